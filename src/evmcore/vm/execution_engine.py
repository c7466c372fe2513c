"""
Execution engine for the evmcore virtual machine.

This module provides the fetch-decode-execute loop. The loop charges gas
before every instruction, mutates the operand stack through the opcode
handlers and halts with an inspectable result: a successful stop, or the
specific failure together with the partial state at the point of failure.
"""

import logging

logger = logging.getLogger(__name__)
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from ..config import VMConfig
from ..errors import (
    ExecutionError,
    ExecutionLimitError,
    InvalidOpcodeError,
    OutOfGasError,
    StackOverflowError,
    StackUnderflowError,
    UnexpectedEndOfBytecodeError,
    ValidationError,
)
from .decoder import is_push_opcode, push_size, read_immediate, to_bytecode
from .gas_meter import GasMeter
from .opcodes import OpcodeRegistry
from .stack import OperandStack


class ExecutionState(Enum):
    """Execution states."""

    RUNNING = "running"
    STOPPED = "stopped"
    OUT_OF_GAS = "out_of_gas"
    STACK_UNDERFLOW = "stack_underflow"
    STACK_OVERFLOW = "stack_overflow"
    INVALID_OPCODE = "invalid_opcode"
    UNEXPECTED_END_OF_BYTECODE = "unexpected_end_of_bytecode"
    STEP_LIMIT_EXCEEDED = "step_limit_exceeded"


_FAILURE_STATES: Dict[Type[ExecutionError], ExecutionState] = {
    OutOfGasError: ExecutionState.OUT_OF_GAS,
    StackUnderflowError: ExecutionState.STACK_UNDERFLOW,
    StackOverflowError: ExecutionState.STACK_OVERFLOW,
    InvalidOpcodeError: ExecutionState.INVALID_OPCODE,
    UnexpectedEndOfBytecodeError: ExecutionState.UNEXPECTED_END_OF_BYTECODE,
    ExecutionLimitError: ExecutionState.STEP_LIMIT_EXCEEDED,
}


def failure_state(error: ExecutionError) -> ExecutionState:
    """Map an execution error onto its halt state."""
    for error_type in type(error).__mro__:
        if error_type in _FAILURE_STATES:
            return _FAILURE_STATES[error_type]
    raise ValueError(f"No halt state for {type(error).__name__}")


@dataclass
class TraceStep:
    """Snapshot taken after a single instruction executed."""

    pc: int
    opcode: int
    name: str
    gas_cost: int
    gas_remaining: int
    stack: Tuple[int, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pc": self.pc,
            "opcode": f"0x{self.opcode:02x}",
            "name": self.name,
            "gas_cost": self.gas_cost,
            "gas_remaining": self.gas_remaining,
            "stack": list(self.stack),
        }


@dataclass
class ExecutionContext:
    """Execution context for a single run over one bytecode sequence."""

    bytecode: bytes
    gas_meter: GasMeter
    stack: OperandStack = field(default_factory=OperandStack)

    # Execution state
    pc: int = 0  # Program counter
    state: ExecutionState = ExecutionState.RUNNING
    explicit_stop: bool = False
    error: Optional[ExecutionError] = None
    steps: int = 0
    trace: List[TraceStep] = field(default_factory=list)

    # Reserved; no handler reads or writes these
    memory: bytearray = field(default_factory=bytearray)
    storage: Dict[int, int] = field(default_factory=dict)

    def __post_init__(self):
        if not isinstance(self.bytecode, bytes):
            raise ValueError("Bytecode must be bytes")

        if not 0 <= self.pc <= len(self.bytecode):
            raise ValueError("Program counter out of range")

    @property
    def is_running(self) -> bool:
        return self.state == ExecutionState.RUNNING

    @property
    def error_message(self) -> str:
        return self.error.message if self.error else ""

    def stop(self, explicit: bool = False) -> None:
        """Halt successfully."""
        self.state = ExecutionState.STOPPED
        self.explicit_stop = explicit

    def fail(self, error: ExecutionError) -> None:
        """Halt with a failure, keeping the partial state."""
        self.state = failure_state(error)
        self.error = error


@dataclass
class ExecutionResult:
    """Result of executing a bytecode sequence."""

    success: bool
    state: ExecutionState
    stack: List[int]
    gas_remaining: int
    gas_used: int
    pc: int
    explicit_stop: bool = False
    error: Optional[ExecutionError] = None
    error_message: str = ""
    steps: int = 0
    trace: List[TraceStep] = field(default_factory=list)
    execution_time: float = 0.0

    @classmethod
    def from_context(
        cls, context: ExecutionContext, execution_time: float = 0.0
    ) -> "ExecutionResult":
        """Build a result from a halted context."""
        return cls(
            success=context.state == ExecutionState.STOPPED,
            state=context.state,
            stack=context.stack.to_list(),
            gas_remaining=context.gas_meter.remaining_gas,
            gas_used=context.gas_meter.gas_used,
            pc=context.pc,
            explicit_stop=context.explicit_stop,
            error=context.error,
            error_message=context.error_message,
            steps=context.steps,
            trace=list(context.trace),
            execution_time=execution_time,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return {
            "success": self.success,
            "state": self.state.value,
            "stack": self.stack,
            "gas_remaining": self.gas_remaining,
            "gas_used": self.gas_used,
            "pc": self.pc,
            "explicit_stop": self.explicit_stop,
            "error": self.error.to_dict() if self.error else None,
            "error_message": self.error_message,
            "steps": self.steps,
            "trace": [step.to_dict() for step in self.trace],
            "execution_time": self.execution_time,
        }


class ExecutionEngine:
    """Fetch-decode-execute loop over bytecode with gas metering."""

    def __init__(self, config: Optional[VMConfig] = None):
        self.config = config or VMConfig()
        self.registry = OpcodeRegistry()

    def create_context(
        self,
        bytecode: Iterable[int],
        gas_limit: int,
        initial_stack: Optional[Iterable[int]] = None,
    ) -> ExecutionContext:
        """
        Create a fresh execution context.

        Args:
            bytecode: program bytes (bytes, bytearray or an iterable of ints)
            gas_limit: non-negative fuel budget
            initial_stack: optional words to preload, bottom first

        Raises:
            ValidationError: if any argument is malformed
        """
        try:
            code = to_bytecode(bytecode)
        except (TypeError, ValueError) as e:
            raise ValidationError(
                f"Invalid bytecode: {e}", field="bytecode", value=bytecode, cause=e
            ) from e

        if isinstance(gas_limit, bool) or not isinstance(gas_limit, int):
            raise ValidationError(
                "Gas limit must be an integer",
                field="gas_limit",
                value=gas_limit,
                expected="int",
            )
        if gas_limit < 0:
            raise ValidationError(
                "Gas limit must be non-negative",
                field="gas_limit",
                value=gas_limit,
                expected=">= 0",
            )

        try:
            stack = OperandStack(initial_stack, max_depth=self.config.max_stack_depth)
        except (ValueError, StackOverflowError) as e:
            raise ValidationError(
                f"Invalid initial stack: {e}",
                field="initial_stack",
                value=initial_stack,
                cause=e,
            ) from e

        return ExecutionContext(
            bytecode=code, gas_meter=GasMeter(gas_limit), stack=stack
        )

    def execute(
        self,
        bytecode: Iterable[int],
        gas_limit: int,
        initial_stack: Optional[Iterable[int]] = None,
    ) -> ExecutionResult:
        """Execute bytecode from a fresh context and return the result."""
        context = self.create_context(bytecode, gas_limit, initial_stack)
        return self.run(context)

    def run(self, context: ExecutionContext) -> ExecutionResult:
        """Drive a context until it halts."""
        start_time = time.time()

        while self.step(context):
            pass

        result = ExecutionResult.from_context(context, time.time() - start_time)

        if result.success:
            logger.debug(
                "Execution stopped after %d step(s), gas used %d, remaining %d",
                result.steps,
                result.gas_used,
                result.gas_remaining,
            )
        else:
            logger.info(
                "Execution failed with %s at pc=%s: %s",
                result.state.value,
                result.error.pc if result.error else None,
                result.error_message,
            )

        return result

    def step(self, context: ExecutionContext) -> bool:
        """
        Execute exactly one instruction.

        Returns:
            True if the context is still running afterwards.
        """
        if not context.is_running:
            return False

        # Exhausting the bytecode is a successful halt
        if context.pc >= len(context.bytecode):
            context.stop()
            return False

        opcode_pc = context.pc
        opcode = context.bytecode[opcode_pc]

        max_steps = self.config.max_steps
        try:
            if max_steps is not None and context.steps >= max_steps:
                raise ExecutionLimitError(
                    f"Step limit of {max_steps} exceeded", limit=max_steps
                )

            context.pc += 1
            halted, name, gas_cost = self._dispatch(context, opcode)
        except ExecutionError as e:
            context.fail(e.at(opcode_pc, opcode))
            return False

        context.steps += 1

        if self.config.trace:
            trace_step = TraceStep(
                pc=opcode_pc,
                opcode=opcode,
                name=name,
                gas_cost=gas_cost,
                gas_remaining=context.gas_meter.remaining_gas,
                stack=tuple(context.stack),
            )
            context.trace.append(trace_step)
            logger.debug(
                "%04x %-6s cost=%d gas=%d stack=%s",
                opcode_pc,
                name,
                gas_cost,
                trace_step.gas_remaining,
                list(trace_step.stack),
            )

        if halted:
            context.stop(explicit=True)

        return context.is_running

    def _dispatch(
        self, context: ExecutionContext, opcode: int
    ) -> Tuple[bool, str, int]:
        """Charge gas and run one opcode; returns (halt flag, name, gas cost)."""
        info = self.registry.get_info(opcode)
        if info is not None:
            context.gas_meter.consume(info.gas_cost, info.name)
            return info.handler(context, context.bytecode), info.name, info.gas_cost

        if is_push_opcode(opcode):
            return self._generic_push(context, opcode)

        raise InvalidOpcodeError(opcode)

    def _generic_push(
        self, context: ExecutionContext, opcode: int
    ) -> Tuple[bool, str, int]:
        """PUSH2..PUSH32: read the big-endian immediate and push it."""
        num_bytes = push_size(opcode)
        name = f"PUSH{num_bytes}"
        gas_cost = self.config.push_gas_cost

        context.gas_meter.consume(gas_cost, name)
        value, context.pc = read_immediate(context.bytecode, context.pc, num_bytes)
        context.stack.push(value)
        return False, name, gas_cost
