"""
Opcodes for the evmcore virtual machine.

This module defines the explicit opcode table: each entry binds an opcode
byte to its handler and static gas cost. PUSH2 through PUSH32 are not table
entries; the execution engine decodes them through the generic PUSH path.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Dict, List, Optional

from . import word
from .decoder import is_push_opcode, read_immediate
from .gas_meter import GasCost


class OpcodeEnum(IntEnum):
    """Enumeration of the opcodes with explicit table entries."""

    # Stop and arithmetic operations
    STOP = 0x00
    ADD = 0x01
    MUL = 0x02
    SUB = 0x03
    DIV = 0x04

    # Stack operations
    PUSH1 = 0x60


# Handlers take the execution context and the bytecode and return the halt flag.
Handler = Callable[..., bool]


def op_stop(context, bytecode: bytes) -> bool:
    return True


def _binary(operation: Callable[[int, int], int]) -> Handler:
    def handler(context, bytecode: bytes) -> bool:
        n1, n2 = context.stack.pop_two()
        context.stack.push(operation(n1, n2))
        return False

    handler.__name__ = f"op_{operation.__name__}"
    handler.__doc__ = f"Pop (n1, n2) and push {operation.__name__}(n1, n2)."
    return handler


op_add = _binary(word.add)
op_mul = _binary(word.mul)
op_sub = _binary(word.sub)
op_div = _binary(word.div)


def op_push1(context, bytecode: bytes) -> bool:
    """Push the single immediate byte following the opcode."""
    value, context.pc = read_immediate(bytecode, context.pc, 1)
    context.stack.push(value)
    return False


@dataclass(frozen=True)
class OpcodeInfo:
    """Information about an opcode."""

    name: str
    gas_cost: int
    stack_inputs: int
    stack_outputs: int
    description: str
    category: str
    handler: Handler


class OpcodeRegistry:
    """Registry for opcode information and execution handlers."""

    def __init__(self):
        self._opcodes: Dict[int, OpcodeInfo] = {}
        self._register_opcodes()

    def _register_opcodes(self) -> None:
        """Register all opcodes with their information."""
        self._register(
            OpcodeEnum.STOP, "STOP", GasCost.ZERO.value, 0, 0,
            "Halts execution", "control", op_stop,
        )
        self._register(
            OpcodeEnum.ADD, "ADD", GasCost.VERY_LOW.value, 2, 1,
            "Addition operation", "arithmetic", op_add,
        )
        self._register(
            OpcodeEnum.MUL, "MUL", GasCost.LOW.value, 2, 1,
            "Multiplication operation", "arithmetic", op_mul,
        )
        self._register(
            OpcodeEnum.SUB, "SUB", GasCost.VERY_LOW.value, 2, 1,
            "Subtraction operation", "arithmetic", op_sub,
        )
        self._register(
            OpcodeEnum.DIV, "DIV", GasCost.LOW.value, 2, 1,
            "Integer division operation", "arithmetic", op_div,
        )
        self._register(
            OpcodeEnum.PUSH1, "PUSH1", GasCost.VERY_LOW.value, 0, 1,
            "Push 1 byte onto stack", "stack", op_push1,
        )

    def _register(
        self,
        opcode: int,
        name: str,
        gas_cost: int,
        stack_inputs: int,
        stack_outputs: int,
        description: str,
        category: str,
        handler: Handler,
    ) -> None:
        """Register an opcode with its information."""
        self._opcodes[int(opcode)] = OpcodeInfo(
            name=name,
            gas_cost=gas_cost,
            stack_inputs=stack_inputs,
            stack_outputs=stack_outputs,
            description=description,
            category=category,
            handler=handler,
        )

    def get_info(self, opcode: int) -> Optional[OpcodeInfo]:
        """Get information about an opcode."""
        return self._opcodes.get(opcode)

    def get_gas_cost(self, opcode: int) -> int:
        """Get the gas cost of an opcode."""
        info = self.get_info(opcode)
        return info.gas_cost if info else 0

    def get_handler(self, opcode: int) -> Optional[Handler]:
        """Get the handler for an opcode."""
        info = self.get_info(opcode)
        return info.handler if info else None

    def is_valid_opcode(self, opcode: int) -> bool:
        """Check if an opcode is executable, via the table or the PUSH range."""
        return opcode in self._opcodes or is_push_opcode(opcode)

    def get_all_opcodes(self) -> List[int]:
        """Get all registered opcodes."""
        return list(self._opcodes.keys())

    def get_opcodes_by_category(self, category: str) -> List[int]:
        """Get all opcodes in a specific category."""
        return [
            opcode
            for opcode, info in self._opcodes.items()
            if info.category == category
        ]

    def __contains__(self, opcode: int) -> bool:
        return opcode in self._opcodes

    def __len__(self) -> int:
        return len(self._opcodes)

    def __repr__(self) -> str:
        return f"OpcodeRegistry({len(self._opcodes)} opcodes)"
