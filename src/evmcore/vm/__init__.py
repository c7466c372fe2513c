"""
evmcore Virtual Machine Package.

This package provides a stack-based bytecode interpreter over 256-bit words
with gas metering, an explicit opcode table and generic PUSH decoding.
"""

from .decoder import (
    Instruction,
    disassemble,
    estimate_gas,
    is_push_opcode,
    push_size,
    read_immediate,
    to_bytecode,
)
from .execution_engine import (
    ExecutionContext,
    ExecutionEngine,
    ExecutionResult,
    ExecutionState,
    TraceStep,
)
from .gas_meter import GasCost, GasMeter
from .opcodes import OpcodeEnum, OpcodeInfo, OpcodeRegistry
from .stack import OperandStack
from .word import UINT256_MAX, WORD_BITS, WORD_MODULUS

__all__ = [
    # Words
    "WORD_BITS",
    "WORD_MODULUS",
    "UINT256_MAX",
    # Stack
    "OperandStack",
    # Opcodes
    "OpcodeEnum",
    "OpcodeInfo",
    "OpcodeRegistry",
    # Gas metering
    "GasMeter",
    "GasCost",
    # Decoding
    "Instruction",
    "disassemble",
    "estimate_gas",
    "is_push_opcode",
    "push_size",
    "read_immediate",
    "to_bytecode",
    # Execution engine
    "ExecutionEngine",
    "ExecutionContext",
    "ExecutionResult",
    "ExecutionState",
    "TraceStep",
]
