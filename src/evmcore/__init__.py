"""
evmcore: a gas-metered stack machine over 256-bit words.

Bytecode is executed by a fetch-decode-execute loop that charges gas before
every instruction and halts with an inspectable result.
"""

__version__ = "0.1.0"

from .config import VMConfig
from .errors import (
    EVMCoreError,
    ExecutionError,
    InvalidOpcodeError,
    OutOfGasError,
    StackUnderflowError,
    UnexpectedEndOfBytecodeError,
)
from .vm import ExecutionEngine, ExecutionResult, ExecutionState

__all__ = [
    "VMConfig",
    "ExecutionEngine",
    "ExecutionResult",
    "ExecutionState",
    "EVMCoreError",
    "ExecutionError",
    "OutOfGasError",
    "StackUnderflowError",
    "InvalidOpcodeError",
    "UnexpectedEndOfBytecodeError",
]
