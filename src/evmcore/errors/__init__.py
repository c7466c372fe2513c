"""evmcore error handling.

This package provides the exception hierarchy shared by the virtual machine,
its configuration layer and the command-line entry point.
"""

from .exceptions import (
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    EVMCoreError,
    ExecutionError,
    ExecutionLimitError,
    InvalidOpcodeError,
    OutOfGasError,
    StackOverflowError,
    StackUnderflowError,
    UnexpectedEndOfBytecodeError,
    ValidationError,
)

__all__ = [
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorContext",
    # Base
    "EVMCoreError",
    "ValidationError",
    "ConfigurationError",
    # Execution
    "ExecutionError",
    "OutOfGasError",
    "StackUnderflowError",
    "StackOverflowError",
    "InvalidOpcodeError",
    "UnexpectedEndOfBytecodeError",
    "ExecutionLimitError",
]
