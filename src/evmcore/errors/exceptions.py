"""Exception hierarchy for evmcore.

This module defines the structured exceptions raised by the virtual machine.
Execution errors describe why a run halted; they are raised inside the
execution loop and converted into an inspectable result at its boundary.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories."""

    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    EXECUTION = "execution"
    GAS = "gas"
    STACK = "stack"
    DECODING = "decoding"
    SYSTEM = "system"


@dataclass
class ErrorContext:
    """Context information for an error."""

    timestamp: float = field(default_factory=time.time)
    component: Optional[str] = None
    operation: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary."""
        return {
            "timestamp": self.timestamp,
            "component": self.component,
            "operation": self.operation,
            "metadata": self.metadata,
        }


class EVMCoreError(Exception):
    """Base exception for all evmcore errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM,
        context: Optional[ErrorContext] = None,
        cause: Optional[Exception] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context or ErrorContext()
        self.cause = cause
        self.metadata = metadata or {}
        self.timestamp = time.time()

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context.to_dict(),
            "cause": str(self.cause) if self.cause else None,
            "metadata": self.metadata,
            "timestamp": self.timestamp,
        }

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"{self.__class__.__name__}: {self.message}"]

        if self.error_code:
            parts.append(f"Code: {self.error_code}")

        if self.severity != ErrorSeverity.MEDIUM:
            parts.append(f"Severity: {self.severity.value}")

        return " | ".join(parts)


class ValidationError(EVMCoreError):
    """Invalid input handed to the virtual machine."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        expected: Optional[Any] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "INVALID_INPUT")
        super().__init__(message, category=ErrorCategory.VALIDATION, **kwargs)
        self.field = field
        self.value = value
        self.expected = expected

    def to_dict(self) -> Dict[str, Any]:
        """Convert validation error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "field": self.field,
                "value": str(self.value) if self.value is not None else None,
                "expected": str(self.expected) if self.expected is not None else None,
            }
        )
        return data


class ConfigurationError(EVMCoreError):
    """Configuration error."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "INVALID_CONFIG")
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.MEDIUM,
            **kwargs,
        )
        self.config_key = config_key
        self.config_value = config_value

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "config_key": self.config_key,
                "config_value": str(self.config_value)
                if self.config_value is not None
                else None,
            }
        )
        return data


class ExecutionError(EVMCoreError):
    """Fatal condition that halts bytecode execution."""

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        opcode: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("category", ErrorCategory.EXECUTION)
        kwargs.setdefault("severity", ErrorSeverity.HIGH)
        super().__init__(message, **kwargs)
        self.pc = pc
        self.opcode = opcode

    def at(self, pc: int, opcode: int) -> "ExecutionError":
        """Attach the location of the failing instruction if not already set."""
        if self.pc is None:
            self.pc = pc
        if self.opcode is None:
            self.opcode = opcode
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Convert execution error to dictionary."""
        data = super().to_dict()
        data.update(
            {
                "pc": self.pc,
                "opcode": f"0x{self.opcode:02x}" if self.opcode is not None else None,
            }
        )
        return data


class OutOfGasError(ExecutionError):
    """Gas meter could not cover the cost of an operation."""

    def __init__(
        self,
        message: str = "Out of gas",
        required: Optional[int] = None,
        available: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "OUT_OF_GAS")
        super().__init__(message, category=ErrorCategory.GAS, **kwargs)
        self.required = required
        self.available = available

    def to_dict(self) -> Dict[str, Any]:
        """Convert out-of-gas error to dictionary."""
        data = super().to_dict()
        data.update({"required": self.required, "available": self.available})
        return data


class StackUnderflowError(ExecutionError):
    """An operation needed more operands than the stack holds."""

    def __init__(
        self,
        message: str = "Stack underflow",
        required: Optional[int] = None,
        available: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "STACK_UNDERFLOW")
        super().__init__(message, category=ErrorCategory.STACK, **kwargs)
        self.required = required
        self.available = available

    def to_dict(self) -> Dict[str, Any]:
        """Convert stack underflow error to dictionary."""
        data = super().to_dict()
        data.update({"required": self.required, "available": self.available})
        return data


class StackOverflowError(ExecutionError):
    """A push exceeded the configured maximum stack depth."""

    def __init__(
        self, message: str = "Stack overflow", limit: Optional[int] = None, **kwargs
    ):
        kwargs.setdefault("error_code", "STACK_OVERFLOW")
        super().__init__(message, category=ErrorCategory.STACK, **kwargs)
        self.limit = limit

    def to_dict(self) -> Dict[str, Any]:
        """Convert stack overflow error to dictionary."""
        data = super().to_dict()
        data.update({"limit": self.limit})
        return data


class InvalidOpcodeError(ExecutionError):
    """Fetched byte is neither a table opcode nor a PUSH opcode."""

    def __init__(self, opcode: int, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("error_code", "INVALID_OPCODE")
        super().__init__(
            message or f"Invalid opcode: 0x{opcode:02x}",
            opcode=opcode,
            category=ErrorCategory.DECODING,
            **kwargs,
        )


class UnexpectedEndOfBytecodeError(ExecutionError):
    """An immediate read ran past the end of the bytecode."""

    def __init__(
        self,
        message: str = "Unexpected end of bytecode",
        needed: Optional[int] = None,
        available: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "UNEXPECTED_END_OF_BYTECODE")
        super().__init__(message, category=ErrorCategory.DECODING, **kwargs)
        self.needed = needed
        self.available = available

    def to_dict(self) -> Dict[str, Any]:
        """Convert truncated-immediate error to dictionary."""
        data = super().to_dict()
        data.update({"needed": self.needed, "available": self.available})
        return data


class ExecutionLimitError(ExecutionError):
    """The run exceeded the configured instruction limit."""

    def __init__(
        self,
        message: str = "Step limit exceeded",
        limit: Optional[int] = None,
        **kwargs,
    ):
        kwargs.setdefault("error_code", "STEP_LIMIT_EXCEEDED")
        super().__init__(message, **kwargs)
        self.limit = limit

    def to_dict(self) -> Dict[str, Any]:
        """Convert step limit error to dictionary."""
        data = super().to_dict()
        data.update({"limit": self.limit})
        return data
