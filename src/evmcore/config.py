"""Configuration for the evmcore virtual machine."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ConfigurationError

# Matches the static cost of PUSH1.
DEFAULT_PUSH_GAS_COST = 3


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class VMConfig:
    """Configuration for an execution engine."""

    push_gas_cost: int = DEFAULT_PUSH_GAS_COST  # PUSH2..PUSH32
    max_stack_depth: Optional[int] = None  # unbounded
    max_steps: Optional[int] = None
    trace: bool = False

    def __post_init__(self):
        """Validate configuration."""
        if not _is_int(self.push_gas_cost) or self.push_gas_cost < 0:
            raise ConfigurationError(
                "Push gas cost must be a non-negative integer",
                config_key="push_gas_cost",
                config_value=self.push_gas_cost,
            )

        if self.max_stack_depth is not None and (
            not _is_int(self.max_stack_depth) or self.max_stack_depth <= 0
        ):
            raise ConfigurationError(
                "Max stack depth must be a positive integer",
                config_key="max_stack_depth",
                config_value=self.max_stack_depth,
            )

        if self.max_steps is not None and (
            not _is_int(self.max_steps) or self.max_steps <= 0
        ):
            raise ConfigurationError(
                "Max steps must be a positive integer",
                config_key="max_steps",
                config_value=self.max_steps,
            )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "push_gas_cost": self.push_gas_cost,
            "max_stack_depth": self.max_stack_depth,
            "max_steps": self.max_steps,
            "trace": self.trace,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "VMConfig":
        """Create from dictionary."""
        return cls(
            push_gas_cost=data.get("push_gas_cost", DEFAULT_PUSH_GAS_COST),
            max_stack_depth=data.get("max_stack_depth"),
            max_steps=data.get("max_steps"),
            trace=data.get("trace", False),
        )
