"""
Gas metering for the evmcore virtual machine.

This module provides:
- Static gas cost constants for the supported instruction set
- A gas meter that is charged before every instruction runs
- Per-operation usage tracking
"""

from enum import Enum
from typing import Dict

from ..errors import OutOfGasError


class GasCost(Enum):
    """Static gas cost tiers."""

    ZERO = 0
    VERY_LOW = 3
    LOW = 5


class GasMeter:
    """Monotonically decreasing gas counter for one execution."""

    def __init__(self, initial_gas: int):
        """Initialize gas meter."""
        if initial_gas < 0:
            raise ValueError("Gas limit must be non-negative")

        self.initial_gas = initial_gas
        self.remaining_gas = initial_gas
        self.gas_used = 0
        self.usage_by_operation: Dict[str, int] = {}

    @property
    def gas_limit(self) -> int:
        """Get gas limit."""
        return self.initial_gas

    @property
    def gas_remaining(self) -> int:
        """Get remaining gas."""
        return self.remaining_gas

    def consume(self, amount: int, operation: str = "UNKNOWN") -> None:
        """
        Charge gas for an operation.

        Raises:
            ValueError: if amount is negative
            OutOfGasError: if the remaining gas cannot cover amount; the meter
                is left unchanged
        """
        if amount < 0:
            raise ValueError("Gas amount must be non-negative")

        if amount > self.remaining_gas:
            raise OutOfGasError(
                f"Out of gas: {operation} requires {amount}, "
                f"{self.remaining_gas} remaining",
                required=amount,
                available=self.remaining_gas,
            )

        self.remaining_gas -= amount
        self.gas_used += amount
        self.usage_by_operation[operation] = (
            self.usage_by_operation.get(operation, 0) + amount
        )

    def can_afford(self, amount: int) -> bool:
        """Check if we can afford an operation."""
        return amount <= self.remaining_gas

    def is_out_of_gas(self) -> bool:
        """Check if out of gas."""
        return self.remaining_gas <= 0

    def get_gas_utilization(self) -> float:
        """Get gas utilization percentage."""
        if self.initial_gas == 0:
            return 0.0
        return (self.gas_used / self.initial_gas) * 100

    def get_usage_breakdown(self) -> Dict[str, int]:
        """Get breakdown of gas costs by operation."""
        breakdown = dict(self.usage_by_operation)
        breakdown["total_gas_used"] = self.gas_used
        breakdown["remaining_gas"] = self.remaining_gas
        return breakdown

    def __eq__(self, other) -> bool:
        """Equality comparison."""
        if not isinstance(other, GasMeter):
            return False
        return (
            self.initial_gas == other.initial_gas
            and self.gas_used == other.gas_used
            and self.remaining_gas == other.remaining_gas
        )

    def __str__(self) -> str:
        """String representation of the gas meter."""
        return f"GasMeter(used={self.gas_used}, remaining={self.remaining_gas})"

    def __repr__(self) -> str:
        return (
            f"GasMeter(initial={self.initial_gas}, used={self.gas_used}, "
            f"remaining={self.remaining_gas}, "
            f"utilization={self.get_gas_utilization():.1f}%)"
        )
