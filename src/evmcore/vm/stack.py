"""
Operand stack for the evmcore virtual machine.

The stack holds 256-bit words. Multi-operand reads check the depth first so
that a failing handler leaves the stack exactly as it found it.
"""

from typing import Iterable, Iterator, List, Optional, Tuple

from ..errors import StackOverflowError, StackUnderflowError
from .word import validate_word


class OperandStack:
    """LIFO stack of words with underflow detection."""

    def __init__(
        self, values: Optional[Iterable[int]] = None, max_depth: Optional[int] = None
    ):
        if max_depth is not None and max_depth <= 0:
            raise ValueError("Max stack depth must be positive")

        self.max_depth = max_depth
        self._items: List[int] = []

        for value in values or ():
            self.push(value)

    def push(self, value: int) -> None:
        """Push a word onto the stack."""
        validate_word(value)
        if self.max_depth is not None and len(self._items) >= self.max_depth:
            raise StackOverflowError(
                f"Stack overflow: depth limit {self.max_depth} reached",
                limit=self.max_depth,
            )
        self._items.append(value)

    def pop(self) -> int:
        """Pop the top word."""
        self._require(1)
        return self._items.pop()

    def pop_two(self) -> Tuple[int, int]:
        """Pop the top two words, returned as (top, second from top)."""
        self._require(2)
        n1 = self._items.pop()
        n2 = self._items.pop()
        return n1, n2

    def peek(self, index: int = 0) -> int:
        """Read a word without popping; index 0 is the top."""
        self._require(index + 1)
        return self._items[-(index + 1)]

    def to_list(self) -> List[int]:
        """Snapshot of the stack, bottom first."""
        return list(self._items)

    def _require(self, count: int) -> None:
        if len(self._items) < count:
            raise StackUnderflowError(
                f"Stack underflow: need {count} item(s), have {len(self._items)}",
                required=count,
                available=len(self._items),
            )

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[int]:
        return iter(self._items)

    def __eq__(self, other) -> bool:
        if isinstance(other, OperandStack):
            return self._items == other._items
        if isinstance(other, list):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"OperandStack({self._items!r})"
