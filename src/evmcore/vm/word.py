"""
256-bit word arithmetic.

Every value on the operand stack is an unsigned integer in [0, 2**256).
The helpers here reduce each arithmetic result modulo 2**256 so no handler
can produce a value outside that range.
"""

from typing import Iterable

WORD_BITS = 256
WORD_BYTES = WORD_BITS // 8
WORD_MODULUS = 2**WORD_BITS
UINT256_MAX = WORD_MODULUS - 1


def to_word(value: int) -> int:
    """Reduce an arbitrary integer into the word range."""
    return value % WORD_MODULUS


def is_word(value) -> bool:
    """Check whether a value is a valid word."""
    return (
        isinstance(value, int)
        and not isinstance(value, bool)
        and 0 <= value <= UINT256_MAX
    )


def validate_word(value) -> int:
    """Return value unchanged, or raise ValueError if it is not a word."""
    if not is_word(value):
        raise ValueError(f"Value out of word range: {value!r}")
    return value


def add(n1: int, n2: int) -> int:
    return to_word(n1 + n2)


def mul(n1: int, n2: int) -> int:
    return to_word(n1 * n2)


def sub(n1: int, n2: int) -> int:
    """Subtract the top operand n1 from the operand beneath it, n2."""
    return to_word(n2 - n1)


def div(n1: int, n2: int) -> int:
    """Divide n2 by the top operand n1; division by zero yields 0."""
    if n1 == 0:
        return 0
    return to_word(n2 // n1)


def word_from_bytes(data: Iterable[int]) -> int:
    """Decode big-endian bytes into a word, shifting in one byte at a time."""
    value = 0
    for byte in data:
        value = (value << 8) | byte
    return to_word(value)
