"""
Unit tests for the operand stack.
"""

import pytest

from evmcore.errors import StackOverflowError, StackUnderflowError
from evmcore.vm.stack import OperandStack
from evmcore.vm.word import UINT256_MAX, WORD_MODULUS


class TestOperandStack:
    """Test OperandStack class."""

    def test_stack_creation(self):
        """Test empty stack creation."""
        stack = OperandStack()

        assert len(stack) == 0
        assert stack.to_list() == []
        assert stack.max_depth is None

    def test_stack_creation_with_values(self):
        """Test preloading values, bottom first."""
        stack = OperandStack([1, 2, 3])

        assert stack.to_list() == [1, 2, 3]
        assert stack.peek() == 3

    def test_stack_creation_invalid_depth(self):
        """Test stack creation with invalid max depth."""
        with pytest.raises(ValueError, match="Max stack depth must be positive"):
            OperandStack(max_depth=0)

    def test_push_and_pop(self):
        """Test pushing and popping."""
        stack = OperandStack()
        stack.push(123)
        stack.push(UINT256_MAX)

        assert len(stack) == 2
        assert stack.pop() == UINT256_MAX
        assert stack.pop() == 123
        assert len(stack) == 0

    def test_push_rejects_non_word(self):
        """Test that values outside the word range are refused."""
        stack = OperandStack()

        with pytest.raises(ValueError):
            stack.push(WORD_MODULUS)
        with pytest.raises(ValueError):
            stack.push(-1)
        assert len(stack) == 0

    def test_pop_empty(self):
        """Test popping an empty stack."""
        stack = OperandStack()

        with pytest.raises(StackUnderflowError) as exc_info:
            stack.pop()
        assert exc_info.value.required == 1
        assert exc_info.value.available == 0

    def test_pop_two_order(self):
        """Test pop_two returns (top, second from top)."""
        stack = OperandStack([10, 3])

        n1, n2 = stack.pop_two()

        assert n1 == 3
        assert n2 == 10
        assert len(stack) == 0

    def test_pop_two_underflow_leaves_stack_intact(self):
        """Test pop_two with a single element fails without mutating."""
        stack = OperandStack([7])

        with pytest.raises(StackUnderflowError) as exc_info:
            stack.pop_two()
        assert exc_info.value.required == 2
        assert exc_info.value.available == 1
        assert stack.to_list() == [7]

    def test_peek(self):
        """Test peeking at stack values."""
        stack = OperandStack([1, 2])

        assert stack.peek(0) == 2
        assert stack.peek(1) == 1
        with pytest.raises(StackUnderflowError):
            stack.peek(2)

    def test_max_depth(self):
        """Test stack overflow with a depth limit."""
        stack = OperandStack(max_depth=2)
        stack.push(1)
        stack.push(2)

        with pytest.raises(StackOverflowError) as exc_info:
            stack.push(3)
        assert exc_info.value.limit == 2
        assert stack.to_list() == [1, 2]

    def test_iteration_and_equality(self):
        """Test iteration order and equality."""
        stack = OperandStack([4, 5])

        assert list(stack) == [4, 5]
        assert stack == [4, 5]
        assert stack == OperandStack([4, 5])
        assert stack != OperandStack([5, 4])

    def test_to_list_is_snapshot(self):
        """Test that to_list does not expose internal state."""
        stack = OperandStack([1])
        snapshot = stack.to_list()
        snapshot.append(2)

        assert stack.to_list() == [1]
