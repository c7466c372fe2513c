"""
Unit tests for immediate decoding and disassembly.
"""

import pytest

from evmcore.errors import UnexpectedEndOfBytecodeError
from evmcore.vm.decoder import (
    Instruction,
    disassemble,
    estimate_gas,
    is_push_opcode,
    push_size,
    read_immediate,
)
from evmcore.vm.opcodes import OpcodeRegistry
from evmcore.vm.word import UINT256_MAX


class EmptyRegistry(OpcodeRegistry):
    def _register_opcodes(self) -> None:
        pass


class TestPushHelpers:
    """Test PUSH family helpers."""

    def test_is_push_opcode(self):
        """Test PUSH range detection."""
        assert is_push_opcode(0x60)
        assert is_push_opcode(0x7F)
        assert not is_push_opcode(0x5F)
        assert not is_push_opcode(0x80)

    def test_push_size(self):
        """Test immediate size per PUSH opcode."""
        assert push_size(0x60) == 1
        assert push_size(0x61) == 2
        assert push_size(0x7F) == 32

    def test_push_size_rejects_other_opcodes(self):
        """Test push_size outside the PUSH range."""
        with pytest.raises(ValueError):
            push_size(0x01)


class TestReadImmediate:
    """Test read_immediate."""

    def test_read_two_bytes(self):
        """Test PUSH2 style decoding."""
        value, pc = read_immediate(b"\x61\x01\x02", 1, 2)

        assert value == 258
        assert pc == 3

    def test_read_thirty_two_bytes(self):
        """Test a full-width immediate."""
        bytecode = b"\x7f" + b"\xff" * 32

        value, pc = read_immediate(bytecode, 1, 32)

        assert value == UINT256_MAX
        assert pc == 33

    def test_leading_zero_bytes(self):
        """Test leading zero bytes are kept as zero high bytes."""
        value, _ = read_immediate(b"\x00\x00\x07", 0, 3)

        assert value == 7

    def test_truncated(self):
        """Test fewer bytes than required."""
        with pytest.raises(UnexpectedEndOfBytecodeError) as exc_info:
            read_immediate(b"\x62\x01\x02", 1, 3)

        assert exc_info.value.needed == 3
        assert exc_info.value.available == 2

    def test_pc_at_end(self):
        """Test reading at the end of bytecode."""
        with pytest.raises(UnexpectedEndOfBytecodeError) as exc_info:
            read_immediate(b"\x60", 1, 1)

        assert exc_info.value.available == 0


class TestDisassemble:
    """Test the static disassembler."""

    def test_disassemble_program(self):
        """Test disassembling a simple program."""
        instructions = disassemble(bytes.fromhex("600560050200"))

        assert [i.name for i in instructions] == ["PUSH1", "PUSH1", "MUL", "STOP"]
        assert [i.pc for i in instructions] == [0, 2, 4, 5]
        assert instructions[0].immediate == 5
        assert instructions[2].immediate is None

    def test_disassemble_generic_push(self):
        """Test PUSH2 naming and immediate."""
        instructions = disassemble(b"\x61\x01\x02")

        assert len(instructions) == 1
        assert instructions[0].name == "PUSH2"
        assert instructions[0].immediate == 258
        assert instructions[0].size == 3

    def test_disassemble_invalid(self):
        """Test unknown bytes are reported as INVALID."""
        instructions = disassemble(b"\x50\x00")

        assert instructions[0].name == "INVALID"
        assert instructions[1].name == "STOP"

    def test_disassemble_truncated(self):
        """Test a truncated immediate ends the listing."""
        instructions = disassemble(b"\x01\x62\x01")

        assert len(instructions) == 2
        assert instructions[1].truncated
        assert instructions[1].immediate is None

    def test_instruction_str(self):
        """Test instruction formatting."""
        assert str(Instruction(0, 0x61, "PUSH2", 258)) == "0000: PUSH2 0x0102"
        assert str(Instruction(4, 0x02, "MUL")) == "0004: MUL"
        assert str(Instruction(6, 0x60, "PUSH1", truncated=True)) == (
            "0006: PUSH1 <truncated>"
        )

    def test_instruction_to_dict(self):
        """Test instruction serialization."""
        data = Instruction(2, 0x60, "PUSH1", 5).to_dict()

        assert data == {
            "pc": 2,
            "opcode": "0x60",
            "name": "PUSH1",
            "immediate": 5,
            "truncated": False,
        }

    def test_disassemble_empty_registry(self):
        """Test a supplied registry is used even when it holds no opcodes."""
        registry = EmptyRegistry()
        assert len(registry) == 0

        instructions = disassemble(b"\x01\x60\x05", registry)

        assert [i.name for i in instructions] == ["INVALID", "PUSH1"]
        assert instructions[1].immediate == 5

    @pytest.mark.parametrize("bytecode", [5, "6005"])
    def test_disassemble_rejects_int_and_str(self, bytecode):
        """Test an int or str is not accepted as bytecode."""
        with pytest.raises(TypeError):
            disassemble(bytecode)


class TestEstimateGas:
    """Test static gas estimation."""

    def test_estimate_program(self):
        """Test the estimate for PUSH1, PUSH1, MUL, STOP."""
        assert estimate_gas(bytes.fromhex("600560050200")) == 11

    def test_estimate_stops_at_stop(self):
        """Test instructions after STOP are not counted."""
        assert estimate_gas(bytes.fromhex("00600501")) == 0

    def test_estimate_generic_push(self):
        """Test generic PUSH uses the supplied cost."""
        registry = OpcodeRegistry()

        assert estimate_gas(b"\x61\x01\x02", registry) == 3
        assert estimate_gas(b"\x61\x01\x02", registry, push_gas_cost=7) == 7

    def test_estimate_empty(self):
        """Test empty bytecode costs nothing."""
        assert estimate_gas(b"") == 0

    def test_estimate_empty_registry(self):
        """Test an empty registry charges only generic PUSH costs."""
        assert estimate_gas(b"\x01\x61\x01\x02\x00", EmptyRegistry()) == 3
