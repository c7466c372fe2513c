"""
Unit tests for the evmcore command line.
"""

import argparse
import json

import pytest

from evmcore.cli import DEFAULT_PROGRAM, build_parser, main, parse_hex
from evmcore.vm.word import UINT256_MAX


class TestParseHex:
    """Test hex bytecode parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("6005", b"\x60\x05"),
            ("0x6005", b"\x60\x05"),
            ("0X60 05", b"\x60\x05"),
            ("60_05_00", b"\x60\x05\x00"),
            ("", b""),
        ],
    )
    def test_valid(self, text, expected):
        """Test accepted spellings."""
        assert parse_hex(text) == expected

    @pytest.mark.parametrize("text", ["6", "zz", "0x600"])
    def test_invalid(self, text):
        """Test malformed literals."""
        with pytest.raises(argparse.ArgumentTypeError):
            parse_hex(text)


class TestRunCommand:
    """Test the run subcommand."""

    def test_default_program(self, capsys):
        """Test a bare invocation runs 5 * 5."""
        assert main([]) == 0

        out = capsys.readouterr().out
        assert "Stack: [25]" in out
        assert "Remaining gas: 989" in out

    def test_explicit_bytecode(self, capsys):
        """Test a given program whose subtraction wraps."""
        assert main(["run", "0x6003600a03", "--gas", "100"]) == 0

        out = capsys.readouterr().out
        assert f"Stack: [{UINT256_MAX - 6}]" in out
        assert "Remaining gas: 91" in out

    def test_out_of_gas_exit_code(self, capsys):
        """Test a failed run exits with 1 and reports the error."""
        assert main(["run", DEFAULT_PROGRAM, "--gas", "5"]) == 1

        out = capsys.readouterr().out
        assert "Stack: [5]" in out
        assert "Remaining gas: 2" in out
        assert "(out_of_gas)" in out

    def test_invalid_opcode(self, capsys):
        """Test an unknown opcode is reported."""
        assert main(["run", "50"]) == 1

        assert "Invalid opcode: 0x50" in capsys.readouterr().out

    def test_json_output(self, capsys):
        """Test JSON result output."""
        assert main(["run", "6002600401", "--json"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is True
        assert data["stack"] == [6]
        assert data["gas_used"] == 9
        assert data["state"] == "stopped"

    def test_trace_output(self, capsys):
        """Test trace lines precede the summary."""
        assert main(["run", "600160020100", "--trace"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0].startswith("0000 PUSH1")
        assert lines[2].startswith("0004 ADD")
        assert lines[3].startswith("0005 STOP")
        assert lines[4] == "Stack: [3]"

    def test_generic_push_cost(self, capsys):
        """Test the generic PUSH cost option."""
        assert main(["run", "610102", "--push-gas-cost", "7", "--gas", "10"]) == 0

        out = capsys.readouterr().out
        assert "Stack: [258]" in out
        assert "Remaining gas: 3" in out

    def test_max_steps(self, capsys):
        """Test the step limit option."""
        assert main(["run", "600160016001", "--max-steps", "2"]) == 1

        assert "(step_limit_exceeded)" in capsys.readouterr().out

    def test_invalid_hex_exits_2(self, capsys):
        """Test argparse rejects malformed bytecode."""
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "xyz"])
        assert exc_info.value.code == 2

    def test_negative_gas_exits_2(self, capsys):
        """Test negative gas is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "00", "--gas", "-1"])
        assert exc_info.value.code == 2

    def test_bad_config_exits_2(self, capsys):
        """Test invalid configuration is a usage error."""
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "00", "--max-stack-depth", "0"])
        assert exc_info.value.code == 2


class TestDisasmCommand:
    """Test the disasm subcommand."""

    def test_listing(self, capsys):
        """Test instruction listing and gas estimate."""
        assert main(["disasm", "61010260030200"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines == [
            "0000: PUSH2 0x0102",
            "0003: PUSH1 0x03",
            "0005: MUL",
            "0006: STOP",
            "Estimated gas: 11",
        ]

    def test_truncated_push(self, capsys):
        """Test a truncated push ends the listing."""
        assert main(["disasm", "0162"]) == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[1] == "0001: PUSH3 <truncated>"

    def test_parser_requires_bytecode(self):
        """Test disasm needs a bytecode argument."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["disasm"])
