"""
Command-line entry point for evmcore.

Runs a bytecode literal with a gas budget and prints the resulting stack
and remaining gas, or disassembles bytecode without running it.
"""

import argparse
import json
import sys
from typing import List, Optional

from .config import DEFAULT_PUSH_GAS_COST, VMConfig
from .errors import ConfigurationError
from .logging import LogConfig, LogLevel, setup_logging, shutdown_logging
from .vm import (
    ExecutionEngine,
    ExecutionResult,
    OpcodeRegistry,
    disassemble,
    estimate_gas,
)

# PUSH1 0x05, PUSH1 0x05, MUL, STOP
DEFAULT_PROGRAM = "600560050200"
DEFAULT_GAS = 1000


def parse_hex(text: str) -> bytes:
    """Parse a hex bytecode literal; an optional 0x prefix and spaces are allowed."""
    cleaned = "".join(text.split()).replace("_", "")
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    try:
        return bytes.fromhex(cleaned)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid hex bytecode: {text!r}") from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evmcore", description="Run 256-bit stack machine bytecode"
    )
    parser.add_argument(
        "--log-level",
        choices=[level.value for level in LogLevel],
        default=LogLevel.WARNING.value,
        help="Log level for diagnostics on stderr",
    )
    parser.add_argument(
        "--log-format", choices=["text", "json"], default="text", help="Log format"
    )
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Execute bytecode")
    run_parser.add_argument(
        "bytecode",
        nargs="?",
        type=parse_hex,
        default=parse_hex(DEFAULT_PROGRAM),
        help=f"Hex bytecode (default: {DEFAULT_PROGRAM})",
    )
    run_parser.add_argument(
        "--gas", type=int, default=DEFAULT_GAS, help="Initial gas budget"
    )
    run_parser.add_argument(
        "--push-gas-cost",
        type=int,
        default=DEFAULT_PUSH_GAS_COST,
        help="Gas charged for PUSH2..PUSH32",
    )
    run_parser.add_argument("--max-stack-depth", type=int, default=None)
    run_parser.add_argument("--max-steps", type=int, default=None)
    run_parser.add_argument(
        "--trace", action="store_true", help="Record and print every step"
    )
    run_parser.add_argument(
        "--json", action="store_true", help="Print the result as JSON"
    )

    disasm_parser = subparsers.add_parser("disasm", help="Disassemble bytecode")
    disasm_parser.add_argument("bytecode", type=parse_hex, help="Hex bytecode")
    disasm_parser.add_argument(
        "--push-gas-cost", type=int, default=DEFAULT_PUSH_GAS_COST
    )

    return parser


def _print_result(result: ExecutionResult, as_json: bool) -> None:
    if as_json:
        print(json.dumps(result.to_dict(), indent=2, default=str))
        return

    for step in result.trace:
        print(
            f"{step.pc:04x} {step.name:<6} cost={step.gas_cost} "
            f"gas={step.gas_remaining} stack={list(step.stack)}"
        )

    print(f"Stack: {result.stack}")
    print(f"Remaining gas: {result.gas_remaining}")
    if not result.success:
        print(f"Error: {result.error_message} ({result.state.value})")


def _run(args, parser: argparse.ArgumentParser) -> int:
    try:
        config = VMConfig(
            push_gas_cost=args.push_gas_cost,
            max_stack_depth=args.max_stack_depth,
            max_steps=args.max_steps,
            trace=args.trace,
        )
    except ConfigurationError as e:
        parser.error(e.message)

    if args.gas < 0:
        parser.error("gas must be non-negative")

    engine = ExecutionEngine(config)
    result = engine.execute(args.bytecode, args.gas)
    _print_result(result, args.json)
    return 0 if result.success else 1


def _disasm(args, parser: argparse.ArgumentParser) -> int:
    if args.push_gas_cost < 0:
        parser.error("push gas cost must be non-negative")

    registry = OpcodeRegistry()
    for instruction in disassemble(args.bytecode, registry):
        print(instruction)
    print(
        f"Estimated gas: "
        f"{estimate_gas(args.bytecode, registry, push_gas_cost=args.push_gas_cost)}"
    )
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        # Bare invocation runs the default program
        args = parser.parse_args(
            ["--log-level", args.log_level, "--log-format", args.log_format, "run"]
        )

    setup_logging(
        LogConfig(level=LogLevel(args.log_level), format_type=args.log_format)
    )
    try:
        if args.command == "disasm":
            return _disasm(args, parser)
        return _run(args, parser)
    finally:
        shutdown_logging()


if __name__ == "__main__":
    sys.exit(main())
