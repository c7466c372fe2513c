"""
Immediate decoding for the evmcore virtual machine.

PUSH1 through PUSH32 carry 1 to 32 literal bytes directly after the opcode
byte. This module reads those immediates, and offers a static disassembler
and gas estimator over whole bytecode sequences.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..errors import UnexpectedEndOfBytecodeError
from .word import word_from_bytes

PUSH_FIRST = 0x60
PUSH_LAST = 0x7F


def is_push_opcode(opcode: int) -> bool:
    """Check if an opcode belongs to the PUSH1..PUSH32 family."""
    return PUSH_FIRST <= opcode <= PUSH_LAST


def push_size(opcode: int) -> int:
    """Number of immediate bytes carried by a PUSH opcode."""
    if not is_push_opcode(opcode):
        raise ValueError(f"Not a PUSH opcode: 0x{opcode:02x}")
    return opcode - (PUSH_FIRST - 1)


def read_immediate(bytecode: bytes, pc: int, num_bytes: int) -> Tuple[int, int]:
    """
    Read a big-endian immediate of num_bytes starting at pc.

    Returns:
        The decoded word and the program counter just past the immediate.

    Raises:
        UnexpectedEndOfBytecodeError: if fewer than num_bytes bytes remain.
    """
    available = max(len(bytecode) - pc, 0)
    if num_bytes > available:
        raise UnexpectedEndOfBytecodeError(
            f"Unexpected end of bytecode: need {num_bytes} byte(s), "
            f"{available} available",
            needed=num_bytes,
            available=available,
        )

    value = word_from_bytes(bytecode[pc : pc + num_bytes])
    return value, pc + num_bytes


@dataclass
class Instruction:
    """A single decoded instruction."""

    pc: int
    opcode: int
    name: str
    immediate: Optional[int] = None
    truncated: bool = False

    @property
    def size(self) -> int:
        """Bytes occupied by this instruction, including its immediate."""
        if is_push_opcode(self.opcode):
            return 1 + push_size(self.opcode)
        return 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pc": self.pc,
            "opcode": f"0x{self.opcode:02x}",
            "name": self.name,
            "immediate": self.immediate,
            "truncated": self.truncated,
        }

    def __str__(self) -> str:
        text = f"{self.pc:04x}: {self.name}"
        if self.truncated:
            return text + " <truncated>"
        if self.immediate is not None:
            width = 2 * push_size(self.opcode)
            text += f" 0x{self.immediate:0{width}x}"
        return text


def to_bytecode(bytecode) -> bytes:
    """
    Convert bytes, a bytearray or an iterable of ints 0..255 to bytes.

    Raises:
        TypeError: for an int or str; bytes(n) would build n zero bytes
    """
    if isinstance(bytecode, (int, str)):
        raise TypeError(
            "bytecode must be bytes or an iterable of ints, "
            f"not {type(bytecode).__name__}"
        )
    return bytes(bytecode)


def _default_registry():
    from .opcodes import OpcodeRegistry

    return OpcodeRegistry()


def disassemble(bytecode: bytes, registry=None) -> List[Instruction]:
    """Decode bytecode into instructions without executing it."""
    if registry is None:
        registry = _default_registry()
    code = to_bytecode(bytecode)
    instructions: List[Instruction] = []
    pc = 0

    while pc < len(code):
        opcode = code[pc]
        info = registry.get_info(opcode)

        if is_push_opcode(opcode):
            name = info.name if info else f"PUSH{push_size(opcode)}"
            try:
                immediate, next_pc = read_immediate(code, pc + 1, push_size(opcode))
            except UnexpectedEndOfBytecodeError:
                instructions.append(Instruction(pc, opcode, name, truncated=True))
                break
            instructions.append(Instruction(pc, opcode, name, immediate))
            pc = next_pc
            continue

        name = info.name if info else "INVALID"
        instructions.append(Instruction(pc, opcode, name))
        pc += 1

    return instructions


def estimate_gas(bytecode: bytes, registry=None, push_gas_cost: int = 3) -> int:
    """
    Estimate the gas a successful run of bytecode would consume.

    Costs are summed up to and including the first STOP. Without jumps the
    estimate matches the amount actually charged.
    """
    if registry is None:
        registry = _default_registry()
    total = 0

    for instruction in disassemble(bytecode, registry):
        info = registry.get_info(instruction.opcode)
        if info is not None:
            total += info.gas_cost
        elif is_push_opcode(instruction.opcode):
            total += push_gas_cost
        if instruction.name == "STOP":
            break

    return total
