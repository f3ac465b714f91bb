"""
6502 Instruction Model
======================

The Instruction record shared by the assembler (which builds it from a
source line) and the disassembler (which builds it from bytes), and the
InstructionAddress sum type that tracks where an instruction lives.

InstructionAddress
------------------
Exactly one of three states:

- ``Unresolved()``: no address yet; the line had no label or address token.
- ``Resolved(address)``: a concrete 16-bit memory address.
- ``LabelReference(name)``: the line declared a label; the assembler binds
  it to the program counter and replaces it with ``Resolved``.

Text Format
-----------
``str(instruction)`` renders ``ADDRESS<TAB>MNEMONIC[ OPERAND]``, which is
also valid assembler input:

    8000    LDA #$05
    8002    STA ($15,X)
    8004    TAX
"""

from dataclasses import dataclass, field
from typing import Union

from asm6502.cpu import AddressingMode, OpcodeEntry, get_instruction_info
from asm6502.errors import InternalConsistencyError


# =============================================================================
# Instruction Address
# =============================================================================

@dataclass(frozen=True)
class Unresolved:
    """No address assigned yet."""

    def __str__(self) -> str:
        return "    "


@dataclass(frozen=True)
class Resolved:
    """A concrete memory address."""
    address: int

    def __post_init__(self) -> None:
        if not 0 <= self.address <= 0xFFFF:
            raise ValueError(f"address {self.address:#x} is outside $0000-$FFFF")

    def __str__(self) -> str:
        return f"{self.address:04X}"


@dataclass(frozen=True)
class LabelReference:
    """A label declared on this line, awaiting its address."""
    name: str

    def __str__(self) -> str:
        return self.name


InstructionAddress = Union[Unresolved, Resolved, LabelReference]

UNRESOLVED = Unresolved()


def format_address(address: InstructionAddress) -> str:
    """Render an address column: four spaces, four hex digits, or a label name."""
    if isinstance(address, Resolved):
        return f"{address.address:04X}"
    if isinstance(address, LabelReference):
        return address.name
    if isinstance(address, Unresolved):
        return "    "
    raise TypeError(f"not an instruction address: {address!r}")


# =============================================================================
# Instruction
# =============================================================================

# Operand templates keyed by addressing mode; {v} is the operand value.
_OPERAND_FORMATS: dict[AddressingMode, str] = {
    AddressingMode.IMMEDIATE: "#${v:02X}",
    AddressingMode.ZERO_PAGE: "${v:02X}",
    AddressingMode.ZERO_PAGE_X: "${v:02X},X",
    AddressingMode.ZERO_PAGE_Y: "${v:02X},Y",
    AddressingMode.ABSOLUTE: "${v:04X}",
    AddressingMode.ABSOLUTE_X: "${v:04X},X",
    AddressingMode.ABSOLUTE_Y: "${v:04X},Y",
    AddressingMode.INDIRECT: "(${v:04X})",
    AddressingMode.INDIRECT_X: "(${v:02X},X)",
    AddressingMode.INDIRECT_Y: "(${v:02X}),Y",
    AddressingMode.RELATIVE: "${v:02X}",
}


@dataclass
class Instruction:
    """
    A single 6502 instruction.

    Attributes:
        mnemonic: The instruction name (e.g., "LDA")
        mode: The addressing mode of this encoding
        opcode: The opcode byte
        operands: Operand bytes, little-endian, 0-2 of them
        address: Where the instruction lives
        incomplete: True only for a disassembled instruction whose operand
            bytes were cut off by the end of the input

    Raises:
        InternalConsistencyError: If the operand count does not match the
            addressing mode. This signals an encoder/decoder bug, never a
            problem with user input.
    """
    mnemonic: str
    mode: AddressingMode
    opcode: int
    operands: bytes = b""
    address: InstructionAddress = field(default=UNRESOLVED)
    incomplete: bool = False

    def __post_init__(self) -> None:
        self.operands = bytes(self.operands)
        expected = self.mode.operand_size
        actual = len(self.operands)
        if self.incomplete:
            consistent = actual < expected
        else:
            consistent = actual == expected
        if not consistent:
            raise InternalConsistencyError(
                f"${self.opcode:02X} {self.mnemonic}: {self.mode} addressing "
                f"takes {expected} operand byte(s), got {actual}"
                + (" (incomplete)" if self.incomplete else "")
            )

    @classmethod
    def from_entry(
        cls,
        entry: OpcodeEntry,
        operands: bytes = b"",
        address: InstructionAddress = UNRESOLVED,
        incomplete: bool = False,
    ) -> "Instruction":
        """Build an instruction from an opcode table row."""
        return cls(
            mnemonic=entry.mnemonic,
            mode=entry.mode,
            opcode=entry.opcode,
            operands=operands,
            address=address,
            incomplete=incomplete,
        )

    @property
    def size(self) -> int:
        """Bytes occupied in memory (opcode included)."""
        return 1 + len(self.operands)

    @property
    def value(self) -> int | None:
        """The operand as an unsigned integer, or None for implied mode."""
        if not self.operands:
            return None
        return int.from_bytes(self.operands, "little")

    @property
    def cycles(self) -> int | None:
        """Base cycle count, or None if the opcode is not a documented one."""
        info = get_instruction_info(self.mnemonic, self.mode)
        return info.cycles if info is not None else None

    def to_bytes(self) -> bytes:
        """Machine code: opcode byte followed by the operand bytes."""
        return bytes([self.opcode]) + self.operands

    def serialize(self) -> tuple[InstructionAddress, bytes]:
        """Return ``(address, machine code)``."""
        return self.address, self.to_bytes()

    def operand_text(self) -> str:
        """Render the operand in assembler syntax (empty for implied mode)."""
        if self.incomplete:
            available = " ".join(f"${b:02X}" for b in self.operands)
            return f"{available} ???".lstrip()
        if self.mode is AddressingMode.IMPLIED:
            return ""
        return _OPERAND_FORMATS[self.mode].format(v=self.value)

    def text(self) -> str:
        """Render ``MNEMONIC[ OPERAND]``."""
        operand = self.operand_text()
        if operand:
            return f"{self.mnemonic} {operand}"
        return self.mnemonic

    def __str__(self) -> str:
        return f"{format_address(self.address)}\t{self.text()}"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        address = self.address.address if isinstance(self.address, Resolved) else None
        return {
            "address": format_address(self.address).strip() or None,
            "address_int": address,
            "opcode": f"${self.opcode:02X}",
            "mnemonic": self.mnemonic,
            "mode": str(self.mode),
            "operand": self.operand_text(),
            "size": self.size,
            "cycles": self.cycles,
            "bytes": [f"${b:02X}" for b in self.to_bytes()],
            "incomplete": self.incomplete,
        }
