"""
MOS 6502 Instruction Set Definition
===================================

This module defines the documented NMOS 6502 instruction set with opcodes,
addressing modes, instruction sizes and base cycle counts, and the
OpcodeTable lookup service used by both the assembler (keyed by mnemonic)
and the disassembler (keyed by opcode byte).

The 6502 is little-endian: 16-bit operands are stored low byte first.

Addressing Modes
----------------
1. **IMPLIED**: No operand (e.g., TAX, RTS, and the accumulator forms
   of ASL/LSR/ROL/ROR). 1 byte.
2. **IMMEDIATE**: Literal value (LDA #$41). 2 bytes.
3. **ZERO_PAGE**: Address $00-$FF (LDA $40). 2 bytes.
4. **ZERO_PAGE_X / ZERO_PAGE_Y**: Zero page + index (LDA $40,X). 2 bytes.
5. **ABSOLUTE**: Full 16-bit address (LDA $1234). 3 bytes.
6. **ABSOLUTE_X / ABSOLUTE_Y**: Absolute + index (LDA $1234,Y). 3 bytes.
7. **INDIRECT**: JMP through a 16-bit pointer (JMP ($FFFC)). 3 bytes.
8. **INDIRECT_X**: Pre-indexed zero page pointer (LDA ($20,X)). 2 bytes.
9. **INDIRECT_Y**: Post-indexed zero page pointer (LDA ($20),Y). 2 bytes.
10. **RELATIVE**: Signed 8-bit branch displacement (BNE loop). 2 bytes.

Reference
---------
- MOS MCS6500 Microcomputer Family Programming Manual (1976)
- http://www.6502.org/tutorials/6502opcodes.html
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Iterable, Iterator, Optional


# =============================================================================
# Addressing Mode Enumeration
# =============================================================================

class AddressingMode(Enum):
    """
    6502 addressing modes.

    The value of each member is the operand width in bytes, paired with a
    unique tag so members with equal widths stay distinct.
    """
    IMPLIED = ("implied", 0)
    IMMEDIATE = ("immediate", 1)
    ZERO_PAGE = ("zero page", 1)
    ZERO_PAGE_X = ("zero page,X", 1)
    ZERO_PAGE_Y = ("zero page,Y", 1)
    ABSOLUTE = ("absolute", 2)
    ABSOLUTE_X = ("absolute,X", 2)
    ABSOLUTE_Y = ("absolute,Y", 2)
    INDIRECT = ("indirect", 2)
    INDIRECT_X = ("indirect,X", 1)
    INDIRECT_Y = ("indirect,Y", 1)
    RELATIVE = ("relative", 1)

    @property
    def operand_size(self) -> int:
        """Number of operand bytes following the opcode (0, 1 or 2)."""
        return self.value[1]

    @property
    def size(self) -> int:
        """Total instruction size in bytes, opcode included."""
        return 1 + self.value[1]

    def __str__(self) -> str:
        """Return human-readable name for error messages."""
        return self.value[0]


# =============================================================================
# Instruction Information
# =============================================================================

@dataclass(frozen=True)
class InstructionInfo:
    """
    Information about a specific instruction encoding.

    Attributes:
        opcode: The opcode byte
        size: Total instruction size in bytes (including operand)
        cycles: Base CPU cycles (page-crossing and branch-taken penalties excluded)
    """
    opcode: int
    size: int
    cycles: int

    def __repr__(self) -> str:
        return f"InstructionInfo(opcode=${self.opcode:02X}, size={self.size}, cycles={self.cycles})"


@dataclass(frozen=True)
class OpcodeEntry:
    """One row of the opcode table: a mnemonic + mode pair and its encoding."""
    mnemonic: str
    mode: AddressingMode
    opcode: int
    size: int

    @property
    def operand_size(self) -> int:
        return self.size - 1


# =============================================================================
# Opcode Table
# =============================================================================
# Key: (mnemonic, addressing_mode)
# Value: InstructionInfo(opcode, total_size, cycles)
#
# Only the 151 documented opcodes are listed. Every other byte value is
# treated as unknown by the disassembler.
# =============================================================================

_M = AddressingMode

OPCODE_TABLE: dict[tuple[str, AddressingMode], InstructionInfo] = {
    # =========================================================================
    # LOAD / STORE
    # =========================================================================
    ("LDA", _M.IMMEDIATE): InstructionInfo(0xA9, 2, 2),
    ("LDA", _M.ZERO_PAGE): InstructionInfo(0xA5, 2, 3),
    ("LDA", _M.ZERO_PAGE_X): InstructionInfo(0xB5, 2, 4),
    ("LDA", _M.ABSOLUTE): InstructionInfo(0xAD, 3, 4),
    ("LDA", _M.ABSOLUTE_X): InstructionInfo(0xBD, 3, 4),
    ("LDA", _M.ABSOLUTE_Y): InstructionInfo(0xB9, 3, 4),
    ("LDA", _M.INDIRECT_X): InstructionInfo(0xA1, 2, 6),
    ("LDA", _M.INDIRECT_Y): InstructionInfo(0xB1, 2, 5),

    ("LDX", _M.IMMEDIATE): InstructionInfo(0xA2, 2, 2),
    ("LDX", _M.ZERO_PAGE): InstructionInfo(0xA6, 2, 3),
    ("LDX", _M.ZERO_PAGE_Y): InstructionInfo(0xB6, 2, 4),
    ("LDX", _M.ABSOLUTE): InstructionInfo(0xAE, 3, 4),
    ("LDX", _M.ABSOLUTE_Y): InstructionInfo(0xBE, 3, 4),

    ("LDY", _M.IMMEDIATE): InstructionInfo(0xA0, 2, 2),
    ("LDY", _M.ZERO_PAGE): InstructionInfo(0xA4, 2, 3),
    ("LDY", _M.ZERO_PAGE_X): InstructionInfo(0xB4, 2, 4),
    ("LDY", _M.ABSOLUTE): InstructionInfo(0xAC, 3, 4),
    ("LDY", _M.ABSOLUTE_X): InstructionInfo(0xBC, 3, 4),

    ("STA", _M.ZERO_PAGE): InstructionInfo(0x85, 2, 3),
    ("STA", _M.ZERO_PAGE_X): InstructionInfo(0x95, 2, 4),
    ("STA", _M.ABSOLUTE): InstructionInfo(0x8D, 3, 4),
    ("STA", _M.ABSOLUTE_X): InstructionInfo(0x9D, 3, 5),
    ("STA", _M.ABSOLUTE_Y): InstructionInfo(0x99, 3, 5),
    ("STA", _M.INDIRECT_X): InstructionInfo(0x81, 2, 6),
    ("STA", _M.INDIRECT_Y): InstructionInfo(0x91, 2, 6),

    ("STX", _M.ZERO_PAGE): InstructionInfo(0x86, 2, 3),
    ("STX", _M.ZERO_PAGE_Y): InstructionInfo(0x96, 2, 4),
    ("STX", _M.ABSOLUTE): InstructionInfo(0x8E, 3, 4),

    ("STY", _M.ZERO_PAGE): InstructionInfo(0x84, 2, 3),
    ("STY", _M.ZERO_PAGE_X): InstructionInfo(0x94, 2, 4),
    ("STY", _M.ABSOLUTE): InstructionInfo(0x8C, 3, 4),

    # =========================================================================
    # REGISTER TRANSFERS
    # =========================================================================
    ("TAX", _M.IMPLIED): InstructionInfo(0xAA, 1, 2),
    ("TAY", _M.IMPLIED): InstructionInfo(0xA8, 1, 2),
    ("TXA", _M.IMPLIED): InstructionInfo(0x8A, 1, 2),
    ("TYA", _M.IMPLIED): InstructionInfo(0x98, 1, 2),
    ("TSX", _M.IMPLIED): InstructionInfo(0xBA, 1, 2),
    ("TXS", _M.IMPLIED): InstructionInfo(0x9A, 1, 2),

    # =========================================================================
    # STACK
    # =========================================================================
    ("PHA", _M.IMPLIED): InstructionInfo(0x48, 1, 3),
    ("PHP", _M.IMPLIED): InstructionInfo(0x08, 1, 3),
    ("PLA", _M.IMPLIED): InstructionInfo(0x68, 1, 4),
    ("PLP", _M.IMPLIED): InstructionInfo(0x28, 1, 4),

    # =========================================================================
    # LOGICAL
    # =========================================================================
    ("AND", _M.IMMEDIATE): InstructionInfo(0x29, 2, 2),
    ("AND", _M.ZERO_PAGE): InstructionInfo(0x25, 2, 3),
    ("AND", _M.ZERO_PAGE_X): InstructionInfo(0x35, 2, 4),
    ("AND", _M.ABSOLUTE): InstructionInfo(0x2D, 3, 4),
    ("AND", _M.ABSOLUTE_X): InstructionInfo(0x3D, 3, 4),
    ("AND", _M.ABSOLUTE_Y): InstructionInfo(0x39, 3, 4),
    ("AND", _M.INDIRECT_X): InstructionInfo(0x21, 2, 6),
    ("AND", _M.INDIRECT_Y): InstructionInfo(0x31, 2, 5),

    ("EOR", _M.IMMEDIATE): InstructionInfo(0x49, 2, 2),
    ("EOR", _M.ZERO_PAGE): InstructionInfo(0x45, 2, 3),
    ("EOR", _M.ZERO_PAGE_X): InstructionInfo(0x55, 2, 4),
    ("EOR", _M.ABSOLUTE): InstructionInfo(0x4D, 3, 4),
    ("EOR", _M.ABSOLUTE_X): InstructionInfo(0x5D, 3, 4),
    ("EOR", _M.ABSOLUTE_Y): InstructionInfo(0x59, 3, 4),
    ("EOR", _M.INDIRECT_X): InstructionInfo(0x41, 2, 6),
    ("EOR", _M.INDIRECT_Y): InstructionInfo(0x51, 2, 5),

    ("ORA", _M.IMMEDIATE): InstructionInfo(0x09, 2, 2),
    ("ORA", _M.ZERO_PAGE): InstructionInfo(0x05, 2, 3),
    ("ORA", _M.ZERO_PAGE_X): InstructionInfo(0x15, 2, 4),
    ("ORA", _M.ABSOLUTE): InstructionInfo(0x0D, 3, 4),
    ("ORA", _M.ABSOLUTE_X): InstructionInfo(0x1D, 3, 4),
    ("ORA", _M.ABSOLUTE_Y): InstructionInfo(0x19, 3, 4),
    ("ORA", _M.INDIRECT_X): InstructionInfo(0x01, 2, 6),
    ("ORA", _M.INDIRECT_Y): InstructionInfo(0x11, 2, 5),

    ("BIT", _M.ZERO_PAGE): InstructionInfo(0x24, 2, 3),
    ("BIT", _M.ABSOLUTE): InstructionInfo(0x2C, 3, 4),

    # =========================================================================
    # ARITHMETIC
    # =========================================================================
    ("ADC", _M.IMMEDIATE): InstructionInfo(0x69, 2, 2),
    ("ADC", _M.ZERO_PAGE): InstructionInfo(0x65, 2, 3),
    ("ADC", _M.ZERO_PAGE_X): InstructionInfo(0x75, 2, 4),
    ("ADC", _M.ABSOLUTE): InstructionInfo(0x6D, 3, 4),
    ("ADC", _M.ABSOLUTE_X): InstructionInfo(0x7D, 3, 4),
    ("ADC", _M.ABSOLUTE_Y): InstructionInfo(0x79, 3, 4),
    ("ADC", _M.INDIRECT_X): InstructionInfo(0x61, 2, 6),
    ("ADC", _M.INDIRECT_Y): InstructionInfo(0x71, 2, 5),

    ("SBC", _M.IMMEDIATE): InstructionInfo(0xE9, 2, 2),
    ("SBC", _M.ZERO_PAGE): InstructionInfo(0xE5, 2, 3),
    ("SBC", _M.ZERO_PAGE_X): InstructionInfo(0xF5, 2, 4),
    ("SBC", _M.ABSOLUTE): InstructionInfo(0xED, 3, 4),
    ("SBC", _M.ABSOLUTE_X): InstructionInfo(0xFD, 3, 4),
    ("SBC", _M.ABSOLUTE_Y): InstructionInfo(0xF9, 3, 4),
    ("SBC", _M.INDIRECT_X): InstructionInfo(0xE1, 2, 6),
    ("SBC", _M.INDIRECT_Y): InstructionInfo(0xF1, 2, 5),

    ("CMP", _M.IMMEDIATE): InstructionInfo(0xC9, 2, 2),
    ("CMP", _M.ZERO_PAGE): InstructionInfo(0xC5, 2, 3),
    ("CMP", _M.ZERO_PAGE_X): InstructionInfo(0xD5, 2, 4),
    ("CMP", _M.ABSOLUTE): InstructionInfo(0xCD, 3, 4),
    ("CMP", _M.ABSOLUTE_X): InstructionInfo(0xDD, 3, 4),
    ("CMP", _M.ABSOLUTE_Y): InstructionInfo(0xD9, 3, 4),
    ("CMP", _M.INDIRECT_X): InstructionInfo(0xC1, 2, 6),
    ("CMP", _M.INDIRECT_Y): InstructionInfo(0xD1, 2, 5),

    ("CPX", _M.IMMEDIATE): InstructionInfo(0xE0, 2, 2),
    ("CPX", _M.ZERO_PAGE): InstructionInfo(0xE4, 2, 3),
    ("CPX", _M.ABSOLUTE): InstructionInfo(0xEC, 3, 4),

    ("CPY", _M.IMMEDIATE): InstructionInfo(0xC0, 2, 2),
    ("CPY", _M.ZERO_PAGE): InstructionInfo(0xC4, 2, 3),
    ("CPY", _M.ABSOLUTE): InstructionInfo(0xCC, 3, 4),

    # =========================================================================
    # INCREMENT / DECREMENT
    # =========================================================================
    ("INC", _M.ZERO_PAGE): InstructionInfo(0xE6, 2, 5),
    ("INC", _M.ZERO_PAGE_X): InstructionInfo(0xF6, 2, 6),
    ("INC", _M.ABSOLUTE): InstructionInfo(0xEE, 3, 6),
    ("INC", _M.ABSOLUTE_X): InstructionInfo(0xFE, 3, 7),
    ("INX", _M.IMPLIED): InstructionInfo(0xE8, 1, 2),
    ("INY", _M.IMPLIED): InstructionInfo(0xC8, 1, 2),

    ("DEC", _M.ZERO_PAGE): InstructionInfo(0xC6, 2, 5),
    ("DEC", _M.ZERO_PAGE_X): InstructionInfo(0xD6, 2, 6),
    ("DEC", _M.ABSOLUTE): InstructionInfo(0xCE, 3, 6),
    ("DEC", _M.ABSOLUTE_X): InstructionInfo(0xDE, 3, 7),
    ("DEX", _M.IMPLIED): InstructionInfo(0xCA, 1, 2),
    ("DEY", _M.IMPLIED): InstructionInfo(0x88, 1, 2),

    # =========================================================================
    # SHIFTS (implied = accumulator form)
    # =========================================================================
    ("ASL", _M.IMPLIED): InstructionInfo(0x0A, 1, 2),
    ("ASL", _M.ZERO_PAGE): InstructionInfo(0x06, 2, 5),
    ("ASL", _M.ZERO_PAGE_X): InstructionInfo(0x16, 2, 6),
    ("ASL", _M.ABSOLUTE): InstructionInfo(0x0E, 3, 6),
    ("ASL", _M.ABSOLUTE_X): InstructionInfo(0x1E, 3, 7),

    ("LSR", _M.IMPLIED): InstructionInfo(0x4A, 1, 2),
    ("LSR", _M.ZERO_PAGE): InstructionInfo(0x46, 2, 5),
    ("LSR", _M.ZERO_PAGE_X): InstructionInfo(0x56, 2, 6),
    ("LSR", _M.ABSOLUTE): InstructionInfo(0x4E, 3, 6),
    ("LSR", _M.ABSOLUTE_X): InstructionInfo(0x5E, 3, 7),

    ("ROL", _M.IMPLIED): InstructionInfo(0x2A, 1, 2),
    ("ROL", _M.ZERO_PAGE): InstructionInfo(0x26, 2, 5),
    ("ROL", _M.ZERO_PAGE_X): InstructionInfo(0x36, 2, 6),
    ("ROL", _M.ABSOLUTE): InstructionInfo(0x2E, 3, 6),
    ("ROL", _M.ABSOLUTE_X): InstructionInfo(0x3E, 3, 7),

    ("ROR", _M.IMPLIED): InstructionInfo(0x6A, 1, 2),
    ("ROR", _M.ZERO_PAGE): InstructionInfo(0x66, 2, 5),
    ("ROR", _M.ZERO_PAGE_X): InstructionInfo(0x76, 2, 6),
    ("ROR", _M.ABSOLUTE): InstructionInfo(0x6E, 3, 6),
    ("ROR", _M.ABSOLUTE_X): InstructionInfo(0x7E, 3, 7),

    # =========================================================================
    # JUMPS / CALLS
    # =========================================================================
    ("JMP", _M.ABSOLUTE): InstructionInfo(0x4C, 3, 3),
    ("JMP", _M.INDIRECT): InstructionInfo(0x6C, 3, 5),
    ("JSR", _M.ABSOLUTE): InstructionInfo(0x20, 3, 6),
    ("RTS", _M.IMPLIED): InstructionInfo(0x60, 1, 6),

    # =========================================================================
    # BRANCHES
    # =========================================================================
    ("BPL", _M.RELATIVE): InstructionInfo(0x10, 2, 2),
    ("BMI", _M.RELATIVE): InstructionInfo(0x30, 2, 2),
    ("BVC", _M.RELATIVE): InstructionInfo(0x50, 2, 2),
    ("BVS", _M.RELATIVE): InstructionInfo(0x70, 2, 2),
    ("BCC", _M.RELATIVE): InstructionInfo(0x90, 2, 2),
    ("BCS", _M.RELATIVE): InstructionInfo(0xB0, 2, 2),
    ("BNE", _M.RELATIVE): InstructionInfo(0xD0, 2, 2),
    ("BEQ", _M.RELATIVE): InstructionInfo(0xF0, 2, 2),

    # =========================================================================
    # STATUS FLAGS
    # =========================================================================
    ("CLC", _M.IMPLIED): InstructionInfo(0x18, 1, 2),
    ("CLD", _M.IMPLIED): InstructionInfo(0xD8, 1, 2),
    ("CLI", _M.IMPLIED): InstructionInfo(0x58, 1, 2),
    ("CLV", _M.IMPLIED): InstructionInfo(0xB8, 1, 2),
    ("SEC", _M.IMPLIED): InstructionInfo(0x38, 1, 2),
    ("SED", _M.IMPLIED): InstructionInfo(0xF8, 1, 2),
    ("SEI", _M.IMPLIED): InstructionInfo(0x78, 1, 2),

    # =========================================================================
    # SYSTEM
    # =========================================================================
    ("BRK", _M.IMPLIED): InstructionInfo(0x00, 1, 7),
    ("NOP", _M.IMPLIED): InstructionInfo(0xEA, 1, 2),
    ("RTI", _M.IMPLIED): InstructionInfo(0x40, 1, 6),
}

del _M


# =============================================================================
# Instruction Set Reference Lists
# =============================================================================

MNEMONICS: frozenset[str] = frozenset({
    mnemonic for mnemonic, _ in OPCODE_TABLE.keys()
})

# Branch instructions, the only users of relative addressing
BRANCH_INSTRUCTIONS: frozenset[str] = frozenset({
    mnemonic for mnemonic, mode in OPCODE_TABLE.keys()
    if mode is AddressingMode.RELATIVE
})


# =============================================================================
# Opcode Table Service
# =============================================================================

class OpcodeTable:
    """
    Immutable two-way opcode lookup.

    Built once from a sequence of OpcodeEntry rows and never modified
    afterwards, so one instance can be shared by any number of concurrent
    assembler and disassembler runs. Tests may build partial tables.

    Example:
        >>> table = OpcodeTable.from_info_table(OPCODE_TABLE)
        >>> table.lookup_by_opcode(0xA9).mnemonic
        'LDA'
    """

    def __init__(self, entries: Iterable[OpcodeEntry]):
        by_mnemonic: dict[str, list[OpcodeEntry]] = {}
        by_opcode: dict[int, OpcodeEntry] = {}
        seen: set[tuple[str, AddressingMode]] = set()

        for entry in entries:
            if entry.size != entry.mode.size:
                raise ValueError(
                    f"{entry.mnemonic} {entry.mode}: size {entry.size} "
                    f"does not match mode size {entry.mode.size}"
                )
            if not 0 <= entry.opcode <= 0xFF:
                raise ValueError(f"opcode ${entry.opcode:X} is not a byte")
            if entry.opcode in by_opcode:
                raise ValueError(
                    f"opcode ${entry.opcode:02X} assigned to both "
                    f"{by_opcode[entry.opcode].mnemonic} and {entry.mnemonic}"
                )
            key = (entry.mnemonic.upper(), entry.mode)
            if key in seen:
                raise ValueError(f"duplicate entry for {entry.mnemonic} {entry.mode}")
            seen.add(key)

            by_opcode[entry.opcode] = entry
            by_mnemonic.setdefault(key[0], []).append(entry)

        self._by_mnemonic: dict[str, tuple[OpcodeEntry, ...]] = {
            name: tuple(rows) for name, rows in by_mnemonic.items()
        }
        self._by_opcode = by_opcode

    @classmethod
    def from_info_table(
        cls,
        table: dict[tuple[str, AddressingMode], InstructionInfo],
    ) -> "OpcodeTable":
        """Build a table from a (mnemonic, mode) -> InstructionInfo mapping."""
        return cls(
            OpcodeEntry(mnemonic, mode, info.opcode, info.size)
            for (mnemonic, mode), info in table.items()
        )

    def lookup_by_mnemonic(self, mnemonic: str) -> tuple[OpcodeEntry, ...]:
        """All encodings of a mnemonic in table order (empty when unknown)."""
        return self._by_mnemonic.get(mnemonic.upper(), ())

    def lookup_by_opcode(self, opcode: int) -> Optional[OpcodeEntry]:
        """The encoding for an opcode byte, or None if the byte is not an opcode."""
        return self._by_opcode.get(opcode)

    def valid_modes(self, mnemonic: str) -> list[AddressingMode]:
        return [entry.mode for entry in self.lookup_by_mnemonic(mnemonic)]

    @property
    def mnemonics(self) -> frozenset[str]:
        return frozenset(self._by_mnemonic)

    def __contains__(self, mnemonic: object) -> bool:
        return isinstance(mnemonic, str) and mnemonic.upper() in self._by_mnemonic

    def __len__(self) -> int:
        return len(self._by_opcode)

    def __iter__(self) -> Iterator[OpcodeEntry]:
        for opcode in sorted(self._by_opcode):
            yield self._by_opcode[opcode]

    def __repr__(self) -> str:
        return f"OpcodeTable({len(self)} opcodes, {len(self._by_mnemonic)} mnemonics)"


@lru_cache(maxsize=None)
def default_opcode_table() -> OpcodeTable:
    """The full documented 6502 table, built on first use and shared."""
    return OpcodeTable.from_info_table(OPCODE_TABLE)


# =============================================================================
# Lookup Functions
# =============================================================================

def get_instruction_info(
    mnemonic: str,
    mode: AddressingMode
) -> Optional[InstructionInfo]:
    """
    Look up instruction information by mnemonic and addressing mode.

    Returns:
        InstructionInfo if found, None if the combination is invalid
    """
    return OPCODE_TABLE.get((mnemonic.upper(), mode))


def get_valid_modes(mnemonic: str) -> list[AddressingMode]:
    """Get all valid addressing modes for an instruction."""
    mnemonic = mnemonic.upper()
    return [
        mode for (m, mode) in OPCODE_TABLE.keys()
        if m == mnemonic
    ]


def is_valid_instruction(mnemonic: str) -> bool:
    """Check if a mnemonic is a documented 6502 instruction."""
    return mnemonic.upper() in MNEMONICS


def is_branch_instruction(mnemonic: str) -> bool:
    """Check if an instruction is a branch (uses relative addressing)."""
    return mnemonic.upper() in BRANCH_INSTRUCTIONS
