"""
6502 Disassembler
=================

Disassembles 6502 machine code into assembler-compatible text. This is the
inverse of the assembler's encoding step.

Decoding Rules:
    - Each opcode byte is looked up in the opcode table; a known opcode
      consumes 1 + operand_size bytes as one instruction.
    - Unknown bytes (undocumented opcodes, data) are skipped one at a time.
    - A final instruction cut short by the end of the input is still
      produced, flagged ``incomplete``, with whatever operand bytes remain.

Disassembly never raises for data content.

Usage:
    disasm = Disassembler()

    for instruction in disasm.iter_instructions(code, origin=0x8000):
        print(instruction)

    lines = disasm.decompile(code, origin=0x8000)
"""

import logging
from typing import Iterator, Optional

from asm6502.config import DEFAULT_ORIGIN
from asm6502.cpu import OpcodeTable, default_opcode_table
from asm6502.instruction import Instruction, Resolved

logger = logging.getLogger(__name__)


class Disassembler:
    """
    Disassembler for 6502 machine code.

    Attributes:
        _table: Opcode table consulted by opcode byte
    """

    def __init__(self, opcode_table: Optional[OpcodeTable] = None):
        """
        Initialize the disassembler.

        Args:
            opcode_table: Opcode table (default: the full 6502 table).
                          A partial table makes the missing opcodes unknown bytes.
        """
        self._table = opcode_table if opcode_table is not None else default_opcode_table()

    def iter_instructions(
        self,
        data: bytes,
        origin: int = DEFAULT_ORIGIN,
    ) -> Iterator[Instruction]:
        """
        Lazily decode instructions from a byte buffer.

        Args:
            data: Machine code
            origin: Memory address of the first byte

        Yields:
            Instruction objects with Resolved addresses, in memory order
        """
        offset = 0
        length = len(data)

        while offset < length:
            opcode = data[offset]
            address = (origin + offset) & 0xFFFF
            entry = self._table.lookup_by_opcode(opcode)

            if entry is None:
                logger.debug("skipping unknown byte $%02X at $%04X", opcode, address)
                offset += 1
                continue

            operands = bytes(data[offset + 1:offset + entry.size])
            incomplete = len(operands) < entry.operand_size
            if incomplete:
                logger.debug(
                    "%s at $%04X truncated: %d of %d operand bytes",
                    entry.mnemonic, address, len(operands), entry.operand_size,
                )

            yield Instruction.from_entry(entry, operands, Resolved(address), incomplete)
            offset += entry.size

    def disassemble(self, data: bytes, origin: int = DEFAULT_ORIGIN) -> list[Instruction]:
        """
        Disassemble a byte buffer.

        Args:
            data: Machine code
            origin: Memory address of the first byte

        Returns:
            List of Instruction objects
        """
        instructions = list(self.iter_instructions(data, origin))
        logger.info(
            "disassembled %d bytes into %d instructions at $%04X",
            len(data), len(instructions), origin & 0xFFFF,
        )
        return instructions

    def decompile(self, data: bytes, origin: int = DEFAULT_ORIGIN) -> list[str]:
        """Disassemble into ``ADDRESS<TAB>MNEMONIC[ OPERAND]`` lines."""
        return [str(instruction) for instruction in self.disassemble(data, origin)]

    def disassemble_to_text(self, data: bytes, origin: int = DEFAULT_ORIGIN) -> str:
        """
        Disassemble and return the lines joined with newlines.

        The result can be fed straight back into the assembler.
        """
        return "\n".join(self.decompile(data, origin))


def decompile(
    data: bytes,
    origin: int = DEFAULT_ORIGIN,
    opcode_table: Optional[OpcodeTable] = None,
) -> list[str]:
    """
    Disassemble a byte buffer into text lines.

    Example:
        >>> decompile(bytes([0xA9, 0x05, 0x81, 0x15, 0xAA]), 0x8000)
        ['8000\\tLDA #$05', '8002\\tSTA ($15,X)', '8004\\tTAX']
    """
    return Disassembler(opcode_table).decompile(data, origin)
