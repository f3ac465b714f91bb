"""
6502 Assembler - Main Interface
===============================

This module provides the Assembler class, the single-pass driver that walks
source lines, keeps the program counter and label table, and collects the
encoded instructions.

Example Usage
-------------
>>> from asm6502.assembler import Assembler
>>> asm = Assembler(origin=0x8000)
>>> code = asm.assemble_string("LDA #%0101\\nSTA ($15,X)\\nTAX")
>>> code.hex()
'a9058115aa'

Assembly Process
----------------
For each non-blank line, in order:

1. Split the line into address column, mnemonic and operand.
2. Infer the operand bytes and addressing mode; look up the opcode.
3. Bind a declared label to the program counter (after the line itself
   has been parsed, so a line cannot refer to its own label).
4. Give the instruction the program counter as its address.
5. Advance the program counter by the instruction size.

The first error aborts the whole run with a CompileError naming the line.
There is no partial output.
"""

import logging
from pathlib import Path
from typing import Optional

from asm6502.assembler.parser import encode_source_line, is_blank, split_source_line
from asm6502.config import DEFAULT_ORIGIN, AssemblerConfig
from asm6502.cpu import OpcodeTable, default_opcode_table
from asm6502.errors import (
    AddressOverflowError,
    AssemblerError,
    CompileError,
    DuplicateLabelError,
    SourceLocation,
)
from asm6502.instruction import Instruction, LabelReference, Resolved

logger = logging.getLogger(__name__)


def normalize_source(source: str) -> str:
    """Convert CRLF to LF and trim surrounding whitespace."""
    return source.replace("\r\n", "\n").strip()


class Assembler:
    """
    Single-pass 6502 assembler.

    Each call to compile() starts from a fresh program counter and label
    table, so one instance can be reused. The opcode table is read-only
    and may be shared between instances and threads.

    Attributes:
        origin: Address of the first emitted byte
    """

    def __init__(
        self,
        origin: Optional[int] = None,
        opcode_table: Optional[OpcodeTable] = None,
        config: Optional[AssemblerConfig] = None,
    ):
        """
        Initialize the assembler.

        Args:
            origin: Starting address (default: config.origin, $8000)
            opcode_table: Opcode table (default: the full 6502 table)
            config: Assembler settings (default: AssemblerConfig())
        """
        self._config = config or AssemblerConfig()
        if origin is None:
            origin = self._config.origin
        if not 0 <= origin <= 0xFFFF:
            raise ValueError(f"origin {origin:#x} is outside $0000-$FFFF")
        self.origin = origin
        self._table = opcode_table if opcode_table is not None else default_opcode_table()

        self._instructions: list[Instruction] = []
        self._symbols: dict[str, int] = {}
        self._start = origin

    # =========================================================================
    # Assembly Methods
    # =========================================================================

    def compile(self, source: str, filename: Optional[str] = None) -> list[Instruction]:
        """
        Assemble source text into instructions.

        Args:
            source: Assembly source, lines separated by LF or CRLF
            filename: Name used in error locations (default: config.filename)

        Returns:
            Instructions in source order, each with a Resolved address

        Raises:
            CompileError: On the first failing line
        """
        filename = filename or self._config.filename
        labels: dict[str, int] = {}
        label_lines: dict[str, int] = {}
        instructions: list[Instruction] = []
        pc = self.origin
        start = self.origin

        for line_number, line in enumerate(normalize_source(source).split("\n"), start=1):
            if is_blank(line):
                continue

            try:
                if pc > 0xFFFF:
                    raise AddressOverflowError(
                        "program counter ran past $FFFF",
                        hint=f"origin ${self.origin:04X} leaves no room for this instruction",
                    )

                source_line = split_source_line(line)
                address = source_line.address

                # An explicit address only moves the origin on the first instruction
                line_pc = pc
                if isinstance(address, Resolved):
                    if not instructions:
                        line_pc = start = address.address
                        logger.debug("origin set to $%04X by line %d", line_pc, line_number)
                    elif address.address != pc:
                        logger.warning(
                            "line %d: column %04X read as an address, not a label; "
                            "ignored, program counter is %04X",
                            line_number, address.address, pc,
                        )

                instruction = encode_source_line(
                    source_line, labels, self._table, line_pc,
                    self._config.max_suggestions,
                )

                if line_pc + instruction.size - 1 > 0xFFFF:
                    raise AddressOverflowError(
                        f"{instruction.mnemonic} at ${line_pc:04X} runs past $FFFF",
                        hint=f"it needs {instruction.size} bytes",
                    )

                if isinstance(address, LabelReference):
                    if address.name in labels:
                        raise DuplicateLabelError(
                            address.name, original_line=label_lines[address.name]
                        )
                    labels[address.name] = line_pc
                    label_lines[address.name] = line_number
                    logger.debug("label '%s' = $%04X", address.name, line_pc)

            except AssemblerError as e:
                raise CompileError(
                    line_number,
                    e.message,
                    cause=e,
                    location=SourceLocation(filename, line_number),
                    source_line=line.strip(),
                ) from e

            instruction.address = Resolved(line_pc)
            instructions.append(instruction)
            pc = line_pc + instruction.size

        self._instructions = instructions
        self._symbols = labels
        self._start = start

        logger.info(
            "assembled %d instructions, %d bytes at $%04X",
            len(instructions), sum(i.size for i in instructions), start,
        )
        return list(instructions)

    def assemble_string(self, source: str, filename: Optional[str] = None) -> bytes:
        """
        Assemble source text into machine code.

        Raises:
            CompileError: On the first failing line
        """
        self.compile(source, filename)
        return self.get_code()

    def assemble_file(self, filepath: str | Path) -> bytes:
        """
        Assemble a source file into machine code.

        Raises:
            CompileError: On the first failing line
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        logger.debug("assembling %s", filepath)
        source = filepath.read_text(encoding="utf-8")
        return self.assemble_string(source, str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_code(self) -> bytes:
        """Machine code of the last run."""
        return b"".join(instruction.to_bytes() for instruction in self._instructions)

    def get_instructions(self) -> list[Instruction]:
        return list(self._instructions)

    def get_symbols(self) -> dict[str, int]:
        """Label table of the last run (a copy)."""
        return dict(self._symbols)

    def get_origin(self) -> int:
        """Address of the first instruction of the last run."""
        return self._start

    def get_listing(self) -> str:
        """
        Listing with address, bytes and instruction text.

            8000  A9 05     LDA #$05
            8002  81 15     STA ($15,X)
            8004  AA        TAX
        """
        lines = []
        for instruction in self._instructions:
            hex_bytes = " ".join(f"{b:02X}" for b in instruction.to_bytes())
            lines.append(
                f"{instruction.address}  {hex_bytes:<8}  {instruction.text()}"
            )
        return "\n".join(lines)

    def write_binary(self, filepath: str | Path) -> None:
        code = self.get_code()
        Path(filepath).write_bytes(code)
        logger.info("wrote %d bytes to %s", len(code), filepath)

    def write_listing(self, filepath: str | Path) -> None:
        Path(filepath).write_text(self.get_listing() + "\n")
        logger.info("wrote listing to %s", filepath)


# =============================================================================
# Convenience Functions
# =============================================================================

def compile(
    source: str,
    origin: int = DEFAULT_ORIGIN,
    opcode_table: Optional[OpcodeTable] = None,
) -> list[Instruction]:
    """
    Assemble source text into instructions.

    Raises:
        CompileError: On the first failing line
    """
    return Assembler(origin, opcode_table).compile(source)


def assemble(
    source: str,
    origin: int = DEFAULT_ORIGIN,
    opcode_table: Optional[OpcodeTable] = None,
) -> bytes:
    """
    Assemble source text into machine code.

    Raises:
        CompileError: On the first failing line
    """
    return Assembler(origin, opcode_table).assemble_string(source)


def assemble_file(filepath: str | Path, origin: int = DEFAULT_ORIGIN) -> bytes:
    """
    Assemble a source file into machine code.

    Raises:
        CompileError: On the first failing line
    """
    return Assembler(origin).assemble_file(filepath)
