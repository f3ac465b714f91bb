"""
6502 Source Line Parser
=======================

Splits one source line into its address/label column, mnemonic and operand
text, and parses it into an Instruction.

Line Grammar
------------
    [LABEL-OR-ADDRESS] <TAB> MNEMONIC [OPERAND] [; comment]
    MNEMONIC [OPERAND] [; comment]

- The first tab separates the optional label-or-address column from the
  instruction. Without a tab the whole line is the instruction.
- A column of 1-4 hex digits is an explicit address (``8000``); anything
  else declares a label (``loop``, ``loop:``).
- Everything after ``;`` is a comment.

Example:
    start<TAB>LDA #$00
    8010<TAB>STA $0200,X
    <TAB>BNE start      ; label column left empty
"""

import re
from dataclasses import dataclass
from typing import Mapping, Optional

from asm6502.assembler.encoder import encode_instruction
from asm6502.assembler.operands import infer_operand
from asm6502.cpu import OpcodeTable, default_opcode_table
from asm6502.instruction import (
    UNRESOLVED,
    Instruction,
    InstructionAddress,
    LabelReference,
    Resolved,
)


_ADDRESS_COLUMN = re.compile(r"[0-9A-Fa-f]{1,4}")

COMMENT_CHAR = ";"


@dataclass(frozen=True)
class SourceLine:
    """
    One source line split into its columns.

    Attributes:
        address: Explicit address, declared label, or Unresolved
        mnemonic: Instruction mnemonic, upper-cased
        operand: Operand text (may be empty)
    """
    address: InstructionAddress
    mnemonic: str
    operand: str = ""


def strip_comment(line: str) -> str:
    """Drop a trailing ``; comment``."""
    index = line.find(COMMENT_CHAR)
    if index >= 0:
        return line[:index]
    return line


def is_blank(line: str) -> bool:
    """True for lines with nothing but whitespace and/or a comment."""
    return not strip_comment(line).strip()


def parse_address_column(column: str) -> InstructionAddress:
    """Classify the text before the tab as an explicit address or a label."""
    column = column.strip()
    if not column:
        return UNRESOLVED
    if _ADDRESS_COLUMN.fullmatch(column):
        return Resolved(int(column, 16))
    return LabelReference(column.rstrip(":"))


def split_source_line(line: str) -> SourceLine:
    """
    Split a source line into address column, mnemonic and operand.

    Args:
        line: One line of source, not blank

    Returns:
        SourceLine with the three columns
    """
    code = strip_comment(line)
    parts = [part for part in code.split("\t") if part.strip()]

    address: InstructionAddress = UNRESOLVED
    if len(parts) > 1:
        address = parse_address_column(parts[0])
        instruction = " ".join(parts[1:])
    elif parts:
        instruction = parts[0]
    else:
        instruction = ""

    fields = instruction.split(None, 1)
    mnemonic = fields[0].upper() if fields else ""
    operand = fields[1].strip() if len(fields) > 1 else ""
    return SourceLine(address=address, mnemonic=mnemonic, operand=operand)


def encode_source_line(
    source: SourceLine,
    labels: Mapping[str, int],
    table: OpcodeTable,
    pc: Optional[int] = None,
    max_suggestions: int = 3,
) -> Instruction:
    """
    Encode an already split source line.

    The returned instruction still carries the line's own address column
    (Unresolved, Resolved or LabelReference); binding labels and assigning
    addresses is the assembler's job.

    Args:
        source: The split line
        labels: Label table, name -> address, of earlier lines
        table: Opcode table
        pc: Address this instruction will occupy, if known
        max_suggestions: How many similar labels to offer on a miss

    Raises:
        AssemblerError: Any line-level error (see asm6502.errors)
    """
    operand = infer_operand(source.operand, labels, max_suggestions)
    return encode_instruction(table, source.mnemonic, operand, source.address, pc)


def parse_source_line(
    line: str,
    labels: Mapping[str, int],
    table: Optional[OpcodeTable] = None,
    pc: Optional[int] = None,
    max_suggestions: int = 3,
) -> Instruction:
    """
    Parse one source line into an Instruction.

    Args:
        line: One line of source
        labels: Label table, name -> address, of earlier lines
        table: Opcode table (default: the full 6502 table)
        pc: Address this instruction will occupy, if known
        max_suggestions: How many similar labels to offer on a miss

    Raises:
        AssemblerError: Any line-level error (see asm6502.errors)
    """
    if table is None:
        table = default_opcode_table()
    return encode_source_line(split_source_line(line), labels, table, pc, max_suggestions)
