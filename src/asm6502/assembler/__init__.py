"""
6502 Assembler
==============

Single-pass assembler for the MOS 6502 instruction set.

Main Components
---------------
- **Assembler**: Drives assembly line by line, tracking the program counter
  and the label table
- **operands**: Converts operand text to bytes and infers the addressing mode
- **encoder**: Picks the opcode for a mnemonic and addressing mode
- **parser**: Splits source lines into address column, mnemonic and operand

Source Format
-------------
One instruction per line, with an optional label or address column
separated by a tab::

    8000<TAB>LDX #$08
    loop<TAB>DEX
    <TAB>BNE loop
    <TAB>BRK

Labels can only be referenced after the line that declares them.

Example Usage
-------------
>>> from asm6502.assembler import assemble
>>> assemble("LDA #%0101\\nSTA ($15,X)\\nTAX", origin=0x8000).hex()
'a9058115aa'
"""

from asm6502.assembler.assembler import Assembler, assemble, assemble_file, compile
from asm6502.assembler.encoder import (
    branch_displacement,
    encode_instruction,
    resolve_opcode,
)
from asm6502.assembler.operands import (
    OperandValue,
    ParsedOperand,
    infer_operand,
    parse_value,
)
from asm6502.assembler.parser import (
    SourceLine,
    encode_source_line,
    parse_source_line,
    split_source_line,
)

__all__ = [
    # Main interface
    "Assembler",
    "assemble",
    "assemble_file",
    "compile",
    # Operands
    "OperandValue",
    "ParsedOperand",
    "infer_operand",
    "parse_value",
    # Encoding
    "branch_displacement",
    "encode_instruction",
    "resolve_opcode",
    # Source lines
    "SourceLine",
    "encode_source_line",
    "parse_source_line",
    "split_source_line",
]
