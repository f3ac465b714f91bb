"""
asm6502 - Assembler and Disassembler for the MOS 6502
=====================================================

This package translates between 6502 assembly source and machine code in
both directions. It is small and embeddable, aimed at retro-computing and
emulator work.

Main Components
---------------
- **cpu**: The 6502 opcode table (mnemonic, addressing mode, opcode, size)
- **assembler**: Single-pass assembler (source text -> bytes)
- **disassembler**: Disassembler (bytes -> source text)
- **instruction**: The Instruction record shared by both directions

Quick Start
-----------
Assemble a program:
    >>> from asm6502 import assemble
    >>> assemble("LDA #%0101\\nSTA ($15,X)\\nTAX", origin=0x8000).hex()
    'a9058115aa'

Disassemble it again:
    >>> from asm6502 import decompile
    >>> decompile(bytes.fromhex("a9058115aa"), origin=0x8000)
    ['8000\\tLDA #$05', '8002\\tSTA ($15,X)', '8004\\tTAX']

Or use the command-line tool:
    $ asm6502 -f prog.asm -o prog.bin
    $ asm6502 -d -f prog.bin

Reference Documentation
-----------------------
- 6502 Instruction Set: https://www.masswerk.at/6502/6502_instruction_set.html
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from asm6502.assembler import Assembler, assemble, compile
from asm6502.config import DEFAULT_ORIGIN, AssemblerConfig, parse_address
from asm6502.cpu import AddressingMode, OpcodeEntry, OpcodeTable, default_opcode_table
from asm6502.disassembler import Disassembler, decompile
from asm6502.errors import (
    Asm6502Error,
    AssemblerError,
    InvalidNumericError,
    UnknownLabelError,
    UnknownOpcodeError,
    InvalidOperandSyntaxError,
    DuplicateLabelError,
    BranchRangeError,
    AddressOverflowError,
    CompileError,
    InternalConsistencyError,
    SourceLocation,
)
from asm6502.instruction import (
    Instruction,
    InstructionAddress,
    LabelReference,
    Resolved,
    Unresolved,
    format_address,
)

__all__ = [
    # Version info
    "__version__",
    # Entry points
    "Assembler",
    "assemble",
    "compile",
    "Disassembler",
    "decompile",
    # Configuration
    "AssemblerConfig",
    "DEFAULT_ORIGIN",
    "parse_address",
    # Opcode table
    "AddressingMode",
    "OpcodeEntry",
    "OpcodeTable",
    "default_opcode_table",
    # Instruction model
    "Instruction",
    "InstructionAddress",
    "LabelReference",
    "Resolved",
    "Unresolved",
    "format_address",
    # Exception hierarchy
    "Asm6502Error",
    "AssemblerError",
    "InvalidNumericError",
    "UnknownLabelError",
    "UnknownOpcodeError",
    "InvalidOperandSyntaxError",
    "DuplicateLabelError",
    "BranchRangeError",
    "AddressOverflowError",
    "CompileError",
    "InternalConsistencyError",
    "SourceLocation",
]
