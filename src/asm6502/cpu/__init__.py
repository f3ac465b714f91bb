"""
asm6502 CPU Package
===================

This package contains the MOS 6502 instruction set definitions shared by
the assembler (which encodes instructions) and the disassembler (which
decodes them), so both sides always agree on opcode bytes and sizes.

Usage:
    from asm6502.cpu import (
        AddressingMode,
        OpcodeTable,
        default_opcode_table,
    )
"""

from asm6502.cpu.mos6502 import (
    # Core types
    AddressingMode,
    InstructionInfo,
    OpcodeEntry,
    OpcodeTable,
    # Master instruction database
    OPCODE_TABLE,
    MNEMONICS,
    BRANCH_INSTRUCTIONS,
    # Lookup functions
    default_opcode_table,
    get_instruction_info,
    get_valid_modes,
    is_branch_instruction,
    is_valid_instruction,
)

__all__ = [
    "AddressingMode",
    "InstructionInfo",
    "OpcodeEntry",
    "OpcodeTable",
    "OPCODE_TABLE",
    "MNEMONICS",
    "BRANCH_INSTRUCTIONS",
    "default_opcode_table",
    "get_instruction_info",
    "get_valid_modes",
    "is_branch_instruction",
    "is_valid_instruction",
]
