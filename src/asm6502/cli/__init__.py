"""
asm6502 Command-Line Interface
==============================

- **asm6502**: 6502 assembler and disassembler

Implemented as a Click application; see ``asm6502 --help``.
"""

__all__ = ["asm6502"]
