"""
asm6502 Disassembler Module
===========================

Turns 6502 machine code back into assembler text.

Usage:
    from asm6502.disassembler import Disassembler, decompile

    lines = decompile(code, origin=0x8000)

    disasm = Disassembler()
    for instruction in disasm.iter_instructions(code, origin=0x8000):
        print(instruction.address, instruction.text())
"""

from .mos6502 import Disassembler, decompile

__all__ = [
    "Disassembler",
    "decompile",
]
