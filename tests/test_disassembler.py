"""
Unit Tests for the Disassembler Module
======================================

Test coverage includes:
- Every addressing mode
- Address assignment and wrap-around
- Edge cases (unknown opcodes, truncated data, empty input)
- Partial opcode tables
"""

import logging

import pytest

from asm6502.cpu import AddressingMode, OpcodeEntry, OpcodeTable
from asm6502.disassembler import Disassembler, decompile
from asm6502.instruction import Resolved


# =============================================================================
# Disassembler Tests
# =============================================================================

class TestDisassembler:
    """Tests for the 6502 disassembler."""

    def setup_method(self):
        """Create disassembler instance for each test."""
        self.disasm = Disassembler()

    def test_end_to_end_example(self):
        lines = self.disasm.decompile(bytes([0xA9, 0x05, 0x81, 0x15, 0xAA]), 0x8000)
        assert lines == ["8000\tLDA #$05", "8002\tSTA ($15,X)", "8004\tTAX"]

    def test_module_decompile(self):
        lines = decompile(bytes([0xA9, 0x05, 0x81, 0x15, 0xAA]), 0x8000)
        assert [line[:4] for line in lines] == ["8000", "8002", "8004"]

    @pytest.mark.parametrize("data,mode,text", [
        (b"\xea", AddressingMode.IMPLIED, "NOP"),
        (b"\x0a", AddressingMode.IMPLIED, "ASL"),
        (b"\xa2\x08", AddressingMode.IMMEDIATE, "LDX #$08"),
        (b"\xa5\x2a", AddressingMode.ZERO_PAGE, "LDA $2A"),
        (b"\x95\x2a", AddressingMode.ZERO_PAGE_X, "STA $2A,X"),
        (b"\x96\x2a", AddressingMode.ZERO_PAGE_Y, "STX $2A,Y"),
        (b"\x20\x34\x12", AddressingMode.ABSOLUTE, "JSR $1234"),
        (b"\x9d\x00\x02", AddressingMode.ABSOLUTE_X, "STA $0200,X"),
        (b"\xb9\x00\x02", AddressingMode.ABSOLUTE_Y, "LDA $0200,Y"),
        (b"\x6c\xfc\xff", AddressingMode.INDIRECT, "JMP ($FFFC)"),
        (b"\xa1\x15", AddressingMode.INDIRECT_X, "LDA ($15,X)"),
        (b"\x91\x20", AddressingMode.INDIRECT_Y, "STA ($20),Y"),
        (b"\xd0\xfd", AddressingMode.RELATIVE, "BNE $FD"),
    ])
    def test_addressing_modes(self, data, mode, text):
        instructions = self.disasm.disassemble(data, 0x8000)
        assert len(instructions) == 1
        assert instructions[0].mode is mode
        assert instructions[0].text() == text
        assert instructions[0].to_bytes() == data

    def test_addresses(self):
        data = bytes([0xA9, 0x05, 0x8D, 0x00, 0x02, 0xAA])
        addresses = [i.address for i in self.disasm.disassemble(data, 0x0600)]
        assert addresses == [Resolved(0x0600), Resolved(0x0602), Resolved(0x0605)]

    def test_addresses_wrap(self):
        instructions = self.disasm.disassemble(bytes([0xEA, 0xEA]), 0xFFFF)
        assert instructions[1].address == Resolved(0x0000)

    def test_iter_instructions_is_lazy(self):
        iterator = self.disasm.iter_instructions(bytes([0xEA] * 1000), 0)
        assert next(iterator).address == Resolved(0)
        assert next(iterator).address == Resolved(1)

    def test_disassemble_to_text(self):
        text = self.disasm.disassemble_to_text(bytes([0xEA, 0x60]), 0x8000)
        assert text == "8000\tNOP\n8001\tRTS"

    def test_empty_input(self):
        assert self.disasm.disassemble(b"", 0x8000) == []
        assert self.disasm.decompile(b"") == []

    # -------------------------------------------------------------------------
    # Best-effort decoding
    # -------------------------------------------------------------------------

    def test_unknown_opcode_skipped(self):
        """0xFF is not a documented opcode."""
        lines = self.disasm.decompile(bytes([0xFF, 0xEA]), 0x8000)
        assert lines == ["8001\tNOP"]

    def test_only_unknown_bytes(self):
        assert self.disasm.decompile(bytes([0x02, 0xFF, 0x03]), 0x8000) == []

    def test_unknown_byte_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="asm6502"):
            self.disasm.disassemble(bytes([0xFF]), 0x8000)
        assert "unknown byte $FF at $8000" in caplog.text

    def test_truncated_instruction(self):
        instructions = self.disasm.disassemble(bytes([0xEA, 0xAD, 0x34]), 0x8000)
        last = instructions[-1]
        assert last.incomplete
        assert last.mnemonic == "LDA"
        assert last.operands == b"\x34"
        assert str(last) == "8001\tLDA $34 ???"

    def test_truncated_after_opcode(self):
        instructions = self.disasm.disassemble(bytes([0xA9]), 0x8000)
        assert instructions[0].incomplete
        assert instructions[0].text() == "LDA ???"

    def test_complete_instructions_not_flagged(self):
        instructions = self.disasm.disassemble(bytes([0xA9, 0x05]), 0x8000)
        assert not instructions[0].incomplete

    def test_partial_table(self):
        """Opcodes missing from the table are treated as unknown bytes."""
        table = OpcodeTable([OpcodeEntry("NOP", AddressingMode.IMPLIED, 0xEA, 1)])
        disasm = Disassembler(table)
        assert disasm.decompile(bytes([0xAA, 0xEA]), 0x8000) == ["8001\tNOP"]

    def test_accepts_bytearray(self):
        lines = self.disasm.decompile(bytearray([0xA9, 0x05]), 0x8000)
        assert lines == ["8000\tLDA #$05"]
