"""
Unit Tests for the Instruction Model
====================================

Tests the InstructionAddress variants, the operand-count invariant and
text rendering.
"""

import pytest

from asm6502.cpu import AddressingMode, default_opcode_table
from asm6502.errors import InternalConsistencyError
from asm6502.instruction import (
    UNRESOLVED,
    Instruction,
    LabelReference,
    Resolved,
    Unresolved,
    format_address,
)


def make(opcode, operands=b"", address=UNRESOLVED, incomplete=False):
    entry = default_opcode_table().lookup_by_opcode(opcode)
    return Instruction.from_entry(entry, operands, address, incomplete)


# =============================================================================
# Instruction Address Tests
# =============================================================================

class TestInstructionAddress:
    """Tests for the three address states."""

    def test_format_unresolved(self):
        assert format_address(Unresolved()) == "    "
        assert format_address(UNRESOLVED) == "    "

    def test_format_resolved(self):
        assert format_address(Resolved(0x8000)) == "8000"
        assert format_address(Resolved(0x2A)) == "002A"

    def test_format_label(self):
        assert format_address(LabelReference("loop")) == "loop"

    def test_format_rejects_other_values(self):
        with pytest.raises(TypeError):
            format_address(0x8000)

    def test_resolved_range(self):
        with pytest.raises(ValueError):
            Resolved(0x10000)
        with pytest.raises(ValueError):
            Resolved(-1)

    def test_variants_compare_by_value(self):
        assert Resolved(0x8000) == Resolved(0x8000)
        assert Unresolved() == UNRESOLVED
        assert LabelReference("a") != LabelReference("b")


# =============================================================================
# Invariant Tests
# =============================================================================

class TestInstructionInvariant:
    """Operand count must match the addressing mode."""

    def test_too_few_operands(self):
        with pytest.raises(InternalConsistencyError):
            Instruction("LDA", AddressingMode.ABSOLUTE, 0xAD, b"\x00")

    def test_too_many_operands(self):
        with pytest.raises(InternalConsistencyError):
            Instruction("TAX", AddressingMode.IMPLIED, 0xAA, b"\x00")

    def test_is_assertion_error(self):
        """Encoder bugs surface as assertions, not user errors."""
        with pytest.raises(AssertionError):
            Instruction("LDA", AddressingMode.IMMEDIATE, 0xA9, b"")

    def test_incomplete_allows_fewer(self):
        instruction = make(0xAD, b"\x34", incomplete=True)
        assert instruction.size == 2

    def test_incomplete_requires_fewer(self):
        with pytest.raises(InternalConsistencyError):
            make(0xAD, b"\x34\x12", incomplete=True)

    def test_operands_converted_to_bytes(self):
        instruction = Instruction("LDA", AddressingMode.IMMEDIATE, 0xA9, [0x05])
        assert instruction.operands == b"\x05"


# =============================================================================
# Encoding Tests
# =============================================================================

class TestInstructionEncoding:
    """Tests for size, value and serialization."""

    def test_size(self):
        assert make(0xAA).size == 1
        assert make(0xA9, b"\x05").size == 2
        assert make(0xAD, b"\x34\x12").size == 3

    def test_value_little_endian(self):
        assert make(0xAD, b"\x34\x12").value == 0x1234
        assert make(0xA9, b"\x05").value == 0x05
        assert make(0xAA).value is None

    def test_to_bytes(self):
        assert make(0xAD, b"\x34\x12").to_bytes() == b"\xad\x34\x12"

    def test_serialize(self):
        instruction = make(0x81, b"\x15", Resolved(0x8002))
        assert instruction.serialize() == (Resolved(0x8002), b"\x81\x15")


# =============================================================================
# Text Rendering Tests
# =============================================================================

class TestInstructionText:
    """Tests for operand and line rendering."""

    @pytest.mark.parametrize("opcode,operands,text", [
        (0xAA, b"", "TAX"),
        (0x0A, b"", "ASL"),
        (0xA9, b"\x05", "LDA #$05"),
        (0xA5, b"\x2a", "LDA $2A"),
        (0xB5, b"\x2a", "LDA $2A,X"),
        (0xB6, b"\x10", "LDX $10,Y"),
        (0xAD, b"\x01\xc0", "LDA $C001"),
        (0xBD, b"\x01\xc0", "LDA $C001,X"),
        (0xB9, b"\x01\xc0", "LDA $C001,Y"),
        (0x6C, b"\xfc\xff", "JMP ($FFFC)"),
        (0x81, b"\x15", "STA ($15,X)"),
        (0xB1, b"\x2a", "LDA ($2A),Y"),
        (0xD0, b"\xfe", "BNE $FE"),
    ])
    def test_text(self, opcode, operands, text):
        assert make(opcode, operands).text() == text

    def test_str_with_address(self):
        assert str(make(0xA9, b"\x05", Resolved(0x8000))) == "8000\tLDA #$05"

    def test_str_unresolved(self):
        assert str(make(0xAA)) == "    \tTAX"

    def test_str_label(self):
        assert str(make(0xCA, address=LabelReference("loop"))) == "loop\tDEX"

    def test_incomplete_text(self):
        assert make(0xAD, b"\x34", incomplete=True).text() == "LDA $34 ???"
        assert make(0xA9, b"", incomplete=True).text() == "LDA ???"

    def test_to_dict(self):
        d = make(0xA9, b"\x05", Resolved(0x8000)).to_dict()
        assert d["address"] == "8000"
        assert d["address_int"] == 0x8000
        assert d["mnemonic"] == "LDA"
        assert d["mode"] == "immediate"
        assert d["bytes"] == ["$A9", "$05"]
        assert d["size"] == 2
        assert d["cycles"] == 2

    def test_cycles(self):
        assert make(0x20, b"\x00\x80").cycles == 6
        assert make(0xEA).cycles == 2

    def test_to_dict_unresolved(self):
        d = make(0xAA).to_dict()
        assert d["address"] is None
        assert d["address_int"] is None
