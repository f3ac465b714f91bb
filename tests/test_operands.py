"""
Unit Tests for Operand Parsing and Addressing Mode Inference
============================================================

Test coverage includes:
- Hex, binary and decimal literals and their byte widths
- Label lookup and unknown-label suggestions
- Zero page vs absolute selection by operand width
- Indexed and indirect operand shapes
- Malformed operands
"""

import pytest

from asm6502.assembler.operands import infer_operand, parse_value
from asm6502.cpu import AddressingMode
from asm6502.errors import (
    InvalidNumericError,
    InvalidOperandSyntaxError,
    UnknownLabelError,
)


# =============================================================================
# Literal and Label Parsing
# =============================================================================

class TestParseValue:
    """Tests for parse_value()."""

    def test_empty(self):
        value = parse_value("", {})
        assert value.data == b""
        assert not value.is_memory_reference

    def test_zero_page_address(self):
        value = parse_value("$2A", {})
        assert value.data == b"\x2a"
        assert value.is_memory_reference

    def test_absolute_address_little_endian(self):
        value = parse_value("$C001", {})
        assert value.data == b"\x01\xc0"
        assert value.value == 0xC001

    def test_four_digit_address_below_256_is_two_bytes(self):
        """Width comes from the digit count, not the value."""
        assert parse_value("$002A", {}).data == b"\x2a\x00"

    def test_three_digit_address_too_wide(self):
        with pytest.raises(InvalidNumericError):
            parse_value("$123", {})

    def test_invalid_hex_address(self):
        with pytest.raises(InvalidNumericError):
            parse_value("$GG", {})

    def test_hex_immediate(self):
        value = parse_value("#$2A", {})
        assert value.data == b"\x2a"
        assert not value.is_memory_reference

    def test_hex_immediate_word(self):
        assert parse_value("#$C001", {}).data == b"\x01\xc0"

    def test_hex_immediate_too_many_digits(self):
        with pytest.raises(InvalidNumericError):
            parse_value("#$12345", {})

    def test_binary_immediate(self):
        assert parse_value("#%0101", {}).data == b"\x05"
        assert parse_value("#%11111111", {}).data == b"\xff"

    def test_binary_immediate_nine_digits_is_word(self):
        assert parse_value("#%101010101", {}).data == b"\x55\x01"

    def test_invalid_binary(self):
        with pytest.raises(InvalidNumericError):
            parse_value("#%012", {})

    def test_decimal_immediate(self):
        assert parse_value("#10", {}).data == b"\x0a"
        assert parse_value("#255", {}).data == b"\xff"

    def test_decimal_immediate_word(self):
        assert parse_value("#300", {}).data == b"\x2c\x01"

    @pytest.mark.parametrize("token", ["#70000", "#-1", "#", "#1_0", "#$"])
    def test_invalid_decimal(self, token):
        with pytest.raises(InvalidNumericError):
            parse_value(token, {})

    def test_label(self):
        value = parse_value("loop", {"loop": 0x8003})
        assert value.data == b"\x03\x80"
        assert value.is_memory_reference
        assert value.label == "loop"

    def test_labels_are_case_sensitive(self):
        with pytest.raises(UnknownLabelError):
            parse_value("LOOP", {"loop": 0x8003})

    def test_unknown_label_suggestions(self):
        with pytest.raises(UnknownLabelError) as exc_info:
            parse_value("lop", {"loop": 0x8003, "start": 0x8000})
        assert exc_info.value.label == "lop"
        assert exc_info.value.similar_labels == ["loop"]
        assert "did you mean 'loop'?" in str(exc_info.value)

    def test_unknown_label_without_suggestions(self):
        with pytest.raises(UnknownLabelError) as exc_info:
            parse_value("later", {})
        assert "declared before" in str(exc_info.value)

    def test_suggestions_disabled(self):
        with pytest.raises(UnknownLabelError) as exc_info:
            parse_value("lop", {"loop": 0x8003}, max_suggestions=0)
        assert exc_info.value.similar_labels == []


# =============================================================================
# Addressing Mode Inference
# =============================================================================

class TestInferOperand:
    """Tests for infer_operand()."""

    @pytest.mark.parametrize("operand", ["", "A", "a", "  "])
    def test_implied(self, operand):
        parsed = infer_operand(operand, {})
        assert parsed.mode is AddressingMode.IMPLIED
        assert parsed.data == b""

    def test_immediate(self):
        parsed = infer_operand("#$2A", {})
        assert parsed.mode is AddressingMode.IMMEDIATE
        assert parsed.data == b"\x2a"

    def test_immediate_word_keeps_two_bytes(self):
        parsed = infer_operand("#$C001", {})
        assert parsed.mode is AddressingMode.IMMEDIATE
        assert parsed.data == b"\x01\xc0"

    def test_zero_page(self):
        parsed = infer_operand("$2A", {})
        assert parsed.mode is AddressingMode.ZERO_PAGE
        assert parsed.data == b"\x2a"

    def test_absolute(self):
        parsed = infer_operand("$C001", {})
        assert parsed.mode is AddressingMode.ABSOLUTE
        assert parsed.data == b"\x01\xc0"

    def test_label_is_absolute(self):
        """Labels are always two bytes, even in zero page."""
        parsed = infer_operand("ptr", {"ptr": 0x0010})
        assert parsed.mode is AddressingMode.ABSOLUTE
        assert parsed.data == b"\x10\x00"
        assert parsed.label == "ptr"

    def test_zero_page_x(self):
        assert infer_operand("$2A,X", {}).mode is AddressingMode.ZERO_PAGE_X

    def test_absolute_x(self):
        parsed = infer_operand("$C001,X", {})
        assert parsed.mode is AddressingMode.ABSOLUTE_X
        assert parsed.data == b"\x01\xc0"

    def test_zero_page_y_lower_case(self):
        assert infer_operand("$2A,y", {}).mode is AddressingMode.ZERO_PAGE_Y

    def test_absolute_y(self):
        assert infer_operand("$C001,Y", {}).mode is AddressingMode.ABSOLUTE_Y

    def test_label_ending_in_x(self):
        """Only the two-character ,X suffix selects indexing."""
        labels = {"MAX": 0x0300}
        assert infer_operand("MAX", labels).mode is AddressingMode.ABSOLUTE
        assert infer_operand("MAX,X", labels).mode is AddressingMode.ABSOLUTE_X

    def test_indirect_x(self):
        parsed = infer_operand("($15,X)", {})
        assert parsed.mode is AddressingMode.INDIRECT_X
        assert parsed.data == b"\x15"

    def test_indirect_x_with_spaces(self):
        assert infer_operand("($15, x)", {}).mode is AddressingMode.INDIRECT_X

    def test_indirect_y(self):
        parsed = infer_operand("($2A),Y", {})
        assert parsed.mode is AddressingMode.INDIRECT_Y
        assert parsed.data == b"\x2a"

    def test_indirect_label(self):
        parsed = infer_operand("(vector)", {"vector": 0x0300})
        assert parsed.mode is AddressingMode.INDIRECT
        assert parsed.data == b"\x00\x03"

    def test_indirect_absolute(self):
        assert infer_operand("($FFFC)", {}).mode is AddressingMode.INDIRECT

    @pytest.mark.parametrize("operand", [
        "($2A",       # unbalanced
        "$2A)",       # stray paren
        ",X",         # no base
        "()",         # empty indirect
        "#$20,X",     # immediate indexed
        "(#$20,X)",   # immediate indirect
        "$20,Z",      # bad index register
        "$20,X,Y",    # two index registers
        "($20,Y)",    # Y pre-indexing does not exist
    ])
    def test_malformed(self, operand):
        with pytest.raises(InvalidOperandSyntaxError):
            infer_operand(operand, {})

    def test_forward_label(self):
        with pytest.raises(UnknownLabelError):
            infer_operand("later", {})

    def test_invalid_numeric_inside_indexed(self):
        with pytest.raises(InvalidNumericError):
            infer_operand("$ZZ,X", {})
