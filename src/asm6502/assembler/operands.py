"""
Operand Parsing and Addressing Mode Inference
=============================================

Turns the operand text of one source line into operand bytes and an
addressing mode. Inference is purely syntactic: it never looks at which
opcodes a mnemonic has. Mismatches are caught later by the encoder.

Addressing Mode Detection
-------------------------

| Syntax        | Mode                   | Example        |
|---------------|------------------------|----------------|
| (none) or A   | Implied                | TAX, ASL A     |
| #value        | Immediate              | #$41, #%0101   |
| $NN           | Zero page              | $2A            |
| $NNNN / label | Absolute               | $C001, loop    |
| value,X       | Zero page,X/Absolute,X | $2A,X          |
| value,Y       | Zero page,Y/Absolute,Y | $C001,Y        |
| (value)       | Indirect               | (vector)       |
| (value,X)     | Indirect,X             | ($15,X)        |
| (value),Y     | Indirect,Y             | ($2A),Y        |

Zero page and absolute are told apart by operand width: four hex digits
or a label give two bytes, anything shorter gives one.

Numeric Literals
----------------
- ``$hh`` / ``$hhhh``: hexadecimal address, four digits means 16 bits.
- ``#$h..``: hex immediate, 1-2 digits is a byte, 3-4 digits a word.
- ``#%b..``: binary immediate, up to 8 digits is a byte, 9-16 a word.
- ``#d..``: decimal immediate, a byte if it fits, otherwise a word.

Labels must already be in the label table when they are used.
"""

import difflib
import re
from dataclasses import dataclass
from typing import Mapping

from asm6502.cpu import AddressingMode
from asm6502.errors import (
    InvalidNumericError,
    InvalidOperandSyntaxError,
    UnknownLabelError,
)


_HEX_DIGITS = re.compile(r"[0-9A-Fa-f]+")
_BINARY_DIGITS = re.compile(r"[01]+")
_DECIMAL_DIGITS = re.compile(r"[0-9]+")

# The bare accumulator operand, as in "ASL A"
ACCUMULATOR = "A"


# =============================================================================
# Parsed Operands
# =============================================================================

@dataclass(frozen=True)
class OperandValue:
    """
    A literal or label converted to bytes.

    Attributes:
        data: Little-endian value bytes (0, 1 or 2 of them)
        is_memory_reference: True for ``$`` addresses and labels, False for
            ``#`` immediates
        label: The label name when the value came from the label table
    """
    data: bytes
    is_memory_reference: bool
    label: str | None = None

    @property
    def value(self) -> int:
        return int.from_bytes(self.data, "little")


@dataclass(frozen=True)
class ParsedOperand:
    """Operand bytes together with the addressing mode inferred for them."""
    data: bytes
    mode: AddressingMode
    label: str | None = None

    @property
    def value(self) -> int:
        return int.from_bytes(self.data, "little")


# =============================================================================
# Literal Parsing
# =============================================================================

def _parse_number(digits: str, pattern: re.Pattern, radix: int, token: str) -> int:
    """Convert a digit string, rejecting signs, spaces and separators int() would allow."""
    if not pattern.fullmatch(digits):
        raise InvalidNumericError(f"invalid numeric literal '{token}'")
    return int(digits, radix)


def _to_bytes(value: int, width: int, token: str) -> bytes:
    if value >= 1 << (8 * width):
        raise InvalidNumericError(
            f"value of '{token}' does not fit in {8 * width} bits"
        )
    return value.to_bytes(width, "little")


def _parse_address_literal(token: str) -> bytes:
    """``$hh`` or ``$hhhh``."""
    digits = token[1:]
    value = _parse_number(digits, _HEX_DIGITS, 16, token)
    width = 2 if len(digits) == 4 else 1
    return _to_bytes(value, width, token)


def _parse_immediate_literal(token: str) -> bytes:
    """``#$h..``, ``#%b..`` or ``#d..``."""
    body = token[1:]

    if body.startswith("$"):
        digits = body[1:]
        value = _parse_number(digits, _HEX_DIGITS, 16, token)
        if len(digits) > 4:
            raise InvalidNumericError(f"hex literal '{token}' has more than 4 digits")
        return _to_bytes(value, 1 if len(digits) <= 2 else 2, token)

    if body.startswith("%"):
        digits = body[1:]
        value = _parse_number(digits, _BINARY_DIGITS, 2, token)
        if len(digits) > 16:
            raise InvalidNumericError(f"binary literal '{token}' has more than 16 digits")
        return _to_bytes(value, 1 if len(digits) <= 8 else 2, token)

    value = _parse_number(body, _DECIMAL_DIGITS, 10, token)
    return _to_bytes(value, 1 if value <= 0xFF else 2, token)


def _similar_labels(name: str, labels: Mapping[str, int], limit: int) -> list[str]:
    if limit <= 0:
        return []
    return difflib.get_close_matches(name, list(labels), n=limit, cutoff=0.6)


def parse_value(
    token: str,
    labels: Mapping[str, int],
    max_suggestions: int = 3,
) -> OperandValue:
    """
    Convert a bare literal or label into bytes.

    Indexing suffixes and parentheses must already have been removed.

    Args:
        token: Operand text (trimmed)
        labels: Label table, name -> address
        max_suggestions: How many similar labels to offer on a miss

    Returns:
        OperandValue with the bytes and the memory-reference flag

    Raises:
        InvalidNumericError: Malformed digits or value too wide
        UnknownLabelError: Label not (yet) defined
    """
    if not token:
        return OperandValue(b"", is_memory_reference=False)

    if token.startswith("$"):
        return OperandValue(_parse_address_literal(token), is_memory_reference=True)

    if token.startswith("#"):
        return OperandValue(_parse_immediate_literal(token), is_memory_reference=False)

    if token in labels:
        address = labels[token]
        return OperandValue(
            address.to_bytes(2, "little"),
            is_memory_reference=True,
            label=token,
        )

    raise UnknownLabelError(
        token,
        similar_labels=_similar_labels(token, labels, max_suggestions),
    )


# =============================================================================
# Addressing Mode Inference
# =============================================================================

def _parse_address(token: str, labels: Mapping[str, int], max_suggestions: int,
                   operand: str) -> OperandValue:
    """Parse the base of an indexed or indirect operand; it must be an address."""
    if not token:
        raise InvalidOperandSyntaxError(f"missing address in operand '{operand}'")
    if any(c in token for c in "(),"):
        raise InvalidOperandSyntaxError(f"malformed operand '{operand}'")
    value = parse_value(token, labels, max_suggestions)
    if not value.is_memory_reference:
        raise InvalidOperandSyntaxError(
            f"immediate value cannot be used as an address in '{operand}'"
        )
    return value


def infer_operand(
    operand: str,
    labels: Mapping[str, int],
    max_suggestions: int = 3,
) -> ParsedOperand:
    """
    Determine operand bytes and addressing mode from operand syntax.

    Args:
        operand: Raw operand text, possibly empty
        labels: Label table, name -> address
        max_suggestions: How many similar labels to offer on a miss

    Returns:
        ParsedOperand with bytes and the inferred mode

    Raises:
        InvalidOperandSyntaxError: Malformed indirect/indexed shape
        InvalidNumericError: Malformed literal
        UnknownLabelError: Label not (yet) defined
    """
    operand = "".join(operand.split())

    if not operand or operand.upper() == ACCUMULATOR:
        return ParsedOperand(b"", AddressingMode.IMPLIED)

    upper = operand.upper()

    # Indirect forms: (op,X)  (op),Y  (op)
    if operand.startswith("("):
        if upper.endswith(",X)"):
            inner, mode = operand[1:-3], AddressingMode.INDIRECT_X
        elif upper.endswith("),Y"):
            inner, mode = operand[1:-3], AddressingMode.INDIRECT_Y
        elif operand.endswith(")"):
            inner, mode = operand[1:-1], AddressingMode.INDIRECT
        else:
            raise InvalidOperandSyntaxError(f"unbalanced parenthesis in '{operand}'")
        value = _parse_address(inner.strip(), labels, max_suggestions, operand)
        return ParsedOperand(value.data, mode, value.label)

    if "(" in operand or ")" in operand:
        raise InvalidOperandSyntaxError(f"unbalanced parenthesis in '{operand}'")

    # Indexed forms: op,X  op,Y
    if upper.endswith(",X") or upper.endswith(",Y"):
        base = operand[:-2].strip()
        value = _parse_address(base, labels, max_suggestions, operand)
        if upper.endswith("X"):
            mode = AddressingMode.ABSOLUTE_X if len(value.data) == 2 else AddressingMode.ZERO_PAGE_X
        else:
            mode = AddressingMode.ABSOLUTE_Y if len(value.data) == 2 else AddressingMode.ZERO_PAGE_Y
        return ParsedOperand(value.data, mode, value.label)

    if "," in operand:
        raise InvalidOperandSyntaxError(
            f"unsupported index register in '{operand}' (expected ,X or ,Y)"
        )

    value = parse_value(operand, labels, max_suggestions)
    if not value.is_memory_reference:
        return ParsedOperand(value.data, AddressingMode.IMMEDIATE)
    if len(value.data) == 2:
        return ParsedOperand(value.data, AddressingMode.ABSOLUTE, value.label)
    return ParsedOperand(value.data, AddressingMode.ZERO_PAGE)
