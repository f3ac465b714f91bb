"""
asm6502 Error Hierarchy
=======================

This module defines the exception hierarchy for the whole package.
All user-facing exceptions inherit from Asm6502Error, allowing callers
to catch every assembler error with a single except clause.

Exception Hierarchy
-------------------
Asm6502Error (base)
└── AssemblerError (assembler-related)
    ├── InvalidNumericError - literal does not parse under its radix/width
    ├── UnknownLabelError - operand references an undefined label
    ├── UnknownOpcodeError - no opcode for a mnemonic + addressing mode
    ├── InvalidOperandSyntaxError - malformed indirect/indexed operand
    ├── DuplicateLabelError - label declared more than once
    ├── BranchRangeError - branch target too far
    ├── AddressOverflowError - program counter ran past $FFFF
    └── CompileError - any of the above, tagged with its line number

InternalConsistencyError sits outside the hierarchy. It is an
AssertionError raised only when the encoder or decoder builds an
Instruction whose operand bytes do not fit its addressing mode, which
user input can never cause.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Asm6502Error(Exception):
    """
    Base exception for all asm6502 errors.

        try:
            assembler.assemble_file("program.asm")
        except Asm6502Error as e:
            print(f"Error: {e}")
    """
    pass


class InternalConsistencyError(AssertionError):
    """An Instruction was built with operand bytes that contradict its mode."""
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed, 0 when unknown)
    """
    filename: str
    line: int
    column: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        if self.column > 0:
            return f"{self.filename}:{self.line}:{self.column}"
        return f"{self.filename}:{self.line}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(Asm6502Error):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            prog.asm:4:5: error: unknown label 'lop'
                BNE lop
                    ^
            hint: did you mean 'loop'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class InvalidNumericError(AssemblerError):
    """
    A numeric literal does not parse under its radix or width.

    Examples:
        LDA #$GG     ; not hexadecimal
        LDA #%012    ; not binary
        LDA #70000   ; does not fit in 16 bits
    """
    pass


class UnknownLabelError(AssemblerError):
    """
    Operand references a label that has not been defined yet.

    Assembly is single pass, so a label must be declared on an earlier
    line than any line that uses it. Similar known labels are offered
    as a hint to catch typos.
    """

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_labels: Optional[list[str]] = None,
    ):
        self.label = label
        self.similar_labels = similar_labels or []

        if self.similar_labels:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_labels)
            hint = f"did you mean {suggestions}?"
        else:
            hint = "labels must be declared before they are referenced"

        super().__init__(
            f"unknown label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnknownOpcodeError(AssemblerError):
    """
    No opcode exists for the mnemonic with the inferred addressing mode.

    Example:
        STA #$41  ; Error: STA has no immediate form
    """

    def __init__(
        self,
        mnemonic: str,
        mode: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        valid_modes: Optional[list[str]] = None,
        operand_size: Optional[int] = None,
        hint: Optional[str] = None,
    ):
        self.mnemonic = mnemonic
        self.mode = mode
        self.valid_modes = valid_modes or []
        self.operand_size = operand_size

        if hint is None and self.valid_modes:
            hint = f"{mnemonic} supports: {', '.join(self.valid_modes)}"

        if operand_size is not None:
            message = (
                f"no opcode for '{mnemonic}' with {mode} addressing "
                f"and a {operand_size}-byte operand"
            )
        else:
            message = f"no opcode for '{mnemonic}' with {mode} addressing"

        super().__init__(
            message,
            location=location,
            hint=hint,
            source_line=source_line,
        )


class InvalidOperandSyntaxError(AssemblerError):
    """
    Malformed indirect or indexed operand.

    Examples:
        LDA ($20       ; unbalanced parenthesis
        LDA ,X         ; missing base value
        LDA #$20,X     ; immediate value cannot be indexed
    """
    pass


class DuplicateLabelError(AssemblerError):
    """A label is declared on more than one line."""

    def __init__(
        self,
        label: str,
        location: Optional[SourceLocation] = None,
        original_line: Optional[int] = None,
        source_line: Optional[str] = None,
    ):
        self.label = label
        self.original_line = original_line

        hint = None
        if original_line is not None:
            hint = f"'{label}' was first declared on line {original_line}"

        super().__init__(
            f"duplicate label '{label}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class BranchRangeError(AssemblerError):
    """
    Branch target is out of range.

    6502 branches use a signed 8-bit displacement measured from the
    instruction following the branch, limiting the range to -128..+127.
    """

    def __init__(
        self,
        target: int,
        offset: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.target = target
        self.offset = offset

        hint = (
            f"branch offset is {offset}, but range is -128 to +127; "
            f"consider branching over a JMP"
        )

        super().__init__(
            f"branch target ${target:04X} is out of range (offset: {offset})",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class AddressOverflowError(AssemblerError):
    """The program counter advanced past $FFFF."""
    pass


class CompileError(AssemblerError):
    """
    Assembly aborted on a line.

    Every line-level error is re-raised as a CompileError carrying the
    1-based line number, so callers only need to handle one type. The
    original error is kept in ``cause`` and chained as ``__cause__``.

    Attributes:
        line_number: 1-based line number of the failing line
        message: Description of the failure (without the line prefix)
        cause: The line-level AssemblerError that aborted assembly
    """

    def __init__(
        self,
        line_number: int,
        message: str,
        cause: Optional[AssemblerError] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.line_number = line_number
        self.cause = cause
        super().__init__(
            message,
            location=location,
            hint=cause.hint if cause is not None else None,
            source_line=source_line,
        )

    def _format_message(self) -> str:
        """
        Example output:
            compile error on line 2: unknown label 'lop'
                BNE lop
            hint: did you mean 'loop'?
        """
        parts = [f"compile error on line {self.line_number}: {self.message}"]
        if self.source_line is not None:
            parts.append(f"    {self.source_line}")
        if self.hint:
            parts.append(f"hint: {self.hint}")
        return "\n".join(parts)
