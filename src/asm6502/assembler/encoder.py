"""
Instruction Encoder
===================

Selects the opcode byte for a mnemonic and an inferred addressing mode,
and builds the resulting Instruction.

Matching Rules
--------------
1. The first table entry whose mode equals the inferred mode and whose
   operand width equals the parsed operand width.
2. A zero page operand is accepted by a relative (branch) entry; the byte
   is used as the raw displacement. Branch operands are lexically the
   same as zero page operands.
3. A two-byte absolute operand (``$C010`` or a label) is accepted by a
   relative entry when the instruction address is known; it is turned
   into a signed displacement from the address after the branch.
4. Otherwise the line fails with UnknownOpcodeError.
"""

import logging
from typing import Optional

from asm6502.assembler.operands import ParsedOperand
from asm6502.cpu import AddressingMode, OpcodeEntry, OpcodeTable, is_valid_instruction
from asm6502.errors import BranchRangeError, UnknownOpcodeError
from asm6502.instruction import UNRESOLVED, Instruction, InstructionAddress

logger = logging.getLogger(__name__)


def branch_displacement(target: int, address: int) -> int:
    """
    Signed displacement from a branch at ``address`` to ``target``.

    Raises:
        BranchRangeError: If the displacement does not fit in a signed byte
    """
    offset = target - ((address + 2) & 0xFFFF)
    if offset > 0x7FFF:
        offset -= 0x10000
    elif offset < -0x8000:
        offset += 0x10000
    if not -128 <= offset <= 127:
        raise BranchRangeError(target, offset)
    return offset


def resolve_opcode(
    table: OpcodeTable,
    mnemonic: str,
    operand: ParsedOperand,
    address: Optional[int] = None,
) -> tuple[OpcodeEntry, bytes]:
    """
    Find the table entry for a mnemonic and parsed operand.

    Args:
        table: Opcode table to search
        mnemonic: Instruction mnemonic (any case)
        operand: Parsed operand with its inferred mode
        address: Address the instruction will occupy, used to turn absolute
            branch targets into displacements (optional)

    Returns:
        The matching entry and the operand bytes to emit with it

    Raises:
        UnknownOpcodeError: No entry fits
        BranchRangeError: Absolute branch target too far away
    """
    entries = table.lookup_by_mnemonic(mnemonic)
    if not entries:
        if is_valid_instruction(mnemonic):
            hint = f"{mnemonic.upper()} is not in this opcode table"
        else:
            hint = "unknown mnemonic"
        raise UnknownOpcodeError(mnemonic.upper(), str(operand.mode), hint=hint)

    width = len(operand.data)
    for entry in entries:
        if entry.mode is operand.mode and entry.operand_size == width:
            return entry, operand.data

    relative = next((e for e in entries if e.mode is AddressingMode.RELATIVE), None)
    if relative is not None:
        if operand.mode is AddressingMode.ZERO_PAGE:
            return relative, operand.data
        if operand.mode is AddressingMode.ABSOLUTE and address is not None:
            offset = branch_displacement(operand.value, address)
            logger.debug(
                "%s $%04X at $%04X -> displacement %d",
                relative.mnemonic, operand.value, address, offset,
            )
            return relative, bytes([offset & 0xFF])

    mode_matches = any(entry.mode is operand.mode for entry in entries)
    raise UnknownOpcodeError(
        mnemonic.upper(),
        str(operand.mode),
        valid_modes=[str(entry.mode) for entry in entries],
        operand_size=width if mode_matches else None,
    )


def encode_instruction(
    table: OpcodeTable,
    mnemonic: str,
    operand: ParsedOperand,
    address: InstructionAddress = UNRESOLVED,
    pc: Optional[int] = None,
) -> Instruction:
    """
    Build an Instruction from a mnemonic and a parsed operand.

    Args:
        table: Opcode table to search
        mnemonic: Instruction mnemonic (any case)
        operand: Parsed operand with its inferred mode
        address: Address tag from the source line
        pc: Address the instruction will occupy (enables absolute branch targets)
    """
    entry, data = resolve_opcode(table, mnemonic, operand, pc)
    return Instruction.from_entry(entry, data, address)
