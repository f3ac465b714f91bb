"""
asm6502 Configuration
=====================

Assembler settings. Configuration can come from:
- Default values (defined here)
- Environment variables (``AssemblerConfig.from_env``)
- Command-line options, which override both

Environment variables (all optional):
    ASM6502_ORIGIN: Default origin address (hex: 8000, $8000 or 0x8000)
    ASM6502_MAX_SUGGESTIONS: Similar labels offered for an unknown label
"""

import os
from dataclasses import dataclass

DEFAULT_ORIGIN = 0x8000


def parse_address(text: str) -> int:
    """
    Parse a 16-bit address written in hex.

    Accepts ``8000``, ``$8000`` and ``0x8000``.

    Raises:
        ValueError: If the text is not hex or is outside $0000-$FFFF
    """
    value = text.strip()
    if value.startswith("$"):
        value = value[1:]
    elif value.lower().startswith("0x"):
        value = value[2:]

    if not value or any(c not in "0123456789abcdefABCDEF" for c in value):
        raise ValueError(f"invalid address '{text}'")

    address = int(value, 16)
    if address > 0xFFFF:
        raise ValueError(f"address '{text}' must be 0000-FFFF")
    return address


@dataclass
class AssemblerConfig:
    """
    Settings shared by the assembler, disassembler and CLI.

    Attributes:
        origin: Address of the first emitted byte (default: $8000)
        filename: Name used in error locations (default: "<input>")
        max_suggestions: Similar labels offered for an unknown label (default: 3)
    """

    origin: int = DEFAULT_ORIGIN
    filename: str = "<input>"
    max_suggestions: int = 3

    def __post_init__(self) -> None:
        if not 0 <= self.origin <= 0xFFFF:
            raise ValueError(f"origin {self.origin:#x} is outside $0000-$FFFF")

    @classmethod
    def from_env(cls) -> "AssemblerConfig":
        """
        Create an AssemblerConfig from environment variables.

        Invalid values are ignored and the default is kept.
        """
        config = cls()

        if origin := os.environ.get("ASM6502_ORIGIN"):
            try:
                config.origin = parse_address(origin)
            except ValueError:
                pass  # Ignore invalid values

        if suggestions := os.environ.get("ASM6502_MAX_SUGGESTIONS"):
            try:
                config.max_suggestions = max(0, int(suggestions))
            except ValueError:
                pass

        return config
