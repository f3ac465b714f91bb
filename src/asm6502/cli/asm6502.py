"""
asm6502 - 6502 Assembler/Disassembler Command-Line Interface
============================================================

Assembles 6502 source into machine code, or disassembles machine code back
into source.

Usage Examples
--------------
Assemble source given on the command line (one byte per output line):
    $ asm6502 'LDA #$05' 'STA ($15,X)' TAX

Assemble a file into a raw binary:
    $ asm6502 -f prog.asm -o prog.bin

Print a listing at a different origin:
    $ asm6502 -f prog.asm -O C000 --listing

Disassemble hex bytes:
    $ asm6502 -d A9 05 81 15 AA

Disassemble a binary file:
    $ asm6502 -d -f prog.bin -O 0x8000
"""

import logging
from pathlib import Path
from typing import Optional

import click

from asm6502 import __version__
from asm6502.assembler import Assembler
from asm6502.cli.errors import handle_cli_exception
from asm6502.config import AssemblerConfig, parse_address
from asm6502.disassembler import Disassembler

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def parse_hex_bytes(tokens: tuple[str, ...]) -> bytes:
    """
    Parse hex bytes given as arguments.

    Accepts separate bytes (``A9 05``), runs (``A905``) and ``0x``/``$``
    prefixes on each token.

    Raises:
        click.BadParameter: If a token is not hex or has an odd digit count
    """
    digits = []
    for token in tokens:
        for part in token.replace(",", " ").split():
            if part.lower().startswith("0x"):
                part = part[2:]
            elif part.startswith("$"):
                part = part[1:]
            digits.append(part)

    text = "".join(digits)
    try:
        return bytes.fromhex(text)
    except ValueError:
        raise click.BadParameter(f"invalid hex bytes '{' '.join(tokens)}'", param_hint="INPUT")


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument("source", nargs=-1, metavar="INPUT...")
@click.option(
    "-f", "--file",
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read source (or binary, with -d) from a file instead of INPUT",
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-O", "--offset",
    type=str,
    default=None,
    help="Origin address in hex (default: $ASM6502_ORIGIN or 8000)",
)
@click.option(
    "-d/-a", "--disassemble/--assemble",
    default=False,
    help="Disassemble hex bytes / assemble source (default: assemble)",
)
@click.option(
    "-l", "--listing",
    is_flag=True,
    help="Print an assembly listing instead of bytes",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="asm6502")
def main(
    source: tuple[str, ...],
    input_file: Optional[Path],
    output: Optional[Path],
    offset: Optional[str],
    disassemble: bool,
    listing: bool,
    verbose: bool,
) -> None:
    """
    Assemble or disassemble 6502 machine code.

    INPUT is source text (one argument per line) or, with -d, hex bytes.

    \b
    Examples:
        asm6502 'LDA #$05' TAX          # Prints A9, 05, AA
        asm6502 -f prog.asm -o prog.bin
        asm6502 -d A9 05 AA             # Prints 8000 LDA #$05, ...
    """
    setup_logging(verbose)

    try:
        config = AssemblerConfig.from_env()
        if offset is not None:
            try:
                config.origin = parse_address(offset)
            except ValueError as e:
                raise click.BadParameter(str(e), param_hint="'-O' / '--offset'")

        if disassemble:
            _run_disassembler(source, input_file, output, config)
        else:
            _run_assembler(source, input_file, output, config, listing)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Assembly" if not disassemble else None)


def _run_assembler(
    source: tuple[str, ...],
    input_file: Optional[Path],
    output: Optional[Path],
    config: AssemblerConfig,
    listing: bool,
) -> None:
    if input_file is not None:
        text = input_file.read_text(encoding="utf-8")
        config.filename = str(input_file)
    elif source:
        text = "\n".join(source)
    else:
        logger.debug("no input, nothing to assemble")
        return

    asm = Assembler(config=config)
    code = asm.assemble_string(text)

    if listing:
        result = asm.get_listing()
        if output:
            output.write_text(result + "\n")
        else:
            click.echo(result)
    elif output:
        asm.write_binary(output)
    else:
        for byte in code:
            click.echo(f"{byte:02X}")

    logger.debug(
        "assembly complete: %d bytes at $%04X, %d symbols",
        len(code), asm.get_origin(), len(asm.get_symbols()),
    )


def _run_disassembler(
    source: tuple[str, ...],
    input_file: Optional[Path],
    output: Optional[Path],
    config: AssemblerConfig,
) -> None:
    if input_file is not None:
        data = input_file.read_bytes()
    elif source:
        data = parse_hex_bytes(source)
    else:
        logger.debug("no input, nothing to disassemble")
        return

    lines = Disassembler().decompile(data, config.origin)

    if output:
        output.write_text("\n".join(lines) + "\n" if lines else "")
    else:
        for line in lines:
            click.echo(line)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
