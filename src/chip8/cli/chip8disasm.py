"""
chip8disasm - CHIP-8 Disassembler Command-Line Interface
========================================================

This module implements the command-line interface for the CHIP-8
disassembler. Every word of the ROM is listed with its address, raw
bytes and mnemonic.

Usage Examples
--------------
Disassemble a ROM loaded at the usual $200:
    $ chip8disasm ibm.ch8

Limit number of instructions:
    $ chip8disasm pong.ch8 --count 20

Output to file:
    $ chip8disasm pong.ch8 -o pong.asm

Hex dump with disassembly:
    $ chip8disasm pong.ch8 --hex
"""

from pathlib import Path
from typing import Optional

import click

from chip8 import __version__
from chip8.cli.errors import handle_cli_exception, parse_address
from chip8.disassembler import Chip8Disassembler


def _hex_dump(data: bytes, base_address: int) -> list[str]:
    """Format data as commented hex dump lines, 16 bytes per line."""
    lines = ["; Hex dump:", "; " + "-" * 60]
    for i in range(0, len(data), 16):
        chunk = data[i:i + 16]
        hex_str = " ".join(f"{b:02X}" for b in chunk)
        ascii_str = "".join(chr(b) if 0x20 <= b < 0x7F else "." for b in chunk)
        lines.append(f"; ${base_address + i:04X}: {hex_str:<48} {ascii_str}")
    lines.append("; " + "-" * 60)
    lines.append("")
    return lines


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "input_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Output file (default: stdout)",
)
@click.option(
    "-a", "--address",
    type=str,
    default="0x200",
    help="Load address of the first byte (hex with 0x or $ prefix, or decimal). Default: 0x200",
)
@click.option(
    "-c", "--count",
    type=click.IntRange(min=0),
    default=None,
    help="Maximum number of instructions to disassemble (default: all)",
)
@click.option(
    "--hex",
    "show_hex",
    is_flag=True,
    help="Include hex dump before disassembly",
)
@click.option(
    "--no-bytes",
    is_flag=True,
    help="Omit raw bytes from output (show only mnemonic and operand)",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
@click.version_option(version=__version__, prog_name="chip8disasm")
def main(
    input_file: Path,
    output: Optional[Path],
    address: str,
    count: Optional[int],
    show_hex: bool,
    no_bytes: bool,
    verbose: bool,
) -> None:
    """
    Disassemble a CHIP-8 program image.

    INPUT_FILE is the ROM to disassemble.

    Examples:

        # Disassemble the whole ROM
        chip8disasm pong.ch8

        # First 20 instructions into a file
        chip8disasm pong.ch8 --count 20 -o listing.asm
    """
    try:
        base_address = parse_address(address)
        data = input_file.read_bytes()
        if not data:
            raise click.BadParameter(f"{input_file} is empty")

        if verbose:
            click.echo(f"Input file: {input_file} ({len(data)} bytes)", err=True)
            click.echo(f"Base address: ${base_address:04X}", err=True)

        output_lines = [
            f"; Disassembly of {input_file.name}",
            f"; Size: {len(data)} bytes",
            f"; Base address: ${base_address:04X}",
            "",
        ]

        if show_hex:
            output_lines.extend(_hex_dump(data, base_address))

        disasm = Chip8Disassembler()
        instructions = disasm.disassemble(data, start_address=base_address, count=count)

        for instr in instructions:
            if no_bytes:
                line = f"${instr.address:04X}: {instr.text}"
                if instr.comment:
                    line += f"  ; {instr.comment}"
                output_lines.append(line)
            else:
                output_lines.append(str(instr))

        result = "\n".join(output_lines) + "\n"

        if output:
            output.write_text(result, encoding="utf-8")
            if verbose:
                click.echo(f"Output written to: {output}", err=True)
        else:
            click.echo(result, nl=False)

        if verbose:
            click.echo(f"Instructions disassembled: {len(instructions)}", err=True)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
