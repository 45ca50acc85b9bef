"""
chip8run - CHIP-8 Program Runner
================================

This module implements the command-line interface for running a CHIP-8
program headless. The ROM is loaded at $200 with the default font at
$050, the machine state is dumped, a fixed number of instructions is
executed and the final state is dumped again.

Usage Examples
--------------
Run the default 39 instructions:
    $ chip8run ibm.ch8

Run longer and save a screenshot:
    $ chip8run pong.ch8 --cycles 5000 --png pong.png

Stop at an address:
    $ chip8run test.ch8 --cycles 10000 --break 0x228

Exit Codes
----------
    0  Program ran for the requested number of instructions
    1  The interpreter stopped on an error (unknown opcode, empty stack,
       out-of-bounds access)
    2  Invalid arguments or missing ROM file
    3  Internal error
"""

import logging
from pathlib import Path
from typing import Optional, Tuple

import click

from chip8 import __version__
from chip8.cli.errors import handle_cli_exception, parse_address
from chip8.emulator import BreakReason, Emulator, EmulatorConfig

logger = logging.getLogger(__name__)

# Enough for the IBM logo test program to finish drawing
DEFAULT_CYCLES = 39


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s" if verbose else "%(message)s",
    )


def _parse_breakpoints(ctx, param, values: Tuple[str, ...]) -> Tuple[int, ...]:
    return tuple(parse_address(value) for value in values)


# =============================================================================
# CLI Definition
# =============================================================================

@click.command()
@click.argument(
    "rom_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-n", "--cycles",
    type=click.IntRange(min=0),
    default=DEFAULT_CYCLES,
    show_default=True,
    help="Number of instructions to execute",
)
@click.option(
    "--no-font",
    is_flag=True,
    help="Do not preload the hexadecimal font at $050",
)
@click.option(
    "-b", "--break", "breakpoints",
    multiple=True,
    callback=_parse_breakpoints,
    help="Stop before executing the instruction at ADDR (repeatable)",
)
@click.option(
    "--png",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the final display as a PNG image",
)
@click.option(
    "--scale",
    type=click.IntRange(min=1),
    default=10,
    show_default=True,
    help="Pixel scale factor for --png",
)
@click.option(
    "-q", "--quiet",
    is_flag=True,
    help="Skip the initial state dump",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output (trace every instruction)",
)
@click.version_option(version=__version__, prog_name="chip8run")
def main(
    rom_file: Path,
    cycles: int,
    no_font: bool,
    breakpoints: Tuple[int, ...],
    png: Optional[Path],
    scale: int,
    quiet: bool,
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program and dump the machine state.

    ROM_FILE is the program image to load at $200.

    Examples:

        # Run the IBM logo program and print the result
        chip8run ibm.ch8

        # Run 1000 instructions and save the screen
        chip8run game.ch8 -n 1000 --png screen.png
    """
    setup_logging(verbose)

    try:
        emu = Emulator(EmulatorConfig(load_font=not no_font))
        emu.load_rom(rom_file)
        for address in breakpoints:
            emu.add_breakpoint(address)

        if not quiet:
            click.echo("Initial:")
            click.echo(emu.machine.dump())

        event = emu.run(cycles)
        if event.reason != BreakReason.MAX_STEPS:
            click.echo(f"Stopped: {event}")

        click.echo(f"After {emu.total_steps} cycles:")
        click.echo(emu.machine.dump())

        if png:
            png.write_bytes(emu.render_display(scale=scale))
            logger.info("Wrote display to %s", png)

    except Exception as e:
        handle_cli_exception(e, verbose=verbose, error_type="Emulation")


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
