"""
CHIP-8 Emulator
===============

An interpreter for the original CHIP-8 virtual machine.

This package provides:

- **Machine**: Memory, registers, stack, timers and the fetch-decode-execute loop
- **Memory**: 4 KB bounds-checked byte image
- **Display**: 64 x 32 monochrome framebuffer with sprite XOR drawing
- **Emulator**: Host loop with ROM loading, breakpoints and snapshots

Quick Start
-----------

Basic usage::

    >>> from chip8.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("ibm.ch8")
    >>> emu.run(39)
    >>> print(emu.display_text)

Driving the core directly::

    >>> from chip8.emulator import Machine, DEFAULT_FONT
    >>> machine = Machine()
    >>> machine.load_font(DEFAULT_FONT)
    >>> machine.load(rom_bytes)
    >>> while True:
    ...     machine.step()
    ...     if machine.display_updated:
    ...         redraw(machine.display)

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: The Machine (interpreter core)
- `memory.py`: Memory image
- `display.py`: Framebuffer and rendering
- `fonts.py`: Default hexadecimal font
- `breakpoints.py`: Debugging support
- `constants.py`: Memory map and display geometry
"""

# Main entry point
from .emulator import Emulator, EmulatorConfig, SNAPSHOT_MAGIC

# Interpreter core
from .cpu import Machine, MachineState

# Memory and display
from .memory import Memory
from .display import Display

# Fonts
from .fonts import DEFAULT_FONT, glyph_address

# Debugging support
from .breakpoints import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    RegisterCondition,
)

# Machine geometry
from .constants import (
    DISPLAY_HEIGHT,
    DISPLAY_WIDTH,
    FONT_SIZE,
    FONT_START,
    MAX_ROM_SIZE,
    MEMORY_SIZE,
    PROGRAM_START,
)

__all__ = [
    # Main API
    "Emulator",
    "EmulatorConfig",
    "SNAPSHOT_MAGIC",

    # Core
    "Machine",
    "MachineState",
    "Memory",
    "Display",

    # Fonts
    "DEFAULT_FONT",
    "glyph_address",

    # Debugging
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    "RegisterCondition",

    # Constants
    "DISPLAY_HEIGHT",
    "DISPLAY_WIDTH",
    "FONT_SIZE",
    "FONT_START",
    "MAX_ROM_SIZE",
    "MEMORY_SIZE",
    "PROGRAM_START",
]
