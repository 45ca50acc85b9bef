"""
CHIP-8 - Interpreter Core and Tools
===================================

This package implements an interpreter for the CHIP-8 virtual machine,
the 1970s bytecode system originally run on the COSMAC VIP.

Main Components
---------------
- **emulator**: The interpreter core (Machine) and its host loop (Emulator)
- **cpu**: Instruction word decoding shared by interpreter and disassembler
- **disassembler**: Program image to assembly listing
- **cli**: The chip8run and chip8disasm command-line tools

Quick Start
-----------
Run a program for a fixed number of instructions:
    >>> from chip8 import Emulator
    >>> emu = Emulator()
    >>> emu.load_rom("ibm.ch8")
    >>> emu.run(39)
    >>> print(emu.display_text)

Or use the command-line tools:
    $ chip8run ibm.ch8 --cycles 39
    $ chip8disasm ibm.ch8

Version History
---------------
1.0.0 - Initial release with interpreter core, disassembler and CLI tools
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from chip8.errors import (
    Chip8Error,
    InvalidArgumentError,
    OutOfBoundsError,
    EmptyStackError,
    UnknownOpcodeError,
)

from chip8.emulator import (
    Emulator,
    EmulatorConfig,
    Machine,
    Memory,
    Display,
    DEFAULT_FONT,
    BreakpointManager,
    BreakEvent,
    BreakReason,
)

from chip8.disassembler import Chip8Disassembler, DisassembledInstruction

__all__ = [
    # Version info
    "__version__",
    # Exception hierarchy
    "Chip8Error",
    "InvalidArgumentError",
    "OutOfBoundsError",
    "EmptyStackError",
    "UnknownOpcodeError",
    # Interpreter
    "Emulator",
    "EmulatorConfig",
    "Machine",
    "Memory",
    "Display",
    "DEFAULT_FONT",
    "BreakpointManager",
    "BreakEvent",
    "BreakReason",
    # Disassembler
    "Chip8Disassembler",
    "DisassembledInstruction",
]
