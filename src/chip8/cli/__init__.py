"""
CHIP-8 Command-Line Interface
=============================

This package provides command-line tools for the CHIP-8 interpreter:

- **chip8run**: Run a ROM for a fixed number of instructions and dump state
- **chip8disasm**: Disassemble a ROM into a mnemonic listing

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["chip8run", "chip8disasm"]
