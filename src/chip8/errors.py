"""
CHIP-8 Error Hierarchy
======================

This module defines the exception hierarchy for the CHIP-8 interpreter.
All exceptions inherit from Chip8Error, allowing callers to catch all
interpreter errors with a single except clause if desired.

Exception Hierarchy
-------------------
Chip8Error (base)
├── InvalidArgumentError - malformed input to a loading operation
├── OutOfBoundsError - PC or a load would run past the end of memory
├── EmptyStackError - return instruction with no pending call frame
└── UnknownOpcodeError - instruction word matches no defined pattern

Design Philosophy
-----------------
Every error is raised before the machine state is mutated, so a caller
that catches one can inspect the machine exactly as it was before the
failing operation. Errors carry the addresses and opcodes involved so
that a host can report them without re-reading memory.

InvalidArgumentError and OutOfBoundsError also derive from ValueError and
IndexError respectively, so code written against the builtin exceptions
keeps working.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class Chip8Error(Exception):
    """
    Base exception for all CHIP-8 interpreter errors.

    Example:
        try:
            machine.step()
        except Chip8Error as e:
            print(f"Emulation stopped: {e}")
    """
    pass


# =============================================================================
# Loading Errors
# =============================================================================

class InvalidArgumentError(Chip8Error, ValueError):
    """
    Malformed input to a loading operation.

    Raised by Machine.load_font() when the glyph table is missing or is
    not exactly 80 bytes. Recoverable: memory is left untouched and the
    caller may retry with corrected input.

    Attributes:
        argument: Name of the offending argument
    """

    def __init__(self, message: str, argument: Optional[str] = None):
        self.argument = argument
        super().__init__(message)


class OutOfBoundsError(Chip8Error, IndexError):
    """
    Access beyond the end of the 4 KB memory image.

    Raised when the program counter cannot reference two addressable
    bytes, or when a ROM would overflow memory on load. Signals a
    malformed or terminated program; the machine should be reset or
    reloaded before executing further.

    Attributes:
        address: The offending address
        length: Number of bytes the operation needed (if applicable)
    """

    def __init__(self, message: str, address: int, length: int = 0):
        self.address = address
        self.length = length
        super().__init__(message)


# =============================================================================
# Execution Errors
# =============================================================================

class EmptyStackError(Chip8Error):
    """
    Return (00EE) executed with no pending subroutine call.

    Attributes:
        address: Address of the offending return instruction
    """

    def __init__(self, address: int):
        self.address = address
        super().__init__(f"return with empty stack at ${address:04X}")


class UnknownOpcodeError(Chip8Error):
    """
    Fetched instruction word does not match any defined pattern.

    Always fatal to the step. The interpreter never treats an unknown
    word as a no-op.

    Attributes:
        opcode: The raw 16-bit instruction word
        address: Address the word was fetched from
    """

    def __init__(self, opcode: int, address: int):
        self.opcode = opcode
        self.address = address
        super().__init__(f"unknown opcode ${opcode:04X} at ${address:04X}")
