"""
CHIP-8 Disassembler Module
==========================

Disassembly of CHIP-8 program images, used by the chip8disasm tool and
by the emulator's debugging helpers.

Usage:
    from chip8.disassembler import Chip8Disassembler

    disasm = Chip8Disassembler()
    instructions = disasm.disassemble(rom_bytes, start_address=0x200)
"""

from .chip8 import Chip8Disassembler, DisassembledInstruction

__all__ = [
    "Chip8Disassembler",
    "DisassembledInstruction",
]
