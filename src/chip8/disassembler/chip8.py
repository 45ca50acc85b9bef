"""
CHIP-8 Disassembler
===================

Turns CHIP-8 program images back into readable assembly.

Every CHIP-8 instruction is one big-endian 16-bit word, so disassembly is
a straight walk through the image two bytes at a time. Words the
interpreter does not execute are listed as `.WORD` data rather than
guessed at, and a trailing odd byte is listed as `.BYTE`.

Mnemonics follow the common CHIP-8 assembler syntax:

    CLS                 00E0
    RET                 00EE
    JP $NNN             1NNN
    CALL $NNN           2NNN
    SE Vx, $NN          3XNN
    SNE Vx, $NN         4XNN
    SE Vx, Vy           5XY0
    LD Vx, $NN          6XNN
    ADD Vx, $NN         7XNN
    LD/OR/AND/XOR Vx, Vy          8XY0-8XY3
    ADD/SUB/SHR/SUBN/SHL Vx, Vy   8XY4-8XY7, 8XYE
    SNE Vx, Vy          9XY0
    LD I, $NNN          ANNN
    DRW Vx, Vy, N       DXYN

Usage:
    disasm = Chip8Disassembler()
    for instr in disasm.disassemble(rom, start_address=0x200):
        print(instr)
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..cpu import decode, is_supported
from ..emulator.constants import FONT_SIZE, FONT_START, GLYPH_HEIGHT, PROGRAM_START

FONT_END = FONT_START + FONT_SIZE

# 8XY? sub-operation -> mnemonic
ALU_MNEMONICS = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    A single disassembled CHIP-8 instruction.

    Attributes:
        address: Memory address of the instruction
        opcode: The instruction word (or the lone byte for `.BYTE`)
        mnemonic: The instruction mnemonic (e.g., "LD", "DRW", ".WORD")
        operand_str: Formatted operand string for display
        size: Instruction size in bytes (2, or 1 for a trailing byte)
        raw_bytes: The bytes making up this instruction
        comment: Optional comment (jump targets, font glyphs, warnings)
    """
    address: int
    opcode: int
    mnemonic: str
    operand_str: str
    size: int
    raw_bytes: bytes
    comment: str = ""

    def __str__(self) -> str:
        """Format as assembly line: ADDRESS: BYTES  MNEMONIC OPERAND"""
        hex_bytes = " ".join(f"{b:02X}" for b in self.raw_bytes).ljust(5)

        if self.operand_str:
            asm = f"{self.mnemonic} {self.operand_str}"
        else:
            asm = self.mnemonic

        if self.comment:
            return f"${self.address:04X}: {hex_bytes}  {asm:<16} ; {self.comment}"
        return f"${self.address:04X}: {hex_bytes}  {asm}"

    @property
    def text(self) -> str:
        """Mnemonic and operands without address or bytes."""
        return f"{self.mnemonic} {self.operand_str}" if self.operand_str else self.mnemonic

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": f"${self.address:04X}",
            "address_int": self.address,
            "opcode": f"${self.opcode:04X}" if self.size == 2 else f"${self.opcode:02X}",
            "mnemonic": self.mnemonic,
            "operand": self.operand_str,
            "size": self.size,
            "bytes": [f"${b:02X}" for b in self.raw_bytes],
            "comment": self.comment,
        }


# =============================================================================
# CHIP-8 Disassembler
# =============================================================================

class Chip8Disassembler:
    """
    Disassembler for CHIP-8 program images.

    Decoding goes through the same instruction tables as the interpreter,
    so a word is listed as an instruction exactly when Machine.step()
    would execute it.
    """

    def disassemble_one(
        self,
        data: bytes,
        address: int = PROGRAM_START,
        offset: int = 0
    ) -> DisassembledInstruction:
        """
        Disassemble a single instruction.

        Args:
            data: Byte buffer containing the instruction
            address: Memory address of the instruction
            offset: Offset into data where the instruction starts

        Returns:
            DisassembledInstruction with decoded information

        Raises:
            ValueError: If offset is beyond the end of data
        """
        if offset >= len(data):
            raise ValueError(f"Offset {offset} beyond data length {len(data)}")

        if offset + 2 > len(data):
            value = data[offset]
            return DisassembledInstruction(
                address=address,
                opcode=value,
                mnemonic=".BYTE",
                operand_str=f"${value:02X}",
                size=1,
                raw_bytes=bytes([value]),
                comment="incomplete instruction",
            )

        raw = bytes(data[offset:offset + 2])
        opcode = (raw[0] << 8) | raw[1]

        if not is_supported(opcode):
            return DisassembledInstruction(
                address=address,
                opcode=opcode,
                mnemonic=".WORD",
                operand_str=f"${opcode:04X}",
                size=2,
                raw_bytes=raw,
                comment="unknown opcode",
            )

        mnemonic, operand_str, comment = self._format(opcode, address)
        return DisassembledInstruction(
            address=address,
            opcode=opcode,
            mnemonic=mnemonic,
            operand_str=operand_str,
            size=2,
            raw_bytes=raw,
            comment=comment,
        )

    def _format(self, opcode: int, address: int) -> Tuple[str, str, str]:
        """
        Build (mnemonic, operands, comment) for a supported instruction word.
        """
        f = decode(opcode)
        vx = f"V{f.x:X}"
        vy = f"V{f.y:X}"

        match f.family:
            case 0x0:
                return ("CLS", "", "") if opcode == 0x00E0 else ("RET", "", "")
            case 0x1:
                comment = "infinite loop" if f.nnn == address else ""
                return "JP", f"${f.nnn:03X}", comment
            case 0x2:
                return "CALL", f"${f.nnn:03X}", ""
            case 0x3:
                return "SE", f"{vx}, ${f.nn:02X}", ""
            case 0x4:
                return "SNE", f"{vx}, ${f.nn:02X}", ""
            case 0x5:
                return "SE", f"{vx}, {vy}", ""
            case 0x6:
                return "LD", f"{vx}, ${f.nn:02X}", ""
            case 0x7:
                return "ADD", f"{vx}, ${f.nn:02X}", ""
            case 0x8:
                return ALU_MNEMONICS[f.n], f"{vx}, {vy}", ""
            case 0x9:
                return "SNE", f"{vx}, {vy}", ""
            case 0xA:
                return "LD", f"I, ${f.nnn:03X}", self._font_comment(f.nnn)
            case 0xD:
                return "DRW", f"{vx}, {vy}, {f.n}", ""
        raise ValueError(f"No format for opcode ${opcode:04X}")

    @staticmethod
    def _font_comment(address: int) -> str:
        """Name the font glyph an index address points at, if any."""
        if FONT_START <= address < FONT_END and (address - FONT_START) % GLYPH_HEIGHT == 0:
            return f"font glyph {(address - FONT_START) // GLYPH_HEIGHT:X}"
        return ""

    def disassemble(
        self,
        data: bytes,
        start_address: int = PROGRAM_START,
        count: Optional[int] = None,
        max_bytes: Optional[int] = None
    ) -> List[DisassembledInstruction]:
        """
        Disassemble multiple instructions.

        Args:
            data: Byte buffer containing the program
            start_address: Memory address of the first byte
            count: Maximum number of instructions (None = all)
            max_bytes: Maximum number of bytes to process (None = all)

        Returns:
            List of DisassembledInstruction objects
        """
        result = []
        offset = 0
        address = start_address

        while offset < len(data):
            if count is not None and len(result) >= count:
                break
            if max_bytes is not None and offset >= max_bytes:
                break

            instr = self.disassemble_one(data, address, offset)
            result.append(instr)
            offset += instr.size
            address += instr.size

        return result

    def disassemble_to_text(
        self,
        data: bytes,
        start_address: int = PROGRAM_START,
        count: Optional[int] = None
    ) -> str:
        """Disassemble and return a multi-line listing."""
        instructions = self.disassemble(data, start_address, count)
        return "\n".join(str(instr) for instr in instructions)
