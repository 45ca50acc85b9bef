"""
CHIP-8 Machine
==============

The fetch-decode-execute engine of the CHIP-8 interpreter.

The CHIP-8 virtual machine has:
- 4 KB of byte-addressable memory (programs load at $200)
- 16 8-bit registers V0-VF (VF doubles as the carry/borrow/collision flag)
- 16-bit index register I and program counter PC
- A call stack of return addresses
- Delay and sound timers (8-bit, count down to zero)
- A 64 x 32 monochrome display

Each call to Machine.step() executes exactly one instruction:

1. Fetch the big-endian word at PC
2. Advance PC by 2
3. Decode the nibble fields and dispatch on the high nibble
4. Decrement both timers (floored at zero)

Timers tick once per instruction rather than at 60 Hz; a host that wants
authentic timing paces step() calls itself.

A step either completes or raises before touching any state. Unknown
opcodes, returns with an empty stack, PC overruns and sprite reads past
the end of memory are all detected up front.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..cpu import decode, is_supported, RET
from ..errors import (
    EmptyStackError,
    InvalidArgumentError,
    OutOfBoundsError,
    UnknownOpcodeError,
)
from .constants import (
    FLAG_REGISTER,
    FONT_SIZE,
    FONT_START,
    MAX_ROM_SIZE,
    NUM_REGISTERS,
    PROGRAM_START,
)
from .display import Display
from .memory import Memory

logger = logging.getLogger(__name__)


@dataclass
class MachineState:
    """
    Scalar machine state for snapshotting.

    All values stored as Python ints but represent:
    - pc, i: 16-bit unsigned (0-65535)
    - opcode: last fetched 16-bit instruction word
    - delay_timer, sound_timer: 8-bit unsigned (0-255)
    """
    pc: int = PROGRAM_START
    i: int = 0
    opcode: int = 0
    delay_timer: int = 0
    sound_timer: int = 0


class Machine:
    """
    CHIP-8 interpreter core.

    Owns all interpreter state. Registers, memory, stack, display and
    timers are public so tests and debuggers can inspect and poke them.

    Example:
        >>> machine = Machine()
        >>> machine.load_font(DEFAULT_FONT)
        >>> machine.load(bytes([0x61, 0x23]))   # LD V1, $23
        >>> machine.step()
        >>> print(f"V1=${machine.v[1]:02X} PC=${machine.pc:04X}")
        V1=$23 PC=$0202

    Attributes:
        v: The 16 general-purpose registers (bytearray, VF = v[15])
        stack: Return addresses, most recent last
        memory: 4 KB memory image
        display: 64 x 32 pixel grid
        display_updated: True if the last step touched the display
    """

    def __init__(self):
        self.state = MachineState()
        self.v = bytearray(NUM_REGISTERS)
        self.stack: List[int] = []
        self.memory = Memory()
        self.display = Display()
        self.display_updated: bool = False

    # ========================================
    # Register Properties
    # ========================================

    @property
    def pc(self) -> int:
        """Program counter (16-bit)."""
        return self.state.pc

    @pc.setter
    def pc(self, value: int) -> None:
        self.state.pc = value & 0xFFFF

    @property
    def i(self) -> int:
        """Index register (16-bit)."""
        return self.state.i

    @i.setter
    def i(self, value: int) -> None:
        self.state.i = value & 0xFFFF

    @property
    def opcode(self) -> int:
        """Last fetched instruction word."""
        return self.state.opcode

    @property
    def delay_timer(self) -> int:
        """Delay timer (8-bit)."""
        return self.state.delay_timer

    @delay_timer.setter
    def delay_timer(self, value: int) -> None:
        self.state.delay_timer = value & 0xFF

    @property
    def sound_timer(self) -> int:
        """Sound timer (8-bit)."""
        return self.state.sound_timer

    @sound_timer.setter
    def sound_timer(self, value: int) -> None:
        self.state.sound_timer = value & 0xFF

    @property
    def vf(self) -> int:
        """Flag register VF."""
        return self.v[FLAG_REGISTER]

    # ========================================
    # Reset and Loading
    # ========================================

    def reset(self) -> None:
        """
        Restore the power-on state.

        Clears memory (including any loaded font), registers, stack,
        timers and display, and sets PC to $200.
        """
        self.state = MachineState()
        self.v[:] = bytes(NUM_REGISTERS)
        self.stack.clear()
        self.memory.clear()
        self.display.clear()
        self.display_updated = False

    def load_font(self, font: Optional[bytes]) -> None:
        """
        Load font glyph data into memory at $050.

        Args:
            font: Exactly 80 bytes (16 glyphs x 5 rows)

        Raises:
            InvalidArgumentError: If font is None or not 80 bytes long
        """
        if font is None or len(font) != FONT_SIZE:
            received = None if font is None else len(font)
            raise InvalidArgumentError(
                f"Font data should be {FONT_SIZE} bytes, received {received}.",
                argument="font",
            )
        self.memory.load(FONT_START, bytes(font))
        logger.debug("Font loaded at $%04X", FONT_START)

    def load(self, rom: bytes) -> None:
        """
        Copy a program image into memory at $200 and point PC at it.

        Args:
            rom: Program bytes (at most 3584)

        Raises:
            OutOfBoundsError: If the image does not fit in memory
        """
        if len(rom) > MAX_ROM_SIZE:
            raise OutOfBoundsError(
                f"ROM is {len(rom)} bytes, at most {MAX_ROM_SIZE} fit "
                f"from ${PROGRAM_START:04X}",
                address=PROGRAM_START,
                length=len(rom),
            )
        self.memory.load(PROGRAM_START, bytes(rom))
        self.pc = PROGRAM_START
        logger.debug("Loaded %d byte ROM at $%04X", len(rom), PROGRAM_START)

    # ========================================
    # Fetch / Decode / Execute
    # ========================================

    def peek_opcode(self) -> int:
        """
        Read the instruction word at PC without executing it.

        Raises:
            OutOfBoundsError: If PC does not reference two addressable bytes
        """
        if self.pc > len(self.memory) - 2:
            raise OutOfBoundsError(
                f"PC (${self.pc:04X}) is out of memory bounds.",
                address=self.pc,
                length=2,
            )
        return self.memory.read_word(self.pc)

    def _check_executable(self, opcode: int) -> None:
        """
        Raise if the instruction cannot run to completion.

        Called before any state is touched so that a failing step leaves
        the machine exactly as it was.
        """
        if not is_supported(opcode):
            raise UnknownOpcodeError(opcode, self.pc)

        if opcode == RET and not self.stack:
            raise EmptyStackError(self.pc)

        if opcode & 0xF000 == 0xD000:
            rows = self._visible_sprite_rows(opcode)
            if rows and self.i + rows > len(self.memory):
                raise OutOfBoundsError(
                    f"Sprite read of {rows} byte(s) at I=${self.i:04X} "
                    f"runs past end of memory",
                    address=self.i,
                    length=rows,
                )

    def _visible_sprite_rows(self, opcode: int) -> int:
        """Number of sprite rows DXYN draws before clipping at the bottom edge."""
        fields = decode(opcode)
        y0 = self.v[fields.y] % self.display.height
        return max(0, min(fields.n, self.display.height - y0))

    def step(self) -> None:
        """
        Execute exactly one instruction.

        Raises:
            OutOfBoundsError: If PC is past the last fetchable word, or a
                sprite would be read from beyond the end of memory
            UnknownOpcodeError: If the word at PC is not a known instruction
            EmptyStackError: If a return executes with an empty stack
        """
        opcode = self.peek_opcode()
        self._check_executable(opcode)

        self.display_updated = False
        self.state.opcode = opcode
        self.pc += 2

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("$%04X: %04X", self.pc - 2, opcode)

        self._execute_instruction(opcode)

        if self.delay_timer > 0:
            self.delay_timer -= 1
        if self.sound_timer > 0:
            self.sound_timer -= 1

    def _execute_instruction(self, opcode: int) -> None:
        """
        Dispatch one decoded instruction.

        Args:
            opcode: The instruction word (PC already advanced past it)
        """
        f = decode(opcode)

        match f.family:
            case 0x0:
                match opcode:
                    case 0x00E0:  # CLS
                        self._clear_display()
                    case 0x00EE:  # RET
                        self.pc = self.stack.pop()
                    case _:
                        raise UnknownOpcodeError(opcode, self.pc - 2)
            case 0x1:  # JP nnn
                self.pc = f.nnn
            case 0x2:  # CALL nnn
                self.stack.append(self.pc)
                self.pc = f.nnn
            case 0x3:  # SE Vx, nn
                if self.v[f.x] == f.nn:
                    self.pc += 2
            case 0x4:  # SNE Vx, nn
                if self.v[f.x] != f.nn:
                    self.pc += 2
            case 0x5:  # SE Vx, Vy
                if self.v[f.x] == self.v[f.y]:
                    self.pc += 2
            case 0x6:  # LD Vx, nn
                self.v[f.x] = f.nn
            case 0x7:  # ADD Vx, nn (no carry flag)
                self.v[f.x] = (self.v[f.x] + f.nn) & 0xFF
            case 0x8:
                self._execute_alu(f.n, f.x, f.y, opcode)
            case 0x9:  # SNE Vx, Vy
                if self.v[f.x] != self.v[f.y]:
                    self.pc += 2
            case 0xA:  # LD I, nnn
                self.i = f.nnn
            case 0xD:  # DRW Vx, Vy, n
                self._draw_sprite(f.x, f.y, f.n)
            case _:
                raise UnknownOpcodeError(opcode, self.pc - 2)

    def _execute_alu(self, operation: int, x: int, y: int, opcode: int) -> None:
        """
        Execute an 8XY? register-register operation.

        VF is written after VX, so when X is F the flag wins.
        """
        vx = self.v[x]
        vy = self.v[y]

        match operation:
            case 0x0:  # LD Vx, Vy
                self.v[x] = vy
            case 0x1:  # OR Vx, Vy
                self.v[x] = vx | vy
            case 0x2:  # AND Vx, Vy
                self.v[x] = vx & vy
            case 0x3:  # XOR Vx, Vy
                self.v[x] = vx ^ vy
            case 0x4:  # ADD Vx, Vy
                total = vx + vy
                self.v[x] = total & 0xFF
                self.v[FLAG_REGISTER] = 1 if total > 0xFF else 0
            case 0x5:  # SUB Vx, Vy
                self.v[x] = (vx - vy) & 0xFF
                self.v[FLAG_REGISTER] = 1 if vx >= vy else 0
            case 0x6:  # SHR Vx
                self.v[x] = vx >> 1
                self.v[FLAG_REGISTER] = vx & 0x01
            case 0x7:  # SUBN Vx, Vy
                self.v[x] = (vy - vx) & 0xFF
                self.v[FLAG_REGISTER] = 1 if vy >= vx else 0
            case 0xE:  # SHL Vx
                self.v[x] = (vx << 1) & 0xFF
                self.v[FLAG_REGISTER] = (vx >> 7) & 0x01
            case _:
                raise UnknownOpcodeError(opcode, self.pc - 2)

    def _clear_display(self) -> None:
        """Clear the display (00E0)."""
        self.display.clear()
        self.display_updated = True

    def _draw_sprite(self, x: int, y: int, rows: int) -> None:
        """
        Draw an n-row sprite from memory[I] at (Vx, Vy) (DXYN).

        Sets VF to 1 if any lit pixel was erased, else 0. Rows clipped at
        the bottom edge are never read from memory.
        """
        y0 = self.v[y] % self.display.height
        visible = max(0, min(rows, self.display.height - y0))
        sprite = self.memory.read_block(self.i, visible)

        collision = self.display.draw_sprite(self.v[x], self.v[y], sprite)

        self.v[FLAG_REGISTER] = 1 if collision else 0
        self.display_updated = True

    # ========================================
    # Diagnostics
    # ========================================

    def dump(self) -> str:
        """
        Format registers, memory and display for humans.

        Not a stable format; meant for logs and debugging sessions.
        """
        lines = [
            f"PC={self.pc:04X}, IR={self.i:04X}",
            "".join(f"{n:02d}={value:02X}, " for n, value in enumerate(self.v)),
            "",
            "Memory: ",
        ]
        lines.extend(self.memory.dump())
        lines.append("")
        lines.append("Display:")
        lines.append(self.display.render_text(ruler=True))
        return "\n".join(lines) + "\n"

    def __str__(self) -> str:
        return self.dump()

    def __repr__(self) -> str:
        return (
            f"Machine(pc=${self.pc:04X}, i=${self.i:04X}, "
            f"opcode=${self.opcode:04X}, sp={len(self.stack)})"
        )

    # ========================================
    # Snapshot Support
    # ========================================

    def get_snapshot_data(self) -> List[int]:
        """
        Get complete machine state as a byte list.

        Format: [PChi, PClo, Ihi, Ilo, OPhi, OPlo, DT, ST, V0..VF,
                 depth, (RAhi, RAlo) * depth, memory..., display...]

        Raises:
            ValueError: If the stack is deeper than 255 frames
        """
        if len(self.stack) > 0xFF:
            raise ValueError(f"Stack depth {len(self.stack)} too deep to snapshot")

        data = [
            (self.pc >> 8) & 0xFF,
            self.pc & 0xFF,
            (self.i >> 8) & 0xFF,
            self.i & 0xFF,
            (self.opcode >> 8) & 0xFF,
            self.opcode & 0xFF,
            self.delay_timer,
            self.sound_timer,
        ]
        data.extend(self.v)
        data.append(len(self.stack))
        for address in self.stack:
            data.extend([(address >> 8) & 0xFF, address & 0xFF])
        data.extend(self.memory.get_snapshot_data())
        data.extend(self.display.get_snapshot_data())
        return data

    def apply_snapshot_data(self, data: List[int], offset: int = 0) -> int:
        """
        Restore machine state from snapshot data.

        Returns:
            Number of bytes consumed from data

        Raises:
            ValueError: If data is truncated
        """
        header = 8 + NUM_REGISTERS + 1
        if len(data) - offset < header:
            raise ValueError("Snapshot truncated in machine header")

        pos = offset
        pc = (data[pos] << 8) | data[pos + 1]
        i = (data[pos + 2] << 8) | data[pos + 3]
        opcode = (data[pos + 4] << 8) | data[pos + 5]
        delay, sound = data[pos + 6], data[pos + 7]
        pos += 8
        registers = bytes(data[pos:pos + NUM_REGISTERS])
        pos += NUM_REGISTERS

        depth = data[pos]
        pos += 1
        if len(data) - pos < depth * 2:
            raise ValueError("Snapshot truncated in stack")
        stack = [(data[pos + 2 * k] << 8) | data[pos + 2 * k + 1] for k in range(depth)]
        pos += depth * 2

        # Both blocks must be present before either is written
        if len(data) - pos < len(self.memory) + self.display.snapshot_size:
            raise ValueError("Snapshot truncated in memory or display block")

        pos += self.memory.apply_snapshot_data(data, pos)
        pos += self.display.apply_snapshot_data(data, pos)

        self.state = MachineState(pc=pc, i=i, opcode=opcode,
                                  delay_timer=delay, sound_timer=sound)
        self.v[:] = registers
        self.stack[:] = stack
        self.display_updated = False
        return pos - offset
