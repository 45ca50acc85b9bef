"""
CHIP-8 Emulator - Host Orchestrator
===================================

This module provides the `Emulator` class, the host loop around the
`Machine` core. The Machine only knows how to load bytes and execute one
instruction; the Emulator adds everything a program runner needs:

- ROM loading from files or raw bytes (with the default font preloaded)
- Execution control (step, run, run_until_pc, run_frame)
- Breakpoints and register conditions via BreakpointManager
- Display inspection (text and PNG)
- Memory access helpers and disassembly
- Snapshot save/restore

Interpreter errors (UnknownOpcodeError, EmptyStackError, OutOfBoundsError)
are never swallowed: they propagate out of step()/run() to the caller,
with the machine left in its pre-instruction state.

Example usage:
    >>> from chip8.emulator import Emulator, EmulatorConfig
    >>> emu = Emulator(EmulatorConfig(rom_path=Path("ibm.ch8")))
    >>> emu.run(39)
    >>> print(emu.display_text)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..disassembler import Chip8Disassembler
from .breakpoints import BreakEvent, BreakpointManager, BreakReason
from .cpu import Machine
from .fonts import DEFAULT_FONT

logger = logging.getLogger(__name__)

SNAPSHOT_MAGIC = b"C8S\x01"


@dataclass(frozen=True)
class EmulatorConfig:
    """
    Configuration for emulator initialization.

    Attributes:
        rom_path: Optional ROM file loaded on construction
        load_font: Load the default font at $050 on construction and reset
        cycles_per_frame: Instructions executed by run_frame()

    Example:
        >>> config = EmulatorConfig(rom_path=Path("pong.ch8"), cycles_per_frame=12)
    """
    rom_path: Optional[Path] = None
    load_font: bool = True
    cycles_per_frame: int = 10

    def __post_init__(self):
        if self.cycles_per_frame < 1:
            raise ValueError(
                f"cycles_per_frame must be at least 1, got {self.cycles_per_frame}"
            )


class Emulator:
    """
    CHIP-8 program runner with debugging support.

    Attributes:
        config: The EmulatorConfig used to initialize this instance
        machine: The Machine core (accessible for low-level control)
        breakpoints: The breakpoint manager

    Example:
        >>> emu = Emulator()
        >>> emu.load_rom("ibm.ch8")
        >>> emu.add_breakpoint(0x228)
        >>> event = emu.run(1000)
        >>> print(event)
        Breakpoint at $0228
    """

    def __init__(self, config: Optional[EmulatorConfig] = None):
        """
        Initialize the emulator with given configuration.

        Args:
            config: EmulatorConfig. If None, defaults are used.

        Raises:
            FileNotFoundError: If config.rom_path does not exist
            OutOfBoundsError: If the ROM does not fit in memory
        """
        self.config = config or EmulatorConfig()
        self.machine = Machine()
        self.breakpoints = BreakpointManager()
        self._disassembler = Chip8Disassembler()
        self._total_steps = 0
        self._rom: bytes = b""

        if self.config.load_font:
            self.machine.load_font(DEFAULT_FONT)

        if self.config.rom_path is not None:
            self.load_rom(self.config.rom_path)

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_rom(self, path: Union[str, Path]) -> None:
        """
        Load a ROM file into memory at $200.

        Raises:
            FileNotFoundError: If the file doesn't exist
            OutOfBoundsError: If the ROM is larger than 3584 bytes
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"ROM file not found: {path}")

        data = path.read_bytes()
        self.load_bytes(data)
        logger.info("Loaded %s (%d bytes)", path.name, len(data))

    def load_bytes(self, data: bytes) -> None:
        """
        Load a program image from raw bytes.

        The image is remembered so that reset() can reload it.
        """
        self.machine.load(data)
        self._rom = bytes(data)

    # =========================================================================
    # Execution Control
    # =========================================================================

    def reset(self) -> None:
        """
        Reset to power-on state and reload the current program.

        The font is reloaded if the config asks for it.
        """
        self.machine.reset()
        if self.config.load_font:
            self.machine.load_font(DEFAULT_FONT)
        if self._rom:
            self.machine.load(self._rom)
        self._total_steps = 0
        self.breakpoints.clear_break_request()

    def _execute_one(self) -> None:
        self.machine.step()
        self._total_steps += 1

    def _should_continue(self) -> bool:
        """Consult the breakpoint manager about the instruction at PC."""
        pc = self.machine.pc
        return self.breakpoints.check_instruction(self.machine, pc, self.machine.peek_opcode())

    def step(self) -> BreakEvent:
        """
        Execute a single instruction, ignoring breakpoints.

        Returns:
            BreakEvent with reason=STEP and the new PC
        """
        self._execute_one()
        return BreakEvent(
            BreakReason.STEP,
            address=self.machine.pc,
            opcode=self.machine.opcode,
            message=f"Step at ${self.machine.pc:04X}"
        )

    def run(self, max_steps: int = 100_000) -> BreakEvent:
        """
        Run until a breakpoint triggers or max_steps instructions execute.

        Breakpoints are checked before every instruction, including the
        first, so step() past a breakpoint before calling run() again.

        Returns:
            BreakEvent describing why execution stopped

        Raises:
            Chip8Error: Any interpreter error, propagated unchanged
        """
        executed = 0
        while executed < max_steps:
            if not self._should_continue():
                logger.debug("Stopped after %d steps: %s", executed, self.breakpoints.last_event)
                return self.breakpoints.last_event
            self._execute_one()
            executed += 1

        return BreakEvent(
            BreakReason.MAX_STEPS,
            address=self.machine.pc,
            message=f"Reached max steps ({max_steps})"
        )

    def run_until_pc(self, address: int, max_steps: int = 100_000) -> bool:
        """
        Run until PC reaches a specific address.

        Returns:
            True if address was reached, False if max_steps ran out first
        """
        was_set = self.breakpoints.has_breakpoint(address)
        if not was_set:
            self.breakpoints.add_breakpoint(address)

        try:
            event = self.run(max_steps)
            return (event.reason == BreakReason.PC_BREAKPOINT and
                    event.address == address)
        finally:
            if not was_set:
                self.breakpoints.remove_breakpoint(address)

    def run_frame(self) -> bool:
        """
        Execute one display frame worth of instructions.

        Runs config.cycles_per_frame instructions, stopping early if a
        breakpoint triggers.

        Returns:
            True if any executed instruction updated the display
        """
        updated = False
        for _ in range(self.config.cycles_per_frame):
            if not self._should_continue():
                break
            self._execute_one()
            updated = updated or self.machine.display_updated
        return updated

    # =========================================================================
    # Breakpoint Management (delegates to BreakpointManager)
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """Add a PC breakpoint at the specified address."""
        self.breakpoints.add_breakpoint(address)

    def remove_breakpoint(self, address: int) -> None:
        """Remove a PC breakpoint at the specified address."""
        self.breakpoints.remove_breakpoint(address)

    def clear_breakpoints(self) -> None:
        """Remove all breakpoints and conditions."""
        self.breakpoints.clear_all()

    # =========================================================================
    # Display Output
    # =========================================================================

    @property
    def display_text(self) -> str:
        """Display as ASCII art, one line per pixel row."""
        return "\n".join(self.machine.display.get_text_grid())

    @property
    def display_updated(self) -> bool:
        """True if the last executed instruction touched the display."""
        return self.machine.display_updated

    def render_display(self, scale: int = 10) -> bytes:
        """Render the display as PNG bytes."""
        return self.machine.display.render_image(scale=scale)

    # =========================================================================
    # Memory Access
    # =========================================================================

    def read_byte(self, address: int) -> int:
        """Read a single byte from memory."""
        return self.machine.memory.read(address)

    def read_bytes(self, address: int, count: int) -> bytes:
        """Read count bytes starting at address."""
        return self.machine.memory.read_block(address, count)

    def write_byte(self, address: int, value: int) -> None:
        """Write a single byte to memory."""
        self.machine.memory.write(address, value)

    def write_bytes(self, address: int, data: bytes) -> None:
        """Write a block of bytes to memory."""
        self.machine.memory.load(address, bytes(data))

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def registers(self) -> Dict[str, int]:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys v0-vf, i, pc, sp, delay_timer, sound_timer, opcode
        """
        regs = {f"v{n:x}": value for n, value in enumerate(self.machine.v)}
        regs.update({
            'i': self.machine.i,
            'pc': self.machine.pc,
            'sp': len(self.machine.stack),
            'delay_timer': self.machine.delay_timer,
            'sound_timer': self.machine.sound_timer,
            'opcode': self.machine.opcode,
        })
        return regs

    @property
    def total_steps(self) -> int:
        """Instructions executed since construction or last reset."""
        return self._total_steps

    @property
    def rom_size(self) -> int:
        """Size of the loaded program image in bytes."""
        return len(self._rom)

    # =========================================================================
    # Snapshot Support
    # =========================================================================

    def save_snapshot(self, path: Union[str, Path]) -> None:
        """
        Save complete machine state to a file.

        Breakpoints and the step counter are not saved.
        """
        data = bytearray(SNAPSHOT_MAGIC)
        data.extend(bytes(self.machine.get_snapshot_data()))
        Path(path).write_bytes(bytes(data))

    def load_snapshot(self, path: Union[str, Path]) -> None:
        """
        Restore machine state from a snapshot file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If snapshot format is invalid
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Snapshot file not found: {path}")

        data = list(path.read_bytes())
        if bytes(data[:4]) != SNAPSHOT_MAGIC:
            raise ValueError("Invalid snapshot format (bad header)")

        self.machine.apply_snapshot_data(data, 4)

    # =========================================================================
    # Debug Helpers
    # =========================================================================

    def disassemble_at(self, address: Optional[int] = None, count: int = 10) -> List[str]:
        """
        Disassemble instructions starting at address (default: PC).

        Returns:
            List of disassembly lines
        """
        if address is None:
            address = self.machine.pc
        size = max(0, min(count * 2, len(self.machine.memory) - address))
        data = self.machine.memory.read_block(address, size)
        return [str(instr) for instr in self._disassembler.disassemble(data, address, count)]

    def __repr__(self) -> str:
        return (
            f"Emulator(pc=${self.machine.pc:04X}, "
            f"steps={self._total_steps}, rom={len(self._rom)} bytes)"
        )
