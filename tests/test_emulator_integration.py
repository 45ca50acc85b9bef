"""
Emulator Integration Tests
==========================

End-to-end tests for the Emulator host loop: ROM loading, run control,
breakpoints, display output, memory helpers and snapshots.
"""

import pytest
from chip8.emulator import (
    DEFAULT_FONT,
    BreakReason,
    Emulator,
    EmulatorConfig,
    SNAPSHOT_MAGIC,
)
from chip8.errors import OutOfBoundsError, UnknownOpcodeError


def words(*opcodes: int) -> bytes:
    """Assemble instruction words into a ROM image."""
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


# Draws the "0" glyph at (0, 0), then spins forever
DRAW_ZERO = words(
    0x00E0,     # $200 CLS
    0xA050,     # $202 LD I, $050
    0x6000,     # $204 LD V0, $00
    0x6100,     # $206 LD V1, $00
    0xD015,     # $208 DRW V0, V1, 5
    0x120A,     # $20A JP $20A
)

# Counts V0 up and calls a subroutine each time round
COUNTER = words(
    0x7001,     # $200 ADD V0, $01
    0x2206,     # $202 CALL $206
    0x1200,     # $204 JP $200
    0x00EE,     # $206 RET
)


# =============================================================================
# Initialization Tests
# =============================================================================

class TestEmulatorInit:
    """Test emulator initialization."""

    def test_default_config(self):
        """Default emulator has the font loaded and PC at $200."""
        emu = Emulator()
        assert emu.config.load_font is True
        assert emu.config.cycles_per_frame == 10
        assert emu.read_bytes(0x050, 80) == DEFAULT_FONT
        assert emu.machine.pc == 0x200
        assert emu.rom_size == 0

    def test_no_font(self):
        emu = Emulator(EmulatorConfig(load_font=False))
        assert emu.read_bytes(0x050, 80) == bytes(80)

    def test_rom_from_config(self, tmp_path):
        rom = tmp_path / "draw.ch8"
        rom.write_bytes(DRAW_ZERO)
        emu = Emulator(EmulatorConfig(rom_path=rom))
        assert emu.rom_size == len(DRAW_ZERO)
        assert emu.read_bytes(0x200, 2) == b"\x00\xE0"

    def test_missing_rom(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            Emulator(EmulatorConfig(rom_path=tmp_path / "missing.ch8"))

    def test_invalid_cycles_per_frame(self):
        with pytest.raises(ValueError):
            EmulatorConfig(cycles_per_frame=0)

    def test_oversized_rom(self):
        emu = Emulator()
        with pytest.raises(OutOfBoundsError):
            emu.load_bytes(bytes(3585))
        assert emu.rom_size == 0

    def test_repr(self):
        assert repr(Emulator()) == "Emulator(pc=$0200, steps=0, rom=0 bytes)"


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:
    """Test step/run/run_frame."""

    @pytest.fixture
    def emu(self):
        emu = Emulator()
        emu.load_bytes(DRAW_ZERO)
        return emu

    def test_step(self, emu):
        event = emu.step()
        assert event.reason == BreakReason.STEP
        assert event.address == 0x202
        assert event.opcode == 0x00E0
        assert emu.total_steps == 1

    def test_run_max_steps(self, emu):
        event = emu.run(100)
        assert event.reason == BreakReason.MAX_STEPS
        assert emu.total_steps == 100
        assert emu.machine.pc == 0x20A

    def test_run_draws_glyph(self, emu):
        emu.run(6)
        lines = emu.display_text.splitlines()
        assert len(lines) == 32
        assert lines[0].startswith("####.")
        assert lines[1].startswith("#..#.")
        assert lines[4].startswith("####.")

    def test_run_propagates_errors(self):
        emu = Emulator()
        emu.load_bytes(words(0x6000, 0xF00A))
        with pytest.raises(UnknownOpcodeError) as exc_info:
            emu.run(10)
        assert exc_info.value.address == 0x202
        assert emu.total_steps == 1

    def test_run_frame_reports_display_update(self, emu):
        """The first frame draws; later frames only spin."""
        assert emu.run_frame() is True
        assert emu.total_steps == 10
        assert emu.run_frame() is False

    def test_run_frame_respects_config(self):
        emu = Emulator(EmulatorConfig(cycles_per_frame=3))
        emu.load_bytes(COUNTER)
        emu.run_frame()
        assert emu.total_steps == 3

    def test_reset_reloads_program(self, emu):
        emu.run(10)
        emu.write_byte(0x200, 0xFF)
        emu.reset()
        assert emu.machine.pc == 0x200
        assert emu.total_steps == 0
        assert emu.read_byte(0x200) == 0x00
        assert emu.read_bytes(0x050, 80) == DEFAULT_FONT
        assert emu.machine.display.is_blank


# =============================================================================
# Breakpoint Integration Tests
# =============================================================================

class TestBreakpointIntegration:
    """Test breakpoints through the emulator."""

    @pytest.fixture
    def emu(self):
        emu = Emulator()
        emu.load_bytes(COUNTER)
        return emu

    def test_pc_breakpoint(self, emu):
        emu.add_breakpoint(0x206)
        event = emu.run(100)
        assert event.reason == BreakReason.PC_BREAKPOINT
        assert event.address == 0x206
        assert emu.total_steps == 2

    def test_resume_after_breakpoint(self, emu):
        """Stepping past a breakpoint lets run() continue to the next hit."""
        emu.add_breakpoint(0x206)
        emu.run(100)
        emu.step()
        emu.run(100)
        assert emu.machine.pc == 0x206
        assert emu.registers["v0"] == 2

    def test_remove_breakpoint(self, emu):
        emu.add_breakpoint(0x206)
        emu.remove_breakpoint(0x206)
        assert emu.run(20).reason == BreakReason.MAX_STEPS

    def test_register_condition(self, emu):
        emu.breakpoints.add_condition("v0", "==", 5)
        event = emu.run(1000)
        assert event.reason == BreakReason.REGISTER_CONDITION
        assert emu.registers["v0"] == 5

    def test_opcode_breakpoint(self, emu):
        emu.breakpoints.add_opcode_breakpoint(0x00EE)
        event = emu.run(100)
        assert event.reason == BreakReason.OPCODE_BREAKPOINT
        assert event.address == 0x206

    def test_run_until_pc(self, emu):
        assert emu.run_until_pc(0x204) is True
        assert emu.machine.pc == 0x204
        assert not emu.breakpoints.has_breakpoint(0x204)

    def test_run_until_pc_unreached(self, emu):
        assert emu.run_until_pc(0x300, max_steps=50) is False

    def test_clear_breakpoints(self, emu):
        emu.add_breakpoint(0x202)
        emu.breakpoints.add_condition("v0", "==", 1)
        emu.clear_breakpoints()
        assert emu.run(30).reason == BreakReason.MAX_STEPS


# =============================================================================
# Inspection Tests
# =============================================================================

class TestInspection:
    """Test registers, memory helpers and disassembly."""

    def test_registers_property(self):
        emu = Emulator()
        emu.load_bytes(words(0x6A42, 0xA123, 0x2300))
        emu.run(3)
        regs = emu.registers
        assert regs["va"] == 0x42
        assert regs["i"] == 0x123
        assert regs["pc"] == 0x300
        assert regs["sp"] == 1
        assert regs["opcode"] == 0x2300
        assert set(f"v{n:x}" for n in range(16)) <= set(regs)

    def test_memory_helpers(self):
        emu = Emulator()
        emu.write_bytes(0x300, b"\x01\x02")
        emu.write_byte(0x302, 0x03)
        assert emu.read_bytes(0x300, 3) == b"\x01\x02\x03"
        assert emu.read_byte(0x301) == 0x02

    def test_disassemble_at_pc(self):
        emu = Emulator()
        emu.load_bytes(DRAW_ZERO)
        lines = emu.disassemble_at(count=2)
        assert len(lines) == 2
        assert "CLS" in lines[0]
        assert "LD I, $050" in lines[1]

    def test_disassemble_at_end_of_memory(self):
        """Disassembly stops at the last byte of memory."""
        emu = Emulator()
        assert len(emu.disassemble_at(0xFFE, count=10)) == 1

    def test_render_display(self):
        emu = Emulator()
        emu.load_bytes(DRAW_ZERO)
        emu.run(6)
        assert emu.render_display(scale=1).startswith(b"\x89PNG")


# =============================================================================
# Snapshot Tests
# =============================================================================

class TestSnapshot:
    """Test snapshot save/restore."""

    @pytest.fixture
    def emu(self):
        emu = Emulator()
        emu.load_bytes(COUNTER)
        return emu

    def test_snapshot_roundtrip(self, emu, tmp_path):
        emu.run(5)
        path = tmp_path / "state.c8s"
        emu.save_snapshot(path)
        saved = dict(emu.registers)

        emu.run(7)
        assert emu.registers != saved

        emu.load_snapshot(path)
        assert emu.registers == saved

    def test_snapshot_header(self, emu, tmp_path):
        path = tmp_path / "state.c8s"
        emu.save_snapshot(path)
        data = path.read_bytes()
        assert data[:4] == SNAPSHOT_MAGIC
        assert data[4:6] == b"\x02\x00"
        assert len(data) == 4 + 8 + 16 + 1 + 4096 + 256

    def test_invalid_snapshot(self, emu, tmp_path):
        path = tmp_path / "bad.c8s"
        path.write_bytes(b"NOPE" + bytes(100))
        with pytest.raises(ValueError):
            emu.load_snapshot(path)

    def test_nonexistent_snapshot(self, emu, tmp_path):
        with pytest.raises(FileNotFoundError):
            emu.load_snapshot(tmp_path / "missing.c8s")
