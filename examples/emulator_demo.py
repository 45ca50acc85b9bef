#!/usr/bin/env python3
"""
CHIP-8 Emulator Demo
====================

This script demonstrates how to use the CHIP-8 emulator to:
1. Build a small program in memory
2. Disassemble it
3. Run it frame by frame
4. Stop on a breakpoint
5. Take a screenshot and a snapshot

Usage:
    source .venv/bin/activate
    python examples/emulator_demo.py
"""

from pathlib import Path

from chip8.emulator import BreakReason, Emulator, EmulatorConfig


def words(*opcodes: int) -> bytes:
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


# Draws the hex digits 0-3 across the top of the screen, then spins
DIGITS = words(
    0x00E0,     # $200 CLS
    0x6000,     # $202 LD V0, $00      x position
    0x6100,     # $204 LD V1, $00      y position
    0xA050,     # $206 LD I, $050      glyph 0
    0xD015,     # $208 DRW V0, V1, 5
    0x7005,     # $20A ADD V0, $05
    0xA055,     # $20C LD I, $055      glyph 1
    0xD015,     # $20E DRW V0, V1, 5
    0x7005,     # $210 ADD V0, $05
    0xA05A,     # $212 LD I, $05A      glyph 2
    0xD015,     # $214 DRW V0, V1, 5
    0x7005,     # $216 ADD V0, $05
    0xA05F,     # $218 LD I, $05F      glyph 3
    0xD015,     # $21A DRW V0, V1, 5
    0x3F00,     # $21C SE VF, $00      skip if nothing collided
    0x00E0,     # $21E CLS
    0x1220,     # $220 JP $220         done
)


def main():
    output_dir = Path("trash")
    output_dir.mkdir(exist_ok=True)

    # ==========================================================================
    # 1. Create an emulator instance
    # ==========================================================================
    # The default font is loaded at $050. cycles_per_frame controls how many
    # instructions run_frame() executes.

    print("Creating CHIP-8 emulator...")
    emu = Emulator(EmulatorConfig(cycles_per_frame=4))
    emu.load_bytes(DIGITS)
    print(f"  {emu!r}")

    # ==========================================================================
    # 2. Disassemble the program
    # ==========================================================================
    print("\nProgram listing:")
    for line in emu.disassemble_at(0x200, count=8):
        print(f"  {line}")

    # ==========================================================================
    # 3. Run a few frames
    # ==========================================================================
    # run_frame() returns True when the frame touched the display, which is
    # when a real frontend would redraw.

    print("\nRunning frames...")
    for frame in range(2):
        updated = emu.run_frame()
        print(f"  Frame {frame}: {emu.total_steps} steps, redraw={updated}")

    # ==========================================================================
    # 4. Breakpoints
    # ==========================================================================
    # Stop when the spin loop is reached. step() past the breakpoint before
    # calling run() again.

    emu.add_breakpoint(0x220)
    event = emu.run(10_000)
    if event.reason == BreakReason.PC_BREAKPOINT:
        print(f"\n{event} after {emu.total_steps} steps")
        print(f"  V0=${emu.registers['v0']:02X} I=${emu.registers['i']:04X}")

    print("\nDisplay:")
    print(emu.machine.display.render_text())

    # ==========================================================================
    # 5. Screenshot and snapshot
    # ==========================================================================
    screenshot = output_dir / "chip8_digits.png"
    screenshot.write_bytes(emu.render_display(scale=8))
    print(f"\nSaved screenshot to {screenshot}")

    snapshot = output_dir / "chip8_digits.c8s"
    emu.save_snapshot(snapshot)
    print(f"Saved snapshot to {snapshot}")


if __name__ == "__main__":
    main()
