"""
Command-Line Tool Tests
=======================

Tests for the chip8run command and the shared CLI error handling.
"""

import pytest
from click.testing import CliRunner

from chip8.cli.chip8run import main
from chip8.cli.errors import ExitCode, handle_cli_exception, parse_address
from chip8.errors import UnknownOpcodeError


# LD I, glyph 1; DRW V0, V1, 5; JP self
DRAW_ONE = bytes([0xA0, 0x55, 0xD0, 0x15, 0x12, 0x04])


@pytest.fixture
def rom(tmp_path):
    path = tmp_path / "one.ch8"
    path.write_bytes(DRAW_ONE)
    return path


# =============================================================================
# chip8run Tests
# =============================================================================

class TestRunCLI:
    """Tests for the chip8run command-line interface."""

    def test_cli_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "Run a CHIP-8 program" in result.output

    def test_cli_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "chip8run" in result.output

    def test_default_run(self, rom):
        """Initial and final dumps are printed around the default cycle count."""
        runner = CliRunner()
        result = runner.invoke(main, [str(rom)])

        assert result.exit_code == 0
        assert "Initial:" in result.output
        assert "After 39 cycles:" in result.output
        assert result.output.count("PC=0200, IR=0000") == 1
        assert "PC=0204, IR=0055" in result.output
        assert "..#....." in result.output

    def test_cycles_option(self, rom):
        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "--cycles", "1", "--quiet"])

        assert result.exit_code == 0
        assert "Initial:" not in result.output
        assert "After 1 cycles:" in result.output
        assert "PC=0202, IR=0055" in result.output

    def test_breakpoint_stops_early(self, rom):
        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "--break", "0x202", "-q"])

        assert result.exit_code == 0
        assert "Stopped: Breakpoint at $0202" in result.output
        assert "After 1 cycles:" in result.output

    def test_bad_breakpoint(self, rom):
        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "--break", "nowhere"])

        assert result.exit_code == 2

    def test_png_output(self, rom, tmp_path):
        png = tmp_path / "screen.png"
        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q", "--png", str(png), "--scale", "2"])

        assert result.exit_code == 0
        assert png.read_bytes().startswith(b"\x89PNG")

    def test_no_font(self, rom):
        """Without the font the glyph address holds zeros and nothing is drawn."""
        runner = CliRunner()
        result = runner.invoke(main, [str(rom), "-q", "--no-font"])

        assert result.exit_code == 0
        assert "#" not in result.output.split("Display:")[-1]

    def test_interpreter_error(self, tmp_path):
        """An unknown opcode exits with status 1."""
        path = tmp_path / "bad.ch8"
        path.write_bytes(bytes([0xF0, 0x0A]))

        runner = CliRunner()
        result = runner.invoke(main, [str(path), "-q"])

        assert result.exit_code == ExitCode.EMULATION_ERROR
        assert "unknown opcode $F00A at $0200" in result.output

    def test_oversized_rom(self, tmp_path):
        path = tmp_path / "big.ch8"
        path.write_bytes(bytes(4000))

        runner = CliRunner()
        result = runner.invoke(main, [str(path)])

        assert result.exit_code == ExitCode.EMULATION_ERROR

    def test_missing_rom(self, tmp_path):
        runner = CliRunner()
        result = runner.invoke(main, [str(tmp_path / "missing.ch8")])

        assert result.exit_code == 2


# =============================================================================
# Shared Error Handling Tests
# =============================================================================

class TestCLIErrors:
    """Tests for the unified exit codes."""

    def test_chip8_error(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(UnknownOpcodeError(0xFFFF, 0x200))
        assert exc_info.value.code == ExitCode.EMULATION_ERROR

    def test_missing_file(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(FileNotFoundError("nope"))
        assert exc_info.value.code == ExitCode.INVALID_ARGS

    def test_internal_error(self):
        with pytest.raises(SystemExit) as exc_info:
            handle_cli_exception(RuntimeError("boom"))
        assert exc_info.value.code == ExitCode.INTERNAL_ERROR

    @pytest.mark.parametrize("text,expected", [
        ("0x228", 0x228),
        ("$228", 0x228),
        ("552", 552),
        ("0XFFFF", 0xFFFF),
    ])
    def test_parse_address(self, text, expected):
        assert parse_address(text) == expected

    @pytest.mark.parametrize("text", ["", "0x", "-1", "0x10000", "abc"])
    def test_parse_address_invalid(self, text):
        import click

        with pytest.raises(click.BadParameter):
            parse_address(text)
