"""
Breakpoint System Unit Tests
============================

Tests for PC breakpoints, opcode breakpoints, register conditions, step
mode and external break requests.
"""

import pytest
from chip8.emulator import (
    BreakpointManager,
    BreakEvent,
    BreakReason,
    Machine,
    RegisterCondition,
)


@pytest.fixture
def machine():
    return Machine()


# =============================================================================
# BreakpointManager Tests
# =============================================================================

class TestBreakpointManager:
    """Test BreakpointManager initialization and basic operations."""

    def test_initial_state(self):
        """Manager starts with no breakpoints."""
        mgr = BreakpointManager()
        assert mgr.breakpoint_count == 0
        assert mgr.last_event is None
        assert mgr.list_register_conditions() == []

    def test_step_mode(self):
        """Step mode can be set and cleared."""
        mgr = BreakpointManager()

        assert mgr.step_mode is False
        mgr.step_mode = True
        assert mgr.step_mode is True
        mgr.step_mode = False
        assert mgr.step_mode is False

    def test_nothing_set_continues(self, machine):
        mgr = BreakpointManager()
        assert mgr.check_instruction(machine, 0x200, 0x6000) is True
        assert mgr.last_event is None


# =============================================================================
# PC Breakpoint Tests
# =============================================================================

class TestPCBreakpoints:
    """Test PC breakpoint functionality."""

    @pytest.fixture
    def mgr(self):
        return BreakpointManager()

    def test_add_breakpoint(self, mgr):
        mgr.add_breakpoint(0x228)
        assert mgr.has_breakpoint(0x228)
        assert mgr.breakpoint_count == 1

    def test_remove_breakpoint(self, mgr):
        mgr.add_breakpoint(0x228)
        mgr.remove_breakpoint(0x228)
        assert not mgr.has_breakpoint(0x228)

    def test_remove_missing_breakpoint(self, mgr):
        """Removing an unset breakpoint is a no-op."""
        mgr.remove_breakpoint(0x300)
        assert mgr.breakpoint_count == 0

    def test_list_sorted(self, mgr):
        for address in (0x300, 0x200, 0x250):
            mgr.add_breakpoint(address)
        assert mgr.list_breakpoints() == [0x200, 0x250, 0x300]

    def test_clear(self, mgr):
        mgr.add_breakpoint(0x200)
        mgr.add_breakpoint(0x202)
        mgr.clear_breakpoints()
        assert mgr.breakpoint_count == 0

    def test_hit(self, mgr, machine):
        """Reaching a breakpoint address stops and records an event."""
        mgr.add_breakpoint(0x204)
        assert mgr.check_instruction(machine, 0x202, 0x6000) is True
        assert mgr.check_instruction(machine, 0x204, 0x6000) is False

        event = mgr.last_event
        assert event.reason == BreakReason.PC_BREAKPOINT
        assert event.address == 0x204
        assert event.opcode == 0x6000
        assert str(event) == "Breakpoint at $0204"


# =============================================================================
# Opcode Breakpoint Tests
# =============================================================================

class TestOpcodeBreakpoints:
    """Test breaking on an instruction word."""

    def test_hit(self, machine):
        mgr = BreakpointManager()
        mgr.add_opcode_breakpoint(0x00EE)
        assert mgr.check_instruction(machine, 0x300, 0x00EE) is False
        assert mgr.last_event.reason == BreakReason.OPCODE_BREAKPOINT

    def test_list_and_remove(self):
        mgr = BreakpointManager()
        mgr.add_opcode_breakpoint(0xD015)
        mgr.add_opcode_breakpoint(0x00E0)
        assert mgr.list_opcode_breakpoints() == [0x00E0, 0xD015]
        mgr.remove_opcode_breakpoint(0xD015)
        assert mgr.list_opcode_breakpoints() == [0x00E0]


# =============================================================================
# Register Condition Tests
# =============================================================================

class TestRegisterCondition:
    """Test RegisterCondition evaluation."""

    @pytest.mark.parametrize("operator,value,expected", [
        ("==", 0x42, True),
        ("!=", 0x42, False),
        ("<", 0x43, True),
        ("<=", 0x42, True),
        (">", 0x42, False),
        (">=", 0x41, True),
        ("&", 0x02, True),
        ("&", 0x01, False),
    ])
    def test_operators(self, machine, operator, value, expected):
        machine.v[3] = 0x42
        assert RegisterCondition("v3", operator, value).check(machine) is expected

    def test_flag_register(self, machine):
        machine.v[0xF] = 1
        assert RegisterCondition("VF", "==", 1).check(machine)

    def test_scalar_registers(self, machine):
        machine.i = 0x300
        machine.delay_timer = 7
        machine.stack.extend([0x202, 0x302])
        assert RegisterCondition("i", ">=", 0x300).check(machine)
        assert RegisterCondition("pc", "==", 0x200).check(machine)
        assert RegisterCondition("delay_timer", "==", 7).check(machine)
        assert RegisterCondition("sound_timer", "==", 0).check(machine)
        assert RegisterCondition("sp", "==", 2).check(machine)

    def test_unknown_register(self):
        with pytest.raises(ValueError):
            RegisterCondition("vg", "==", 0)

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            RegisterCondition("v0", "=~", 0)

    def test_default_description(self):
        assert RegisterCondition("v0", "==", 16).description == "v0 == 0x10"


class TestRegisterConditions:
    """Test conditions managed by BreakpointManager."""

    def test_condition_triggers(self, machine):
        mgr = BreakpointManager()
        mgr.add_condition("v0", "==", 5)

        assert mgr.check_instruction(machine, 0x200, 0x6000) is True
        machine.v[0] = 5
        assert mgr.check_instruction(machine, 0x200, 0x6000) is False
        assert mgr.last_event.reason == BreakReason.REGISTER_CONDITION
        assert "v0 == 0x5" in str(mgr.last_event)

    def test_remove_condition(self, machine):
        mgr = BreakpointManager()
        cond_id = mgr.add_condition("v0", "==", 0)
        mgr.remove_register_condition(cond_id)
        assert mgr.check_instruction(machine, 0x200, 0x6000) is True
        assert mgr.list_register_conditions() == []

    def test_ids_stay_stable(self):
        """Removing one condition keeps the IDs of the others."""
        mgr = BreakpointManager()
        first = mgr.add_condition("v0", "==", 0)
        second = mgr.add_condition("v1", "==", 0)
        mgr.remove_register_condition(first)
        assert [cid for cid, _ in mgr.list_register_conditions()] == [second]


# =============================================================================
# Control Tests
# =============================================================================

class TestBreakControl:
    """Test step mode, break requests and priorities."""

    def test_break_request_is_one_shot(self, machine):
        mgr = BreakpointManager()
        mgr.request_break()
        assert mgr.check_instruction(machine, 0x200, 0x6000) is False
        assert mgr.last_event.reason == BreakReason.USER_INTERRUPT
        assert mgr.check_instruction(machine, 0x200, 0x6000) is True

    def test_step_mode_is_one_shot(self, machine):
        mgr = BreakpointManager()
        mgr.step_mode = True
        assert mgr.check_instruction(machine, 0x200, 0x6000) is False
        assert mgr.last_event.reason == BreakReason.STEP
        assert mgr.step_mode is False

    def test_interrupt_beats_breakpoint(self, machine):
        mgr = BreakpointManager()
        mgr.add_breakpoint(0x200)
        mgr.request_break()
        mgr.check_instruction(machine, 0x200, 0x6000)
        assert mgr.last_event.reason == BreakReason.USER_INTERRUPT

    def test_clear_break_request_forgets_event(self, machine):
        mgr = BreakpointManager()
        mgr.add_breakpoint(0x200)
        mgr.check_instruction(machine, 0x200, 0x6000)
        mgr.clear_break_request()
        assert mgr.last_event is None

    def test_clear_all(self, machine):
        mgr = BreakpointManager()
        mgr.add_breakpoint(0x200)
        mgr.add_opcode_breakpoint(0x6000)
        mgr.add_condition("v0", "==", 0)
        mgr.step_mode = True
        mgr.clear_all()
        assert mgr.check_instruction(machine, 0x200, 0x6000) is True


class TestBreakEvent:
    """Test BreakEvent formatting."""

    def test_message_wins(self):
        event = BreakEvent(BreakReason.STEP, message="custom")
        assert str(event) == "custom"

    @pytest.mark.parametrize("reason,text", [
        (BreakReason.REGISTER_CONDITION, "Register condition met"),
        (BreakReason.USER_INTERRUPT, "User interrupt"),
        (BreakReason.MAX_STEPS, "Maximum steps reached"),
        (BreakReason.NONE, "Unknown"),
    ])
    def test_default_text(self, reason, text):
        assert str(BreakEvent(reason)) == text

    def test_default_breakpoint_text(self):
        assert str(BreakEvent(BreakReason.PC_BREAKPOINT, address=0x20A)) == "Breakpoint at $020A"
