"""
Breakpoint System for the CHIP-8 Interpreter
============================================

Provides debugging support for host run loops:
- PC breakpoints (break when PC reaches address)
- Opcode breakpoints (break before a specific instruction word executes)
- Register conditions (break when registers match)
- Step mode and external break requests

The Emulator checks the BreakpointManager before every instruction. The
Machine itself knows nothing about breakpoints.

Example usage:

    >>> from chip8.emulator import Emulator, BreakReason
    >>> emu = Emulator()
    >>> emu.load_bytes(rom)
    >>> emu.breakpoints.add_breakpoint(0x20A)
    >>> event = emu.run(10_000)
    >>> if event.reason == BreakReason.PC_BREAKPOINT:
    ...     print(f"Hit breakpoint at ${event.address:04X}")
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import List, Optional, Set, TYPE_CHECKING

if TYPE_CHECKING:
    from .cpu import Machine


class BreakReason(Enum):
    """
    Enumeration of reasons why execution stopped.

    Used in BreakEvent to indicate what triggered the break.
    """
    NONE = auto()                # No specific reason
    PC_BREAKPOINT = auto()       # PC reached a breakpoint address
    OPCODE_BREAKPOINT = auto()   # Next instruction word matched
    REGISTER_CONDITION = auto()  # Register condition met
    STEP = auto()                # Single-step mode
    USER_INTERRUPT = auto()      # External break request
    MAX_STEPS = auto()           # Step budget exhausted


@dataclass
class BreakEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: PC at the time of the break (if applicable)
        opcode: Instruction word about to execute (if applicable)
        message: Human-readable description
    """
    reason: BreakReason
    address: Optional[int] = None
    opcode: Optional[int] = None
    message: str = ""

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return self.message
        match self.reason:
            case BreakReason.PC_BREAKPOINT:
                return f"Breakpoint at ${self.address:04X}" if self.address is not None else "Breakpoint"
            case BreakReason.OPCODE_BREAKPOINT:
                return f"Opcode ${self.opcode:04X}" if self.opcode is not None else "Opcode breakpoint"
            case BreakReason.REGISTER_CONDITION:
                return "Register condition met"
            case BreakReason.STEP:
                return "Single step"
            case BreakReason.USER_INTERRUPT:
                return "User interrupt"
            case BreakReason.MAX_STEPS:
                return "Maximum steps reached"
            case _:
                return "Unknown"


class RegisterCondition:
    """
    Condition on machine registers.

    Supported registers: v0-vf, i, pc, delay_timer, sound_timer, sp
    (sp is the current stack depth).

    Supported operators: ==, !=, <, <=, >, >=, & (true if result non-zero)

    Examples:
        >>> cond = RegisterCondition('v0', '==', 0x42)
        >>> cond = RegisterCondition('vf', '==', 1)       # last draw collided
        >>> cond = RegisterCondition('i', '>=', 0x300)
    """

    OPERATORS = ('==', '!=', '<', '<=', '>', '>=', '&')
    SCALAR_REGISTERS = ('i', 'pc', 'delay_timer', 'sound_timer', 'sp')

    def __init__(
        self,
        register: str,
        operator: str,
        value: int,
        description: str = ""
    ):
        """
        Create a register condition.

        Args:
            register: Register name
            operator: Comparison operator
            value: Value to compare against
            description: Optional description for debugging

        Raises:
            ValueError: If register or operator is unknown
        """
        register = register.lower()
        if register not in self.SCALAR_REGISTERS and self._register_index(register) is None:
            raise ValueError(f"Unknown register: {register}")
        if operator not in self.OPERATORS:
            raise ValueError(f"Unknown operator: {operator}")

        self.register = register
        self.operator = operator
        self.value = value
        self.description = description or f"{register} {operator} {value:#x}"

    @staticmethod
    def _register_index(name: str) -> Optional[int]:
        """Map 'v0'..'vf' to 0..15, or None."""
        if len(name) == 2 and name[0] == 'v' and name[1] in "0123456789abcdef":
            return int(name[1], 16)
        return None

    def _read(self, machine: "Machine") -> int:
        index = self._register_index(self.register)
        if index is not None:
            return machine.v[index]
        if self.register == 'sp':
            return len(machine.stack)
        return getattr(machine, self.register)

    def check(self, machine: "Machine") -> bool:
        """
        Evaluate the condition against current machine state.

        Returns:
            True if the condition holds
        """
        current = self._read(machine)
        match self.operator:
            case '==':
                return current == self.value
            case '!=':
                return current != self.value
            case '<':
                return current < self.value
            case '<=':
                return current <= self.value
            case '>':
                return current > self.value
            case '>=':
                return current >= self.value
            case '&':
                return (current & self.value) != 0
        return False

    def __repr__(self) -> str:
        return f"RegisterCondition({self.register!r}, {self.operator!r}, {self.value:#x})"


class BreakpointManager:
    """
    Manages breakpoints and register conditions.

    Example:
        >>> mgr = BreakpointManager()
        >>> mgr.add_breakpoint(0x210)
        >>> mgr.add_opcode_breakpoint(0x00EE)
        >>> mgr.add_condition('v3', '==', 0)
        >>> # Checked by the host before each instruction
        >>> mgr.check_instruction(machine, machine.pc, machine.peek_opcode())
    """

    def __init__(self):
        """Initialize empty breakpoint manager."""
        self._pc_breakpoints: Set[int] = set()
        self._opcode_breakpoints: Set[int] = set()

        # Register conditions (list with possible None holes)
        self._register_conditions: List[Optional[RegisterCondition]] = []

        self._last_event: Optional[BreakEvent] = None
        self._step_mode: bool = False
        self._break_requested: bool = False

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def last_event(self) -> Optional[BreakEvent]:
        """Get the last break event that occurred."""
        return self._last_event

    @property
    def step_mode(self) -> bool:
        """Check if step mode is active."""
        return self._step_mode

    @step_mode.setter
    def step_mode(self, value: bool) -> None:
        self._step_mode = value

    @property
    def breakpoint_count(self) -> int:
        """Number of active PC breakpoints."""
        return len(self._pc_breakpoints)

    # =========================================================================
    # PC Breakpoints
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """
        Add PC breakpoint at address.

        Execution stops when PC reaches this address, before the
        instruction at that address is executed.
        """
        self._pc_breakpoints.add(address & 0xFFFF)

    def remove_breakpoint(self, address: int) -> None:
        """Remove PC breakpoint at address."""
        self._pc_breakpoints.discard(address & 0xFFFF)

    def has_breakpoint(self, address: int) -> bool:
        """Check if breakpoint exists at address."""
        return (address & 0xFFFF) in self._pc_breakpoints

    def clear_breakpoints(self) -> None:
        """Remove all PC breakpoints."""
        self._pc_breakpoints.clear()

    def list_breakpoints(self) -> List[int]:
        """Get sorted list of breakpoint addresses."""
        return sorted(self._pc_breakpoints)

    # =========================================================================
    # Opcode Breakpoints
    # =========================================================================

    def add_opcode_breakpoint(self, opcode: int) -> None:
        """Break before any instruction whose word equals opcode."""
        self._opcode_breakpoints.add(opcode & 0xFFFF)

    def remove_opcode_breakpoint(self, opcode: int) -> None:
        """Remove an opcode breakpoint."""
        self._opcode_breakpoints.discard(opcode & 0xFFFF)

    def list_opcode_breakpoints(self) -> List[int]:
        """Get sorted list of opcode breakpoints."""
        return sorted(self._opcode_breakpoints)

    # =========================================================================
    # Register Conditions
    # =========================================================================

    def add_register_condition(self, condition: RegisterCondition) -> int:
        """
        Add a register condition.

        Returns:
            Condition ID for later removal
        """
        self._register_conditions.append(condition)
        return len(self._register_conditions) - 1

    def add_condition(
        self,
        register: str,
        operator: str,
        value: int,
        description: str = ""
    ) -> int:
        """
        Convenience wrapper building a RegisterCondition.

        Returns:
            Condition ID for later removal
        """
        return self.add_register_condition(
            RegisterCondition(register, operator, value, description)
        )

    def remove_register_condition(self, condition_id: int) -> None:
        """Remove a register condition by ID."""
        if 0 <= condition_id < len(self._register_conditions):
            self._register_conditions[condition_id] = None

    def clear_register_conditions(self) -> None:
        """Remove all register conditions."""
        self._register_conditions.clear()

    def list_register_conditions(self) -> List[tuple[int, RegisterCondition]]:
        """Get (id, condition) pairs for all active conditions."""
        return [
            (i, cond) for i, cond in enumerate(self._register_conditions)
            if cond is not None
        ]

    # =========================================================================
    # Control
    # =========================================================================

    def request_break(self) -> None:
        """Ask the run loop to stop before the next instruction."""
        self._break_requested = True

    def clear_break_request(self) -> None:
        """Cancel a pending break request and forget the last event."""
        self._break_requested = False
        self._last_event = None

    def clear_all(self) -> None:
        """Remove all breakpoints and conditions."""
        self._pc_breakpoints.clear()
        self._opcode_breakpoints.clear()
        self._register_conditions.clear()
        self._step_mode = False
        self._break_requested = False

    # =========================================================================
    # Check Function (called by the host run loop)
    # =========================================================================

    def check_instruction(self, machine: "Machine", pc: int, opcode: int) -> bool:
        """
        Check if we should break before executing an instruction.

        Args:
            machine: Machine instance
            pc: Current program counter
            opcode: Instruction word about to execute

        Returns:
            True to continue execution, False to break
        """
        if self._break_requested:
            self._break_requested = False
            self._last_event = BreakEvent(
                BreakReason.USER_INTERRUPT,
                address=pc,
                opcode=opcode,
                message="User interrupt"
            )
            return False

        if self._step_mode:
            self._step_mode = False
            self._last_event = BreakEvent(
                BreakReason.STEP,
                address=pc,
                opcode=opcode,
                message=f"Step at ${pc:04X}"
            )
            return False

        if pc in self._pc_breakpoints:
            self._last_event = BreakEvent(
                BreakReason.PC_BREAKPOINT,
                address=pc,
                opcode=opcode,
                message=f"Breakpoint at ${pc:04X}"
            )
            return False

        if opcode in self._opcode_breakpoints:
            self._last_event = BreakEvent(
                BreakReason.OPCODE_BREAKPOINT,
                address=pc,
                opcode=opcode,
                message=f"Opcode ${opcode:04X} at ${pc:04X}"
            )
            return False

        for cond in self._register_conditions:
            if cond is not None and cond.check(machine):
                self._last_event = BreakEvent(
                    BreakReason.REGISTER_CONDITION,
                    address=pc,
                    opcode=opcode,
                    message=f"Condition: {cond.description}"
                )
                return False

        return True
