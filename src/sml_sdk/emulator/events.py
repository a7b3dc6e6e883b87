"""
Execution Events for the SML Virtual Machine
============================================

Describes the processor's run state and why a step or run returned.

Example usage:

    >>> from sml_sdk.emulator import Emulator, StopReason
    >>> emu = Emulator()
    >>> emu.load_file("loop.mach")
    >>> emu.add_breakpoint(4)
    >>> event = emu.run()
    >>> if event.reason == StopReason.BREAKPOINT:
    ...     print(f"Stopped at {event.address:02d}")

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class ProcessorState(Enum):
    """
    Processor run state.

    RUNNING is the only state in which instructions execute. HALTED and
    FAULTED are terminal until the processor is reset.
    """
    RUNNING = auto()
    HALTED = auto()    # HALT executed
    FAULTED = auto()   # A RuntimeFault was raised


class StopReason(Enum):
    """Why execution returned control to the caller."""
    STEP = auto()            # Single step completed
    HALTED = auto()          # HALT instruction
    END_OF_MEMORY = auto()   # Program counter reached memory capacity
    BREAKPOINT = auto()      # Instruction hook asked to stop
    MAX_CYCLES = auto()      # Cycle limit reached
    NOT_RUNNING = auto()     # Processor was already halted or faulted


@dataclass
class StopEvent:
    """
    Information about why execution stopped.

    Attributes:
        reason: Why execution stopped
        address: Program counter when execution stopped
        cycles: Instructions executed by the call that returned this event
        message: Human-readable description (optional)
    """
    reason: StopReason
    address: Optional[int] = None
    cycles: int = 0
    message: str = ""

    def __str__(self) -> str:
        """Return human-readable description."""
        if self.message:
            return self.message
        match self.reason:
            case StopReason.STEP:
                return f"Step to {self.address:02d}" if self.address is not None else "Single step"
            case StopReason.HALTED:
                return f"Halted at {self.address:02d}" if self.address is not None else "Halted"
            case StopReason.END_OF_MEMORY:
                return "Reached end of memory"
            case StopReason.BREAKPOINT:
                return f"Breakpoint at {self.address:02d}" if self.address is not None else "Breakpoint"
            case StopReason.MAX_CYCLES:
                return f"Maximum cycles reached ({self.cycles})"
            case StopReason.NOT_RUNNING:
                return "Processor is not running"
            case _:
                return "Unknown"
