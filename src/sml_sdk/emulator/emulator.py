"""
SML Virtual Machine - Main Orchestrator
=======================================

This module provides the main `Emulator` class that ties Memory, the
SMLProcessor, input/output and breakpoints together behind one API.

The Emulator class:
- Owns one Memory and one SMLProcessor
- Loads programs from machine images, assembled programs or .mach files
- Supports execution control (run, step) with breakpoints
- Renders register and memory dumps

Example usage:
    >>> from sml_sdk.emulator import Emulator, ScriptedInput
    >>> emu = Emulator(input_source=ScriptedInput(["12"]))
    >>> emu.load_file("double.mach")
    >>> event = emu.run()
    >>> print(event, emu.output)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from pathlib import Path
from typing import Optional, Union
import logging

from sml_sdk.config import MachineConfig, get_default_config
from sml_sdk.mach import MachineImage, load_mach
from .cpu import SMLProcessor
from .dump import render_dump
from .events import ProcessorState, StopEvent
from .io import ConsoleInput, InputSource, OutputSink
from .memory import Memory

logger = logging.getLogger(__name__)


class Emulator:
    """
    SML virtual machine with breakpoint support.

    Attributes:
        config: The MachineConfig used to initialize this instance
        cpu: The SMLProcessor (accessible for low-level control)

    Example:
        >>> emu = Emulator()
        >>> emu.load_program(assemble(source))
        >>> emu.add_breakpoint(5)
        >>> event = emu.run()
        >>> if event.reason == StopReason.BREAKPOINT:
        ...     print(emu.dump())
    """

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        input_source: Optional[InputSource] = None,
        output_sink: Optional[OutputSink] = None,
    ):
        """
        Initialize the emulator.

        Args:
            config: Machine configuration. If None, uses the default
                    configuration (environment variables applied).
            input_source: Source of READ tokens. If None, prompts on the
                          console.
            output_sink: Receives WRITE lines. If None, echoes to stdout.
        """
        self.config = config or get_default_config()
        self._memory = Memory(self.config.memory_size)
        if input_source is None:
            input_source = ConsoleInput(self.config.prompt)
        self.cpu = SMLProcessor(self._memory, input_source, output_sink)
        self.cpu.on_instruction = self._instruction_hook

        self._breakpoints: set[int] = set()
        self._image: Optional[MachineImage] = None

    def _instruction_hook(self, pc: int, word: Optional[int]) -> bool:
        """Return False to stop before the instruction at a breakpoint."""
        return pc not in self._breakpoints

    # =========================================================================
    # Program Loading
    # =========================================================================

    def load_image(self, image: MachineImage) -> None:
        """
        Load a machine image and reset the processor to its origin.

        Memory is cleared first, so cells beyond the image read as 0.

        Raises:
            MachFormatError: If the image does not fit in memory
        """
        self._memory.clear()
        image.load_into(self._memory)
        self._image = image
        self.cpu.reset(image.instruction_origin)
        logger.debug(
            f"Loaded {len(image)} words, execution starts at {image.instruction_origin:02d}"
        )

    def load_program(self, program) -> None:
        """Load an AssembledProgram."""
        self.load_image(program.to_image())

    def load_file(self, path: Union[str, Path]) -> None:
        """
        Load a .mach file.

        Raises:
            FileNotFoundError: If the file does not exist
            MachFormatError: If the file is too large for memory
        """
        self.load_image(load_mach(path, max_words=self._memory.size))

    def reset(self) -> None:
        """
        Restore the loaded image and reset registers.

        Without a loaded image, memory is cleared and pc starts at 0.
        """
        if self._image is not None:
            self.load_image(self._image)
        else:
            self._memory.clear()
            self.cpu.reset(0)

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> StopEvent:
        """
        Execute a single instruction, ignoring breakpoints.

        Raises:
            RuntimeFault: If the instruction faults
        """
        return self.cpu.step()

    def run(self, max_cycles: Optional[int] = None) -> StopEvent:
        """
        Run until halt, end of memory, breakpoint or cycle limit.

        Args:
            max_cycles: Maximum instructions to execute. None uses the
                        configured limit (unbounded by default).

        Returns:
            StopEvent describing why execution stopped

        Raises:
            RuntimeFault: If an instruction faults
        """
        if max_cycles is None:
            max_cycles = self.config.max_cycles
        event = self.cpu.run(max_cycles)
        logger.debug(f"Stopped: {event}")
        return event

    # =========================================================================
    # Breakpoint Management
    # =========================================================================

    def add_breakpoint(self, address: int) -> None:
        """
        Add a breakpoint.

        run() stops before executing the instruction at this address.
        """
        self._breakpoints.add(address)

    def remove_breakpoint(self, address: int) -> None:
        """Remove a breakpoint (no error if absent)."""
        self._breakpoints.discard(address)

    def clear_breakpoints(self) -> None:
        """Remove all breakpoints."""
        self._breakpoints.clear()

    @property
    def breakpoints(self) -> frozenset[int]:
        return frozenset(self._breakpoints)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def memory(self) -> Memory:
        return self._memory

    @property
    def registers(self) -> dict:
        """
        Get current register values as a dictionary.

        Returns:
            Dictionary with keys: accumulator, pc, instruction_register,
            opcode, operand
        """
        return self.cpu.registers

    @property
    def accumulator(self) -> int:
        return self.cpu.accumulator

    @property
    def pc(self) -> int:
        return self.cpu.pc

    @property
    def state(self) -> ProcessorState:
        return self.cpu.state

    @property
    def output(self) -> list[str]:
        """Lines written by WRITE since the last load or reset."""
        return list(self.cpu.output)

    @property
    def warnings(self) -> list[str]:
        """Runtime warnings since the last load or reset."""
        return list(self.cpu.warnings)

    def dump(self) -> str:
        """Render registers and memory as text."""
        return render_dump(self.cpu)

    def __repr__(self) -> str:
        return (
            f"Emulator(acc={self.cpu.accumulator_text}, pc={self.cpu.pc:02d}, "
            f"state={self.cpu.state.name})"
        )
