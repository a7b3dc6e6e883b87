"""
SML Virtual Machine
===================

Accumulator machine that executes assembled SML programs.

- **SMLProcessor**: fetch/decode/execute over 4-digit words
- **Memory**: fixed array of numeric or raw cells (100 by default)
- **I/O**: injectable READ sources and WRITE sinks
- **Debugging**: breakpoints, single stepping, register and memory dumps

Quick Start
-----------

Basic usage::

    >>> from sml_sdk.assembler import assemble
    >>> from sml_sdk.emulator import Emulator, ScriptedInput
    >>> emu = Emulator(input_source=ScriptedInput([]))
    >>> emu.load_program(assemble("x 5\\nWRITE x\\nHALT\\n"))
    >>> emu.run()
    >>> emu.output
    ['5']

Module Structure
----------------

- `emulator.py`: Main Emulator class (high-level API)
- `cpu.py`: SMLProcessor implementation
- `memory.py`: Memory and cell types
- `io.py`: Console and scripted input, output sinks
- `events.py`: Processor states and stop events
- `dump.py`: Register and memory rendering

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

# Main entry point
from .emulator import Emulator

# CPU components
from .cpu import SMLProcessor, CPUState, DIVIDE_BY_ZERO_MESSAGE

# Memory subsystem
from .memory import Memory, NumericCell, RawCell, Cell

# I/O
from .io import InputSource, ConsoleInput, ScriptedInput, OutputSink, console_output

# Execution events
from .events import ProcessorState, StopReason, StopEvent

# Dumps
from .dump import render_registers, render_memory, render_dump

__all__ = [
    # Main API
    "Emulator",

    # CPU
    "SMLProcessor",
    "CPUState",
    "DIVIDE_BY_ZERO_MESSAGE",

    # Memory
    "Memory",
    "NumericCell",
    "RawCell",
    "Cell",

    # I/O
    "InputSource",
    "ConsoleInput",
    "ScriptedInput",
    "OutputSink",
    "console_output",

    # Events
    "ProcessorState",
    "StopReason",
    "StopEvent",

    # Dumps
    "render_registers",
    "render_memory",
    "render_dump",
]
