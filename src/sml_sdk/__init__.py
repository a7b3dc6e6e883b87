"""
SML SDK - Assembler and Virtual Machine for the Symbolic Machine Language
=========================================================================

This package provides a toolchain for SML, a small teaching machine: a
100-word memory of signed 4-digit decimal words and a single accumulator.

An instruction word is opcode * 100 + operand. Programs are written in a
symbolic form with named variables and labels, assembled to a .mach machine
image, and executed by the emulator.

Main Components
---------------
- **assembler**: Two-pass SML assembler (smlasm)
    Converts source files (.sml) to machine images (.mach)

- **emulator**: SML virtual machine (smlrun)
    Loads machine images and executes them, with single-step dumps

- **disassembler**: Machine word decoder (smldisasm)
    Lists .mach files as instructions and regenerates source

- **mach**: Machine image format shared by the tools

Quick Start
-----------
Assemble a program:
    >>> from sml_sdk.assembler import Assembler
    >>> asm = Assembler()
    >>> program = asm.assemble_file("sum.sml")
    >>> asm.write_mach("sum.mach")

Run it:
    >>> from sml_sdk.emulator import Emulator
    >>> emu = Emulator()
    >>> emu.load_file("sum.mach")
    >>> emu.run()

Or use the command-line tools:
    $ smlasm sum.sml -o sum.mach
    $ smlrun sum.mach
    $ smldisasm sum.mach

Version History
---------------
1.0.0 - Initial release with assembler, emulator and disassembler
"""

__version__ = "1.0.0"
__author__ = "Hugo José Pinto & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================
# These are the main classes and functions that users of the library will use.
# We import them here so they can be accessed directly from sml_sdk.
# =============================================================================

from sml_sdk.assembler import Assembler, assemble, assemble_file
from sml_sdk.emulator import Emulator, ProcessorState, StopReason, StopEvent
from sml_sdk.disassembler import SMLDisassembler
from sml_sdk.mach import MachineImage, load_mach, parse_mach
from sml_sdk.config import MachineConfig, get_default_config, set_default_config
from sml_sdk.errors import (
    SMLError,
    SourceLocation,
    AssemblerError,
    AssemblySyntaxError,
    UnknownMnemonicError,
    UndefinedSymbolError,
    MachFormatError,
    EmulatorError,
    AddressError,
    RuntimeFault,
    ArithmeticOverflowError,
    ModuloByZeroError,
    InputRangeError,
    InputExhaustedError,
    NonNumericValueError,
    InvalidInstructionError,
)

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Main classes
    "Assembler",
    "assemble",
    "assemble_file",
    "Emulator",
    "ProcessorState",
    "StopReason",
    "StopEvent",
    "SMLDisassembler",
    "MachineImage",
    "load_mach",
    "parse_mach",
    # Configuration
    "MachineConfig",
    "get_default_config",
    "set_default_config",
    # Exceptions
    "SMLError",
    "SourceLocation",
    "AssemblerError",
    "AssemblySyntaxError",
    "UnknownMnemonicError",
    "UndefinedSymbolError",
    "MachFormatError",
    "EmulatorError",
    "AddressError",
    "RuntimeFault",
    "ArithmeticOverflowError",
    "ModuloByZeroError",
    "InputRangeError",
    "InputExhaustedError",
    "NonNumericValueError",
    "InvalidInstructionError",
]
