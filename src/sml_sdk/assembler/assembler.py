"""
SML Assembler - Main Interface
==============================

This module provides the main Assembler class, which is the primary interface
for assembling SML source code. It coordinates the line classifier and the
two-pass code generator to produce a machine image.

Example Usage
-------------
>>> from sml_sdk.assembler import Assembler
>>>
>>> # Create assembler instance
>>> asm = Assembler()
>>>
>>> # Assemble from string
>>> asm.assemble_string('''
... x = 5
... y = 3
...     LOAD x
...     ADD y
...     STORE x
...     HALT
... ''')
>>>
>>> # Get generated words
>>> print(asm.get_code())
['0005', '0003', '2000', '3001', '2100', '4300']
>>>
>>> # Write the machine image
>>> asm.write_mach("sum.mach")

Command-Line Usage
------------------
The assembler can also be invoked from the command line:

    $ smlasm sum.sml -o sum.mach -l sum.lst -s sum.sym

Options:
    -o, --output FILE      Output .mach file
    -l, --listing FILE     Generate listing file
    -s, --symbols FILE     Generate symbol file
    --strict               Undefined operand symbols are errors
    -r, --run              Run the program after assembling
    -S, --step             Single-step the program after assembling
    -v, --verbose          Verbose output
"""

from pathlib import Path
from typing import Optional

from sml_sdk.assembler.codegen import AssembledProgram, CodeGenerator, format_tables
from sml_sdk.config import get_default_config
from sml_sdk.errors import AssemblerError


class Assembler:
    """
    Main SML assembler class.

    This class provides a high-level interface for assembling SML source
    code into a machine image.

    Attributes:
        verbose: If True, print progress messages
        strict_symbols: If True, undefined operand symbols are errors
    """

    def __init__(self, verbose: bool = False, strict_symbols: Optional[bool] = None):
        """
        Initialize the assembler.

        Args:
            verbose: Enable verbose output
            strict_symbols: Treat undefined operand symbols as errors.
                            If None, uses the default configuration.
        """
        if strict_symbols is None:
            strict_symbols = get_default_config().strict_symbols
        self._verbose = verbose
        self._strict_symbols = strict_symbols
        self._codegen = CodeGenerator(strict_symbols=strict_symbols)

    @property
    def verbose(self) -> bool:
        return self._verbose

    @property
    def strict_symbols(self) -> bool:
        return self._strict_symbols

    def assemble_string(self, source: str, filename: str = "<input>") -> AssembledProgram:
        """
        Assemble source code from a string.

        Args:
            source: SML source code
            filename: Virtual filename for error messages

        Returns:
            The assembled program

        Raises:
            AssemblerError: If assembly fails
        """
        if self._verbose:
            print(f"Assembling {filename}...")

        program = self._codegen.generate_source(source, filename)

        if self._verbose:
            print(f"Allocated {len(program.symbols)} variables, "
                  f"instructions start at {program.instruction_origin}")
            print(f"Generated {len(program.instructions)} instructions")

        return program

    def assemble_file(self, filepath: str | Path) -> AssembledProgram:
        """
        Assemble source code from a file.

        Args:
            filepath: Path to SML source file

        Returns:
            The assembled program

        Raises:
            AssemblerError: If assembly fails
            FileNotFoundError: If source file not found
        """
        filepath = Path(filepath)
        return self.assemble_string(filepath.read_text(), str(filepath))

    # =========================================================================
    # Output Methods
    # =========================================================================

    def get_program(self) -> Optional[AssembledProgram]:
        """Return the last assembled program (None before a success)."""
        return self._codegen.get_program()

    def get_code(self) -> list[str]:
        """
        Get the generated machine image words.

        Returns:
            Data words followed by instruction words, from address 0
        """
        return self._require().to_image().words

    def get_origin(self) -> int:
        """
        Get the instruction origin.

        Returns:
            Address of the first instruction (the number of variables)
        """
        return self._require().instruction_origin

    def get_symbols(self) -> dict[str, int]:
        """
        Get the variable table.

        Returns:
            Dictionary mapping variable names to data addresses
        """
        return {name: sym.address for name, sym in self._require().symbols.items()}

    def get_labels(self) -> dict[str, int]:
        """
        Get the label table.

        Returns:
            Dictionary mapping label names to instruction addresses
        """
        return {name: label.address for name, label in self._require().labels.items()}

    def get_tables(self) -> str:
        """Get the symbol and label tables formatted for display."""
        return format_tables(self._require())

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            Assembly listing with addresses, words and source
        """
        return self._codegen.get_listing()

    def get_warnings(self) -> list[str]:
        """Get warnings from the last assembly."""
        return self._codegen.get_warnings()

    def write_mach(self, filepath: str | Path) -> None:
        """
        Write the machine image (.mach) file.

        Args:
            filepath: Output file path
        """
        self._require().to_image().write(filepath)

        if self._verbose:
            print(f"Wrote {filepath}")

    def write_listing(self, filepath: str | Path) -> None:
        """
        Write assembly listing file.

        The listing file shows:
        - Addresses
        - Generated words
        - Source lines
        - Symbol and label tables

        Args:
            filepath: Output file path
        """
        self._codegen.write_listing(filepath)

        if self._verbose:
            print(f"Wrote listing to {filepath}")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Args:
            filepath: Output file path
        """
        self._codegen.write_symbols(filepath)

        if self._verbose:
            print(f"Wrote symbols to {filepath}")

    def _require(self) -> AssembledProgram:
        program = self._codegen.get_program()
        if program is None:
            raise AssemblerError("no program has been assembled")
        return program


# =============================================================================
# Convenience Functions
# =============================================================================

def assemble(source: str, filename: str = "<input>",
             strict_symbols: bool = False) -> AssembledProgram:
    """
    Convenience function to assemble source code.

    Args:
        source: SML source code
        filename: Virtual filename for errors
        strict_symbols: Treat undefined operand symbols as errors

    Returns:
        The assembled program

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(strict_symbols=strict_symbols)
    return asm.assemble_string(source, filename)


def assemble_file(filepath: str | Path, strict_symbols: bool = False) -> AssembledProgram:
    """
    Convenience function to assemble a file.

    Args:
        filepath: Path to source file
        strict_symbols: Treat undefined operand symbols as errors

    Returns:
        The assembled program

    Raises:
        AssemblerError: If assembly fails
    """
    asm = Assembler(strict_symbols=strict_symbols)
    return asm.assemble_file(filepath)
