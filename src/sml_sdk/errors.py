"""
SML SDK Error Hierarchy
=======================

This module defines the exception hierarchy for the entire SML SDK.
All exceptions inherit from SMLError, allowing callers to catch all
SDK-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
SMLError (base)
├── AssemblerError (assembler-related, poisons the whole compilation)
│   ├── AssemblySyntaxError - malformed source line or missing operand
│   ├── UnknownMnemonicError - instruction mnemonic not in the opcode table
│   ├── UndefinedSymbolError - operand symbol not found (strict mode only)
│   └── TooManyErrors - error collector limit reached
├── MachFormatError (machine image files)
└── EmulatorError (virtual machine)
    ├── AddressError - memory address outside capacity
    └── RuntimeFault - terminal to execution
        ├── ArithmeticOverflowError - result outside [-9999, 9999]
        ├── ModuloByZeroError - MOD/MODI with a zero divisor
        ├── InputRangeError - READ value outside [-9999, 9999]
        ├── InputExhaustedError - READ with no input left
        ├── NonNumericValueError - arithmetic on a raw memory cell
        └── InvalidInstructionError - raw token fetched as an instruction

Warnings
--------
Not every problem stops the toolchain. Undefined operand symbols (outside
strict mode), label redefinitions, unknown opcodes and division by zero are
reported as warnings: logged through the ``logging`` module and collected as
strings, as the ErrorCollector does for the assembler.

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass
from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SMLError(Exception):
    """
    Base exception for all SML SDK errors.

    All exceptions in the SDK inherit from this class, allowing callers
    to catch all SDK-related errors with a single except clause:

        try:
            assembler.assemble_file("program.sml")
        except SMLError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in source code for error reporting.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


# =============================================================================
# Assembler Exceptions
# =============================================================================

class AssemblerError(SMLError):
    """
    Base exception for all assembler-related errors.

    Attributes:
        message: The error description
        location: Where in the source the error occurred (optional)
        hint: A suggestion for fixing the error (optional)
        source_line: The actual source text at the error location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            loop.sml:7:1: error: unknown instruction 'LODA'
                LODA x
                ^
            hint: did you mean 'LOAD'?
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class AssemblySyntaxError(AssemblerError):
    """
    Syntax error in SML source code.

    Examples:
        - Label definition with an empty name (a lone ':')
        - Operand-bearing instruction written without its operand
        - Variable initial value outside the word range
    """
    pass


class UnknownMnemonicError(AssemblerError):
    """
    Instruction mnemonic not found in the opcode table.

    Raised during the encoding pass. A single unknown mnemonic poisons the
    whole compilation: no machine code is emitted.
    """

    def __init__(
        self,
        mnemonic: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar: Optional[list[str]] = None,
    ):
        self.mnemonic = mnemonic
        self.similar = similar or []

        hint = None
        if self.similar:
            suggestions = ", ".join(f"'{s}'" for s in self.similar[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"unknown instruction '{mnemonic}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndefinedSymbolError(AssemblerError):
    """
    Reference to an undefined symbol (label or variable).

    By default the assembler only warns about undefined operands and
    substitutes 0. This error is raised instead when strict symbol checking
    is enabled.
    """

    def __init__(
        self,
        symbol: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        similar_symbols: Optional[list[str]] = None,
    ):
        self.symbol = symbol
        self.similar_symbols = similar_symbols or []

        hint = None
        if self.similar_symbols:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_symbols[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undefined symbol '{symbol}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


# =============================================================================
# Machine Image Exceptions
# =============================================================================

class MachFormatError(SMLError):
    """
    Invalid machine image.

    Raised when a .mach file cannot be loaded, for example when it holds
    more words than the target memory can store.
    """
    pass


# =============================================================================
# Emulator Exceptions
# =============================================================================

class EmulatorError(SMLError):
    """Base exception for virtual machine errors."""
    pass


class AddressError(EmulatorError):
    """
    Memory address outside the memory capacity.

    Attributes:
        address: The offending address
        size: Memory capacity in words
    """

    def __init__(self, address: int, size: int):
        self.address = address
        self.size = size
        super().__init__(f"address {address} outside memory (0-{size - 1})")


class RuntimeFault(EmulatorError):
    """
    Unrecoverable condition during execution.

    A fault is terminal: the processor enters the FAULTED state and the
    instruction that caused it leaves the accumulator and memory untouched.
    Faults are never caught or retried by the emulator core.

    Attributes:
        message: The fault description
        pc: Program counter of the faulting instruction (optional)
        opcode: Opcode of the faulting instruction (optional)
    """

    def __init__(
        self,
        message: str,
        pc: Optional[int] = None,
        opcode: Optional[int] = None,
    ):
        self.message = message
        self.pc = pc
        self.opcode = opcode
        if pc is not None:
            super().__init__(f"{message} (pc={pc:02d})")
        else:
            super().__init__(message)


class ArithmeticOverflowError(RuntimeFault):
    """
    Arithmetic result outside [-9999, 9999].

    Raised by ADD, SUBT, MULT and DIV (memory and immediate forms).
    """

    def __init__(self, result: int, pc: Optional[int] = None,
                 opcode: Optional[int] = None):
        self.result = result
        limit = "upper" if result > 0 else "lower"
        super().__init__(
            f"result {result} exceeds {limit} value limit", pc=pc, opcode=opcode
        )


class ModuloByZeroError(RuntimeFault):
    """
    MOD or MODI with a zero divisor.

    Unlike division by zero, which yields 0 and continues, modulo by zero
    terminates execution.
    """

    def __init__(self, pc: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__("modulo by zero", pc=pc, opcode=opcode)


class InputRangeError(RuntimeFault):
    """READ received a number outside [-9999, 9999]."""

    def __init__(self, value: int, pc: Optional[int] = None):
        self.value = value
        super().__init__(f"input {value} exceeds value limits", pc=pc, opcode=10)


class InputExhaustedError(RuntimeFault):
    """READ executed but the input source has no more values."""

    def __init__(self, pc: Optional[int] = None):
        super().__init__("no input available for READ", pc=pc, opcode=10)


class NonNumericValueError(RuntimeFault):
    """
    Numeric operation on a raw (non-numeric) memory cell.

    READ may store arbitrary tokens in memory. Only WRITE can consume them;
    loading them into the accumulator or using them in arithmetic faults.
    """

    def __init__(self, address: int, token: str, pc: Optional[int] = None,
                 opcode: Optional[int] = None):
        self.address = address
        self.token = token
        super().__init__(
            f"memory[{address:02d}] holds non-numeric value {token!r}",
            pc=pc,
            opcode=opcode,
        )


class InvalidInstructionError(RuntimeFault):
    """A raw token was fetched where an instruction word was expected."""

    def __init__(self, token: str, pc: Optional[int] = None):
        self.token = token
        super().__init__(f"cannot execute non-numeric word {token!r}", pc=pc)


# =============================================================================
# Error Collection for Multiple Error Reporting
# =============================================================================

class ErrorCollector:
    """
    Collects multiple errors and warnings for batch reporting.

    The assembler uses this to keep encoding after an error so that all
    problems in a source file are reported together. Any collected error
    still poisons the compilation.

    Example:
        collector = ErrorCollector(max_errors=100)
        collector.add(UnknownMnemonicError("LODA", location))
        collector.add_warning("undefined symbol 'z', using 0")

        if collector.has_errors():
            print(collector.report())
    """

    def __init__(self, max_errors: int = 100):
        """
        Initialize the error collector.

        Args:
            max_errors: Maximum errors to collect before raising TooManyErrors
        """
        self.errors: list[AssemblerError] = []
        self.warnings: list[str] = []
        self.max_errors = max_errors

    def add(self, error: AssemblerError) -> None:
        """
        Add an error to the collection.

        Raises:
            TooManyErrors: If max_errors has been reached
        """
        self.errors.append(error)
        if len(self.errors) >= self.max_errors:
            raise TooManyErrors(
                f"Too many errors ({self.max_errors}), stopping\n\n{self.report()}"
            )

    def add_warning(self, message: str) -> None:
        """Add a warning message."""
        self.warnings.append(message)

    def has_errors(self) -> bool:
        """Return True if any errors have been collected."""
        return len(self.errors) > 0

    def error_count(self) -> int:
        """Return the number of collected errors."""
        return len(self.errors)

    def report(self) -> str:
        """
        Format all errors and warnings for display.

        Returns:
            Formatted string with all errors and warnings
        """
        lines = []

        for error in self.errors:
            lines.append(str(error))
            lines.append("")

        if self.warnings:
            lines.append("Warnings:")
            for warning in self.warnings:
                lines.append(f"  {warning}")

        error_word = "error" if len(self.errors) == 1 else "errors"
        warning_word = "warning" if len(self.warnings) == 1 else "warnings"
        lines.append(
            f"\n{len(self.errors)} {error_word}, {len(self.warnings)} {warning_word}"
        )

        return "\n".join(lines)


class TooManyErrors(AssemblerError):
    """Raised when too many errors have been encountered."""

    def __init__(self, message: str = "Too many errors"):
        super().__init__(message)
