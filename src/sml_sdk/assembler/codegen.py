"""
SML Code Generator
==================

This module turns classified SML source lines into 4-digit machine words.
It implements a two-pass assembly process over an immutable line list.

Pass 1 (Declarations and Labels)
--------------------------------
- First scan: allocate data addresses to variables in first-declaration
  order, starting at 0. Re-declarations are ignored.
- The instruction origin is the number of distinct variables.
- Second scan: bind each label to the current instruction address, starting
  at the origin and counting one address per instruction line.

Both scans finish before any operand is resolved, so an instruction may
refer to a label defined further down the source.

Pass 2 (Encoding)
-----------------
- Resolve each mnemonic against the opcode table (case-insensitive).
  Unknown mnemonics are collected as errors; any error poisons the whole
  assembly and no machine code is returned.
- Resolve operands in priority order: literal number, label, variable.
  An unresolved operand is a warning and encodes as 0, unless strict symbol
  checking is enabled.
- Encode as opcode * 100 + operand.

State
-----
All tables live in an AssemblyContext created for each generate() call.
Nothing is kept in module globals, so independent assemblies never share
state.
"""

from dataclasses import dataclass, field
from difflib import get_close_matches
from pathlib import Path
from typing import Optional
import logging

from sml_sdk.assembler.lexer import Lexer, LineKind, SourceLine
from sml_sdk.cpu import (
    MNEMONICS,
    OPERAND_MAX,
    encode,
    format_word,
    get_instruction_info,
    get_opcode,
    in_word_range,
)
from sml_sdk.errors import (
    AssemblerError,
    AssemblySyntaxError,
    ErrorCollector,
    SourceLocation,
    UndefinedSymbolError,
    UnknownMnemonicError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Symbol and Label Tables
# =============================================================================

@dataclass(frozen=True)
class Symbol:
    """
    Variable symbol table entry.

    Attributes:
        name: Variable name
        address: Data address (0-based, first-declaration order)
        initial_value: Value stored at the address before execution
        location: Where the variable was first declared
    """
    name: str
    address: int
    initial_value: int = 0
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class Label:
    """
    Label table entry.

    Attributes:
        name: Label name
        address: Instruction address the label marks
        location: Where the label was (last) defined
    """
    name: str
    address: int
    location: Optional[SourceLocation] = None


@dataclass(frozen=True)
class EncodedInstruction:
    """
    One assembled instruction.

    Attributes:
        address: Instruction address
        word: Encoded value (opcode * 100 + operand)
        opcode: Operation code
        operand: Resolved operand
        line: The source line the instruction came from
        resolved_from: How the operand was resolved: "literal", "label",
                       "variable", "undefined", or None when the opcode
                       takes no operand
    """
    address: int
    word: int
    opcode: int
    operand: int
    line: SourceLine
    resolved_from: Optional[str] = None

    @property
    def text(self) -> str:
        """The 4-digit word as written to a machine image."""
        return format_word(self.word)


@dataclass
class AssemblyContext:
    """
    Mutable state threaded through the two passes of one assembly.

    Attributes:
        lines: The classified source lines (never modified)
        symbols: Variable name -> Symbol, in declaration order
        labels: Label name -> Label
        instruction_origin: First instruction address
        instructions: Encoded instructions in source order
        errors: Errors and warnings collected so far
        strict_symbols: Treat undefined operands as errors
    """
    lines: list[SourceLine]
    symbols: dict[str, Symbol] = field(default_factory=dict)
    labels: dict[str, Label] = field(default_factory=dict)
    instruction_origin: int = 0
    instructions: list[EncodedInstruction] = field(default_factory=list)
    errors: ErrorCollector = field(default_factory=ErrorCollector)
    strict_symbols: bool = False

    def warn(self, message: str, location: Optional[SourceLocation] = None) -> None:
        """Record and log an assembly warning."""
        if location is not None:
            message = f"{location}: warning: {message}"
        logger.warning(message)
        self.errors.add_warning(message)


# =============================================================================
# Assembled Program
# =============================================================================

@dataclass
class AssembledProgram:
    """
    The result of a successful assembly.

    Attributes:
        symbols: Variable name -> Symbol, in declaration order
        labels: Label name -> Label
        instruction_origin: Address of the first instruction
        instructions: Encoded instructions, aligned with addresses starting
                      at instruction_origin
        warnings: Warnings reported during assembly
        filename: Source name
    """
    symbols: dict[str, Symbol]
    labels: dict[str, Label]
    instruction_origin: int
    instructions: list[EncodedInstruction]
    warnings: list[str] = field(default_factory=list)
    filename: str = "<input>"

    @property
    def data_words(self) -> list[str]:
        """Initial values of the data region, in address order."""
        ordered = sorted(self.symbols.values(), key=lambda s: s.address)
        return [format_word(s.initial_value) for s in ordered]

    @property
    def code_words(self) -> list[str]:
        """Encoded instruction words, in address order."""
        return [inst.text for inst in self.instructions]

    @property
    def size(self) -> int:
        """Total words occupied by data and instructions."""
        return self.instruction_origin + len(self.instructions)

    def to_image(self):
        """
        Build the machine image for this program.

        Returns:
            MachineImage with the data region followed by the instructions
        """
        from sml_sdk.mach import MachineImage

        ordered = sorted(self.symbols.values(), key=lambda s: s.address)
        return MachineImage(
            words=self.data_words + self.code_words,
            instruction_origin=self.instruction_origin,
            names={s.address: s.name for s in ordered},
        )


# =============================================================================
# Code Generator
# =============================================================================

class CodeGenerator:
    """
    Generates SML machine words from source text.

    Usage:
        codegen = CodeGenerator()
        program = codegen.generate_source("x 5\\nLOAD x\\nHALT\\n")
        print(program.code_words)
    """

    def __init__(self, strict_symbols: bool = False):
        """
        Initialize the code generator.

        Args:
            strict_symbols: If True, an undefined operand symbol is an
                            error instead of a warning with operand 0
        """
        self.strict_symbols = strict_symbols
        self._program: Optional[AssembledProgram] = None
        self._context: Optional[AssemblyContext] = None

    # =========================================================================
    # Public Interface
    # =========================================================================

    def generate_source(self, source: str, filename: str = "<input>") -> AssembledProgram:
        """
        Classify and assemble source text.

        Raises:
            AssemblerError: If any line fails to classify or encode
        """
        lexer = Lexer(source, filename)
        errors = ErrorCollector()
        lines: list[SourceLine] = []

        for number, raw in enumerate(source.splitlines(), start=1):
            try:
                lines.append(lexer.classify(raw, number))
            except AssemblerError as e:
                errors.add(e)

        if errors.has_errors():
            raise AssemblerError(
                f"Assembly failed with {errors.error_count()} errors:\n\n"
                f"{errors.report()}"
            )

        return self.generate(lines, filename)

    def generate(self, lines: list[SourceLine], filename: str = "<input>") -> AssembledProgram:
        """
        Assemble classified source lines.

        This is the main entry point for code generation.

        Args:
            lines: Classified source lines, in source order
            filename: Source name recorded in the result

        Returns:
            The assembled program

        Raises:
            AssemblerError: If any error was collected; no partial output
        """
        context = AssemblyContext(lines=list(lines), strict_symbols=self.strict_symbols)
        self._context = context
        self._program = None

        self._pass1(context)
        logger.debug(
            f"Pass 1: {len(context.symbols)} variables, {len(context.labels)} labels, "
            f"instruction origin {context.instruction_origin}"
        )

        self._pass2(context)

        if context.errors.has_errors():
            raise AssemblerError(
                f"Assembly failed with {context.errors.error_count()} errors:\n\n"
                f"{context.errors.report()}"
            )

        logger.debug(f"Pass 2: encoded {len(context.instructions)} instructions")

        self._program = AssembledProgram(
            symbols=dict(context.symbols),
            labels=dict(context.labels),
            instruction_origin=context.instruction_origin,
            instructions=list(context.instructions),
            warnings=list(context.errors.warnings),
            filename=filename,
        )
        return self._program

    def get_program(self) -> Optional[AssembledProgram]:
        """Return the last successfully assembled program, if any."""
        return self._program

    def get_warnings(self) -> list[str]:
        """Return warnings from the last assembly attempt."""
        if self._context is None:
            return []
        return list(self._context.errors.warnings)

    def get_listing(self) -> str:
        """
        Get the assembly listing as a string.

        Returns:
            The listing showing addresses, words and source lines, followed
            by the symbol and label tables
        """
        program = self._require_program()
        lines = []
        lines.append("SML Assembler Listing")
        lines.append("=" * 60)
        lines.append("")
        lines.append("Addr  Word   Line  Source")
        lines.append("-" * 60)
        ordered = sorted(program.symbols.values(), key=lambda s: s.address)
        for sym in ordered:
            line_no = sym.location.line if sym.location else 0
            lines.append(
                f"{sym.address:02d}    {format_word(sym.initial_value):6s} "
                f"{line_no:4d}  {sym.name}"
            )
        for inst in program.instructions:
            lines.append(
                f"{inst.address:02d}    {inst.text:6s} "
                f"{inst.line.location.line:4d}  {inst.line.text}"
            )
        lines.append("")
        lines.append(format_tables(program))
        return "\n".join(lines)

    def write_listing(self, filepath: str | Path) -> None:
        """Write the assembly listing to a file."""
        Path(filepath).write_text(self.get_listing() + "\n")

    def write_symbols(self, filepath: str | Path) -> None:
        """
        Write symbol table file.

        Format: one "name address" pair per line, variables then labels.
        """
        program = self._require_program()
        with open(filepath, "w") as f:
            f.write("# Symbol table\n")
            f.write("# Generated by smlasm\n")
            for sym in sorted(program.symbols.values(), key=lambda s: s.address):
                f.write(f"{sym.name} {sym.address:02d}\n")
            f.write("# Labels\n")
            for label in sorted(program.labels.values(), key=lambda l: l.address):
                f.write(f"{label.name} {label.address:02d}\n")

    # =========================================================================
    # Pass 1
    # =========================================================================

    def _pass1(self, context: AssemblyContext) -> None:
        """Allocate variable addresses, then bind labels."""
        for line in context.lines:
            if line.kind is LineKind.VARIABLE:
                self._declare_variable(context, line)

        context.instruction_origin = len(context.symbols)

        address = context.instruction_origin
        for line in context.lines:
            if line.kind is LineKind.LABEL:
                self._define_label(context, line, address)
            elif line.kind is LineKind.INSTRUCTION:
                address += 1

    def _declare_variable(self, context: AssemblyContext, line: SourceLine) -> None:
        """Add a variable on its first declaration."""
        name = line.name
        if name in context.symbols:
            logger.debug(f"{line.location}: variable '{name}' already declared, ignored")
            return

        if not in_word_range(line.value):
            context.errors.add(AssemblySyntaxError(
                f"initial value {line.value} of '{name}' is outside -9999..9999",
                location=line.location,
                source_line=line.raw.rstrip(),
            ))
            return

        context.symbols[name] = Symbol(
            name=name,
            address=len(context.symbols),
            initial_value=line.value,
            location=line.location,
        )

    def _define_label(self, context: AssemblyContext, line: SourceLine, address: int) -> None:
        """Bind a label to an instruction address; later definitions win."""
        name = line.name
        existing = context.labels.get(name)
        if existing is not None:
            context.warn(
                f"label '{name}' redefined (was {existing.address:02d}, now {address:02d})",
                line.location,
            )
        context.labels[name] = Label(name=name, address=address, location=line.location)

    # =========================================================================
    # Pass 2
    # =========================================================================

    def _pass2(self, context: AssemblyContext) -> None:
        """Encode every instruction line."""
        address = context.instruction_origin
        for line in context.lines:
            if line.kind is not LineKind.INSTRUCTION:
                continue
            try:
                context.instructions.append(self._encode_instruction(context, line, address))
            except AssemblerError as e:
                context.errors.add(e)
            address += 1

    def _encode_instruction(
        self, context: AssemblyContext, line: SourceLine, address: int
    ) -> EncodedInstruction:
        """Encode one instruction line."""
        opcode = get_opcode(line.mnemonic)
        if opcode is None:
            raise UnknownMnemonicError(
                line.mnemonic,
                location=line.location,
                source_line=line.raw.rstrip(),
                similar=get_close_matches(line.mnemonic.upper(), sorted(MNEMONICS), n=3),
            )

        info = get_instruction_info(opcode)

        if line.extra:
            context.warn(
                f"extra tokens after operand ignored: {' '.join(line.extra)}",
                line.location,
            )

        if not info.has_operand:
            return EncodedInstruction(address, encode(opcode, 0), int(opcode), 0, line)

        if line.operand is None:
            raise AssemblySyntaxError(
                f"'{info.mnemonic}' requires an operand",
                location=line.location,
                source_line=line.raw.rstrip(),
            )

        operand, resolved_from = self._resolve_operand(context, line)
        word = encode(opcode, operand)
        if not in_word_range(word):
            raise AssemblySyntaxError(
                f"operand {operand} makes word {word} wider than four digits",
                location=line.location,
                source_line=line.raw.rstrip(),
                hint=f"'{info.mnemonic}' takes an operand of 0-{OPERAND_MAX}",
            )
        if operand > OPERAND_MAX:
            context.warn(
                f"operand {operand} does not fit in two digits; word overflows",
                line.location,
            )

        return EncodedInstruction(
            address, word, int(opcode), operand, line, resolved_from
        )

    def _resolve_operand(self, context: AssemblyContext, line: SourceLine) -> tuple[int, str]:
        """
        Resolve an operand token.

        Priority: literal non-negative integer, label, variable.

        Returns:
            (operand value, how it was resolved)
        """
        token = line.operand

        if token.isascii() and token.isdigit():
            return int(token), "literal"

        if token in context.labels:
            return context.labels[token].address, "label"

        if token in context.symbols:
            return context.symbols[token].address, "variable"

        if context.strict_symbols:
            known = list(context.labels) + list(context.symbols)
            raise UndefinedSymbolError(
                token,
                location=line.location,
                source_line=line.raw.rstrip(),
                similar_symbols=get_close_matches(token, known, n=3),
            )

        context.warn(f"undefined symbol '{token}', using operand 0", line.location)
        return 0, "undefined"

    def _require_program(self) -> AssembledProgram:
        if self._program is None:
            raise AssemblerError("no program has been assembled")
        return self._program


# =============================================================================
# Table Formatting
# =============================================================================

def format_tables(program: AssembledProgram) -> str:
    """
    Format the symbol and label tables for display.

    Returns:
        Two indented tables, "Symbol Table:" then "Label Table:"
    """
    lines = ["Symbol Table:"]
    for sym in sorted(program.symbols.values(), key=lambda s: s.address):
        lines.append(f"  {sym.name} -> {sym.address}")
    lines.append("")
    lines.append("Label Table:")
    for label in sorted(program.labels.values(), key=lambda l: l.address):
        lines.append(f"  {label.name} -> {label.address}")
    return "\n".join(lines)
