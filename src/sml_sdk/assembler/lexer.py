"""
SML Source Line Lexer
=====================

This module classifies SML source lines. SML is strictly line oriented:
each line is classified on its own into exactly one kind, and the
assembler's passes then filter lines by kind.

Line Kinds
----------
| Kind        | Syntax                                | Example      |
|-------------|---------------------------------------|--------------|
| BLANK       | empty or whitespace only              |              |
| COMMENT     | starts with //                        | // loop body |
| LABEL       | identifier followed by a colon        | loop:        |
| VARIABLE    | name = integer                        | x = -5       |
|             | name integer (name not a mnemonic)    | y 3          |
|             | bare name (not a mnemonic)            | total        |
| INSTRUCTION | anything else: mnemonic [operand]     | ADD y        |

Classification is total and mutually exclusive; INSTRUCTION is the
fallback, so a misspelled mnemonic followed by an operand is reported later
by the encoding pass as an unknown instruction.

A trailing "// comment" is removed from any line before it is classified.
Mnemonics are matched case-insensitively; names are case-sensitive.

Example
-------
>>> from sml_sdk.assembler.lexer import Lexer
>>> for line in Lexer("x = 5\\nloop:\\n  LOAD x\\n", "example.sml").lines():
...     print(line.kind.name, line.name or line.mnemonic)
VARIABLE x
LABEL loop
INSTRUCTION LOAD
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import re

from sml_sdk.cpu import is_mnemonic
from sml_sdk.errors import AssemblySyntaxError, SourceLocation


COMMENT_PREFIX = "//"

_IDENTIFIER = r"[A-Za-z_][A-Za-z0-9_]*"
_ASSIGN_RE = re.compile(rf"({_IDENTIFIER})\s*=\s*([+-]?[0-9]+)")
_PAIR_RE = re.compile(rf"({_IDENTIFIER})\s+([+-]?[0-9]+)")
_BARE_RE = re.compile(_IDENTIFIER)


class LineKind(Enum):
    """Classification of a single source line."""
    BLANK = auto()
    COMMENT = auto()
    LABEL = auto()
    VARIABLE = auto()
    INSTRUCTION = auto()


@dataclass(frozen=True)
class SourceLine:
    """
    A classified source line.

    Attributes:
        kind: The line classification
        text: Line text with surrounding whitespace and trailing comment removed
        location: Position of the first non-blank character
        raw: The line exactly as it appeared in the source
        name: Label or variable name (LABEL and VARIABLE lines)
        value: Initial value (VARIABLE lines, 0 for a bare declaration)
        mnemonic: Mnemonic as written (INSTRUCTION lines)
        operand: Operand token, or None (INSTRUCTION lines)
        extra: Tokens after the operand (INSTRUCTION lines, ignored)
    """
    kind: LineKind
    text: str
    location: SourceLocation
    raw: str = ""
    name: Optional[str] = None
    value: int = 0
    mnemonic: Optional[str] = None
    operand: Optional[str] = None
    extra: tuple[str, ...] = ()

    @property
    def is_code(self) -> bool:
        """True for lines that occupy an instruction address."""
        return self.kind is LineKind.INSTRUCTION


def strip_comment(text: str) -> str:
    """Remove a trailing // comment and surrounding whitespace."""
    index = text.find(COMMENT_PREFIX)
    if index >= 0:
        text = text[:index]
    return text.strip()


def is_variable_declaration(text: str) -> bool:
    """
    Check if trimmed, comment-free text declares a variable.

    Reserved mnemonics cannot be declared with the "name value" or bare
    forms; "LOADI 5" is an instruction, not a variable named LOADI.
    """
    if _ASSIGN_RE.fullmatch(text):
        return True
    match = _PAIR_RE.fullmatch(text)
    if match:
        return not is_mnemonic(match.group(1))
    if _BARE_RE.fullmatch(text):
        return not is_mnemonic(text)
    return False


class Lexer:
    """
    Line classifier for SML source code.

    Attributes:
        source: The complete source text
        filename: Name used in source locations
    """

    def __init__(self, source: str, filename: str = "<input>"):
        """
        Initialize the lexer.

        Args:
            source: SML source text
            filename: Name used in error messages
        """
        self.source = source
        self.filename = filename

    def lines(self) -> Iterator[SourceLine]:
        """
        Classify every source line in order.

        Yields:
            One SourceLine per physical line, including blanks and comments

        Raises:
            AssemblySyntaxError: On a label definition with an empty name
        """
        for number, raw in enumerate(self.source.splitlines(), start=1):
            yield self.classify(raw, number)

    def classify(self, raw: str, line_number: int = 1) -> SourceLine:
        """
        Classify one line of source.

        Args:
            raw: The line as written
            line_number: 1-based line number for the source location

        Returns:
            The classified SourceLine
        """
        stripped = raw.strip()
        column = len(raw) - len(raw.lstrip()) + 1
        location = SourceLocation(self.filename, line_number, column)

        if not stripped:
            return SourceLine(LineKind.BLANK, "", location, raw)

        if stripped.startswith(COMMENT_PREFIX):
            return SourceLine(LineKind.COMMENT, stripped, location, raw)

        text = strip_comment(stripped)
        if not text:
            return SourceLine(LineKind.COMMENT, stripped, location, raw)

        if text.endswith(":"):
            name = text[:-1].strip()
            if not name:
                raise AssemblySyntaxError(
                    "label definition without a name",
                    location=location,
                    source_line=raw.rstrip(),
                )
            return SourceLine(LineKind.LABEL, text, location, raw, name=name)

        if is_variable_declaration(text):
            match = _ASSIGN_RE.fullmatch(text) or _PAIR_RE.fullmatch(text)
            if match:
                return SourceLine(
                    LineKind.VARIABLE, text, location, raw,
                    name=match.group(1), value=int(match.group(2)),
                )
            return SourceLine(LineKind.VARIABLE, text, location, raw, name=text)

        tokens = text.split()
        return SourceLine(
            LineKind.INSTRUCTION, text, location, raw,
            mnemonic=tokens[0],
            operand=tokens[1] if len(tokens) > 1 else None,
            extra=tuple(tokens[2:]),
        )


def classify_source(source: str, filename: str = "<input>") -> list[SourceLine]:
    """
    Classify all lines of a source text.

    Args:
        source: SML source text
        filename: Name used in error messages

    Returns:
        List of classified lines, one per physical line
    """
    return list(Lexer(source, filename).lines())
