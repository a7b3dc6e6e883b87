"""
SML Instruction Set Definition
==============================

This module defines the SML instruction set: opcodes, mnemonics and the
4-digit word format shared by the assembler, the disassembler and the
emulator.

Word Format
-----------
Every instruction is a single decimal word of exactly four digits:

    opcode * 100 + operand

- opcode: two digits in the range 10-43
- operand: two digits in the range 0-99, either a memory address (direct
  instructions) or a literal value (immediate instructions)

Data words use the same width. A numeric word holds a signed value in the
range -9999 to 9999 and is written with four digits and a leading minus sign
when negative ("0042", "-0042").

Addressing
----------
- **Direct** instructions (LOAD, ADD, ...) dereference the operand:
  the value used is memory[operand].
- **Immediate** instructions (LOADI, ADDI, ...) use the operand itself.
- **Jumps** use the operand as the target instruction address.
- **HALT** takes no operand and always encodes operand 0.

Mnemonics
---------
Mnemonics are case-insensitive. Several opcodes have aliases (LOAD/LOADM,
JUMP/JMP, ...). The first name of each entry is the canonical name used by
the disassembler.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional
import re


# =============================================================================
# Word Limits
# =============================================================================

WORD_MIN = -9999
WORD_MAX = 9999
WORD_DIGITS = 4
OPERAND_MAX = 99

_WORD_PATTERN = re.compile(r"[+-]?[0-9]+")


# =============================================================================
# Opcodes
# =============================================================================

class Opcode(IntEnum):
    """SML operation codes."""
    READ = 10
    WRITE = 11
    LOAD = 20
    STORE = 21
    LOADI = 22
    ADD = 30
    SUBT = 31
    DIV = 32
    MOD = 33
    MULT = 34
    ADDI = 35
    SUBTI = 36
    DIVI = 37
    MODI = 38
    MULTI = 39
    JUMP = 40
    JUMPN = 41
    JUMPZ = 42
    HALT = 43


@dataclass(frozen=True)
class InstructionInfo:
    """
    Information about a single opcode.

    Attributes:
        opcode: The operation code
        mnemonic: Canonical mnemonic (used by the disassembler)
        aliases: All accepted mnemonics, canonical first
        has_operand: False only for HALT
        immediate: True if the operand is a literal value, not an address
        description: Short human-readable description
    """
    opcode: Opcode
    mnemonic: str
    aliases: tuple[str, ...]
    has_operand: bool
    immediate: bool
    description: str


def _info(opcode: Opcode, aliases: tuple[str, ...], description: str,
          has_operand: bool = True, immediate: bool = False) -> InstructionInfo:
    return InstructionInfo(
        opcode=opcode,
        mnemonic=aliases[0],
        aliases=aliases,
        has_operand=has_operand,
        immediate=immediate,
        description=description,
    )


# =============================================================================
# Opcode Table
# =============================================================================
# Key: opcode
# Value: InstructionInfo
# =============================================================================

OPCODE_TABLE: dict[int, InstructionInfo] = {
    # I/O
    Opcode.READ: _info(Opcode.READ, ("READ",), "read input into memory"),
    Opcode.WRITE: _info(Opcode.WRITE, ("WRITE",), "write memory to output"),

    # Load / store
    Opcode.LOAD: _info(Opcode.LOAD, ("LOAD", "LOADM"), "load memory into accumulator"),
    Opcode.STORE: _info(Opcode.STORE, ("STORE",), "store accumulator into memory"),
    Opcode.LOADI: _info(Opcode.LOADI, ("LOADI",), "load literal into accumulator",
                        immediate=True),

    # Arithmetic, memory operand
    Opcode.ADD: _info(Opcode.ADD, ("ADD", "ADDM"), "add memory"),
    Opcode.SUBT: _info(Opcode.SUBT, ("SUBT", "SUBTM"), "subtract memory"),
    Opcode.DIV: _info(Opcode.DIV, ("DIV", "DIVM"), "divide by memory"),
    Opcode.MOD: _info(Opcode.MOD, ("MOD", "MODM"), "remainder by memory"),
    Opcode.MULT: _info(Opcode.MULT, ("MULT", "MULTM"), "multiply by memory"),

    # Arithmetic, immediate operand
    Opcode.ADDI: _info(Opcode.ADDI, ("ADDI",), "add literal", immediate=True),
    Opcode.SUBTI: _info(Opcode.SUBTI, ("SUBTI",), "subtract literal", immediate=True),
    Opcode.DIVI: _info(Opcode.DIVI, ("DIVI",), "divide by literal", immediate=True),
    Opcode.MODI: _info(Opcode.MODI, ("MODI",), "remainder by literal", immediate=True),
    Opcode.MULTI: _info(Opcode.MULTI, ("MULTI",), "multiply by literal", immediate=True),

    # Control flow
    Opcode.JUMP: _info(Opcode.JUMP, ("JUMP", "JMP"), "jump"),
    Opcode.JUMPN: _info(Opcode.JUMPN, ("JUMPN", "JMPN"), "jump if accumulator < 0"),
    Opcode.JUMPZ: _info(Opcode.JUMPZ, ("JUMPZ", "JMPZ"), "jump if accumulator == 0"),
    Opcode.HALT: _info(Opcode.HALT, ("HALT",), "stop execution", has_operand=False),
}


# Every accepted mnemonic (upper case) mapped to its opcode
MNEMONIC_TABLE: dict[str, Opcode] = {
    alias: info.opcode
    for info in OPCODE_TABLE.values()
    for alias in info.aliases
}

# Reserved words: a bare identifier from this set is never a variable
MNEMONICS: frozenset[str] = frozenset(MNEMONIC_TABLE)

# Opcode groups
ARITHMETIC_OPCODES = frozenset({
    Opcode.ADD, Opcode.SUBT, Opcode.DIV, Opcode.MOD, Opcode.MULT,
    Opcode.ADDI, Opcode.SUBTI, Opcode.DIVI, Opcode.MODI, Opcode.MULTI,
})
JUMP_OPCODES = frozenset({Opcode.JUMP, Opcode.JUMPN, Opcode.JUMPZ})


# =============================================================================
# Lookup Functions
# =============================================================================

def get_opcode(mnemonic: str) -> Optional[Opcode]:
    """
    Look up the opcode for a mnemonic (case-insensitive).

    Returns:
        The opcode, or None if the mnemonic is unknown
    """
    return MNEMONIC_TABLE.get(mnemonic.upper())


def is_mnemonic(name: str) -> bool:
    """Check if a name is a reserved instruction mnemonic (case-insensitive)."""
    return name.upper() in MNEMONICS


def get_instruction_info(opcode: int) -> Optional[InstructionInfo]:
    """
    Get the InstructionInfo for an opcode.

    Returns:
        InstructionInfo, or None if the opcode is not defined
    """
    return OPCODE_TABLE.get(opcode)


# =============================================================================
# Word Encoding
# =============================================================================

def encode(opcode: int, operand: int = 0) -> int:
    """
    Encode an instruction word.

    The operand is not range-checked. An operand above 99 carries into the
    opcode digits; callers that care report it as an overflow.
    """
    return opcode * 100 + operand


def decode(word: int) -> tuple[int, int]:
    """
    Split an instruction word into (opcode, operand).

    Division truncates toward zero, so a negative word decodes into a
    negative opcode that matches no instruction.
    """
    sign = -1 if word < 0 else 1
    opcode, operand = divmod(abs(word), 100)
    return sign * opcode, sign * operand


def format_word(value: int) -> str:
    """
    Render a numeric word with four digits.

    Examples:
        >>> format_word(8)
        '0008'
        >>> format_word(-42)
        '-0042'
    """
    if value < 0:
        return f"-{abs(value):0{WORD_DIGITS}d}"
    return f"{value:0{WORD_DIGITS}d}"


def parse_word(text: str) -> Optional[int]:
    """
    Parse a signed decimal integer token.

    Returns:
        The integer value, or None if the text is not an optionally signed
        run of digits
    """
    text = text.strip()
    if _WORD_PATTERN.fullmatch(text):
        return int(text)
    return None


def in_word_range(value: int) -> bool:
    """Check if a value fits in a numeric word (-9999 to 9999)."""
    return WORD_MIN <= value <= WORD_MAX
