"""
SML SDK CPU Package
===================

This package contains the SML instruction set definitions used by multiple
tools in the SDK: the assembler (which encodes instructions), the
disassembler (which decodes them) and the emulator (which executes them).

Modules:
    isa: Opcode table, mnemonic aliases, word limits and the helpers that
         encode, decode, format and parse 4-digit words.

Usage:
    from sml_sdk.cpu import Opcode, encode, decode, format_word
"""

from sml_sdk.cpu.isa import (
    # Core types
    Opcode,
    InstructionInfo,
    # Tables
    OPCODE_TABLE,
    MNEMONIC_TABLE,
    MNEMONICS,
    ARITHMETIC_OPCODES,
    JUMP_OPCODES,
    # Word limits
    WORD_MIN,
    WORD_MAX,
    WORD_DIGITS,
    OPERAND_MAX,
    # Lookup functions
    get_opcode,
    is_mnemonic,
    get_instruction_info,
    # Word helpers
    encode,
    decode,
    format_word,
    parse_word,
    in_word_range,
)

__all__ = [
    "Opcode",
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONIC_TABLE",
    "MNEMONICS",
    "ARITHMETIC_OPCODES",
    "JUMP_OPCODES",
    "WORD_MIN",
    "WORD_MAX",
    "WORD_DIGITS",
    "OPERAND_MAX",
    "get_opcode",
    "is_mnemonic",
    "get_instruction_info",
    "encode",
    "decode",
    "format_word",
    "parse_word",
    "in_word_range",
]
