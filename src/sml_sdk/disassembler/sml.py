"""
SML Disassembler
================

Turns 4-digit SML machine words back into readable instructions. This is
the inverse of the assembler's encoding pass.

Every word decodes to ``opcode = word / 100`` and ``operand = word % 100``.
Words whose opcode is not in the opcode table are shown as "???"; raw
(non-numeric) cells are shown as "<token>".

Usage:
    disasm = SMLDisassembler()

    # Disassemble a list of words
    for instr in disasm.disassemble(["2000", "3001", "4300"], start_address=2):
        print(instr)

    # Produce source that reassembles to the same words
    source = disasm.to_source(load_mach("program.mach"))

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Union
import logging

from sml_sdk.cpu import JUMP_OPCODES, decode, format_word, get_instruction_info, parse_word
from sml_sdk.mach import MachineImage

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass
class DisassembledInstruction:
    """
    Represents a single disassembled SML word.

    Attributes:
        address: Memory address of the word
        word: Numeric value of the word, or None for a raw token
        opcode: Decoded operation code (0 for a raw token)
        operand: Decoded operand (0 for a raw token)
        mnemonic: Canonical mnemonic, "???" for an unknown opcode, or
                  "<token>" for a raw token
        text: The word as written in memory
        comment: Optional comment (e.g., variable name of a direct operand)
    """
    address: int
    word: Optional[int]
    opcode: int
    operand: int
    mnemonic: str
    text: str = ""
    comment: str = ""

    @property
    def is_known(self) -> bool:
        """True if the word decodes to a real instruction."""
        return self.word is not None and get_instruction_info(self.opcode) is not None

    @property
    def has_operand(self) -> bool:
        info = get_instruction_info(self.opcode) if self.word is not None else None
        return info is None or info.has_operand

    def __str__(self) -> str:
        """Format as listing line: NN: WWWW  MNEMONIC OPERAND"""
        if self.word is None or (self.is_known and not self.has_operand):
            asm = self.mnemonic
        else:
            asm = f"{self.mnemonic} {self.operand:02d}"

        line = f"{self.address:02d}: {self.text}  {asm}"
        if self.comment:
            return f"{line:<24} // {self.comment}"
        return line

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "address": self.address,
            "word": self.text,
            "opcode": self.opcode,
            "operand": self.operand,
            "mnemonic": self.mnemonic,
            "comment": self.comment,
        }


# =============================================================================
# SML Disassembler
# =============================================================================

class SMLDisassembler:
    """
    SML machine word disassembler.

    Optionally annotates direct operands with variable names taken from a
    machine image or an explicit address -> name table.

    Example:
        >>> disasm = SMLDisassembler({0: "x"})
        >>> print(disasm.disassemble_one("2000", 2))
        02: 2000  LOAD 00        // x
    """

    def __init__(self, names: Optional[dict[int, str]] = None):
        self.names: dict[int, str] = dict(names or {})

    def add_name(self, address: int, name: str) -> None:
        """Add a variable name for operand annotation."""
        self.names[address] = name

    def disassemble_one(self, word: Union[int, str], address: int = 0) -> DisassembledInstruction:
        """
        Disassemble a single word.

        Args:
            word: The word as a number or as memory text
            address: Address the word is stored at

        Returns:
            DisassembledInstruction for the word
        """
        if isinstance(word, str):
            text = word.strip()
            value = parse_word(text)
        else:
            value = word
            text = format_word(word)

        if value is None:
            return DisassembledInstruction(address, None, 0, 0, f"<{text}>", text)

        opcode, operand = decode(value)
        info = get_instruction_info(opcode)
        if info is None:
            return DisassembledInstruction(address, value, opcode, operand, "???", text)

        comment = ""
        if info.has_operand and not info.immediate and opcode not in JUMP_OPCODES:
            comment = self.names.get(operand, "")

        return DisassembledInstruction(
            address, value, opcode, operand, info.mnemonic, text, comment
        )

    def disassemble(
        self,
        words: Iterable[Union[int, str]],
        start_address: int = 0,
        count: Optional[int] = None,
    ) -> list[DisassembledInstruction]:
        """
        Disassemble consecutive words.

        Args:
            words: Words to decode, in address order
            start_address: Address of the first word
            count: Maximum number of words to decode (None for all)

        Returns:
            One DisassembledInstruction per word
        """
        result = []
        for offset, word in enumerate(words):
            if count is not None and offset >= count:
                break
            result.append(self.disassemble_one(word, start_address + offset))
        return result

    def disassemble_image(self, image: MachineImage) -> list[DisassembledInstruction]:
        """Disassemble the instruction region of a machine image."""
        for address, name in image.names.items():
            self.names.setdefault(address, name)
        return self.disassemble(image.code_words, start_address=image.instruction_origin)

    def disassemble_to_text(self, image: MachineImage) -> str:
        """
        Render a machine image as a listing.

        The data region is listed first, one line per word, followed by
        the decoded instructions.
        """
        lines = []
        instructions = self.disassemble_image(image)
        lines.append(f"// Data (addresses 0-{image.instruction_origin - 1})")
        for address, word in enumerate(image.data_words):
            name = self.names.get(address, "")
            line = f"{address:02d}: {word}"
            lines.append(f"{line:<24} // {name}" if name else line)
        lines.append(f"// Code (starting at address {image.instruction_origin})")
        lines.extend(str(instr) for instr in instructions)
        return "\n".join(lines)

    def to_source(self, image: MachineImage) -> str:
        """
        Produce SML source that reassembles to the same words.

        Data words become variable declarations in address order and
        operands are written as literal numbers, so addresses are kept.
        Words that no instruction encodes to (unknown opcodes, raw tokens,
        HALT with an operand) cannot be expressed and are emitted as
        comments.
        """
        lines = []
        for address, word in enumerate(image.data_words):
            name = image.names.get(address) or f"v{address:02d}"
            value = parse_word(word)
            if value is None:
                logger.warning(f"data word {word!r} at {address:02d} is not numeric")
                value = 0
            lines.append(f"{name} = {value}")

        for instr in self.disassemble_image(image):
            info = get_instruction_info(instr.opcode) if instr.word is not None else None
            if info is None or (not info.has_operand and instr.operand != 0):
                logger.warning(f"word {instr.text} at {instr.address:02d} has no source form")
                lines.append(f"// {instr.address:02d}: {instr.text}")
            elif info.has_operand:
                lines.append(f"{info.mnemonic} {instr.operand}")
            else:
                lines.append(info.mnemonic)

        return "\n".join(lines) + "\n"
