"""
Machine Image Parser
====================

Reads .mach files back into MachineImage objects.

Parsing Rules
-------------
- Blank lines are skipped.
- A line starting with "// Instructions" records the current address as
  the instruction origin.
- Any other line starting with "//" is a comment.
- A trailing "// comment" is removed; the remaining token is the word
  stored at the next address.
- A file without the instructions header has origin 0.

Usage:
    >>> from sml_sdk.mach import load_mach
    >>> image = load_mach("program.mach")
    >>> print(image.instruction_origin)
"""

from pathlib import Path
from typing import Optional
import logging

from sml_sdk.cpu import in_word_range, parse_word
from sml_sdk.errors import MachFormatError
from sml_sdk.mach.image import INSTRUCTIONS_HEADER, MachineImage

logger = logging.getLogger(__name__)


def parse_mach(text: str, max_words: Optional[int] = None) -> MachineImage:
    """
    Parse .mach text.

    Args:
        text: File contents
        max_words: Reject images with more words than this (optional)

    Returns:
        The parsed MachineImage

    Raises:
        MachFormatError: If a word line holds more than one token, a numeric
                         word is outside -9999..9999, or the image exceeds
                         max_words
    """
    words: list[str] = []
    names: dict[int, str] = {}
    origin: Optional[int] = None

    for number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped:
            continue

        if stripped.startswith(INSTRUCTIONS_HEADER):
            if origin is not None:
                logger.warning(f"line {number}: duplicate instructions header ignored")
            else:
                origin = len(words)
            continue

        if stripped.startswith("//"):
            continue

        word, _, comment = stripped.partition("//")
        word = word.strip()
        if not word:
            continue
        if len(word.split()) != 1:
            raise MachFormatError(f"line {number}: expected one word, got {word!r}")
        value = parse_word(word)
        if value is not None and not in_word_range(value):
            raise MachFormatError(f"line {number}: word {word!r} outside -9999..9999")

        if comment.strip() and origin is None:
            names[len(words)] = comment.strip()
        words.append(word)

    if max_words is not None and len(words) > max_words:
        raise MachFormatError(
            f"image has {len(words)} words but memory holds {max_words}"
        )

    if origin is None:
        logger.debug("No instructions header found, assuming origin 0")
        origin = 0

    logger.debug(f"Parsed {len(words)} words, instruction origin {origin}")
    return MachineImage(words=words, instruction_origin=origin, names=names)


def load_mach(filepath: str | Path, max_words: Optional[int] = None) -> MachineImage:
    """
    Read and parse a .mach file.

    Raises:
        FileNotFoundError: If the file does not exist
        MachFormatError: If the file cannot be parsed
    """
    return parse_mach(Path(filepath).read_text(), max_words=max_words)
