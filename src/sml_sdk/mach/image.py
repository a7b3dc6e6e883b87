"""
Machine Image
=============

In-memory form of an assembled program and its text serialization, the
.mach file.

File Layout
-----------
```
// Variables (addresses 0-1)
0005  // x
0003  // y
// Instructions (starting at address 2)
2000
3001
1101
4300
```

- The data region comes first: one word per variable, in declaration
  order, with the variable name as a trailing comment.
- The "// Instructions" header marks the instruction origin so that a
  loader can find where execution starts.
- Every word is a 4-digit signed decimal.
"""

from dataclasses import dataclass, field
from pathlib import Path
import logging

from sml_sdk.cpu import in_word_range, parse_word

logger = logging.getLogger(__name__)


VARIABLES_HEADER = "// Variables"
INSTRUCTIONS_HEADER = "// Instructions"


@dataclass
class MachineImage:
    """
    A loadable program: memory words plus the instruction origin.

    Attributes:
        words: Memory contents from address 0, as textual words
        instruction_origin: Address of the first instruction
        names: Optional address -> variable name annotations
    """
    words: list[str]
    instruction_origin: int = 0
    names: dict[int, str] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.words)

    @property
    def data_words(self) -> list[str]:
        """Words below the instruction origin."""
        return self.words[:self.instruction_origin]

    @property
    def code_words(self) -> list[str]:
        """Words from the instruction origin onward."""
        return self.words[self.instruction_origin:]

    def load_into(self, memory) -> None:
        """
        Copy the image into memory starting at address 0.

        Args:
            memory: Target memory (anything with size and write_text())

        Raises:
            MachFormatError: If the image does not fit in memory or a numeric
                             word is outside -9999..9999
        """
        from sml_sdk.errors import MachFormatError

        if len(self.words) > memory.size:
            raise MachFormatError(
                f"image has {len(self.words)} words but memory holds {memory.size}"
            )
        for address, value in enumerate(self.numeric_words()):
            if value is not None and not in_word_range(value):
                raise MachFormatError(
                    f"address {address:02d}: word {self.words[address]!r} "
                    f"outside -9999..9999"
                )
        for address, word in enumerate(self.words):
            memory.write_text(address, word)
        logger.debug(
            f"Loaded {len(self.words)} words, instruction origin {self.instruction_origin}"
        )

    def to_text(self) -> str:
        """
        Serialize to .mach text.

        Returns:
            The file contents, newline terminated
        """
        lines = []
        lines.append(f"{VARIABLES_HEADER} (addresses 0-{self.instruction_origin - 1})")
        for address, word in enumerate(self.data_words):
            name = self.names.get(address)
            lines.append(f"{word}  // {name}" if name else word)
        lines.append(
            f"{INSTRUCTIONS_HEADER} (starting at address {self.instruction_origin})"
        )
        lines.extend(self.code_words)
        return "\n".join(lines) + "\n"

    def write(self, filepath: str | Path) -> None:
        """Write the image to a .mach file."""
        Path(filepath).write_text(self.to_text())

    def numeric_words(self) -> list[int | None]:
        """Words parsed as integers (None for non-numeric words)."""
        return [parse_word(word) for word in self.words]
