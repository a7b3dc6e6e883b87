"""
Memory Subsystem for the SML Virtual Machine
============================================

Memory is a fixed array of cells addressed from 0. Data and code share the
same array: assembled variables occupy the low addresses and instructions
follow from the instruction origin.

Cell Model:
    NumericCell  Signed value in [-9999, 9999]
    RawCell      Arbitrary token stored by READ when the input was not a
                 number; only WRITE can consume it

Cells start as NumericCell(0). Memory never grows: any access outside
0..size-1 raises AddressError.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Iterable, Iterator, Union

from sml_sdk.config import DEFAULT_MEMORY_SIZE
from sml_sdk.cpu import format_word, parse_word
from sml_sdk.errors import AddressError


@dataclass(frozen=True)
class NumericCell:
    """A memory cell holding a number."""
    value: int = 0

    def __str__(self) -> str:
        return format_word(self.value)


@dataclass(frozen=True)
class RawCell:
    """A memory cell holding a non-numeric token."""
    token: str

    def __str__(self) -> str:
        return self.token


Cell = Union[NumericCell, RawCell]


class Memory:
    """
    Word-addressed memory of fixed capacity.

    Attributes:
        size: Number of cells

    Example:
        >>> mem = Memory(100)
        >>> mem.write(5, NumericCell(42))
        >>> mem.read(5)
        NumericCell(value=42)
        >>> mem.write_text(6, "hello")
        >>> mem.read(6)
        RawCell(token='hello')
    """

    def __init__(self, size: int = DEFAULT_MEMORY_SIZE):
        """
        Initialize memory with every cell set to 0.

        Args:
            size: Capacity in cells (must be positive)
        """
        if size <= 0:
            raise ValueError(f"memory size must be positive, got {size}")
        self._size = size
        self._cells: list[Cell] = [NumericCell(0)] * size

    @property
    def size(self) -> int:
        """Capacity in cells."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells)

    def _check(self, address: int) -> None:
        if not 0 <= address < self._size:
            raise AddressError(address, self._size)

    def read(self, address: int) -> Cell:
        """
        Read the cell at an address.

        Raises:
            AddressError: If the address is outside memory
        """
        self._check(address)
        return self._cells[address]

    def write(self, address: int, cell: Cell) -> None:
        """
        Store a cell at an address.

        Raises:
            AddressError: If the address is outside memory
        """
        self._check(address)
        self._cells[address] = cell

    def write_value(self, address: int, value: int) -> None:
        """Store a number at an address."""
        self.write(address, NumericCell(value))

    def write_text(self, address: int, text: str) -> None:
        """
        Store a textual word.

        Signed integers become numeric cells; anything else is kept as a
        raw token.
        """
        value = parse_word(text)
        self.write(address, NumericCell(value) if value is not None else RawCell(text))

    def load_words(self, words: Iterable[str], start: int = 0) -> int:
        """
        Store consecutive textual words starting at an address.

        Returns:
            Number of words stored
        """
        count = 0
        for offset, word in enumerate(words):
            self.write_text(start + offset, word)
            count += 1
        return count

    def cells(self) -> list[Cell]:
        """Return a copy of all cells, in address order."""
        return list(self._cells)

    def clear(self) -> None:
        """Reset every cell to 0."""
        self._cells = [NumericCell(0)] * self._size

    def __repr__(self) -> str:
        used = sum(1 for cell in self._cells if cell != NumericCell(0))
        return f"Memory(size={self._size}, used={used})"
