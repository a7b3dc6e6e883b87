"""
Memory Subsystem Tests
======================

Tests for the fixed-size SML memory and its cell types.
"""

import pytest

from sml_sdk.emulator import Memory, NumericCell, RawCell
from sml_sdk.errors import AddressError


# =============================================================================
# Basic Access
# =============================================================================

class TestMemoryAccess:
    """Test reads and writes."""

    def test_initial_state(self):
        """Every cell starts as numeric zero."""
        mem = Memory()
        assert mem.size == 100
        assert len(mem) == 100
        assert all(cell == NumericCell(0) for cell in mem)

    def test_write_and_read(self):
        """Cells read back as written."""
        mem = Memory(10)
        mem.write(3, NumericCell(42))
        mem.write_value(4, -7)
        assert mem.read(3) == NumericCell(42)
        assert mem.read(4).value == -7

    def test_write_text(self):
        """Signed integers are numeric; other tokens are raw."""
        mem = Memory(10)
        mem.write_text(0, "0005")
        mem.write_text(1, "-0042")
        mem.write_text(2, "hello")
        assert mem.read(0) == NumericCell(5)
        assert mem.read(1) == NumericCell(-42)
        assert mem.read(2) == RawCell("hello")

    def test_load_words(self):
        """load_words stores consecutive words."""
        mem = Memory(10)
        assert mem.load_words(["1", "2", "3"], start=4) == 3
        assert [c.value for c in mem.cells()[4:7]] == [1, 2, 3]

    def test_clear(self):
        """clear() resets every cell to zero."""
        mem = Memory(5)
        mem.write_text(0, "abc")
        mem.write_value(4, 9)
        mem.clear()
        assert mem.cells() == [NumericCell(0)] * 5

    def test_cells_is_a_copy(self):
        """Changing the returned list leaves memory alone."""
        mem = Memory(3)
        cells = mem.cells()
        cells[0] = NumericCell(9)
        assert mem.read(0) == NumericCell(0)


# =============================================================================
# Bounds
# =============================================================================

class TestBounds:
    """Test address checking."""

    @pytest.mark.parametrize("address", [-1, 10, 100])
    def test_out_of_range(self, address):
        """Addresses outside 0..size-1 raise AddressError."""
        mem = Memory(10)
        with pytest.raises(AddressError):
            mem.read(address)
        with pytest.raises(AddressError):
            mem.write_value(address, 1)

    def test_invalid_size(self):
        """Memory must have at least one cell."""
        with pytest.raises(ValueError):
            Memory(0)


# =============================================================================
# Cell Rendering
# =============================================================================

class TestCells:
    """Test cell text forms."""

    def test_numeric_str(self):
        """Numeric cells render as four digits."""
        assert str(NumericCell(8)) == "0008"
        assert str(NumericCell(-5)) == "-0005"

    def test_raw_str(self):
        """Raw cells render their token."""
        assert str(RawCell("hello")) == "hello"

    def test_repr(self):
        """repr counts non-zero cells."""
        mem = Memory(10)
        mem.write_value(1, 5)
        assert repr(mem) == "Memory(size=10, used=1)"
