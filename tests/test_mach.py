# =============================================================================
# test_mach.py - Machine Image Tests
# =============================================================================
# Tests for the .mach machine image model, writer and parser.
# =============================================================================

import pytest
from pathlib import Path

from sml_sdk.assembler import assemble
from sml_sdk.emulator import Memory, NumericCell, RawCell
from sml_sdk.errors import MachFormatError
from sml_sdk.mach import MachineImage, load_mach, parse_mach


SUM_MACH = """\
// Variables (addresses 0-1)
0005  // x
0003  // y
// Instructions (starting at address 2)
2000
3001
1101
4300
"""


# =============================================================================
# Writer Tests
# =============================================================================

class TestWriter:
    """Test serialization of machine images."""

    def test_to_text(self):
        """Data words carry their names; the header marks the origin."""
        image = MachineImage(
            words=["0005", "0003", "2000", "3001", "1101", "4300"],
            instruction_origin=2,
            names={0: "x", 1: "y"},
        )
        assert image.to_text() == SUM_MACH

    def test_no_variables(self):
        """A program without variables starts its code at 0."""
        image = assemble("HALT\n").to_image()
        assert image.to_text() == (
            "// Variables (addresses 0--1)\n"
            "// Instructions (starting at address 0)\n"
            "4300\n"
        )

    def test_regions(self):
        """data_words and code_words split at the origin."""
        image = parse_mach(SUM_MACH)
        assert image.data_words == ["0005", "0003"]
        assert image.code_words == ["2000", "3001", "1101", "4300"]
        assert len(image) == 6

    def test_write(self, tmp_path: Path):
        """write() stores the text form."""
        output = tmp_path / "out.mach"
        parse_mach(SUM_MACH).write(output)
        assert output.read_text() == SUM_MACH


# =============================================================================
# Parser Tests
# =============================================================================

class TestParser:
    """Test reading machine images back."""

    def test_parse(self):
        """Words, origin and names are recovered."""
        image = parse_mach(SUM_MACH)
        assert image.words == ["0005", "0003", "2000", "3001", "1101", "4300"]
        assert image.instruction_origin == 2
        assert image.names == {0: "x", 1: "y"}

    def test_matches_assembler_output(self):
        """Parsing the written text gives back the assembled image."""
        image = assemble("a = -4\nb 7\nLOAD a\nMULT b\nWRITE a\nHALT\n").to_image()
        assert parse_mach(image.to_text()) == image

    def test_no_header(self):
        """Without the instructions header the origin is 0."""
        image = parse_mach("2000\n4300\n")
        assert image.instruction_origin == 0
        assert image.words == ["2000", "4300"]

    def test_blank_lines_and_comments(self):
        """Blank lines and comment lines are skipped."""
        image = parse_mach("\n// hand written\n\n// Instructions\n4300  // stop\n\n")
        assert image.words == ["4300"]
        assert image.names == {}

    def test_raw_words_kept(self):
        """Non-numeric words survive parsing as text."""
        image = parse_mach("hello\n// Instructions\n4300\n")
        assert image.words == ["hello", "4300"]
        assert image.numeric_words() == [None, 4300]

    def test_two_tokens_rejected(self):
        """A word line must hold a single token."""
        with pytest.raises(MachFormatError) as exc_info:
            parse_mach("2000 3001\n")
        assert "line 1" in str(exc_info.value)

    def test_too_large(self):
        """Images larger than the limit are rejected."""
        text = "\n".join(["0000"] * 101) + "\n"
        with pytest.raises(MachFormatError):
            parse_mach(text, max_words=100)

    def test_word_out_of_range(self):
        """Numeric words must fit in four digits."""
        with pytest.raises(MachFormatError) as exc_info:
            parse_mach("12345\n// Instructions\n2000\n2100\n4300\n")
        assert "line 1" in str(exc_info.value)
        with pytest.raises(MachFormatError):
            parse_mach("// Instructions\n-10000\n")

    def test_load_mach(self, tmp_path: Path):
        """load_mach reads from a file."""
        path = tmp_path / "sum.mach"
        path.write_text(SUM_MACH)
        assert load_mach(path).instruction_origin == 2

    def test_load_missing(self, tmp_path: Path):
        """A missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_mach(tmp_path / "missing.mach")


# =============================================================================
# Loading Into Memory
# =============================================================================

class TestLoadInto:
    """Test copying images into memory."""

    def test_load_into(self):
        """Numeric words become numbers, other words stay raw."""
        memory = Memory(10)
        MachineImage(words=["0005", "-0002", "abc"]).load_into(memory)
        assert memory.read(0) == NumericCell(5)
        assert memory.read(1) == NumericCell(-2)
        assert memory.read(2) == RawCell("abc")
        assert memory.read(3) == NumericCell(0)

    def test_image_too_large(self):
        """An image that does not fit raises MachFormatError."""
        with pytest.raises(MachFormatError):
            MachineImage(words=["0000"] * 11).load_into(Memory(10))

    def test_word_out_of_range(self):
        """An out-of-range word is rejected before memory is touched."""
        memory = Memory(10)
        image = MachineImage(words=["0007", "12345", "4300"], instruction_origin=1)
        with pytest.raises(MachFormatError) as exc_info:
            image.load_into(memory)
        assert "address 01" in str(exc_info.value)
        assert memory.read(0) == NumericCell(0)
