# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the two-pass code generator and its output formats.
#
# Test coverage includes:
#   - Generation from pre-classified lines
#   - Encoded instruction records
#   - Listing and symbol file output
#   - Table formatting
# =============================================================================

import pytest
from pathlib import Path

from sml_sdk.assembler.codegen import CodeGenerator, format_tables
from sml_sdk.assembler.lexer import classify_source
from sml_sdk.errors import AssemblerError


COUNTDOWN_SOURCE = """\
n 3
loop:
    LOAD n
    SUBTI 1
    STORE n
    JUMPZ done
    JUMP loop
done:
    HALT
"""


# =============================================================================
# Helper Function
# =============================================================================

def generate(source: str, **kwargs):
    """Generate code from source text."""
    return CodeGenerator(**kwargs).generate_source(source)


# =============================================================================
# Generation Tests
# =============================================================================

class TestGeneration:
    """Test the generated program model."""

    def test_generate_from_lines(self):
        """generate() accepts classified lines."""
        lines = classify_source("x 2\nLOAD x\nHALT\n")
        program = CodeGenerator().generate(lines, "lines.sml")
        assert program.filename == "lines.sml"
        assert program.code_words == ["2000", "4300"]

    def test_instruction_records(self):
        """Each instruction keeps its address, opcode and source line."""
        program = generate(COUNTDOWN_SOURCE)
        first = program.instructions[0]
        assert first.address == 1
        assert first.opcode == 20
        assert first.operand == 0
        assert first.resolved_from == "variable"
        assert first.line.text == "LOAD n"
        jump = program.instructions[4]
        assert jump.address == 5
        assert jump.resolved_from == "label"
        assert program.instructions[-1].resolved_from is None

    def test_addresses_are_contiguous(self):
        """Instruction addresses run from the origin without gaps."""
        program = generate(COUNTDOWN_SOURCE)
        addresses = [inst.address for inst in program.instructions]
        assert addresses == list(range(1, 7))
        assert program.size == 7

    def test_independent_runs(self):
        """A generator keeps no state between assemblies."""
        codegen = CodeGenerator()
        codegen.generate_source("a 1\nb 2\nHALT\n")
        program = codegen.generate_source("HALT\n")
        assert program.symbols == {}
        assert program.instruction_origin == 0

    def test_to_image_names(self):
        """The machine image carries variable names."""
        image = generate("x = 5\ny 3\nHALT\n").to_image()
        assert image.names == {0: "x", 1: "y"}
        assert image.instruction_origin == 2

    def test_warnings_reset(self):
        """Warnings belong to the last assembly only."""
        codegen = CodeGenerator()
        codegen.generate_source("LOAD missing\nHALT\n")
        assert len(codegen.get_warnings()) == 1
        codegen.generate_source("HALT\n")
        assert codegen.get_warnings() == []


# =============================================================================
# Output Format Tests
# =============================================================================

class TestOutputFormats:
    """Test listing, symbol and table output."""

    def test_format_tables(self):
        """Tables list names and addresses in address order."""
        program = generate(COUNTDOWN_SOURCE)
        assert format_tables(program) == (
            "Symbol Table:\n"
            "  n -> 0\n"
            "\n"
            "Label Table:\n"
            "  loop -> 1\n"
            "  done -> 6"
        )

    def test_format_tables_empty(self):
        """Empty tables still print their headings."""
        assert format_tables(generate("HALT\n")) == "Symbol Table:\n\nLabel Table:"

    def test_listing(self):
        """The listing shows addresses, words and source lines."""
        codegen = CodeGenerator()
        codegen.generate_source(COUNTDOWN_SOURCE)
        listing = codegen.get_listing()
        assert listing.startswith("SML Assembler Listing")
        assert "00    0003      1  n" in listing
        assert "01    2000      3  LOAD n" in listing
        assert "06    4300      9  HALT" in listing
        assert "Label Table:" in listing

    def test_write_listing(self, tmp_path: Path):
        """write_listing writes the listing to a file."""
        codegen = CodeGenerator()
        codegen.generate_source(COUNTDOWN_SOURCE)
        output = tmp_path / "countdown.lst"
        codegen.write_listing(output)
        assert output.read_text() == codegen.get_listing() + "\n"

    def test_write_symbols(self, tmp_path: Path):
        """The symbol file lists variables, then labels."""
        codegen = CodeGenerator()
        codegen.generate_source(COUNTDOWN_SOURCE)
        output = tmp_path / "countdown.sym"
        codegen.write_symbols(output)
        lines = output.read_text().splitlines()
        assert lines[0] == "# Symbol table"
        assert lines[2:] == ["n 00", "# Labels", "loop 01", "done 06"]

    def test_listing_requires_program(self):
        """Output methods fail before any successful generation."""
        with pytest.raises(AssemblerError):
            CodeGenerator().get_listing()
