# =============================================================================
# test_assembler.py - Full Assembler Integration Tests
# =============================================================================
# End-to-end tests for the SML assembler, from source text to machine image.
#
# Test coverage includes:
#   - Variable allocation and the instruction origin
#   - Label binding, including forward references
#   - Operand resolution order and undefined symbols
#   - Error poisoning (no output on any error)
#   - File input and output
# =============================================================================

import pytest
from pathlib import Path

from sml_sdk.assembler import Assembler, assemble, assemble_file
from sml_sdk.config import MachineConfig, set_default_config
from sml_sdk.errors import AssemblerError, TooManyErrors


SUM_SOURCE = """\
x = 5
y 3
LOAD x
ADD y
WRITE y
HALT
"""

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
# Full Assembly Pipeline Tests
# =============================================================================

class TestFullPipeline:
    """Test the complete assembly pipeline from source to words."""

    def test_sum_program(self):
        """Variables come first, then instructions."""
        asm = Assembler()
        program = asm.assemble_string(SUM_SOURCE)
        assert asm.get_symbols() == {"x": 0, "y": 1}
        assert asm.get_origin() == 2
        assert program.code_words == ["2000", "3001", "1101", "4300"]
        assert asm.get_code() == ["0005", "0003", "2000", "3001", "1101", "4300"]

    def test_minimal_program(self):
        """A lone HALT assembles with origin 0."""
        program = assemble("HALT\n")
        assert program.instruction_origin == 0
        assert program.code_words == ["4300"]
        assert program.symbols == {}

    def test_empty_source(self):
        """Empty source produces an empty program."""
        program = assemble("")
        assert program.size == 0
        assert program.to_image().words == []

    def test_comments_and_blank_lines(self):
        """Comments and blank lines occupy no address."""
        source = "// header\n\nx 1   // counter\n\n  LOAD x // go\nHALT\n"
        program = assemble(source)
        assert program.instruction_origin == 1
        assert program.code_words == ["2000", "4300"]

    def test_case_insensitive_mnemonics(self):
        """Mnemonics may be written in any case."""
        program = assemble("x 1\nload x\nHalt\n")
        assert program.code_words == ["2000", "4300"]

    def test_aliases(self):
        """Alias mnemonics encode like their canonical forms."""
        program = assemble("x 1\nLOADM x\nADDM x\nJMP 0\nJMPN 0\nJMPZ 0\nHALT\n")
        assert program.code_words == ["2000", "3000", "4000", "4100", "4200", "4300"]

    def test_immediate_operand(self):
        """Immediate instructions take a literal number."""
        program = assemble("LOADI 42\nADDI 7\nHALT\n")
        assert program.code_words == ["2242", "3507", "4300"]


# =============================================================================
# Variable Allocation Tests
# =============================================================================

class TestVariables:
    """Test data address allocation."""

    def test_addresses_in_declaration_order(self):
        """The k-th distinct variable gets address k-1."""
        program = assemble("a 1\nb\nc = -2\nHALT\n")
        assert {n: s.address for n, s in program.symbols.items()} == {"a": 0, "b": 1, "c": 2}
        assert program.data_words == ["0001", "0000", "-0002"]
        assert program.instruction_origin == 3

    def test_redeclaration_ignored(self):
        """A repeated declaration keeps the first address and value."""
        program = assemble("x 5\ny 2\nx 9\nHALT\n")
        assert program.symbols["x"].address == 0
        assert program.symbols["x"].initial_value == 5
        assert program.instruction_origin == 2

    def test_variables_after_code(self):
        """Declarations are hoisted ahead of all instructions."""
        program = assemble("LOAD x\nHALT\nx 5\n")
        assert program.instruction_origin == 1
        assert program.to_image().words == ["0005", "2000", "4300"]

    def test_initial_value_out_of_range(self):
        """An initial value outside the word range is an error."""
        with pytest.raises(AssemblerError) as exc_info:
            assemble("x 10000\nHALT\n")
        assert "outside -9999..9999" in str(exc_info.value)


# =============================================================================
# Label Tests
# =============================================================================

class TestLabels:
    """Test label binding and references."""

    def test_forward_reference(self):
        """Labels may be used before they are defined."""
        asm = Assembler()
        program = asm.assemble_string(COUNTDOWN_SOURCE)
        assert asm.get_labels() == {"loop": 1, "done": 6}
        assert program.code_words == ["2000", "3601", "2100", "4206", "4001", "4300"]

    def test_label_at_end(self):
        """A label after the last instruction binds to the next address."""
        asm = Assembler()
        asm.assemble_string("HALT\nend:\n")
        assert asm.get_labels() == {"end": 1}

    def test_label_redefinition_warns(self):
        """The last definition wins and a warning is reported."""
        asm = Assembler()
        program = asm.assemble_string("here:\nHALT\nhere:\nJUMP here\n")
        assert asm.get_labels() == {"here": 1}
        assert program.code_words == ["4300", "4001"]
        assert any("redefined" in w for w in asm.get_warnings())

    def test_label_wins_over_variable(self):
        """Labels are resolved before variables."""
        program = assemble("spot 7\nspot:\nJUMP spot\n")
        assert program.code_words == ["4001"]


# =============================================================================
# Operand Resolution Tests
# =============================================================================

class TestOperands:
    """Test operand resolution and diagnostics."""

    def test_literal_operand(self):
        """Numbers are used directly."""
        program = assemble("x 1\nLOAD 07\nHALT\n")
        assert program.code_words == ["2007", "4300"]
        assert program.instructions[0].resolved_from == "literal"

    def test_undefined_symbol_warns(self):
        """An unresolved operand encodes as 0 with a warning."""
        program = assemble("LOAD missing\nHALT\n")
        assert program.code_words == ["2000", "4300"]
        assert any("undefined symbol 'missing'" in w for w in program.warnings)

    def test_undefined_symbol_strict(self):
        """Strict mode turns an unresolved operand into an error."""
        with pytest.raises(AssemblerError) as exc_info:
            assemble("total 0\nLOAD totl\nHALT\n", strict_symbols=True)
        message = str(exc_info.value)
        assert "undefined symbol 'totl'" in message
        assert "did you mean 'total'?" in message

    def test_strict_from_default_config(self):
        """The default configuration supplies strict mode."""
        set_default_config(MachineConfig(strict_symbols=True))
        with pytest.raises(AssemblerError):
            Assembler().assemble_string("LOAD nope\nHALT\n")

    def test_missing_operand(self):
        """Operand-bearing instructions require an operand."""
        with pytest.raises(AssemblerError) as exc_info:
            assemble("LOAD\n")
        assert "'LOAD' requires an operand" in str(exc_info.value)

    def test_extra_tokens_warn(self):
        """Tokens after the operand are ignored with a warning."""
        program = assemble("x 1\nLOAD x junk\nHALT\n")
        assert program.code_words == ["2000", "4300"]
        assert any("extra tokens" in w for w in program.warnings)

    def test_operand_overflow_warns(self):
        """Operands above 99 are encoded but reported."""
        program = assemble("LOAD 150\nHALT\n")
        assert program.code_words == ["2150", "4300"]
        assert any("two digits" in w for w in program.warnings)

    def test_word_wider_than_four_digits(self):
        """An operand that pushes the word past 9999 fails assembly."""
        with pytest.raises(AssemblerError) as exc_info:
            assemble("one 1\nLOAD one\nADDI 9999\nHALT\n", "prog.sml")
        message = str(exc_info.value)
        assert "prog.sml:3:1: error:" in message
        assert "word 13499 wider than four digits" in message


# =============================================================================
# Error Handling Tests
# =============================================================================

class TestErrors:
    """Test that errors poison the whole assembly."""

    def test_unknown_mnemonic(self):
        """An unknown mnemonic fails assembly with a suggestion."""
        asm = Assembler()
        with pytest.raises(AssemblerError) as exc_info:
            asm.assemble_string("x 1\nLODA x\nHALT\n", "prog.sml")
        message = str(exc_info.value)
        assert "prog.sml:2:1: error: unknown instruction 'LODA'" in message
        assert "LOAD" in message
        assert asm.get_program() is None

    def test_all_errors_reported(self):
        """Encoding continues so every error is reported together."""
        with pytest.raises(AssemblerError) as exc_info:
            assemble("FOO x\nBAR y\nHALT\n")
        message = str(exc_info.value)
        assert "'FOO'" in message
        assert "'BAR'" in message
        assert "2 errors" in message

    def test_no_output_before_success(self):
        """Output methods require a successful assembly."""
        asm = Assembler()
        with pytest.raises(AssemblerError):
            asm.get_code()

    def test_failure_clears_previous_program(self):
        """A failed assembly does not leave the earlier program behind."""
        asm = Assembler()
        asm.assemble_string("HALT\n")
        with pytest.raises(AssemblerError):
            asm.assemble_string("NOPE x\n")
        assert asm.get_program() is None

    def test_empty_label(self):
        """A lone colon is reported with its line number."""
        with pytest.raises(AssemblerError) as exc_info:
            assemble("HALT\n:\n")
        assert "<input>:2:1" in str(exc_info.value)

    def test_too_many_errors(self):
        """Assembly stops at the error limit and still reports what it saw."""
        source = "BAD x\n" * 120
        with pytest.raises(TooManyErrors) as exc_info:
            assemble(source)
        message = str(exc_info.value)
        assert "Too many errors (100), stopping" in message
        assert "<input>:100:1: error: unknown instruction 'BAD'" in message
        assert "<input>:101:1" not in message


# =============================================================================
# File I/O Tests
# =============================================================================

class TestFileIO:
    """Test assembling from and writing to files."""

    def test_assemble_file(self, tmp_path: Path):
        """Files are read and assembled."""
        source = tmp_path / "sum.sml"
        source.write_text(SUM_SOURCE)
        program = assemble_file(source)
        assert program.filename == str(source)
        assert program.instruction_origin == 2

    def test_missing_file(self, tmp_path: Path):
        """A missing source file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            assemble_file(tmp_path / "absent.sml")

    def test_write_mach(self, tmp_path: Path):
        """The machine image lists variables, then instructions."""
        asm = Assembler()
        asm.assemble_string(SUM_SOURCE)
        output = tmp_path / "sum.mach"
        asm.write_mach(output)
        assert output.read_text() == (
            "// Variables (addresses 0-1)\n"
            "0005  // x\n"
            "0003  // y\n"
            "// Instructions (starting at address 2)\n"
            "2000\n"
            "3001\n"
            "1101\n"
            "4300\n"
        )

    def test_verbose_output(self, capsys):
        """Verbose mode reports progress."""
        Assembler(verbose=True).assemble_string(SUM_SOURCE, "sum.sml")
        out = capsys.readouterr().out
        assert "Assembling sum.sml..." in out
        assert "instructions start at 2" in out
