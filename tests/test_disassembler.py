# =============================================================================
# test_disassembler.py - SML Disassembler Tests
# =============================================================================
# Tests for decoding machine words back into instructions and source.
# =============================================================================

import pytest

from sml_sdk.assembler import assemble
from sml_sdk.disassembler import DisassembledInstruction, SMLDisassembler
from sml_sdk.mach import MachineImage, parse_mach


SUM_SOURCE = "x = 5\ny 3\nLOAD x\nADD y\nWRITE y\nHALT\n"

COUNTDOWN_SOURCE = """\
n 3
loop:
    WRITE n
    LOAD n
    SUBTI 1
    STORE n
    JUMPZ done
    JUMP loop
done:
    HALT
"""


# =============================================================================
# Single Word Decoding
# =============================================================================

class TestDisassembleOne:
    """Test decoding of individual words."""

    def test_memory_operand(self):
        """Direct operands are annotated with variable names."""
        instr = SMLDisassembler({0: "x"}).disassemble_one("2000", 2)
        assert instr.mnemonic == "LOAD"
        assert instr.opcode == 20
        assert instr.operand == 0
        assert instr.comment == "x"
        assert str(instr) == f"{'02: 2000  LOAD 00':<24} // x"

    def test_numeric_word(self):
        """Words may be given as integers."""
        instr = SMLDisassembler().disassemble_one(3001, 3)
        assert instr.text == "3001"
        assert str(instr) == "03: 3001  ADD 01"

    def test_halt(self):
        """HALT is shown without an operand."""
        instr = SMLDisassembler().disassemble_one("4300", 5)
        assert str(instr) == "05: 4300  HALT"
        assert instr.is_known
        assert not instr.has_operand

    def test_immediate_not_annotated(self):
        """Immediate operands are values, not addresses."""
        instr = SMLDisassembler({1: "y"}).disassemble_one("3601")
        assert instr.mnemonic == "SUBTI"
        assert instr.comment == ""

    def test_jump_not_annotated(self):
        """Jump targets are code addresses, not variables."""
        instr = SMLDisassembler({1: "y"}).disassemble_one("4001")
        assert instr.comment == ""

    def test_unknown_opcode(self):
        """Unknown opcodes decode as ???."""
        instr = SMLDisassembler().disassemble_one("9999")
        assert instr.mnemonic == "???"
        assert not instr.is_known
        assert str(instr) == "00: 9999  ??? 99"

    def test_raw_token(self):
        """Raw tokens are shown in angle brackets."""
        instr = SMLDisassembler().disassemble_one("hello", 7)
        assert instr.word is None
        assert str(instr) == "07: hello  <hello>"

    def test_to_dict(self):
        """to_dict exposes the decoded fields."""
        instr = SMLDisassembler().disassemble_one("1107", 4)
        assert instr.to_dict() == {
            "address": 4,
            "word": "1107",
            "opcode": 11,
            "operand": 7,
            "mnemonic": "WRITE",
            "comment": "",
        }


# =============================================================================
# Ranges and Images
# =============================================================================

class TestDisassembleImage:
    """Test decoding of word sequences and machine images."""

    def test_disassemble_range(self):
        """Addresses count up from the start address."""
        result = SMLDisassembler().disassemble(["2000", "3001", "4300"], start_address=2)
        assert [i.address for i in result] == [2, 3, 4]
        assert [i.mnemonic for i in result] == ["LOAD", "ADD", "HALT"]

    def test_count_limit(self):
        """count limits the number of decoded words."""
        result = SMLDisassembler().disassemble(["2000", "3001", "4300"], count=2)
        assert len(result) == 2

    def test_image_code_only(self):
        """disassemble_image decodes the instruction region."""
        image = assemble(SUM_SOURCE).to_image()
        result = SMLDisassembler().disassemble_image(image)
        assert [i.mnemonic for i in result] == ["LOAD", "ADD", "WRITE", "HALT"]
        assert result[0].address == 2
        assert result[2].comment == "y"

    def test_listing_text(self):
        """The listing shows data, then code."""
        image = assemble(SUM_SOURCE).to_image()
        lines = SMLDisassembler().disassemble_to_text(image).splitlines()
        assert lines[0] == "// Data (addresses 0-1)"
        assert lines[1] == f"{'00: 0005':<24} // x"
        assert lines[3] == "// Code (starting at address 2)"
        assert lines[4] == f"{'02: 2000  LOAD 00':<24} // x"
        assert lines[-1] == "05: 4300  HALT"


# =============================================================================
# Source Regeneration
# =============================================================================

class TestToSource:
    """Test regenerating assemblable source."""

    @pytest.mark.parametrize("source", [SUM_SOURCE, COUNTDOWN_SOURCE])
    def test_reassembles_to_same_image(self, source):
        """to_source output assembles back to the same image."""
        image = assemble(source).to_image()
        regenerated = SMLDisassembler().to_source(image)
        assert assemble(regenerated).to_image() == image

    def test_source_text(self):
        """Variables become declarations and operands become numbers."""
        image = assemble(SUM_SOURCE).to_image()
        assert SMLDisassembler().to_source(image) == (
            "x = 5\n"
            "y = 3\n"
            "LOAD 0\n"
            "ADD 1\n"
            "WRITE 1\n"
            "HALT\n"
        )

    def test_unnamed_variables(self):
        """Data words without names get generated names."""
        image = parse_mach("0007\n// Instructions\n4300\n")
        assert SMLDisassembler().to_source(image) == "v00 = 7\nHALT\n"

    def test_inexpressible_words(self):
        """Words with no source form are kept as comments."""
        image = MachineImage(words=["9999", "4305", "4300"])
        assert SMLDisassembler().to_source(image) == (
            "// 00: 9999\n"
            "// 01: 4305\n"
            "HALT\n"
        )

    def test_disassembled_instruction_defaults(self):
        """The record can be built directly."""
        instr = DisassembledInstruction(0, 4300, 43, 0, "HALT", "4300")
        assert instr.comment == ""
        assert str(instr) == "00: 4300  HALT"
