"""
SML Assembler
=============

This module provides a two-pass assembler for SML, the symbolic machine
language of a 100-word accumulator machine.

The assembler converts SML source into 4-digit signed decimal machine
words and writes them as a .mach machine image, which the emulator loads
and runs.

Main Components
---------------
- **Assembler**: Main assembler class that orchestrates the assembly process
- **Lexer**: Classifies each source line (blank, comment, label, variable,
  instruction)
- **CodeGenerator**: Allocates variables, binds labels and encodes
  instructions

Assembly Process
----------------
1. **Classification (Lexer)**:
   - Each physical line is classified on its own
   - Trailing // comments are removed

2. **Code Generation (CodeGenerator)** (two-pass):
   - Pass 1: Allocate variables from address 0, compute the instruction
     origin, bind labels to instruction addresses
   - Pass 2: Resolve mnemonics and operands, encode opcode * 100 + operand

Example Usage
-------------
>>> from sml_sdk.assembler import Assembler
>>> asm = Assembler()
>>> program = asm.assemble_string('''
... counter = 3
... loop:
...     LOAD counter
...     SUBTI 1
...     STORE counter
...     JUMPZ done
...     JUMP loop
... done:
...     HALT
... ''')
>>> program.code_words
['2000', '3601', '2100', '4206', '4001', '4300']
>>> asm.write_mach("countdown.mach")

Supported Features
------------------
- 19 instructions with memory-operand and immediate forms
- Mnemonic aliases (LOADM, ADDM, JMP, ...)
- Variables declared as "name = value", "name value" or a bare "name"
- Labels with forward references
- Listing file generation
- Symbol table output
"""

from sml_sdk.assembler.assembler import Assembler, assemble, assemble_file
from sml_sdk.assembler.lexer import (
    Lexer,
    LineKind,
    SourceLine,
    classify_source,
    is_variable_declaration,
    strip_comment,
)
from sml_sdk.assembler.codegen import (
    AssembledProgram,
    AssemblyContext,
    CodeGenerator,
    EncodedInstruction,
    Label,
    Symbol,
    format_tables,
)
from sml_sdk.cpu import (
    InstructionInfo,
    OPCODE_TABLE,
    MNEMONICS,
)

__all__ = [
    # Main class and functions
    "Assembler",
    "assemble",
    "assemble_file",
    # Lexer
    "Lexer",
    "LineKind",
    "SourceLine",
    "classify_source",
    "is_variable_declaration",
    "strip_comment",
    # Code generator
    "AssembledProgram",
    "AssemblyContext",
    "CodeGenerator",
    "EncodedInstruction",
    "Label",
    "Symbol",
    "format_tables",
    # Opcodes
    "InstructionInfo",
    "OPCODE_TABLE",
    "MNEMONICS",
]
