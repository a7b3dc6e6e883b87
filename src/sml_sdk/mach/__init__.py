"""
SML Machine Image Module
========================

This module handles the .mach machine image format written by the
assembler and read by the emulator and disassembler.

Main Components
---------------
- **MachineImage**: memory words plus the instruction origin
- **parse_mach / load_mach**: read .mach text or files

Usage:
    >>> from sml_sdk.assembler import assemble
    >>> program = assemble("x 5\\nLOAD x\\nHALT\\n")
    >>> image = program.to_image()
    >>> image.write("program.mach")
    >>> load_mach("program.mach").instruction_origin
    1
"""

from sml_sdk.mach.image import MachineImage, VARIABLES_HEADER, INSTRUCTIONS_HEADER
from sml_sdk.mach.parser import parse_mach, load_mach

__all__ = [
    "MachineImage",
    "VARIABLES_HEADER",
    "INSTRUCTIONS_HEADER",
    "parse_mach",
    "load_mach",
]
