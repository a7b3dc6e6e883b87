"""
SML SDK Disassembler Module
===========================

This module decodes SML machine words back into instructions, for listings
of .mach files and for regenerating assemblable source.

Usage:
    from sml_sdk.disassembler import SMLDisassembler
    from sml_sdk.mach import load_mach

    disasm = SMLDisassembler()
    print(disasm.disassemble_to_text(load_mach("program.mach")))

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

from .sml import SMLDisassembler, DisassembledInstruction

__all__ = [
    "SMLDisassembler",
    "DisassembledInstruction",
]
