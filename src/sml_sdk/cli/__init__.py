"""
SML SDK Command-Line Interface
==============================

This package provides command-line tools for the SML SDK:

- **smlasm**: SML assembler
- **smlrun**: SML virtual machine runner
- **smldisasm**: Machine image disassembler

Each tool is implemented as a Click-based CLI application with
comprehensive help and error reporting.
"""

__all__ = ["smlasm", "smlrun", "smldisasm"]
