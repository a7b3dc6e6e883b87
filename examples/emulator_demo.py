#!/usr/bin/env python3
"""
SML Emulator Demo
=================

This script demonstrates how to use the SML SDK to:
1. Assemble a source program
2. Load it into the emulator with scripted input
3. Stop at a breakpoint and inspect the machine
4. Single-step to completion
5. Disassemble the machine image

Usage:
    python examples/emulator_demo.py

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from pathlib import Path

from sml_sdk.assembler import Assembler
from sml_sdk.disassembler import SMLDisassembler
from sml_sdk.emulator import Emulator, ScriptedInput, StopReason


def main():
    examples = Path(__file__).parent

    # ==========================================================================
    # 1. Assemble
    # ==========================================================================
    print("Assembling countdown.sml...")
    asm = Assembler()
    program = asm.assemble_file(examples / "countdown.sml")
    print(asm.get_tables())
    print(f"  Words: {asm.get_code()}")

    # ==========================================================================
    # 2. Load into the emulator
    # ==========================================================================
    # Scripted input keeps READ from prompting; countdown never reads.
    emu = Emulator(input_source=ScriptedInput([]))
    emu.load_program(program)

    # ==========================================================================
    # 3. Run to a breakpoint
    # ==========================================================================
    # Stop before each JUMPZ and look at the counter.
    jumpz = asm.get_labels()["done"] - 2
    emu.add_breakpoint(jumpz)

    event = emu.run()
    while event.reason is StopReason.BREAKPOINT:
        print(f"\n{event}: n = {emu.memory.read(0)}, accumulator = {emu.cpu.accumulator_text}")
        event = emu.run()
    print(f"\n{event}")

    # ==========================================================================
    # 4. Single-step from the start
    # ==========================================================================
    emu.reset()
    emu.clear_breakpoints()
    print("\nStepping...")
    while emu.step().reason is StopReason.STEP:
        pass
    print(emu.dump())

    # ==========================================================================
    # 5. Disassemble
    # ==========================================================================
    print()
    print(SMLDisassembler().disassemble_to_text(program.to_image()))

    print("\nDone!")


if __name__ == "__main__":
    main()
