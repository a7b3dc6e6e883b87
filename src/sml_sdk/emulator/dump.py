"""
Register and Memory Dump
========================

Text rendering of processor state for single-step tracing.

Layout::

    REGISTERS:
    accumulator:           +0008
    programCounter:           04
    instructionRegister:    4300
    operationCode:            43
    operand:                  00

    MEMORY:
              0        1        2   ...
    00    +0005    +0003    +2000   ...

Numbers are shown with an explicit sign; raw tokens are shown as stored.

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from .memory import Memory, NumericCell


GRID_COLUMNS = 10


def _signed(value: int) -> str:
    sign = "-" if value < 0 else "+"
    return f"{sign}{abs(value):04d}"


def render_registers(cpu) -> str:
    """
    Render the register block for the word at the current pc.

    The instruction register, opcode and operand describe the word about
    to be executed, so the dump reads as "before this step".
    """
    pc = cpu.pc
    word = None
    if 0 <= pc < cpu.memory.size:
        cell = cpu.memory.read(pc)
        if isinstance(cell, NumericCell):
            word = cell.value
            ir = f"{word:04d}" if word >= 0 else f"-{abs(word):04d}"
        else:
            ir = str(cell)
    else:
        ir = "----"

    lines = ["REGISTERS:"]
    lines.append(f"accumulator:{' ' * 11}{cpu.accumulator_text}")
    lines.append(f"programCounter:{' ' * 11}{pc:02d}")
    lines.append(f"instructionRegister:{' ' * 3}{ir:>5s}")
    if word is not None:
        opcode, operand = abs(word) // 100, abs(word) % 100
        lines.append(f"operationCode:{' ' * 12}{opcode:02d}")
        lines.append(f"operand:{' ' * 18}{operand:02d}")
    else:
        lines.append(f"operationCode:{' ' * 12}--")
        lines.append(f"operand:{' ' * 18}--")
    return "\n".join(lines)


def render_memory(memory: Memory) -> str:
    """Render memory as a 10-wide grid with row labels."""
    lines = ["MEMORY:"]
    header = " " * 6 + "".join(f"{i:5d}{' ' * 4}" for i in range(GRID_COLUMNS))
    lines.append(header.rstrip())

    cells = memory.cells()
    for row_start in range(0, len(cells), GRID_COLUMNS):
        row = [f"{row_start:02d}{' ' * 4}"]
        for cell in cells[row_start:row_start + GRID_COLUMNS]:
            text = _signed(cell.value) if isinstance(cell, NumericCell) else str(cell)
            row.append(f"{text:>5s}{' ' * 4}")
        lines.append("".join(row).rstrip())
    return "\n".join(lines)


def render_dump(cpu) -> str:
    """Registers, a blank line, then the memory grid."""
    return render_registers(cpu) + "\n\n" + render_memory(cpu.memory)
