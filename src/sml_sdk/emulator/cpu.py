"""
SML Processor
=============

Accumulator machine that executes 4-digit SML words held in Memory.

Registers:
- Accumulator: signed value in [-9999, 9999]
- Program counter: address of the next instruction
- Instruction register: the word being executed, split into opcode
  (word / 100) and operand (word % 100)

Execution Cycle
---------------
1. Fetch the word at pc. A raw token at pc is an InvalidInstructionError.
2. Decode and dispatch on the opcode.
3. If still running, pc += 1. A taken jump sets pc = target - 1 so that the
   increment lands on the target. HALT stops without incrementing.

Faults are terminal: the processor enters FAULTED, the faulting instruction
leaves the accumulator and memory untouched, and the RuntimeFault is raised
to the caller. Unknown opcodes and division by zero are not faults; they
are logged, recorded in ``warnings`` and execution continues.

Instrumentation
---------------
``on_instruction(pc, word) -> bool`` is called by run() before each cycle;
returning False stops with StopReason.BREAKPOINT. step() ignores the hook.

Example:
    >>> cpu = SMLProcessor(memory, ScriptedInput(["7"]))
    >>> cpu.reset(origin=2)
    >>> event = cpu.run()
    >>> print(cpu.accumulator_text, cpu.output)

Copyright (c) 2025 Hugo José Pinto & Contributors
"""

from dataclasses import dataclass
from typing import Callable, Optional
import logging

from sml_sdk.cpu import Opcode, decode, in_word_range, parse_word
from sml_sdk.errors import (
    AddressError,
    ArithmeticOverflowError,
    InputExhaustedError,
    InputRangeError,
    InvalidInstructionError,
    ModuloByZeroError,
    NonNumericValueError,
    RuntimeFault,
)
from .events import ProcessorState, StopEvent, StopReason
from .io import InputSource, OutputSink, ScriptedInput, console_output
from .memory import Memory, NumericCell, RawCell

logger = logging.getLogger(__name__)


DIVIDE_BY_ZERO_MESSAGE = "ERROR: Cannot divide by 0."


@dataclass
class CPUState:
    """
    Register file.

    Attributes:
        accumulator: Signed accumulator value
        pc: Program counter
        instruction_register: Last fetched word (as a number)
        opcode: Opcode of the last fetched word
        operand: Operand of the last fetched word
    """
    accumulator: int = 0
    pc: int = 0
    instruction_register: int = 0
    opcode: int = 0
    operand: int = 0


def _trunc_div(a: int, b: int) -> int:
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _trunc_mod(a: int, b: int) -> int:
    return a - b * _trunc_div(a, b)


class SMLProcessor:
    """
    SML accumulator processor.

    Attributes:
        memory: The Memory the processor executes from
        input_source: Source of READ tokens
        output_sink: Receives each WRITE line
        regs: The register file
        state: Current ProcessorState
        output: Every line written by WRITE since reset
        warnings: Runtime warnings since reset
        cycles: Instructions executed since reset
        on_instruction: Optional hook called before each cycle of run()
    """

    def __init__(
        self,
        memory: Memory,
        input_source: Optional[InputSource] = None,
        output_sink: Optional[OutputSink] = None,
    ):
        self.memory = memory
        self.input_source = input_source if input_source is not None else ScriptedInput()
        self.output_sink = output_sink if output_sink is not None else console_output
        self.regs = CPUState()
        self.state = ProcessorState.RUNNING
        self.output: list[str] = []
        self.warnings: list[str] = []
        self.cycles = 0

        # on_instruction(pc, word) -> bool: return False to stop run()
        self.on_instruction: Optional[Callable[[int, Optional[int]], bool]] = None
        self._break_pc: Optional[int] = None

    # =========================================================================
    # Register Access
    # =========================================================================

    @property
    def accumulator(self) -> int:
        return self.regs.accumulator

    @property
    def pc(self) -> int:
        return self.regs.pc

    @property
    def accumulator_text(self) -> str:
        """Accumulator with explicit sign, e.g. '+0008' or '-0005'."""
        sign = "-" if self.regs.accumulator < 0 else "+"
        return f"{sign}{abs(self.regs.accumulator):04d}"

    @property
    def registers(self) -> dict:
        """Register values as a dictionary."""
        return {
            "accumulator": self.regs.accumulator,
            "pc": self.regs.pc,
            "instruction_register": self.regs.instruction_register,
            "opcode": self.regs.opcode,
            "operand": self.regs.operand,
        }

    @property
    def is_running(self) -> bool:
        return self.state is ProcessorState.RUNNING

    def reset(self, origin: int = 0) -> None:
        """
        Reset registers and run state. Memory is left as is.

        Args:
            origin: Initial program counter (the instruction origin)
        """
        self.regs = CPUState(pc=origin)
        self.state = ProcessorState.RUNNING
        self.output = []
        self.warnings = []
        self.cycles = 0
        self._break_pc = None

    # =========================================================================
    # Execution Control
    # =========================================================================

    def step(self) -> StopEvent:
        """
        Execute exactly one instruction.

        Returns:
            StopEvent with reason STEP, HALTED, END_OF_MEMORY or NOT_RUNNING

        Raises:
            RuntimeFault: If the instruction faults
        """
        if not self.is_running:
            return StopEvent(StopReason.NOT_RUNNING, address=self.regs.pc)
        if self.regs.pc >= self.memory.size:
            return StopEvent(StopReason.END_OF_MEMORY, address=self.regs.pc)

        self._break_pc = None
        self._cycle()

        if self.state is ProcessorState.HALTED:
            return StopEvent(StopReason.HALTED, address=self.regs.pc, cycles=1)
        return StopEvent(StopReason.STEP, address=self.regs.pc, cycles=1)

    def run(self, max_cycles: Optional[int] = None) -> StopEvent:
        """
        Run until halt, end of memory, breakpoint or cycle limit.

        Args:
            max_cycles: Maximum instructions to execute (None for no limit)

        Returns:
            StopEvent describing why execution stopped

        Raises:
            RuntimeFault: If an instruction faults
        """
        if not self.is_running:
            return StopEvent(StopReason.NOT_RUNNING, address=self.regs.pc)

        executed = 0
        while True:
            pc = self.regs.pc
            if pc >= self.memory.size:
                logger.debug(f"Program counter reached end of memory ({pc})")
                return StopEvent(StopReason.END_OF_MEMORY, address=pc, cycles=executed)

            if max_cycles is not None and executed >= max_cycles:
                return StopEvent(StopReason.MAX_CYCLES, address=pc, cycles=executed)

            if self.on_instruction is not None:
                # Resuming from a breakpoint executes the instruction it stopped on
                if executed == 0 and pc == self._break_pc:
                    self._break_pc = None
                else:
                    cell = self.memory.read(pc)
                    word = cell.value if isinstance(cell, NumericCell) else None
                    if not self.on_instruction(pc, word):
                        self._break_pc = pc
                        return StopEvent(StopReason.BREAKPOINT, address=pc, cycles=executed)

            self._cycle()
            executed += 1

            if self.state is ProcessorState.HALTED:
                return StopEvent(StopReason.HALTED, address=self.regs.pc, cycles=executed)

    # =========================================================================
    # Fetch / Decode / Execute
    # =========================================================================

    def _cycle(self) -> None:
        try:
            cell = self.memory.read(self.regs.pc)
            if isinstance(cell, RawCell):
                raise InvalidInstructionError(cell.token, pc=self.regs.pc)

            opcode, operand = decode(cell.value)
            self.regs.instruction_register = cell.value
            self.regs.opcode = opcode
            self.regs.operand = operand

            self._execute(opcode, operand)
        except (RuntimeFault, AddressError) as e:
            self.state = ProcessorState.FAULTED
            logger.debug(f"Fault at {self.regs.pc:02d}: {e}")
            raise

        self.cycles += 1
        if self.state is ProcessorState.RUNNING:
            self.regs.pc += 1

    def _execute(self, opcode: int, operand: int) -> None:
        """Dispatch one decoded instruction."""
        match opcode:
            # I/O
            case Opcode.READ:
                self._read(operand)
            case Opcode.WRITE:
                self._write(operand)

            # Load/store
            case Opcode.LOAD:
                self.regs.accumulator = self._numeric(operand, opcode)
            case Opcode.STORE:
                self.memory.write_value(operand, self.regs.accumulator)
            case Opcode.LOADI:
                self.regs.accumulator = operand

            # Arithmetic, memory operand
            case Opcode.ADD:
                self._set_checked(self.regs.accumulator + self._numeric(operand, opcode), opcode)
            case Opcode.SUBT:
                self._set_checked(self.regs.accumulator - self._numeric(operand, opcode), opcode)
            case Opcode.MULT:
                self._set_checked(self.regs.accumulator * self._numeric(operand, opcode), opcode)
            case Opcode.DIV:
                self._divide(self._numeric(operand, opcode), opcode)
            case Opcode.MOD:
                self._modulo(self._numeric(operand, opcode), opcode)

            # Arithmetic, immediate operand
            case Opcode.ADDI:
                self._set_checked(self.regs.accumulator + operand, opcode)
            case Opcode.SUBTI:
                self._set_checked(self.regs.accumulator - operand, opcode)
            case Opcode.MULTI:
                self._set_checked(self.regs.accumulator * operand, opcode)
            case Opcode.DIVI:
                self._divide(operand, opcode)
            case Opcode.MODI:
                self._modulo(operand, opcode)

            # Control
            case Opcode.JUMP:
                self.regs.pc = operand - 1
            case Opcode.JUMPN:
                if self.regs.accumulator < 0:
                    self.regs.pc = operand - 1
            case Opcode.JUMPZ:
                if self.regs.accumulator == 0:
                    self.regs.pc = operand - 1
            case Opcode.HALT:
                self.state = ProcessorState.HALTED
                logger.debug(f"HALT at {self.regs.pc:02d}")

            case _:
                self._warn(f"Unknown opcode: {opcode}")

    # =========================================================================
    # Instruction Helpers
    # =========================================================================

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def _numeric(self, address: int, opcode: int) -> int:
        """Read a numeric cell; raw tokens cannot take part in arithmetic."""
        cell = self.memory.read(address)
        if isinstance(cell, RawCell):
            raise NonNumericValueError(address, cell.token, pc=self.regs.pc, opcode=opcode)
        return cell.value

    def _set_checked(self, result: int, opcode: int) -> None:
        if not in_word_range(result):
            raise ArithmeticOverflowError(result, pc=self.regs.pc, opcode=opcode)
        self.regs.accumulator = result

    def _divide(self, divisor: int, opcode: int) -> None:
        if divisor == 0:
            self._warn(DIVIDE_BY_ZERO_MESSAGE)
            self.regs.accumulator = 0
            return
        self._set_checked(_trunc_div(self.regs.accumulator, divisor), opcode)

    def _modulo(self, divisor: int, opcode: int) -> None:
        if divisor == 0:
            raise ModuloByZeroError(pc=self.regs.pc, opcode=opcode)
        self.regs.accumulator = _trunc_mod(self.regs.accumulator, divisor)

    def _read(self, address: int) -> None:
        token = self.input_source.read_token()
        if token is None:
            raise InputExhaustedError(pc=self.regs.pc)

        value = parse_word(token)
        if value is None:
            logger.debug(f"READ stored raw token {token!r} at {address:02d}")
            self.memory.write(address, RawCell(token))
            return
        if not in_word_range(value):
            raise InputRangeError(value, pc=self.regs.pc)
        self.memory.write_value(address, value)

    def _write(self, address: int) -> None:
        cell = self.memory.read(address)
        if isinstance(cell, RawCell):
            line = f"RESULT: {cell.token}"
        else:
            line = str(cell.value)
        self.output.append(line)
        self.output_sink(line)

    def __repr__(self) -> str:
        return (
            f"SMLProcessor(acc={self.accumulator_text}, pc={self.regs.pc:02d}, "
            f"state={self.state.name})"
        )


