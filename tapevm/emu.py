"""
tapevm: Main Machine Class

This is the top-level class that integrates:
  - Registers (cpu/regs.py)
  - Program store (mem/program.py)
  - Data tape (mem/tape.py)
  - Opcode decoder (cpu/decoder.py)
  - Jump resolver (cpu/jump.py)
  - Console output port (periph/console.py)

Execution model, one step():
  1. Fetch + decode the byte at PC; past the end -> HALT
  2. Breakpoint check
  3. Execute the handler (tape, pointer, output, or PC for jumps)
  4. PC += 1, unconditionally, jumps included

Termination reasons:
  - HALT:               PC ran past the end of the program (normal exit)
  - TIMEOUT:            max_steps exhausted
  - BREAK:              breakpoint PC reached
  - POINTER_UNDERFLOW:  '<' with the data pointer at 0
  - UNMATCHED_BRACKET:  jump scan ran off the program store
  - EMPTY_CELL:         '.' on a cell that was never written

Faults are detected before the step mutates any state. PC is left on the
faulting instruction and stepping again reproduces the same fault.
"""

import logging
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Optional, Set, TextIO, Union

from .config import MachineConfig
from .cpu.regs import Registers
from .cpu.decoder import (
    decode_opcode,
    INC_DP, DEC_DP, INC_CELL, DEC_CELL, OUT, JMP_FWD, JMP_BKW, NOP,
)
from .cpu.jump import scan_forward, scan_backward
from .faults import MachineFault, PointerUnderflow, UnmatchedBracket, EmptyCell
from .mem.program import ProgramStore
from .mem.tape import Tape
from .periph.console import OutputPort

log = logging.getLogger(__name__)


class StopReason(Enum):
    HALT = 'HALT'
    TIMEOUT = 'TIMEOUT'
    BREAK = 'BREAK'
    POINTER_UNDERFLOW = 'POINTER_UNDERFLOW'
    UNMATCHED_BRACKET = 'UNMATCHED_BRACKET'
    EMPTY_CELL = 'EMPTY_CELL'

    @property
    def is_fault(self) -> bool:
        return self in _FAULT_REASONS


_FAULT_REASONS = frozenset((
    StopReason.POINTER_UNDERFLOW,
    StopReason.UNMATCHED_BRACKET,
    StopReason.EMPTY_CELL,
))

_FAULT_MAP = {
    PointerUnderflow: StopReason.POINTER_UNDERFLOW,
    UnmatchedBracket: StopReason.UNMATCHED_BRACKET,
    EmptyCell: StopReason.EMPTY_CELL,
}


class TapeMachine:
    """Eight-symbol tape machine.

    Usage:
        vm = TapeMachine()
        vm.load(b"++++++++[>++++++++<-]>+.")
        reason = vm.run()        # StopReason.HALT
        print(vm.console.text)   # "A"
    """

    # Trace keeps only the most recent lines
    TRACE_DEPTH = 10_000

    def __init__(self, config: Optional[MachineConfig] = None,
                 stream: Optional[TextIO] = None,
                 record_output: bool = True):
        self.config = config or MachineConfig.from_profile()

        # Core components
        self.regs = Registers()
        self.program = ProgramStore()
        self.tape = Tape(absent_decrement=self.config.absent_decrement)
        self.console = OutputPort(stream, record=record_output)

        # Outcome of the last run(); last_fault is set when it was a fault
        self.stop_reason: Optional[StopReason] = None
        self.last_fault: Optional[MachineFault] = None

        # Breakpoints: set of PC values that trigger BREAK
        self._breakpoints: Set[int] = set()
        self._resume_pc: Optional[int] = None

        # Trace output
        self._trace = False
        self._trace_output = deque(maxlen=self.TRACE_DEPTH)

        # Instruction dispatch table
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    def load(self, data):
        """Append program bytes to the program store, unmodified."""
        self.program.load(data)

    def load_file(self, path: Union[str, Path]):
        """Append the contents of a program file.

        Raises OSError if the file cannot be opened or read.
        """
        self.program.load_file(path)

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    @property
    def halted(self) -> bool:
        return self.regs.PC >= len(self.program)

    def step(self) -> Optional[StopReason]:
        """Execute one instruction. Returns StopReason if stopped, else None."""
        pc = self.regs.PC

        # Past the end is terminal, breakpoint or not
        mnem = decode_opcode(self.program, pc)
        if mnem is None:
            return StopReason.HALT

        # Breakpoint check; resuming from the same PC runs the instruction
        if pc in self._breakpoints and pc != self._resume_pc:
            self._resume_pc = pc
            return StopReason.BREAK
        self._resume_pc = None

        if self._trace:
            self._trace_output.append(f"{pc:05d}: {mnem:8s} {self.regs.display()}")

        try:
            self._dispatch[mnem]()
        except MachineFault as fault:
            self.last_fault = fault
            log.warning("Fault: %s", fault)
            if self._trace:
                self._trace_output.append(f"  FAULT: {fault}")
            return _FAULT_MAP[type(fault)]

        self.regs.steps += 1
        self.regs.advance()
        return None

    def run(self, max_steps: Optional[int] = None) -> StopReason:
        """Step until a StopReason comes back.

        Args:
            max_steps: instructions to execute before giving up with
                TIMEOUT. None runs without limit.
        """
        log.debug("Run start: %d program bytes, %s", len(self.program), self.regs.display())
        executed = 0
        while max_steps is None or executed < max_steps:
            reason = self.step()
            if reason is not None:
                break
            executed += 1
        else:
            reason = StopReason.HALT if self.halted else StopReason.TIMEOUT

        self.stop_reason = reason
        log.info("Stopped: %s after %d steps", reason.value, self.regs.steps)
        return reason

    def run_or_raise(self, max_steps: Optional[int] = None) -> StopReason:
        """Like run(), but raise the MachineFault instead of returning it."""
        reason = self.run(max_steps)
        if reason.is_fault:
            raise self.last_fault
        return reason

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════

    def _build_dispatch(self) -> dict:
        """Build mnemonic -> handler dispatch table."""
        return {
            INC_DP:   self._op_inc_dp,
            DEC_DP:   self._op_dec_dp,
            INC_CELL: self._op_inc_cell,
            DEC_CELL: self._op_dec_cell,
            OUT:      self._op_out,
            JMP_FWD:  self._op_jmp_fwd,
            JMP_BKW:  self._op_jmp_bkw,
            NOP:      self._op_nop,
        }

    # ── Pointer ──

    def _op_inc_dp(self):
        self.regs.DP += 1

    def _op_dec_dp(self):
        if self.regs.DP == 0:
            raise PointerUnderflow(self.regs.PC)
        self.regs.DP -= 1

    # ── Cells ──

    def _op_inc_cell(self):
        self.tape.increment(self.regs.DP)

    def _op_dec_cell(self):
        self.tape.decrement(self.regs.DP)

    # ── Output ──

    def _op_out(self):
        val = self.tape.read8(self.regs.DP)
        if val is None:
            raise EmptyCell(self.regs.PC, self.regs.DP)
        self.console.transmit(val)

    # ── Jumps ──
    # An absent cell compares as "not zero" in both directions.

    def _op_jmp_fwd(self):
        if self.tape.read8(self.regs.DP) == 0:
            self.regs.PC = scan_forward(self.program, self.regs.PC, self.regs.DP)

    def _op_jmp_bkw(self):
        if self.tape.read8(self.regs.DP) != 0:
            self.regs.PC = scan_backward(self.program, self.regs.PC, self.regs.DP)

    def _op_nop(self):
        pass

    # ══════════════════════════════════════════════
    # Breakpoint API
    # ══════════════════════════════════════════════

    def add_breakpoint(self, pc: int):
        """Stop with BREAK before executing the instruction at pc."""
        self._breakpoints.add(pc)

    def remove_breakpoint(self, pc: int):
        self._breakpoints.discard(pc)

    def clear_breakpoints(self):
        self._breakpoints.clear()

    # ══════════════════════════════════════════════
    # Trace / Debug
    # ══════════════════════════════════════════════

    def enable_trace(self, enable: bool = True):
        """Enable per-instruction trace recording.

        Only the last TRACE_DEPTH lines are kept.
        """
        self._trace = enable

    def get_trace(self) -> str:
        return '\n'.join(self._trace_output)

    def clear_trace(self):
        self._trace_output.clear()

    def reset(self):
        """Reset machine state. The loaded program is kept."""
        self.regs.reset()
        self.tape.reset()
        self.console.reset()
        self.stop_reason = None
        self.last_fault = None
        self._resume_pc = None
        self._breakpoints.clear()
        self._trace_output.clear()
