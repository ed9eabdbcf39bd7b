"""
tapevm: Execution Faults

A fault is a programming error in the guest program detected while it
runs. The engine catches these inside step() and reports them as a
StopReason; run_or_raise() re-raises the recorded fault for callers that
prefer exceptions.

Faults are raised before the faulting step mutates anything, so the
registers they carry point at the offending instruction.
"""


class MachineFault(Exception):
    """Base class for execution-time faults."""

    def __init__(self, message: str, pc: int, dp: int):
        super().__init__(message)
        self.pc = pc
        self.dp = dp

    def __str__(self):
        return f"{self.args[0]} (pc={self.pc}, dp={self.dp})"


class PointerUnderflow(MachineFault):
    """'<' executed with the data pointer already at 0."""

    def __init__(self, pc: int, dp: int = 0):
        super().__init__("Data pointer decremented below 0", pc, dp)


class UnmatchedBracket(MachineFault):
    """A jump scan ran off the program store without finding its partner."""

    def __init__(self, pc: int, dp: int, bracket: str):
        super().__init__(f"No matching bracket for {bracket!r}", pc, dp)
        self.bracket = bracket


class EmptyCell(MachineFault):
    """'.' read a cell that was never written."""

    def __init__(self, pc: int, dp: int):
        super().__init__("Output from a cell that does not exist yet", pc, dp)
