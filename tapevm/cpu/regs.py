"""
tapevm: Machine Registers

Register model for the tape machine:
  PC    : program counter, index into the program store
  DP    : data pointer, index into the tape
  steps : number of instructions executed since reset

Both indices are plain unbounded Python ints. Neither wraps: the engine
checks DP before decrementing and the jump resolver checks PC while
scanning, so a negative value never reaches the registers.
"""


class Registers:
    """Tape machine register set."""

    __slots__ = ('PC', 'DP', 'steps')

    def __init__(self):
        self.PC: int = 0      # Program counter
        self.DP: int = 0      # Data pointer
        self.steps: int = 0   # Executed instruction counter

    def advance(self):
        """Move PC to the next instruction (end of every dispatch iteration)."""
        self.PC += 1

    # --- Display ---

    def display(self) -> str:
        """Format register state for trace lines and diagnostics."""
        return f"PC={self.PC:05d} DP={self.DP:05d} STEPS={self.steps}"

    def reset(self):
        """Reset registers to power-on state."""
        self.PC = 0
        self.DP = 0
        self.steps = 0
