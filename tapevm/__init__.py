"""
tapevm: Eight-Symbol Tape Machine
==================================
An execution engine for the classic eight-symbol tape language. Programs
are raw bytes; seven of them are instructions and everything else
(including ',') is a no-op.

Architecture:
    ┌──────────┐    ┌──────────────┐    ┌──────────┐    ┌────────────┐
    │ Program  │───>│ ProgramStore │───>│ Decoder  │───>│  Handlers  │
    │ (bytes)  │    │ (mem/)       │    │ (cpu/)   │    │ (emu.py)   │
    └──────────┘    └──────────────┘    └──────────┘    └─────┬──────┘
                                                              │
                          ┌──────────────┬────────────────────┼
                          v              v                    v
                    ┌──────────┐   ┌────────────┐      ┌────────────┐
                    │   Tape   │   │ Jump scan  │      │ OutputPort │
                    │ (mem/)   │   │ (cpu/)     │      │ (periph/)  │
                    └──────────┘   └────────────┘      └────────────┘

    - mem/program.py:   append-only byte store, fetch(pc) -> byte | None
    - mem/tape.py:      upward-growing 8-bit cells, absent-cell rules
    - cpu/decoder.py:   byte -> mnemonic table, program listing
    - cpu/jump.py:      bracket matching by linear scan, no jump table
    - periph/console.py: character output, immediate and recorded
    - emu.py:           TapeMachine, step/run loop, StopReason
"""

__version__ = "0.1.0"

from typing import Optional, TextIO, Union

from .config import MachineConfig, PROFILES, DEFAULT_PROFILE
from .emu import TapeMachine, StopReason
from .faults import MachineFault, PointerUnderflow, UnmatchedBracket, EmptyCell


def run_program(source: Union[str, bytes], *, profile: str = DEFAULT_PROFILE,
                stream: Optional[TextIO] = None,
                max_steps: Optional[int] = None) -> TapeMachine:
    """Load and run a program, returning the stopped machine.

    Args:
        source: program bytes, or text (encoded as UTF-8).
        profile: machine profile name from PROFILES.
        stream: output text stream (default: sys.stdout).
        max_steps: instruction limit; None runs until the program stops.

    The stop reason is available afterwards as ``machine.stop_reason``.
    """
    if isinstance(source, str):
        source = source.encode("utf-8")
    vm = TapeMachine(MachineConfig.from_profile(profile), stream=stream)
    vm.load(source)
    vm.run(max_steps)
    return vm


__all__ = [
    "TapeMachine",
    "StopReason",
    "MachineConfig",
    "PROFILES",
    "DEFAULT_PROFILE",
    "MachineFault",
    "PointerUnderflow",
    "UnmatchedBracket",
    "EmptyCell",
    "run_program",
]
