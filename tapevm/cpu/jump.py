"""
tapevm: Jump Resolver

Resolves '[' and ']' by scanning the program store one byte at a time
with a nesting counter. There is no precomputed jump table: every taken
jump rescans.

Both scans start on the bracket being executed, so the first byte they
see moves the counter off zero. The scan stops on the partner bracket
that brings the counter back to zero and returns its index. The caller
leaves PC there and the dispatch loop's unconditional increment moves
past it:

  '[' taken -> PC lands on matching ']' -> resumes after the loop
  ']' taken -> PC lands on matching '['  -> resumes at the loop body

Running off either end of the program store raises UnmatchedBracket
carrying the PC of the bracket that started the scan.
"""

from ..faults import UnmatchedBracket
from .decoder import OPEN_BRACKET, CLOSE_BRACKET


def scan_forward(program, pc: int, dp: int = 0) -> int:
    """Find the ']' matching the '[' at pc."""
    depth = 0
    pos = pc
    end = len(program)
    while pos < end:
        opcode = program.fetch(pos)
        if opcode == OPEN_BRACKET:
            depth += 1
        elif opcode == CLOSE_BRACKET:
            depth -= 1
            if depth == 0:
                return pos
        pos += 1
    raise UnmatchedBracket(pc, dp, '[')


def scan_backward(program, pc: int, dp: int = 0) -> int:
    """Find the '[' matching the ']' at pc."""
    depth = 0
    pos = pc
    while pos >= 0:
        opcode = program.fetch(pos)
        if opcode == CLOSE_BRACKET:
            depth += 1
        elif opcode == OPEN_BRACKET:
            depth -= 1
            if depth == 0:
                return pos
        pos -= 1
    raise UnmatchedBracket(pc, dp, ']')
