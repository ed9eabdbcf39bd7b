"""
tapevm: Opcode Decoder / Dispatch Table

Maps program bytes to mnemonics. The instruction set has seven defined
opcodes, all single byte, no operands:

  '>'  INC_DP    data pointer += 1
  '<'  DEC_DP    data pointer -= 1
  '+'  INC_CELL  cell += 1 (mod 256)
  '-'  DEC_CELL  cell -= 1 (mod 256)
  '.'  OUT       write cell as a character
  '['  JMP_FWD   skip past matching ']' when cell is zero
  ']'  JMP_BKW   return to matching '[' when cell is non-zero

Every other byte decodes to NOP. That includes ',' (the classic input
operator), which this machine does not implement.
"""

from typing import Iterator, Optional, Tuple


# ──────────────────────────────────────────────
# Mnemonics
# ──────────────────────────────────────────────

INC_DP   = 'INC_DP'
DEC_DP   = 'DEC_DP'
INC_CELL = 'INC_CELL'
DEC_CELL = 'DEC_CELL'
OUT      = 'OUT'
JMP_FWD  = 'JMP_FWD'
JMP_BKW  = 'JMP_BKW'
NOP      = 'NOP'

# Bracket bytes, shared with the jump resolver
OPEN_BRACKET  = ord('[')
CLOSE_BRACKET = ord(']')


# ──────────────────────────────────────────────
# Opcode table
# ──────────────────────────────────────────────
# Format: opcode byte -> mnemonic

OPCODES = {
    ord('>'): INC_DP,
    ord('<'): DEC_DP,
    ord('+'): INC_CELL,
    ord('-'): DEC_CELL,
    ord('.'): OUT,
    OPEN_BRACKET:  JMP_FWD,
    CLOSE_BRACKET: JMP_BKW,
}


def decode_opcode(program, pc: int) -> Optional[str]:
    """Fetch and decode the opcode at PC.

    Returns the mnemonic, or None when PC is past the end of the
    program store (the halt condition). Unknown bytes decode to NOP.
    """
    opcode = program.fetch(pc)
    if opcode is None:
        return None
    return OPCODES.get(opcode, NOP)


def disassemble(program, *, skip_nops: bool = True) -> Iterator[Tuple[int, int, str]]:
    """Yield (pc, byte, mnemonic) rows for a program listing."""
    for pc, opcode in enumerate(program):
        mnem = OPCODES.get(opcode, NOP)
        if skip_nops and mnem == NOP:
            continue
        yield pc, opcode, mnem


def format_listing(program, *, skip_nops: bool = True) -> str:
    """Render disassemble() output as text, one instruction per line."""
    lines = []
    for pc, opcode, mnem in disassemble(program, skip_nops=skip_nops):
        shown = chr(opcode) if 0x20 <= opcode < 0x7F else '.'
        lines.append(f"{pc:05d}  {opcode:02X}  {shown}  {mnem}")
    return '\n'.join(lines)
