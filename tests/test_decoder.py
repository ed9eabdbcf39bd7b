"""
Tape Machine: Decoder and Jump Resolver Tests

The jump resolver is exercised directly here, independent of the
dispatch loop, so bracket matching failures point at the scan itself.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from tapevm.cpu import decoder
from tapevm.cpu.decoder import decode_opcode, disassemble, format_listing
from tapevm.cpu.jump import scan_forward, scan_backward
from tapevm.faults import UnmatchedBracket
from tapevm.mem.program import ProgramStore


def _store(code: bytes) -> ProgramStore:
    store = ProgramStore()
    store.load(code)
    return store


class TestDecodeOpcode:

    def test_defined_opcodes(self):
        cases = [
            (b">", decoder.INC_DP),
            (b"<", decoder.DEC_DP),
            (b"+", decoder.INC_CELL),
            (b"-", decoder.DEC_CELL),
            (b".", decoder.OUT),
            (b"[", decoder.JMP_FWD),
            (b"]", decoder.JMP_BKW),
        ]
        for code, mnem in cases:
            assert decode_opcode(_store(code), 0) == mnem, code

    def test_everything_else_is_nop(self):
        defined = set(b"<>+-.[]")
        store = _store(bytes(range(256)))
        for pc in range(256):
            if pc not in defined:
                assert decode_opcode(store, pc) == decoder.NOP

    def test_past_end_is_none(self):
        assert decode_opcode(_store(b"+"), 1) is None
        assert decode_opcode(_store(b""), 0) is None


class TestListing:

    def test_disassemble_skips_nops(self):
        rows = list(disassemble(b"+ x."))
        assert rows == [(0, 0x2B, decoder.INC_CELL), (3, 0x2E, decoder.OUT)]

    def test_disassemble_with_nops(self):
        rows = list(disassemble(b"+,", skip_nops=False))
        assert rows[1] == (1, 0x2C, decoder.NOP)

    def test_format_listing(self):
        text = format_listing(_store(b"[-]"))
        assert text.splitlines() == [
            "00000  5B  [  JMP_FWD",
            "00001  2D  -  DEC_CELL",
            "00002  5D  ]  JMP_BKW",
        ]

    def test_format_listing_unprintable(self):
        text = format_listing(b"\x00", skip_nops=False)
        assert text == "00000  00  .  NOP"


class TestJumpResolver:

    def test_forward_simple(self):
        assert scan_forward(_store(b"[-]"), 0) == 2

    def test_forward_nested(self):
        store = _store(b"[[]]")
        assert scan_forward(store, 0) == 3
        assert scan_forward(store, 1) == 2

    def test_forward_skips_other_bytes(self):
        assert scan_forward(_store(b"[a[b]c]d"), 0) == 6

    def test_backward_simple(self):
        assert scan_backward(_store(b"[-]"), 2) == 0

    def test_backward_nested(self):
        store = _store(b"[[]]")
        assert scan_backward(store, 3) == 0
        assert scan_backward(store, 2) == 1

    def test_forward_unmatched(self):
        with pytest.raises(UnmatchedBracket) as exc:
            scan_forward(_store(b"+[[]"), 1, dp=4)
        assert exc.value.pc == 1
        assert exc.value.dp == 4
        assert exc.value.bracket == '['

    def test_backward_unmatched(self):
        with pytest.raises(UnmatchedBracket) as exc:
            scan_backward(_store(b"[]]"), 2)
        assert exc.value.pc == 2
        assert exc.value.bracket == ']'
