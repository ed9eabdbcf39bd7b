"""
tapevm: Growable Data Tape

The tape starts empty and grows only upward, one cell at a time, when an
increment or decrement hits a cell that does not exist yet. Reads never
grow it.

Absent-cell rules:
  '+' on an absent cell appends a cell valued 1.
  '-' on an absent cell appends a cell valued ``absent_decrement``.
      The reference machine appends 1 here too, not 255. That asymmetry
      is reproduced by default; the 'symmetric' profile passes 255.
  Appending always happens at the end of the tape. If the data pointer
  is two or more cells past the end, the new cell still lands at index
  len(tape), not at the pointer.

Existing cells wrap modulo 256 in both directions.
"""

from typing import Dict, Optional

CELL_MASK = 0xFF


class Tape:
    """Lazily grown sequence of 8-bit cells."""

    def __init__(self, absent_decrement: int = 1):
        self.absent_decrement = absent_decrement & CELL_MASK
        self._cells = bytearray()

    def __len__(self) -> int:
        return len(self._cells)

    def __getitem__(self, index):
        return self._cells[index]

    # --- Core read/write ---

    def read8(self, index: int) -> Optional[int]:
        """Return the cell at index, or None when it has not been created."""
        if 0 <= index < len(self._cells):
            return self._cells[index]
        return None

    def increment(self, index: int):
        val = self.read8(index)
        if val is None:
            self._cells.append(1)
        else:
            self._cells[index] = (val + 1) & CELL_MASK

    def decrement(self, index: int):
        val = self.read8(index)
        if val is None:
            self._cells.append(self.absent_decrement)
        else:
            self._cells[index] = (val - 1) & CELL_MASK

    # --- Inspection ---

    def snapshot(self) -> bytes:
        """Copy of the current tape contents."""
        return bytes(self._cells)

    def diff_snapshots(self, snap_a: bytes, snap_b: bytes) -> Dict[int, tuple]:
        """Compare two snapshots, return {index: (old, new)} for changed cells.

        Cells present in only one snapshot are reported with None on the
        missing side.
        """
        changes = {}
        for i in range(max(len(snap_a), len(snap_b))):
            old = snap_a[i] if i < len(snap_a) else None
            new = snap_b[i] if i < len(snap_b) else None
            if old != new:
                changes[i] = (old, new)
        return changes

    def hexdump(self, start: int = 0, length: Optional[int] = None) -> str:
        """Hex dump of existing cells, 16 per row."""
        end = len(self._cells) if length is None else min(len(self._cells), start + length)
        lines = []
        for row in range(start, end, 16):
            chunk = self._cells[row:min(row + 16, end)]
            hex_bytes = ' '.join(f'{b:02X}' for b in chunk)
            ascii_bytes = ''.join(chr(b) if 0x20 <= b < 0x7F else '.' for b in chunk)
            lines.append(f'{row:05d}  {hex_bytes:<47}  {ascii_bytes}')
        return '\n'.join(lines)

    def reset(self):
        self._cells = bytearray()
