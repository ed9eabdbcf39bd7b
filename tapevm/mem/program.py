"""
tapevm: Program Store

Holds the program bytes exactly as loaded. Loading appends; nothing is
filtered, translated or validated, so bytes without a meaning stay in
place and decode to NOP at dispatch time. The store is read-only while
the machine runs.
"""

from pathlib import Path
from typing import Iterable, Iterator, Optional, Union
import logging

log = logging.getLogger(__name__)


class ProgramStore:
    """Append-only byte store addressed by the program counter."""

    def __init__(self):
        self._code = bytearray()

    def __len__(self) -> int:
        return len(self._code)

    def __iter__(self) -> Iterator[int]:
        return iter(self._code)

    def fetch(self, pc: int) -> Optional[int]:
        """Return the byte at pc, or None when pc is outside the store."""
        if 0 <= pc < len(self._code):
            return self._code[pc]
        return None

    # --- Loading ---

    def load(self, data: Union[bytes, bytearray, memoryview, Iterable[int]]):
        """Append raw program bytes."""
        before = len(self._code)
        self._code.extend(data)
        log.debug("Loaded %d program bytes (store now %d bytes)",
                  len(self._code) - before, len(self._code))

    def load_file(self, path: Union[str, Path]):
        """Read a whole file in binary mode and append it.

        OSError from opening or reading propagates unchanged. The file is
        read completely before anything is appended, so a failed read
        leaves the store as it was.
        """
        data = Path(path).read_bytes()
        log.info("Read %d bytes from %s", len(data), path)
        self.load(data)

    def dump(self) -> bytes:
        """Return a copy of the loaded program."""
        return bytes(self._code)

    def clear(self):
        self._code.clear()
