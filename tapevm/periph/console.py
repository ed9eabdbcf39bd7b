"""
tapevm: Console Output Port

Receives the bytes written by the OUT instruction. Each byte is written
to the attached text stream right away as chr(value), so values 0x80-0xFF
come out as the matching Latin-1 code points in the stream's encoding,
and the stream is flushed after every character.

With ``record`` on (the default) all transmitted bytes are also kept in
tx_buffer for programmatic inspection (tests, trace dumps). Long-running
callers that only need the stream turn it off.
"""

import sys
from typing import Optional, TextIO


class OutputPort:
    """Character output sink for the tape machine."""

    def __init__(self, stream: Optional[TextIO] = None, record: bool = True):
        # None means "whatever sys.stdout is at write time", which keeps
        # pytest's capsys and redirect_stdout working.
        self._stream = stream
        self.record = record

        # TX output record: every byte written goes here while record is on
        self.tx_buffer: bytearray = bytearray()

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stdout

    def transmit(self, value: int):
        """Write one byte as a character, recording it if enabled."""
        value &= 0xFF
        if self.record:
            self.tx_buffer.append(value)
        out = self.stream
        out.write(chr(value))
        out.flush()

    @property
    def text(self) -> str:
        """Everything recorded so far, decoded byte-per-code-point."""
        return self.tx_buffer.decode('latin-1')

    def reset(self):
        self.tx_buffer = bytearray()
