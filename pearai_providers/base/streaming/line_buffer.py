"""Incremental newline splitter for streamed response bodies.

`LineBuffer` is deliberately transport-free: it is fed raw ``bytes`` in
whatever chunking the network produced and hands back complete lines. The
same byte content therefore yields the same lines regardless of where chunk
boundaries fall, including boundaries inside a line or inside a multi-byte
UTF-8 sequence.
"""
from __future__ import annotations

import codecs
from typing import List


class LineBuffer:
    """Accumulate bytes and release complete, non-blank lines.

    ``\\r\\n`` line endings are normalized; blank lines are dropped because
    the servers use them only as keep-alives.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")
        self._pending = ""

    def feed(self, data: bytes) -> List[str]:
        """Add ``data`` and return the lines it completed (possibly none)."""
        return self.feed_text(self._decoder.decode(data))

    def feed_text(self, text: str) -> List[str]:
        """Add already decoded ``text`` and return the lines it completed."""
        self._pending += text
        if "\n" not in self._pending:
            return []
        *complete, self._pending = self._pending.split("\n")
        return [line for line in (c.rstrip("\r") for c in complete) if line.strip()]

    def flush(self) -> List[str]:
        """Return the unterminated remainder at end of stream."""
        tail = (self._pending + self._decoder.decode(b"", final=True)).rstrip("\r")
        self._pending = ""
        return [tail] if tail.strip() else []

    @property
    def pending(self) -> str:
        """Text received after the last newline (not yet released)."""
        return self._pending


__all__ = ["LineBuffer"]
