"""
Line framing for chunked serial reads.

A serial read returns whatever bytes happened to arrive before the timeout, so a
single NMEA sentence may be split over two reads and one read may carry several
sentences. SentenceBuffer keeps the unterminated tail between reads and only
hands out complete lines.
"""
import logging
from typing import Iterator

logger = logging.getLogger(__name__)

# NMEA-0183 caps a sentence at 82 characters; anything this long without a
# newline is noise (wrong baud rate, binary protocol).
DEFAULT_MAX_PENDING = 4096


class SentenceBuffer:
    """
    Accumulates raw bytes and yields complete newline-terminated text lines.

    Bytes are held until a newline arrives and are decoded one line at a time,
    so a multi-byte character split across reads still decodes correctly.
    Invalid sequences are replaced with U+FFFD instead of raising.
    The unterminated tail never grows past `max_pending` bytes; older bytes
    are dropped first.
    """
    def __init__(self, encoding: str = "utf-8", max_pending: int = DEFAULT_MAX_PENDING):
        if max_pending < 1:
            raise ValueError(f"max_pending must be positive, got {max_pending}")
        self.encoding = encoding
        self.max_pending = max_pending
        self._pending = b""

    @property
    def pending(self) -> bytes:
        """Bytes received after the last newline."""
        return self._pending

    def feed(self, data: bytes) -> Iterator[str]:
        """
        Add a chunk of raw bytes and return an iterator over the complete lines.

        The split happens here, not when the iterator is consumed, so the
        retained tail is correct for the next call either way.

        Args:
            data: Bytes from one read (may be empty).

        Returns:
            Iterator of decoded lines without line terminators. Blank lines are skipped.
        """
        parts = (self._pending + data).split(b"\n")
        tail = parts.pop()
        if len(tail) > self.max_pending:
            logger.debug("Dropping %d bytes without line terminator", len(tail) - self.max_pending)
            tail = tail[-self.max_pending:]
        self._pending = tail
        return self._decode_lines(parts)

    def _decode_lines(self, parts) -> Iterator[str]:
        for raw in parts:
            line = raw.decode(self.encoding, errors="replace").strip()
            if line:
                yield line

    def reset(self):
        self._pending = b""
