"""
Frame Reader
============

Delimiter-aware accumulator that turns a raw byte stream into frames.

Framing Rules:
    - No finish sequence: every chunk is one frame, passed through as-is
    - Finish sequence set: bytes are buffered and each frame is the
      content between the start sequence (if any) and the finish sequence,
      delimiters excluded
    - Bytes preceding a start sequence are discarded
    - Changing either delimiter resets the buffer
    - Buffer is bounded; overflow discards everything buffered
"""

import logging
from typing import List


logger = logging.getLogger(__name__)


class FrameReader:
    """
    Splits a byte stream into frames using start/finish delimiters.

    Satisfies the Transport protocol, so the mode controller can push
    delimiter changes straight into it.

    Example:
        reader = FrameReader()
        reader.set_start_sequence(b"/*")
        reader.set_finish_sequence(b"*/")
        reader.feed(b"noise/*1,2,")   # -> []
        reader.feed(b"3*/")           # -> [b"1,2,3"]
    """

    def __init__(self, max_buffer_size: int = 1024 * 1024) -> None:
        """
        Initialize frame reader.

        Args:
            max_buffer_size: Maximum bytes held while waiting for a
                finish sequence. Must be >= 1.
        """
        if max_buffer_size < 1:
            raise ValueError("max_buffer_size must be >= 1")

        self._max_buffer_size = max_buffer_size
        self._start: bytes = b""
        self._finish: bytes = b""
        self._buffer = bytearray()
        self._overflow_count: int = 0

    @property
    def start_sequence(self) -> bytes:
        return self._start

    @property
    def finish_sequence(self) -> bytes:
        return self._finish

    @property
    def buffered_bytes(self) -> int:
        return len(self._buffer)

    @property
    def overflow_count(self) -> int:
        return self._overflow_count

    def set_start_sequence(self, sequence: bytes) -> None:
        self._start = bytes(sequence)
        self._buffer.clear()

    def set_finish_sequence(self, sequence: bytes) -> None:
        self._finish = bytes(sequence)
        self._buffer.clear()

    def feed(self, chunk: bytes) -> List[bytes]:
        """
        Consume a raw chunk.

        Args:
            chunk: Bytes received from the device link

        Returns:
            Complete frames extracted so far, in arrival order
        """
        if not chunk:
            return []

        if not self._finish:
            return [bytes(chunk)]

        self._buffer.extend(chunk)
        frames = self._extract()

        if len(self._buffer) > self._max_buffer_size:
            self._overflow_count += 1
            logger.warning(
                f"Frame buffer exceeded {self._max_buffer_size} bytes "
                f"without a finish sequence, discarding. "
                f"Total overflows: {self._overflow_count}"
            )
            self._buffer.clear()

        return frames

    def _extract(self) -> List[bytes]:
        frames: List[bytes] = []

        while True:
            if self._start:
                begin = self._buffer.find(self._start)
                if begin < 0:
                    # Keep a possible partial start sequence at the tail
                    keep = len(self._start) - 1
                    if keep > 0:
                        del self._buffer[:-keep]
                    else:
                        self._buffer.clear()
                    break
                del self._buffer[:begin]
                payload_start = len(self._start)
            else:
                payload_start = 0

            end = self._buffer.find(self._finish, payload_start)
            if end < 0:
                break

            frames.append(bytes(self._buffer[payload_start:end]))
            del self._buffer[:end + len(self._finish)]

        return frames
