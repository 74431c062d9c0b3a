"""Fixed-size chunk buffer and growable line accumulator."""
from __future__ import annotations

from typing import Optional

from common.errors import SourceReadError

LF = 0x0A


class ChunkBuffer:
    """Raw bytes of the most recent chunk read from a source.

    Invariant: 0 <= read_pos <= valid_length <= capacity.
    """

    __slots__ = ("data", "read_pos", "valid_length")

    def __init__(self, capacity: int) -> None:
        self.data = bytearray(capacity)
        self.read_pos = 0
        self.valid_length = 0

    @property
    def capacity(self) -> int:
        return len(self.data)

    @property
    def remaining(self) -> int:
        return self.valid_length - self.read_pos

    @property
    def exhausted(self) -> bool:
        return self.read_pos >= self.valid_length

    def refill(self, source) -> int:
        """Replace the buffer contents with the next chunk; returns its length."""

        chunk = source.read_chunk(self.capacity)
        count = len(chunk)
        if count > self.capacity:
            raise SourceReadError(
                f"Source returned {count} bytes for a {self.capacity}-byte read",
                context={"requested": self.capacity, "returned": count},
            )
        self.data[:count] = chunk
        self.read_pos = 0
        self.valid_length = count
        return count

    def find_terminator(self) -> int:
        """Offset of the first CR or LF at or after read_pos, or -1."""

        lf = self.data.find(b"\n", self.read_pos, self.valid_length)
        # earliest of the two: a CR only counts if it sits before the first LF
        cr = self.data.find(b"\r", self.read_pos, self.valid_length if lf < 0 else lf)
        return cr if cr >= 0 else lf

    def peek(self) -> Optional[int]:
        if self.exhausted:
            return None
        return self.data[self.read_pos]

    def take(self, count: int) -> bytearray:
        end = self.read_pos + count
        taken = self.data[self.read_pos:end]
        self.read_pos = end
        return taken

    def skip(self, count: int) -> None:
        self.read_pos += count


class LineAccumulator:
    """Partial-line bytes carried across chunk boundaries."""

    __slots__ = ("_data",)

    def __init__(self) -> None:
        self._data = bytearray()

    def __len__(self) -> int:
        return len(self._data)

    def extend(self, chunk: bytes) -> None:
        self._data += chunk

    def drain(self) -> bytes:
        line = bytes(self._data)
        self._data.clear()
        return line
