"""In-memory chunk source, handy for tests and small payloads."""
from __future__ import annotations

from typing import Optional


class BytesChunkSource:
    """Serves slices of `payload`.

    `max_chunk` caps every read below what the caller asked for, simulating a
    source that returns short reads.
    """

    def __init__(self, payload: bytes, *, name: str = "<memory>", max_chunk: Optional[int] = None) -> None:
        self.payload = bytes(payload)
        self.name = name
        self.max_chunk = max_chunk
        self.open_calls = 0
        self.closed = False
        self._offset = 0
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    def open(self) -> None:
        self.open_calls += 1
        self._is_open = True
        self.closed = False

    def read_chunk(self, max_bytes: int) -> bytes:
        if not self._is_open:
            raise OSError(f"{self.name} is not open")
        limit = max_bytes if self.max_chunk is None else min(max_bytes, self.max_chunk)
        chunk = self.payload[self._offset:self._offset + limit]
        self._offset += len(chunk)
        return chunk

    def size(self) -> int:
        return len(self.payload)

    def close(self) -> None:
        self._is_open = False
        self.closed = True
