"""Chunk source over an already-open binary stream (stdin, sockets' makefile, ...)."""
from __future__ import annotations

from typing import BinaryIO


class StreamChunkSource:
    """Adapts a binary file object.

    The stream is already open, so `open()` only checks it is readable. Pair
    with `LineReader(..., owns_source=False)` when the caller keeps using the
    stream after the reader is done.
    """

    def __init__(self, stream: BinaryIO, *, name: str = "<stream>") -> None:
        self.stream = stream
        self.name = getattr(stream, "name", None) or name
        if not isinstance(self.name, str):
            self.name = name

    def open(self) -> None:
        if self.stream.closed:
            raise OSError(f"{self.name} is already closed")

    def read_chunk(self, max_bytes: int) -> bytes:
        reader = getattr(self.stream, "read1", None) or self.stream.read
        return reader(max_bytes) or b""

    def close(self) -> None:
        self.stream.close()
