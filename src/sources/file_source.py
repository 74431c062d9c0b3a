"""Chunk source backed by a file on disk."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

logger = logging.getLogger(__name__)


class FileChunkSource:
    """Opens `path` in binary mode and hands out raw chunks."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self._handle: Optional[BinaryIO] = None

    @property
    def name(self) -> str:
        return str(self.path)

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> None:
        if self._handle is not None:
            return
        # buffering=0: LineReader already owns the chunk buffer
        self._handle = self.path.open("rb", buffering=0)
        logger.debug("Opened %s", self.path)

    def read_chunk(self, max_bytes: int) -> bytes:
        if self._handle is None:
            raise OSError(f"{self.path} is not open")
        return self._handle.read(max_bytes) or b""

    def size(self) -> int:
        return self.path.stat().st_size

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.close()
        self._handle = None
        logger.debug("Closed %s", self.path)
