"""Resolve CLI/GUI input arguments into chunk sources."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Tuple, Union

from .base import ChunkSource
from .file_source import FileChunkSource
from .stream_source import StreamChunkSource

STDIN_MARKER = "-"


def source_for_path(target: Union[str, Path]) -> Tuple[ChunkSource, bool]:
    """Return `(source, owns_source)` for a path or `-` (standard input).

    Standard input belongs to the process, so the reader must not close it.
    """
    if str(target) == STDIN_MARKER:
        return StreamChunkSource(sys.stdin.buffer, name="<stdin>"), False
    return FileChunkSource(target), True
