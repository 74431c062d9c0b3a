"""Capability expected from anything LineReader pulls bytes from."""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ChunkSource(Protocol):
    """Byte producer with an explicit open/read/close lifecycle.

    `read_chunk` returns at most `max_bytes` bytes; an empty result means the
    source is exhausted. Implementations raise `OSError` (or a BackendError
    subclass) on failure; LineReader maps `OSError` onto its own error kinds.
    """

    def open(self) -> None:
        ...

    def read_chunk(self, max_bytes: int) -> bytes:
        ...

    def close(self) -> None:
        ...


def describe_source(source: object) -> str:
    """Best-effort human label for logs and progress records."""

    name: Optional[str] = getattr(source, "name", None)
    return str(name) if name else type(source).__name__


def source_size(source: object) -> Optional[int]:
    size = getattr(source, "size", None)
    if size is None:
        return None
    try:
        return int(size())
    except (OSError, TypeError, ValueError):
        return None
