"""Chunked byte buffering and line splitting over a ChunkSource."""

from .buffers import ChunkBuffer, LineAccumulator
from .reader import LineReader, check_line_encoding

__all__ = ["ChunkBuffer", "LineAccumulator", "LineReader", "check_line_encoding"]
