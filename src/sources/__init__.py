"""Byte sources consumed by LineReader (file, memory, open stream)."""

from .base import ChunkSource
from .file_source import FileChunkSource
from .memory_source import BytesChunkSource
from .factory import source_for_path
from .stream_source import StreamChunkSource

__all__ = [
	"ChunkSource",
	"FileChunkSource",
	"BytesChunkSource",
	"StreamChunkSource",
	"source_for_path",
]
