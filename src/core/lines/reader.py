"""Line-oriented text reader over a chunked byte source."""
from __future__ import annotations

import logging
from typing import Iterator, Optional

from common.config import check_line_encoding, error_mode_from_policy
from common.errors import (
    BackendError,
    DecodingError,
    ErrorCode,
    ReaderClosed,
    SourceReadError,
    SourceUnavailable,
)
from common.models import DEFAULT_BUFFER_SIZE, ReaderSettings
from sources.base import ChunkSource, describe_source

from .buffers import LF, ChunkBuffer, LineAccumulator

logger = logging.getLogger(__name__)


class LineReader:
    """Pulls fixed-size chunks from `source` and returns one decoded line per call.

    Bytes are decoded only once a whole line is assembled, so a multi-byte
    character split across two chunks decodes correctly. `\\n`, `\\r` and
    `\\r\\n` each end exactly one line. `read_line()` returns None at end of
    stream.

    Not thread-safe: the buffers and counters belong to a single caller.
    """

    def __init__(
        self,
        source: ChunkSource,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        encoding: str = "utf-8",
        *,
        owns_source: bool = True,
        trim_lines: bool = False,
        emit_empty_lines: bool = True,
        error_policy: str = "fail-fast",
    ) -> None:
        if isinstance(buffer_size, bool) or not isinstance(buffer_size, int) or buffer_size <= 0:
            raise BackendError(
                ErrorCode.CONFIG_ERROR,
                f"buffer_size must be a positive integer, got {buffer_size!r}",
            )
        self.encoding = check_line_encoding(encoding)
        self.owns_source = owns_source
        self.trim_lines = trim_lines
        self.emit_empty_lines = emit_empty_lines
        self.error_policy = error_policy
        self.lines_read = 0
        self._errors = error_mode_from_policy(error_policy)
        self._source = source
        self._buffer_size = buffer_size
        self._chunk: Optional[ChunkBuffer] = ChunkBuffer(buffer_size)
        self._accumulator: Optional[LineAccumulator] = LineAccumulator()
        self._bytes_processed = 0
        self._opened = False
        self._exhausted = False
        self._skip_lf = False
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        source: ChunkSource,
        settings: ReaderSettings,
        *,
        owns_source: bool = True,
    ) -> "LineReader":
        return cls(
            source,
            settings.buffer_size,
            settings.encoding,
            owns_source=owns_source,
            trim_lines=settings.trim_lines,
            emit_empty_lines=settings.emit_empty_lines,
            error_policy=settings.error_policy,
        )

    @property
    def source(self) -> ChunkSource:
        return self._source

    @property
    def source_name(self) -> str:
        return describe_source(self._source)

    @property
    def buffer_size(self) -> int:
        return self._buffer_size

    @property
    def bytes_processed(self) -> int:
        """Raw bytes consumed from the source so far, terminators included."""
        return self._bytes_processed

    @property
    def closed(self) -> bool:
        return self._closed

    def open(self) -> None:
        if self._closed:
            raise ReaderClosed(context={"source": self.source_name})
        if self._opened:
            return
        if not getattr(self._source, "is_open", False):
            try:
                self._source.open()
            except BackendError:
                raise
            except OSError as exc:
                raise SourceUnavailable(
                    f"Cannot open {self.source_name}: {exc}",
                    context={"source": self.source_name},
                ) from exc
        self._opened = True
        logger.debug("Reading %s with %d-byte chunks (%s)", self.source_name, self._buffer_size, self.encoding)

    def read_line(self) -> Optional[str]:
        if self._closed:
            raise ReaderClosed(context={"source": self.source_name})
        self.open()
        while True:
            raw = self._next_raw_line()
            if raw is None:
                return None
            line = self._decode(raw)
            if self.trim_lines:
                line = line.strip()
            if line or self.emit_empty_lines:
                self.lines_read += 1
                return line

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._chunk = None
        self._accumulator = None
        if self.owns_source:
            self._source.close()
        logger.debug(
            "Closed reader for %s after %d line(s), %d byte(s)",
            self.source_name,
            self.lines_read,
            self._bytes_processed,
        )

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.read_line()
            if line is None:
                return
            yield line

    def __enter__(self) -> "LineReader":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers

    def _next_raw_line(self) -> Optional[bytes]:
        """Bytes of the next line without its terminator, or None at end of stream."""

        chunk = self._chunk
        accumulator = self._accumulator
        if self._skip_lf:
            # previous line ended on a CR at the end of a chunk
            if chunk.exhausted:
                self._fill_chunk()
            self._skip_lf = False
            if chunk.peek() == LF:
                chunk.skip(1)
                self._bytes_processed += 1
        while True:
            if chunk.exhausted and not self._fill_chunk():
                if not accumulator:
                    return None
                raw = accumulator.drain()
                self._bytes_processed += len(raw)
                return raw

            index = chunk.find_terminator()
            if index < 0:
                accumulator.extend(chunk.take(chunk.remaining))
                continue

            accumulator.extend(chunk.take(index - chunk.read_pos))
            terminator_length = 1
            if chunk.take(1) == b"\r":
                if chunk.exhausted:
                    # the LF of a CRLF pair, if any, is checked on the next call
                    self._skip_lf = True
                elif chunk.peek() == LF:
                    chunk.skip(1)
                    terminator_length = 2
            raw = accumulator.drain()
            self._bytes_processed += len(raw) + terminator_length
            return raw

    def _fill_chunk(self) -> bool:
        if self._exhausted:
            return False
        try:
            count = self._chunk.refill(self._source)
        except BackendError:
            raise
        except OSError as exc:
            raise SourceReadError(
                f"Reading from {self.source_name} failed: {exc}",
                context={"source": self.source_name, "bytes_processed": self._bytes_processed},
            ) from exc
        if count == 0:
            self._exhausted = True
            logger.debug("End of %s after %d byte(s)", self.source_name, self._bytes_processed)
            return False
        return True

    def _decode(self, raw: bytes) -> str:
        try:
            return raw.decode(self.encoding, self._errors)
        except UnicodeDecodeError as exc:
            raise DecodingError(
                f"Line ending at byte {self._bytes_processed} of {self.source_name} "
                f"is not valid {self.encoding}: {exc.reason}",
                context={
                    "source": self.source_name,
                    "bytes_processed": self._bytes_processed,
                    "position": exc.start,
                },
            ) from exc
