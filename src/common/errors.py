"""Shared error codes and exceptions for readers, sources, and the CLI."""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    SCHEMA_ERROR = "SCHEMA_ERROR"
    IO_ERROR = "IO_ERROR"
    DECODE_ERROR = "DECODE_ERROR"
    STATE_ERROR = "STATE_ERROR"


class BackendError(RuntimeError):
    """Exception carrying a structured error code for CLI/readers."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:  # pragma: no cover - formatting sugar
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value


class SourceUnavailable(BackendError):
    """The underlying byte source could not be opened."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.IO_ERROR, message, context=context)


class SourceReadError(BackendError):
    """A chunk read failed part-way through the stream. Never retried."""

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.IO_ERROR, message, context=context)


class DecodingError(BackendError):
    """Line bytes are not valid under the configured encoding.

    The reader has already moved past the offending bytes, so callers may keep
    reading subsequent lines.
    """

    def __init__(self, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.DECODE_ERROR, message, context=context)


class EmptyHeader(BackendError):
    """CSV header read reached end-of-stream immediately."""

    def __init__(self, message: str = "CSV input has no header line", *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.SCHEMA_ERROR, message, context=context)


class ReaderClosed(BackendError):
    def __init__(self, message: str = "reader is closed", *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(ErrorCode.STATE_ERROR, message, context=context)
