"""Data models shared across readers, configuration, CLI, and preview layers."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

DEFAULT_BUFFER_SIZE = 4096


@dataclass(slots=True)
class ReaderSettings:
    """Knobs consumed by LineReader.from_settings."""

    buffer_size: int = DEFAULT_BUFFER_SIZE
    encoding: str = "utf-8"
    error_policy: str = "fail-fast"  # fail-fast | replace
    trim_lines: bool = False
    emit_empty_lines: bool = True


@dataclass(slots=True)
class CsvDialect:
    """Quote and separator characters governing tokenization."""

    quote_char: str = '"'
    separator_char: str = ","


@dataclass(slots=True)
class GlobalSettings:
    """Global knobs that apply across profiles."""

    encoding: str = "utf-8"
    error_policy: str = "fail-fast"  # fail-fast | replace


@dataclass(slots=True)
class ProfileSettings:
    """Profile-specific buffering and dialect settings."""

    description: str
    buffer_size: int
    trim_lines: bool = False
    emit_empty_lines: bool = True
    quote_char: str = '"'
    separator_char: str = ","


@dataclass(slots=True)
class RuntimeConfig:
    """Resolved configuration for a single run."""

    global_settings: GlobalSettings
    profile: ProfileSettings


@dataclass(slots=True)
class ReadProgress:
    """Progress payload reported while a source is being consumed."""

    source_name: str
    bytes_processed: int
    total_bytes: Optional[int]
    lines_read: int
    current_phase: str
    records_read: Optional[int] = None
    lines_per_second: Optional[float] = None

    @property
    def fraction(self) -> Optional[float]:
        if not self.total_bytes:
            return None
        return min(1.0, self.bytes_processed / self.total_bytes)


@dataclass(slots=True)
class CsvPreview:
    """First records of a CSV source, as shown by the preview window."""

    source_name: str
    header: Tuple[str, ...] = ()
    records: List[Dict[str, str]] = field(default_factory=list)
    bytes_processed: int = 0
    total_bytes: Optional[int] = None
    truncated: bool = False
