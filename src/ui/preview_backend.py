"""Backend for the preview window: first records of a CSV file."""
from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

from common.config import dialect_from_runtime, reader_settings_from_runtime
from common.models import CsvPreview, RuntimeConfig
from core.records import CsvReader
from sources import FileChunkSource
from sources.base import source_size


def build_preview(path: Path, runtime: RuntimeConfig, *, limit: int = 50) -> CsvPreview:
    """Read the header and at most `limit` records of `path`."""

    source = FileChunkSource(path)
    preview = CsvPreview(source_name=source.name, total_bytes=source_size(source))
    settings = reader_settings_from_runtime(runtime)
    with CsvReader.from_settings(source, settings, dialect_from_runtime(runtime)) as reader:
        preview.header = reader.read_header()
        while len(preview.records) < limit:
            record = reader.read_record()
            if record is None:
                break
            preview.records.append(record)
        preview.bytes_processed = reader.bytes_processed
        if len(preview.records) == limit:
            preview.truncated = reader.line_reader.read_line() is not None
    return preview


def preview_rows(preview: CsvPreview) -> List[Sequence[str]]:
    """Records as positional rows in header order, for table widgets."""

    return [[record.get(name, "") for name in preview.header] for record in preview.records]
