"""Structured progress logging utilities."""
from __future__ import annotations

import json
import time
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from .models import ReadProgress


class ProgressLogger:
    """Writes progress events to JSONL for later inspection."""

    def __init__(self, path: Optional[Path]) -> None:
        self.path = path
        if path:
            path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, progress: ReadProgress) -> None:
        if not self.path:
            return
        payload = asdict(progress)
        payload["fraction"] = progress.fraction
        payload["timestamp"] = time.time()
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload))
            handle.write("\n")


class ProgressTracker:
    """Emits a ReadProgress every `interval` lines plus once when finished."""

    def __init__(
        self,
        logger: ProgressLogger,
        *,
        source_name: str,
        total_bytes: Optional[int],
        interval: int = 10_000,
    ) -> None:
        self.logger = logger
        self.source_name = source_name
        self.total_bytes = total_bytes
        self.interval = max(1, interval)
        self._started = time.perf_counter()

    def maybe_emit(self, *, bytes_processed: int, lines_read: int, records_read: Optional[int] = None) -> None:
        if lines_read % self.interval == 0:
            self._emit("reading", bytes_processed, lines_read, records_read)

    def finish(self, *, bytes_processed: int, lines_read: int, records_read: Optional[int] = None) -> None:
        self._emit("complete", bytes_processed, lines_read, records_read)

    def _emit(self, phase: str, bytes_processed: int, lines_read: int, records_read: Optional[int]) -> None:
        elapsed = time.perf_counter() - self._started
        self.logger.emit(
            ReadProgress(
                source_name=self.source_name,
                bytes_processed=bytes_processed,
                total_bytes=self.total_bytes,
                lines_read=lines_read,
                current_phase=phase,
                records_read=records_read,
                lines_per_second=lines_read / elapsed if elapsed > 0 else None,
            )
        )
