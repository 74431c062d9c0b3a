from __future__ import annotations

import json

from common.models import ReadProgress
from common.progress import ProgressLogger, ProgressTracker


def test_progress_logger_appends_jsonl(tmp_path) -> None:
    path = tmp_path / "nested" / "progress.jsonl"
    logger = ProgressLogger(path)
    logger.emit(ReadProgress(source_name="a.csv", bytes_processed=5, total_bytes=10, lines_read=1, current_phase="reading"))
    logger.emit(ReadProgress(source_name="a.csv", bytes_processed=10, total_bytes=10, lines_read=2, current_phase="complete"))
    events = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [event["fraction"] for event in events] == [0.5, 1.0]
    assert all("timestamp" in event for event in events)


def test_progress_logger_without_path_is_silent(tmp_path) -> None:
    ProgressLogger(None).emit(
        ReadProgress(source_name="a", bytes_processed=0, total_bytes=None, lines_read=0, current_phase="reading")
    )
    assert list(tmp_path.iterdir()) == []


def test_fraction_unknown_without_total() -> None:
    progress = ReadProgress(source_name="-", bytes_processed=3, total_bytes=None, lines_read=1, current_phase="reading")
    assert progress.fraction is None


def test_tracker_emits_on_interval_and_finish(tmp_path) -> None:
    path = tmp_path / "progress.jsonl"
    tracker = ProgressTracker(ProgressLogger(path), source_name="s", total_bytes=None, interval=3)
    for lines_read in range(1, 8):
        tracker.maybe_emit(bytes_processed=lines_read * 2, lines_read=lines_read, records_read=lines_read - 1)
    tracker.finish(bytes_processed=14, lines_read=7, records_read=6)
    events = [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]
    assert [(event["current_phase"], event["lines_read"]) for event in events] == [
        ("reading", 3),
        ("reading", 6),
        ("complete", 7),
    ]
    assert events[-1]["records_read"] == 6
