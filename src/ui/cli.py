"""CLI over the buffered readers: print lines, print CSV records, count lines."""
from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from common.config import dialect_from_runtime, load_runtime_config, reader_settings_from_runtime
from common.errors import BackendError
from common.logging_setup import setup_logging
from common.models import RuntimeConfig
from common.progress import ProgressLogger, ProgressTracker
from core.lines import LineReader
from core.records import CsvReader
from sources import source_for_path
from sources.base import ChunkSource, describe_source, source_size

logger = logging.getLogger(__name__)


def resolve_runtime(args: argparse.Namespace) -> RuntimeConfig:
    """Load the selected profile and fold command-line flags into it."""

    profile: Dict[str, Any] = {}
    global_settings: Dict[str, Any] = {}
    if args.buffer_size is not None:
        profile["buffer_size"] = args.buffer_size
    if args.trim_lines:
        profile["trim_lines"] = True
    if args.skip_empty_lines:
        profile["emit_empty_lines"] = False
    if getattr(args, "quote", None) is not None:
        profile["quote_char"] = args.quote
    if getattr(args, "separator", None) is not None:
        profile["separator_char"] = _unescape_separator(args.separator)
    if args.encoding:
        global_settings["encoding"] = args.encoding
    if args.error_policy:
        global_settings["error_policy"] = args.error_policy
    config_path = Path(args.config) if args.config else None
    return load_runtime_config(
        args.profile,
        config_path=config_path,
        overrides={"profile": profile, "global": global_settings},
    )


def build_tracker(args: argparse.Namespace, source: ChunkSource) -> ProgressTracker:
    progress_log = Path(args.progress_log) if args.progress_log else None
    return ProgressTracker(
        ProgressLogger(progress_log),
        source_name=describe_source(source),
        total_bytes=source_size(source),
        interval=args.progress_interval,
    )


def command_lines(args: argparse.Namespace) -> None:
    runtime = resolve_runtime(args)
    source, owns_source = source_for_path(args.input)
    tracker = build_tracker(args, source)
    settings = reader_settings_from_runtime(runtime)
    with LineReader.from_settings(source, settings, owns_source=owns_source) as reader:
        for line in reader:
            print(line)
            tracker.maybe_emit(bytes_processed=reader.bytes_processed, lines_read=reader.lines_read)
            if args.limit and reader.lines_read >= args.limit:
                break
        tracker.finish(bytes_processed=reader.bytes_processed, lines_read=reader.lines_read)


def command_records(args: argparse.Namespace) -> None:
    runtime = resolve_runtime(args)
    source, owns_source = source_for_path(args.input)
    tracker = build_tracker(args, source)
    settings = reader_settings_from_runtime(runtime)
    dialect = dialect_from_runtime(runtime)
    with CsvReader.from_settings(source, settings, dialect, owns_source=owns_source) as reader:
        header = reader.read_header()
        logger.info("Header: %s", ", ".join(header))
        lines = reader.line_reader
        while True:
            record = reader.read_record()
            if record is None:
                break
            print(json.dumps(record, ensure_ascii=False))
            tracker.maybe_emit(
                bytes_processed=reader.bytes_processed,
                lines_read=lines.lines_read,
                records_read=reader.records_read,
            )
            if args.limit and reader.records_read >= args.limit:
                break
        tracker.finish(
            bytes_processed=reader.bytes_processed,
            lines_read=lines.lines_read,
            records_read=reader.records_read,
        )


def command_count(args: argparse.Namespace) -> None:
    runtime = resolve_runtime(args)
    source, owns_source = source_for_path(args.input)
    tracker = build_tracker(args, source)
    settings = reader_settings_from_runtime(runtime)
    with LineReader.from_settings(source, settings, owns_source=owns_source) as reader:
        for _line in reader:
            tracker.maybe_emit(bytes_processed=reader.bytes_processed, lines_read=reader.lines_read)
        tracker.finish(bytes_processed=reader.bytes_processed, lines_read=reader.lines_read)
        print(f"[count] {reader.source_name} lines={reader.lines_read} bytes={reader.bytes_processed}")


def add_reader_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("input", help="File to read, or '-' for standard input")
    parser.add_argument(
        "--profile",
        default="low_memory",
        help="Configuration profile to use (default: low_memory)",
    )
    parser.add_argument("--config", help="Path to configuration JSON (default: config/defaults.json)")
    parser.add_argument("--buffer-size", type=int, help="Chunk size in bytes (overrides profile)")
    parser.add_argument("--encoding", help="Text encoding (overrides global setting)")
    parser.add_argument(
        "--error-policy",
        choices=["fail-fast", "replace"],
        help="Undecodable lines: fail-fast raises, replace substitutes U+FFFD",
    )
    parser.add_argument("--trim-lines", action="store_true", help="Strip whitespace around each line")
    parser.add_argument("--skip-empty-lines", action="store_true", help="Do not emit empty lines")
    parser.add_argument("--progress-log", help="Append JSONL progress events to this file")
    parser.add_argument(
        "--progress-interval",
        type=int,
        default=10_000,
        help="Emit a progress event every N lines",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Buffered line and CSV record reader")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("--log-file", help="Optional log file receiving DEBUG output")
    subparsers = parser.add_subparsers(dest="command")

    lines = subparsers.add_parser("lines", help="Print decoded lines")
    add_reader_options(lines)
    lines.add_argument("--limit", type=int, default=0, help="Stop after N lines")
    lines.set_defaults(func=command_lines)

    records = subparsers.add_parser("records", help="Print CSV records as JSON lines")
    add_reader_options(records)
    records.add_argument("--quote", help="Quote character (overrides profile)")
    records.add_argument("--separator", help="Separator character, '\\t' for tab (overrides profile)")
    records.add_argument("--limit", type=int, default=0, help="Stop after N records")
    records.set_defaults(func=command_records)

    count = subparsers.add_parser("count", help="Count lines and bytes")
    add_reader_options(count)
    count.set_defaults(func=command_count)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return
    setup_logging(args.log_level, Path(args.log_file) if args.log_file else None)
    try:
        args.func(args)
    except BackendError as exc:
        raise SystemExit(str(exc)) from exc


def _unescape_separator(value: str) -> str:
    return "\t" if value == "\\t" else value


if __name__ == "__main__":
    main()
