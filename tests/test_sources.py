from __future__ import annotations

import io
import sys

import pytest

from common.errors import ErrorCode, SourceUnavailable
from core.lines import LineReader
from sources import BytesChunkSource, ChunkSource, FileChunkSource, StreamChunkSource, source_for_path
from sources.base import describe_source, source_size


def test_file_source_reads_in_chunks(tmp_path) -> None:
    path = tmp_path / "data.txt"
    path.write_bytes(b"0123456789")
    source = FileChunkSource(path)
    source.open()
    source.open()
    assert source.is_open
    assert source.read_chunk(4) == b"0123"
    assert source.read_chunk(4) == b"4567"
    assert source.read_chunk(4) == b"89"
    assert source.read_chunk(4) == b""
    assert source.size() == 10
    source.close()
    source.close()
    assert not source.is_open


def test_file_source_must_be_opened_before_reading(tmp_path) -> None:
    source = FileChunkSource(tmp_path / "data.txt")
    with pytest.raises(OSError):
        source.read_chunk(4)


def test_missing_file_is_source_unavailable(tmp_path) -> None:
    reader = LineReader(FileChunkSource(tmp_path / "missing.csv"), 16)
    with pytest.raises(SourceUnavailable) as exc:
        reader.read_line()
    assert exc.value.code == ErrorCode.IO_ERROR
    assert "missing.csv" in str(exc.value)


def test_line_reader_over_file(tmp_path) -> None:
    path = tmp_path / "data.csv"
    path.write_bytes(b"a\r\nb\r\n")
    with LineReader(FileChunkSource(path), 3) as reader:
        assert list(reader) == ["a", "b"]
        assert reader.bytes_processed == path.stat().st_size
    assert not reader.source.is_open


def test_stream_source_is_not_closed_when_borrowed() -> None:
    stream = io.BytesIO(b"x\ny\n")
    reader = LineReader(StreamChunkSource(stream), 2, owns_source=False)
    assert list(reader) == ["x", "y"]
    reader.close()
    assert not stream.closed


def test_closed_stream_is_source_unavailable() -> None:
    stream = io.BytesIO(b"x")
    stream.close()
    reader = LineReader(StreamChunkSource(stream), 2)
    with pytest.raises(SourceUnavailable):
        reader.read_line()


def test_source_for_path_resolves_stdin(monkeypatch) -> None:
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"from stdin\n")))
    source, owns_source = source_for_path("-")
    assert isinstance(source, StreamChunkSource)
    assert owns_source is False
    assert list(LineReader(source, 4, owns_source=owns_source)) == ["from stdin"]


def test_source_for_path_resolves_files(tmp_path) -> None:
    source, owns_source = source_for_path(tmp_path / "data.csv")
    assert isinstance(source, FileChunkSource)
    assert owns_source is True


def test_memory_source_caps_reads() -> None:
    source = BytesChunkSource(b"abcdef", max_chunk=2)
    source.open()
    assert source.read_chunk(10) == b"ab"
    assert source.read_chunk(1) == b"c"


def test_sources_satisfy_protocol(tmp_path) -> None:
    assert isinstance(BytesChunkSource(b""), ChunkSource)
    assert isinstance(FileChunkSource(tmp_path / "x"), ChunkSource)
    assert isinstance(StreamChunkSource(io.BytesIO()), ChunkSource)


def test_describe_and_size_helpers(tmp_path) -> None:
    assert describe_source(BytesChunkSource(b"abc", name="inline")) == "inline"
    assert describe_source(object()) == "object"
    assert source_size(BytesChunkSource(b"abc")) == 3
    assert source_size(FileChunkSource(tmp_path / "missing")) is None
    assert source_size(StreamChunkSource(io.BytesIO(b"abc"))) is None
