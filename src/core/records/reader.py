"""Header-mapped CSV records on top of LineReader."""
from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from common.errors import BackendError, EmptyHeader, ErrorCode
from common.models import CsvDialect, ReaderSettings
from core.lines import LineReader
from sources.base import ChunkSource

from .tokenizer import check_dialect, tokenize_line

logger = logging.getLogger(__name__)


class CsvReader:
    """Reads a header line, then one record (field name -> value) per line.

    Rows shorter than the header are padded with empty strings; tokens beyond
    the header width are dropped. Records never span lines, so a quoted field
    cannot contain a line break.
    """

    def __init__(
        self,
        line_reader: LineReader,
        *,
        quote_char: str = '"',
        separator_char: str = ",",
    ) -> None:
        check_dialect(quote_char, separator_char)
        self.line_reader = line_reader
        self.quote_char = quote_char
        self.separator_char = separator_char
        self.records_read = 0
        self._header: Optional[Tuple[str, ...]] = None

    @classmethod
    def from_settings(
        cls,
        source: ChunkSource,
        settings: ReaderSettings,
        dialect: Optional[CsvDialect] = None,
        *,
        owns_source: bool = True,
    ) -> "CsvReader":
        dialect = dialect or CsvDialect()
        line_reader = LineReader.from_settings(source, settings, owns_source=owns_source)
        return cls(line_reader, quote_char=dialect.quote_char, separator_char=dialect.separator_char)

    @property
    def header(self) -> Optional[Tuple[str, ...]]:
        return self._header

    @header.setter
    def header(self, names: Optional[Sequence[str]]) -> None:
        # header-less inputs: caller supplies the field names up front
        self._header = tuple(names) if names is not None else None

    @property
    def bytes_processed(self) -> int:
        return self.line_reader.bytes_processed

    def tokenize(self, line: str) -> List[str]:
        return tokenize_line(line, self.quote_char, self.separator_char)

    def read_header(self) -> Tuple[str, ...]:
        line = self.line_reader.read_line()
        if line is None:
            raise EmptyHeader(context={"source": self.line_reader.source_name})
        self._header = tuple(self.tokenize(line))
        logger.debug("CSV header for %s: %s", self.line_reader.source_name, self._header)
        return self._header

    def read_record(self) -> Optional[Dict[str, str]]:
        header = self._header
        if header is None:
            raise BackendError(
                ErrorCode.STATE_ERROR,
                "read_header() must run (or header be assigned) before read_record()",
                context={"source": self.line_reader.source_name},
            )
        line = self.line_reader.read_line()
        if line is None:
            return None
        tokens = self.tokenize(line)
        width = len(header)
        if len(tokens) < width:
            tokens.extend([""] * (width - len(tokens)))
        elif len(tokens) > width:
            logger.debug(
                "Dropping %d extra field(s) on line %d of %s",
                len(tokens) - width,
                self.line_reader.lines_read,
                self.line_reader.source_name,
            )
        self.records_read += 1
        return dict(zip(header, tokens))

    def close(self) -> None:
        self.line_reader.close()

    def __iter__(self) -> Iterator[Dict[str, str]]:
        if self._header is None:
            self.read_header()
        while True:
            record = self.read_record()
            if record is None:
                return
            yield record

    def __enter__(self) -> "CsvReader":
        self.line_reader.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
