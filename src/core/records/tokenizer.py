"""Single-pass CSV line tokenizer (quote + separator dialect)."""
from __future__ import annotations

from typing import List

from common.errors import BackendError, ErrorCode


def check_dialect(quote_char: str, separator_char: str) -> None:
    for label, value in (("quote_char", quote_char), ("separator_char", separator_char)):
        if not isinstance(value, str) or len(value) != 1:
            raise BackendError(ErrorCode.CONFIG_ERROR, f"{label} must be a single character, got {value!r}")
        if value in "\r\n":
            raise BackendError(ErrorCode.CONFIG_ERROR, f"{label} cannot be a line terminator")
    if quote_char == separator_char:
        raise BackendError(ErrorCode.CONFIG_ERROR, "quote_char and separator_char must differ")


def tokenize_line(line: str, quote_char: str = '"', separator_char: str = ",") -> List[str]:
    """Split one decoded line into fields.

    A field is quoted only when its first character is `quote_char`; inside it
    a doubled quote stands for one literal quote and separators lose their
    meaning. Text after a closing quote is kept verbatim up to the next
    separator, and an unterminated quoted field runs to the end of the line.
    Whitespace is never stripped.
    """
    fields: List[str] = []
    current: List[str] = []
    field_start = True
    in_quotes = False
    index = 0
    length = len(line)
    while index < length:
        char = line[index]
        if in_quotes:
            if char != quote_char:
                current.append(char)
            elif index + 1 < length and line[index + 1] == quote_char:
                current.append(quote_char)
                index += 1
            else:
                in_quotes = False
        elif char == separator_char:
            fields.append("".join(current))
            current = []
            field_start = True
            index += 1
            continue
        elif char == quote_char and field_start:
            in_quotes = True
        else:
            current.append(char)
        field_start = False
        index += 1
    fields.append("".join(current))
    return fields
