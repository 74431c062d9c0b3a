"""CSV header/record parsing layered on LineReader."""

from .reader import CsvReader
from .tokenizer import tokenize_line

__all__ = ["CsvReader", "tokenize_line"]
