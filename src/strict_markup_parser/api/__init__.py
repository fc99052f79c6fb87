"""Public parsing functions and library adapters."""

from .parser import parse, parse_document, parse_file, parse_string, serialize

__all__ = [
    "parse",
    "parse_document",
    "parse_file",
    "parse_string",
    "serialize",
]
