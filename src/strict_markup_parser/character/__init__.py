"""Character-level scanning of markup source text."""

from .cursor import Cursor, is_token_char, is_whitespace

__all__ = [
    "Cursor",
    "is_token_char",
    "is_whitespace",
]
