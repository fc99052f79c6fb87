"""Character cursor over an in-memory markup source.

The cursor owns the source text and a scan position and offers the primitive
operations the parser is built from. Consumption is checked: reading past the
end or finding the wrong character raises a positioned parse error.
"""

import re
from typing import Callable, Optional

from strict_markup_parser.parsing.errors import (
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)

CharPredicate = Callable[[str], bool]

_TOKEN_CHAR = re.compile(r"[\w-]", re.ASCII)


def is_token_char(char: str) -> bool:
    """ASCII word characters (letters, digits, underscore) and hyphen."""
    return _TOKEN_CHAR.fullmatch(char) is not None


def is_whitespace(char: str) -> bool:
    return char.isspace()


class Cursor:
    """Scan position over an immutable source string."""

    def __init__(self, source: str, position: int = 0) -> None:
        if not isinstance(source, str):
            raise TypeError("Cursor source must be a string")
        if not 0 <= position <= len(source):
            raise ValueError("Cursor position out of range")
        self._source = source
        self.position = position

    @property
    def source(self) -> str:
        return self._source

    def next_char(self) -> Optional[str]:
        """Character at the current position, or None at end of input."""
        if self.position >= len(self._source):
            return None
        return self._source[self.position]

    def look_ahead(self, n: int = 1) -> Optional[str]:
        """Character ``n`` places past the current one, or None past the end."""
        if n < 1:
            n = 1
        index = self.position + n
        if index >= len(self._source):
            return None
        return self._source[index]

    def consume_char(self, expected: Optional[str] = None) -> str:
        """Consume one character, optionally requiring it to be ``expected``.

        Raises:
            UnexpectedEndOfInput: The cursor is already at the end
            UnexpectedCharacter: The next character differs from ``expected``
        """
        if self.is_at_end():
            raise UnexpectedEndOfInput(self._source, self.position)

        char = self._source[self.position]
        if expected is not None and char != expected:
            raise UnexpectedCharacter(expected, char, self.position, self._source)

        self.position += 1
        return char

    def consume_while(self, predicate: CharPredicate) -> str:
        """Consume characters while ``predicate`` holds; return the run."""
        start = self.position
        end = len(self._source)
        while self.position < end and predicate(self._source[self.position]):
            self.position += 1
        return self._source[start:self.position]

    def consume_whitespace(self) -> str:
        return self.consume_while(is_whitespace)

    def consume_token(self) -> str:
        return self.consume_while(is_token_char)

    def is_at_end(self) -> bool:
        return self.position >= len(self._source)

    def __repr__(self) -> str:
        return f"Cursor(position={self.position}, length={len(self._source)})"
