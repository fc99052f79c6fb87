"""Parse errors with positioned source excerpts.

Every error raised while parsing derives from :class:`ParseError`. When the
source text and an offset are known, the rendered message ends with the
offending source line and a caret under the exact column::

    Tag name 'b' and closing tag name 'bx' do not match:
    <a><b></bx></a>
            ↑
"""

from typing import Optional, Tuple

CARET = "↑"


def find_line_bounds(source: str, position: int) -> Tuple[int, int]:
    """Return ``(start, end)`` offsets of the line containing ``position``.

    ``start`` is one past the last newline strictly before ``position`` and
    ``end`` is the first newline at or after it; either side falls back to
    the string bounds. Out-of-range positions are clamped.
    """
    position = max(0, min(position, len(source)))
    start = source.rfind("\n", 0, position) + 1
    end = source.find("\n", position)
    if end == -1:
        end = len(source)
    return start, end


def line_and_column(source: str, position: int) -> Tuple[int, int]:
    """Return the 1-based line and 0-based column of ``position``."""
    position = max(0, min(position, len(source)))
    line_start, _ = find_line_bounds(source, position)
    return source.count("\n", 0, position) + 1, position - line_start


def render_excerpt(source: str, position: int) -> str:
    """Render the source line holding ``position`` with a caret line below."""
    start, end = find_line_bounds(source, position)
    column = max(0, min(position, len(source))) - start
    return f"{source[start:end]}\n{' ' * column}{CARET}"


class ParseError(Exception):
    """Base error for malformed markup.

    Attributes:
        message: Bare description without the excerpt
        source: Source text being parsed, if known
        position: Character offset of the problem, if known
        excerpt: Rendered line + caret, or None without source/position
        line: 1-based line of ``position``, or None
        column: 0-based column of ``position``, or None
    """

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        position: Optional[int] = None
    ) -> None:
        self.message = message
        self.source = source
        self.position = position
        self.excerpt: Optional[str] = None
        self.line: Optional[int] = None
        self.column: Optional[int] = None

        if source is not None and position is not None:
            self.excerpt = render_excerpt(source, position)
            self.line, self.column = line_and_column(source, position)
            super().__init__(f"{message}:\n{self.excerpt}")
        else:
            super().__init__(message)


class UnexpectedEndOfInput(ParseError):
    """Consumption was attempted past the end of the source."""

    def __init__(self, source: Optional[str] = None,
                 position: Optional[int] = None) -> None:
        super().__init__("Cannot consume next char: end of input reached",
                         source, position)


class UnexpectedCharacter(ParseError):
    """A specific character was required and a different one was found."""

    def __init__(self, expected: str, actual: Optional[str], position: int,
                 source: Optional[str] = None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Unexpected char {actual!r} at position {position}; "
            f"expected {expected!r}",
            source,
            position,
        )


class EmptyTagName(ParseError):
    """A ``<`` was not followed by a tag name."""

    def __init__(self, position: int, source: Optional[str] = None) -> None:
        super().__init__("Tag name cannot be empty", source, position)


class EmptyAttributeName(ParseError):
    """An attribute started with a non-token character."""

    def __init__(self, position: int, source: Optional[str] = None) -> None:
        super().__init__("Attribute name cannot be empty", source, position)


class TagNameMismatch(ParseError):
    """A closing tag does not match the element it closes."""

    def __init__(self, opening: str, closing: str, position: int,
                 source: Optional[str] = None) -> None:
        self.opening = opening
        self.closing = closing
        super().__init__(
            f"Tag name '{opening}' and closing tag name '{closing}' do not match",
            source,
            position,
        )


class NestingTooDeep(ParseError):
    """Elements are nested deeper than the configured limit."""

    def __init__(self, max_depth: int, position: int,
                 source: Optional[str] = None) -> None:
        self.max_depth = max_depth
        super().__init__(
            f"Elements nested deeper than the maximum depth of {max_depth}",
            source,
            position,
        )


class MultipleRootElements(ParseError):
    """A second top-level element was found in single-root mode."""

    def __init__(self, position: int, source: Optional[str] = None) -> None:
        super().__init__(
            "Document must contain exactly one top-level element", source, position
        )
