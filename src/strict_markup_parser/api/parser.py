"""Public parsing API.

Level 1 functions wrap :class:`MarkupParser` for the common cases:

- :func:`parse` / :func:`parse_string` return the forest of root elements
- :func:`parse_document` returns a :class:`MarkupDocument` with statistics
- :func:`parse_file` reads a file and returns a :class:`MarkupDocument`
- :func:`serialize` turns nodes back into markup

Malformed input raises a :class:`ParseError` subclass. Errors are logged at
WARNING level before being re-raised to the caller.
"""

from pathlib import Path
from typing import List, Optional, Union

from strict_markup_parser.parsing.errors import ParseError
from strict_markup_parser.parsing.parser import MarkupParser
from strict_markup_parser.shared.config import ParserConfig
from strict_markup_parser.shared.logging import get_logger
from strict_markup_parser.tree.document import MarkupDocument
from strict_markup_parser.tree.nodes import ElementNode, serialize

# Maximum length of source previews in log records
PREVIEW_LENGTH = 100

__all__ = [
    "parse",
    "parse_document",
    "parse_file",
    "parse_string",
    "serialize",
]


def _preview(source: str) -> str:
    if len(source) > PREVIEW_LENGTH:
        return source[:PREVIEW_LENGTH] + "..."
    return source


def parse(
    source: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> List[ElementNode]:
    """Parse markup into its ordered list of top-level elements.

    Args:
        source: Markup text
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The forest of root elements, at least one

    Raises:
        ParseError: The source is malformed

    Examples:
        >>> roots = parse('<a href="x">link</a><b></b>')
        >>> [root.tag_name for root in roots]
        ['a', 'b']
        >>> roots[0].text_content
        'link'
    """
    return parse_document(source, config, correlation_id).roots


def parse_string(
    source: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> List[ElementNode]:
    """Alias of :func:`parse`."""
    return parse(source, config, correlation_id)


def parse_document(
    source: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> MarkupDocument:
    """Parse markup into a :class:`MarkupDocument`.

    Raises:
        ParseError: The source is malformed
    """
    logger = get_logger(__name__, correlation_id, "parse_document")
    logger.info(
        "Starting markup parse",
        extra={"content_length": len(source), "preview": _preview(source)}
    )

    parser = MarkupParser(config=config, correlation_id=correlation_id)
    try:
        roots, metrics = parser.parse_with_metrics(source)
    except ParseError as e:
        logger.warning(
            "Markup parse failed",
            extra={
                "error_type": type(e).__name__,
                "error": e.message,
                "line": e.line,
                "column": e.column,
            }
        )
        raise

    document = MarkupDocument(
        roots=roots, metrics=metrics, correlation_id=correlation_id
    )
    logger.info(
        "Markup parse completed",
        extra={
            "root_count": len(document),
            "element_count": document.total_elements,
            "processing_time_ms": metrics.processing_time_ms,
        }
    )
    return document


def parse_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> MarkupDocument:
    """Read and parse a markup file.

    Raises:
        FileNotFoundError: The file does not exist
        ParseError: The file content is malformed
    """
    path_obj = Path(file_path)
    logger = get_logger(__name__, correlation_id, "parse_file")
    logger.debug(
        "Reading markup file",
        extra={"file_path": str(path_obj), "encoding": encoding}
    )

    with path_obj.open(encoding=encoding) as file:
        content = file.read()

    return parse_document(content, config, correlation_id)
