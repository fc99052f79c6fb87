"""Recursive-descent parser for the strict markup dialect.

Grammar::

    document := (ws element)+ ws
    element  := '<' name attrs '>' content '</' name '>'
    name     := tokenchar+              ; tokenchar = ASCII word char | '-'
    attrs    := (ws name '=' '"' value '"')*
    value    := any char except '"'     ; no escape sequences
    content  := (textrun | element)*
    textrun  := any char except '<'     ; non-empty runs only

There are no comments, CDATA sections, doctypes, self-closing tags or entity
references. Any deviation from the grammar raises a :class:`ParseError`
subclass; nothing is recovered and no partial tree is returned.
"""

import time
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from strict_markup_parser.character.cursor import Cursor
from strict_markup_parser.shared.config import ParserConfig
from strict_markup_parser.shared.logging import get_logger
from strict_markup_parser.shared.result import ParseMetrics
from strict_markup_parser.tree.nodes import ElementNode, TextNode

from .errors import (
    EmptyAttributeName,
    EmptyTagName,
    MultipleRootElements,
    NestingTooDeep,
    ParseError,
    TagNameMismatch,
    UnexpectedEndOfInput,
)

MS_PER_SECOND = 1000


def _not_tag_open(char: str) -> bool:
    return char != "<"


def _not_quote(char: str) -> bool:
    return char != '"'


@dataclass
class ParseSession:
    """Mutable state of one parse call: the cursor, nesting depth and counters."""

    cursor: Cursor
    depth: int = 0
    metrics: ParseMetrics = field(default_factory=ParseMetrics)

    @classmethod
    def start(cls, source: str) -> "ParseSession":
        return cls(
            cursor=Cursor(source),
            metrics=ParseMetrics(characters_processed=len(source)),
        )


class MarkupParser:
    """Parse markup source text into a forest of :class:`ElementNode`.

    The parser holds only configuration. Every :meth:`parse` call creates its
    own :class:`ParseSession` and passes it down the descent, so one instance
    can be reused across calls and shared between threads.
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "parser")

    def parse(self, source: str) -> List[ElementNode]:
        """Parse ``source`` and return its top-level elements in order.

        Raises:
            ParseError: The source does not match the grammar
        """
        roots, _ = self.parse_with_metrics(source)
        return roots

    def parse_with_metrics(self, source: str) -> Tuple[List[ElementNode], ParseMetrics]:
        """Parse ``source`` and also return the metrics gathered for this call."""
        if not isinstance(source, str):
            raise TypeError(f"Markup source must be str, not {type(source).__name__}")

        start_time = time.perf_counter()
        session = ParseSession.start(source)

        self.logger.debug(
            "Starting markup parse",
            extra={"content_length": len(source), "max_depth": self.config.max_depth}
        )

        try:
            roots = self.parse_document(session)
        except ParseError as e:
            self.logger.debug(
                "Markup parse failed",
                extra={"error_type": type(e).__name__, "position": e.position}
            )
            raise
        finally:
            session.metrics.processing_time_ms = (
                (time.perf_counter() - start_time) * MS_PER_SECOND
            )

        self.logger.debug(
            "Markup parse completed",
            extra={
                "root_count": len(roots),
                "elements_built": session.metrics.elements_built,
                "processing_time_ms": session.metrics.processing_time_ms,
            }
        )
        return roots, session.metrics

    def parse_document(self, session: ParseSession) -> List[ElementNode]:
        cursor = session.cursor
        roots: List[ElementNode] = []

        while True:
            cursor.consume_whitespace()
            if roots and self.config.single_root:
                raise MultipleRootElements(cursor.position, cursor.source)
            roots.append(self.parse_element(session))
            cursor.consume_whitespace()
            if cursor.is_at_end():
                break

        return roots

    def parse_element(self, session: ParseSession) -> ElementNode:
        cursor = session.cursor
        start = cursor.position

        session.depth += 1
        if session.depth > self.config.max_depth:
            raise NestingTooDeep(self.config.max_depth, start, cursor.source)

        cursor.consume_char("<")

        tag_name = cursor.consume_token()
        if not tag_name:
            raise EmptyTagName(cursor.position, cursor.source)

        element = ElementNode(tag_name)
        session.metrics.elements_built += 1

        self.parse_attributes(session, element)
        cursor.consume_char(">")

        while True:
            text = cursor.consume_while(_not_tag_open)
            if text:
                element.children.append(TextNode(text))
                session.metrics.text_nodes_built += 1

            if cursor.next_char() == "<" and cursor.look_ahead(1) != "/":
                element.children.append(self.parse_element(session))
                continue
            break

        cursor.consume_char("<")
        cursor.consume_char("/")

        closing_start = cursor.position
        closing_name = cursor.consume_token()
        if closing_name != tag_name:
            raise TagNameMismatch(tag_name, closing_name, closing_start, cursor.source)

        cursor.consume_char(">")

        session.depth -= 1
        return element

    def parse_attributes(self, session: ParseSession, element: ElementNode) -> None:
        """Read attributes up to the closing ``>`` of an opening tag.

        A repeated attribute keeps its first position and takes the last value.
        """
        cursor = session.cursor

        while True:
            cursor.consume_whitespace()
            if cursor.next_char() == ">":
                return
            if cursor.is_at_end():
                raise UnexpectedEndOfInput(cursor.source, cursor.position)

            name_start = cursor.position
            name = cursor.consume_token()
            if not name:
                raise EmptyAttributeName(name_start, cursor.source)

            cursor.consume_char("=")
            cursor.consume_char('"')
            value = cursor.consume_while(_not_quote)
            cursor.consume_char('"')

            element.attributes[name] = value
