"""Strict Markup Parser.

Parses a small XML/HTML-like markup dialect into a forest of typed nodes and
serializes it back. Malformed input raises a positioned ParseError; there is
no error recovery.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_document(), parse_file(), serialize()
- Level 2: Configured parser - MarkupParser with ParserConfig
- Level 3: Adapters - strict_markup_parser.api.adapters
"""

__version__ = "0.1.0"
__author__ = "Strict Markup Parser Team"

# Level 1: Simple functions
from .api import parse, parse_document, parse_file, parse_string, serialize

# Level 2: Configured parser
from .parsing import (
    EmptyAttributeName,
    EmptyTagName,
    MarkupParser,
    MultipleRootElements,
    NestingTooDeep,
    ParseError,
    TagNameMismatch,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)
from .shared.config import ParserConfig

# Result objects and data structures
from .tree import ElementNode, MarkupDocument, Node, TextNode

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_document",
    "parse_file",
    "parse_string",
    "serialize",

    # Level 2: Configured parser
    "MarkupParser",
    "ParserConfig",

    # Node model
    "ElementNode",
    "MarkupDocument",
    "Node",
    "TextNode",

    # Errors
    "EmptyAttributeName",
    "EmptyTagName",
    "MultipleRootElements",
    "NestingTooDeep",
    "ParseError",
    "TagNameMismatch",
    "UnexpectedCharacter",
    "UnexpectedEndOfInput",
]
