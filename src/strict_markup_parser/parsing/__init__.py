"""Grammar and error types for the strict markup dialect."""

from .errors import (
    EmptyAttributeName,
    EmptyTagName,
    MultipleRootElements,
    NestingTooDeep,
    ParseError,
    TagNameMismatch,
    UnexpectedCharacter,
    UnexpectedEndOfInput,
)
from .parser import MarkupParser, ParseSession

__all__ = [
    "EmptyAttributeName",
    "EmptyTagName",
    "MarkupParser",
    "MultipleRootElements",
    "NestingTooDeep",
    "ParseError",
    "ParseSession",
    "TagNameMismatch",
    "UnexpectedCharacter",
    "UnexpectedEndOfInput",
]
