"""Node model and document container for parsed markup."""

from .nodes import ElementNode, Node, TextNode, serialize
from .document import MarkupDocument

__all__ = [
    "ElementNode",
    "MarkupDocument",
    "Node",
    "TextNode",
    "serialize",
]
