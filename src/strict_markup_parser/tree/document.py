"""Forest container returned by the document-level parse functions."""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple

from strict_markup_parser.shared.result import ParseMetrics

from .nodes import ElementNode, TextNode, serialize


@dataclass
class MarkupDocument:
    """Ordered forest of top-level elements with document statistics.

    Statistics are computed once on construction; mutate the nodes and call
    :meth:`refresh_statistics` to bring them up to date.
    """

    roots: List[ElementNode] = field(default_factory=list)
    metrics: ParseMetrics = field(default_factory=ParseMetrics)
    correlation_id: Optional[str] = None

    total_elements: int = 0
    total_attributes: int = 0
    total_text_nodes: int = 0
    max_depth: int = 0

    def __post_init__(self) -> None:
        for root in self.roots:
            if not isinstance(root, ElementNode):
                raise TypeError("Document roots must be ElementNode instances")
        self.refresh_statistics()

    def refresh_statistics(self) -> None:
        """Recalculate document-wide statistics."""
        self.total_elements = 0
        self.total_attributes = 0
        self.total_text_nodes = 0
        self.max_depth = 0

        for element, depth in self._walk():
            self.total_elements += 1
            self.total_attributes += len(element.attributes)
            self.total_text_nodes += sum(
                1 for child in element.children if isinstance(child, TextNode)
            )
            self.max_depth = max(self.max_depth, depth)

    def _walk(self) -> Iterator[Tuple[ElementNode, int]]:
        """Yield ``(element, depth)`` pairs in document order, roots at depth 0."""
        stack = [(root, 0) for root in reversed(self.roots)]
        while stack:
            element, depth = stack.pop()
            yield element, depth
            stack.extend(
                (child, depth + 1) for child in reversed(element.element_children)
            )

    def iter_elements(self) -> Iterator[ElementNode]:
        """Iterate over all elements in document order."""
        for element, _ in self._walk():
            yield element

    def find(self, tag_name: str) -> Optional[ElementNode]:
        """Find first element with matching tag name, roots included."""
        return next(
            (elem for elem in self.iter_elements() if elem.tag_name == tag_name),
            None,
        )

    def find_all(self, tag_name: str) -> List[ElementNode]:
        """Find all elements with matching tag name, roots included."""
        return [elem for elem in self.iter_elements() if elem.tag_name == tag_name]

    def find_by_attribute(
        self, name: str, value: Optional[str] = None
    ) -> List[ElementNode]:
        """Find elements by attribute name and optionally value."""
        return [
            elem for elem in self.iter_elements()
            if name in elem.attributes
            and (value is None or elem.attributes[name] == value)
        ]

    @property
    def text_content(self) -> str:
        return "".join(root.text_content for root in self.roots)

    def serialize(self) -> str:
        return serialize(self.roots)

    def to_dict(self) -> Dict[str, Any]:
        """Convert document to dictionary representation."""
        return {
            "total_elements": self.total_elements,
            "total_attributes": self.total_attributes,
            "total_text_nodes": self.total_text_nodes,
            "max_depth": self.max_depth,
            "roots": [root.to_dict() for root in self.roots],
        }

    def __len__(self) -> int:
        return len(self.roots)

    def __iter__(self) -> Iterator[ElementNode]:
        return iter(self.roots)

    def __getitem__(self, index: int) -> ElementNode:
        return self.roots[index]
