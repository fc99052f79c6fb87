"""Node model for parsed markup.

A parsed document is a forest of :class:`ElementNode` trees. Elements own an
ordered list of children mixing :class:`TextNode` and nested elements in
document order, so concatenating text depth-first reproduces every text run
of the source. There are no parent references; an element exclusively owns
its subtree.

Both node kinds serialize back to markup with :meth:`Node.serialize` (also
available as ``str(node)``). Text is emitted verbatim, without escaping.

Tree walks use an explicit stack rather than recursion, so any tree the
parser accepts can be read, compared and serialized regardless of depth.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


class Node(ABC):
    """Shared interface of the two node kinds."""

    __slots__ = ()

    @property
    @abstractmethod
    def text_content(self) -> str:
        """All character data in this node, in document order."""

    @abstractmethod
    def serialize(self) -> str:
        """Markup for this node."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation of this node."""

    def __str__(self) -> str:
        return self.serialize()


class TextNode(Node):
    """A run of character data."""

    __slots__ = ("content",)

    def __init__(self, content: str = "") -> None:
        self.content = content or ""

    @property
    def text_content(self) -> str:
        return self.content

    @text_content.setter
    def text_content(self, content: str) -> None:
        self.content = content

    def serialize(self) -> str:
        return self.content

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "text", "content": self.content}

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TextNode):
            return NotImplemented
        return self.content == other.content

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"TextNode({self.content!r})"


class ElementNode(Node):
    """An element with a tag name, ordered attributes and ordered children.

    ``attributes`` is a plain ``dict``: keys keep the position of their first
    insertion, and assigning to an existing key replaces the value in place.
    That is exactly how duplicate attributes in the source resolve.
    """

    __slots__ = ("tag_name", "attributes", "children")

    def __init__(
        self,
        tag_name: str,
        attributes: Optional[Dict[str, str]] = None,
        children: Optional[List[Node]] = None
    ) -> None:
        if not tag_name:
            raise ValueError("Element tag name cannot be empty")
        self.tag_name = tag_name
        self.attributes: Dict[str, str] = dict(attributes) if attributes else {}
        self.children: List[Node] = list(children) if children else []

    @property
    def text_content(self) -> str:
        """Depth-first concatenation of all descendant text."""
        return "".join(
            node.content for node in self.iter_descendants()
            if isinstance(node, TextNode)
        )

    @text_content.setter
    def text_content(self, content: str) -> None:
        # Non-text children are dropped, existing text children are kept and
        # the new text is appended after them.
        self.children = [child for child in self.children if isinstance(child, TextNode)]
        self.children.append(TextNode(content))

    @property
    def element_children(self) -> List["ElementNode"]:
        """Direct children that are elements."""
        return [child for child in self.children if isinstance(child, ElementNode)]

    def append(self, child: Node) -> None:
        """Append a child node."""
        if not isinstance(child, Node):
            raise TypeError("Child must be a TextNode or ElementNode")
        self.children.append(child)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        return name in self.attributes

    def iter_descendants(self) -> Iterator[Node]:
        """Iterate over every descendant node, text included, in document order."""
        stack: List[Node] = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, ElementNode):
                stack.extend(reversed(node.children))

    def iter(self) -> Iterator["ElementNode"]:
        """Iterate over this element and its descendant elements, depth-first."""
        yield self
        for node in self.iter_descendants():
            if isinstance(node, ElementNode):
                yield node

    def find(self, tag_name: str) -> Optional["ElementNode"]:
        """Find the first descendant element with a matching tag name."""
        return next(
            (elem for elem in self.iter() if elem is not self and elem.tag_name == tag_name),
            None,
        )

    def find_all(self, tag_name: str) -> List["ElementNode"]:
        """Find all descendant elements with a matching tag name."""
        return [
            elem for elem in self.iter()
            if elem is not self and elem.tag_name == tag_name
        ]

    def opening_tag(self) -> str:
        attributes_string = ""
        if self.attributes:
            attributes_string = " " + " ".join(
                f'{name}="{value}"' for name, value in self.attributes.items()
            )
        return f"<{self.tag_name}{attributes_string}>"

    def closing_tag(self) -> str:
        return f"</{self.tag_name}>"

    def serialize(self) -> str:
        parts: List[str] = []
        # Closing tags are pushed as plain strings between the nodes
        stack: List[Union[Node, str]] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, TextNode):
                parts.append(item.content)
            else:
                parts.append(item.opening_tag())
                stack.append(item.closing_tag())
                stack.extend(reversed(item.children))
        return "".join(parts)

    def _shallow_dict(self) -> Dict[str, Any]:
        return {
            "type": "element",
            "tag_name": self.tag_name,
            "attributes": dict(self.attributes),
            "children": [],
        }

    def to_dict(self) -> Dict[str, Any]:
        result = self._shallow_dict()
        stack: List[Tuple[ElementNode, Dict[str, Any]]] = [(self, result)]
        while stack:
            element, data = stack.pop()
            for child in element.children:
                if isinstance(child, ElementNode):
                    child_data = child._shallow_dict()
                    stack.append((child, child_data))
                else:
                    child_data = child.to_dict()
                data["children"].append(child_data)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ElementNode):
            return NotImplemented
        pairs: List[Tuple[ElementNode, ElementNode]] = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if (
                left.tag_name != right.tag_name
                or list(left.attributes.items()) != list(right.attributes.items())
                or len(left.children) != len(right.children)
            ):
                return False
            for left_child, right_child in zip(left.children, right.children):
                if isinstance(left_child, ElementNode) and isinstance(right_child, ElementNode):
                    pairs.append((left_child, right_child))
                elif left_child != right_child:
                    return False
        return True

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"ElementNode({self.tag_name!r}, attributes={self.attributes!r}, "
            f"children={len(self.children)})"
        )


def serialize(nodes: Union[Node, List[Node]]) -> str:
    """Serialize a node or a forest of nodes back to markup."""
    if isinstance(nodes, Node):
        return nodes.serialize()
    return "".join(node.serialize() for node in nodes)
