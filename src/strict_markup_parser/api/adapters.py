"""Adapters converting parsed forests to and from other XML libraries.

``xml.etree.ElementTree`` is always available. ``lxml`` and ``beautifulsoup4``
are optional; their adapters report availability through
:meth:`IntegrationAdapter.is_available` and raise
:class:`AdapterUnavailableError` when used without the library installed.

ElementTree-style trees keep text in ``.text`` (before the first child) and
``.tail`` (after each child). Conversions map those slots to and from
:class:`TextNode` children so that text order is preserved both ways.
"""

import importlib
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from strict_markup_parser.character.cursor import is_token_char
from strict_markup_parser.shared.logging import get_logger
from strict_markup_parser.tree.nodes import ElementNode, TextNode, serialize

MS_PER_SECOND = 1000


class AdapterUnavailableError(ImportError):
    """The library backing an adapter is not installed."""


@dataclass(frozen=True)
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    module_name: str
    description: str
    supports_import: bool = True


class IntegrationAdapter(ABC):
    """Base class for conversions between a forest and a target library."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    def is_available(self) -> bool:
        """Check if the target library can be imported."""
        try:
            importlib.import_module(self.metadata.module_name)
        except ImportError:
            return False
        return True

    def _load(self) -> Any:
        try:
            return importlib.import_module(self.metadata.module_name)
        except ImportError as e:
            raise AdapterUnavailableError(
                f"{self.metadata.target_library} is required for the "
                f"{self.metadata.name} adapter"
            ) from e

    def to_target(self, roots: Sequence[ElementNode]) -> Any:
        """Convert a forest into the target representation."""
        start_time = time.perf_counter()
        module = self._load()
        converted = self._convert_to(roots, module)
        self._logger.debug(
            "Converted forest",
            extra={
                "adapter": self.metadata.name,
                "root_count": len(roots),
                "conversion_time_ms": (time.perf_counter() - start_time) * MS_PER_SECOND,
            }
        )
        return converted

    def from_target(self, target: Any) -> ElementNode:
        """Convert a target element back into an :class:`ElementNode`."""
        if not self.metadata.supports_import:
            raise NotImplementedError(
                f"The {self.metadata.name} adapter only converts to its target"
            )
        self._load()
        return _element_from_etree(target)

    @abstractmethod
    def _convert_to(self, roots: Sequence[ElementNode], module: Any) -> Any:
        """Library-specific conversion of a forest."""


def _check_token(value: str, what: str) -> None:
    if not value or not all(is_token_char(char) for char in value):
        raise ValueError(f"{what} {value!r} is not a valid markup token")


def _element_to_etree(element: ElementNode, factory: Any) -> Any:
    """Build an ElementTree-compatible element through ``factory.Element``."""
    target = factory.Element(element.tag_name)
    for name, value in element.attributes.items():
        target.set(name, value)

    last_child = None
    for child in element.children:
        if isinstance(child, TextNode):
            if last_child is None:
                target.text = (target.text or "") + child.content
            else:
                last_child.tail = (last_child.tail or "") + child.content
        else:
            last_child = _element_to_etree(child, factory)
            target.append(last_child)
    return target


def _element_from_etree(source: Any) -> ElementNode:
    """Convert an ElementTree or lxml element into an :class:`ElementNode`."""
    tag = source.tag
    if not isinstance(tag, str):
        raise ValueError("Only elements can be converted, not comments or PIs")
    _check_token(tag, "Tag name")

    element = ElementNode(tag)
    for name, value in source.attrib.items():
        _check_token(name, "Attribute name")
        element.attributes[name] = value

    if source.text:
        element.children.append(TextNode(source.text))
    for child in source:
        # lxml exposes comments and processing instructions as children
        if isinstance(child.tag, str):
            element.children.append(_element_from_etree(child))
        if child.tail:
            element.children.append(TextNode(child.tail))
    return element


class ElementTreeAdapter(IntegrationAdapter):
    """Conversion to and from ``xml.etree.ElementTree`` elements."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            module_name="xml.etree.ElementTree",
            description="Forest <-> list of ElementTree.Element",
        )

    def _convert_to(self, roots: Sequence[ElementNode], module: Any) -> List[Any]:
        return [_element_to_etree(root, module) for root in roots]


class LxmlAdapter(IntegrationAdapter):
    """Conversion to and from ``lxml.etree`` elements.

    lxml enforces XML name rules, so tokens that start with a digit or hyphen
    are rejected with ``ValueError`` during conversion.
    """

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            module_name="lxml.etree",
            description="Forest <-> list of lxml.etree._Element",
        )

    def _convert_to(self, roots: Sequence[ElementNode], module: Any) -> List[Any]:
        return [_element_to_etree(root, module) for root in roots]


class BeautifulSoupAdapter(IntegrationAdapter):
    """Conversion to a ``bs4.BeautifulSoup`` document using ``html.parser``."""

    @property
    def metadata(self) -> AdapterMetadata:
        return AdapterMetadata(
            name="beautifulsoup",
            target_library="beautifulsoup4",
            module_name="bs4",
            description="Forest -> BeautifulSoup document",
            supports_import=False,
        )

    def _convert_to(self, roots: Sequence[ElementNode], module: Any) -> Any:
        return module.BeautifulSoup(serialize(list(roots)), "html.parser")


class AdapterRegistry:
    """Name-based lookup of adapter classes."""

    def __init__(self) -> None:
        self._adapters: Dict[str, type] = {}

    def register(self, adapter_class: type) -> None:
        if not issubclass(adapter_class, IntegrationAdapter):
            raise TypeError("Adapter must subclass IntegrationAdapter")
        name = adapter_class().metadata.name
        self._adapters[name] = adapter_class

    def get(
        self, name: str, correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        adapter_class = self._adapters.get(name)
        if adapter_class is None:
            return None
        return adapter_class(correlation_id)

    def names(self) -> List[str]:
        return sorted(self._adapters)


_registry = AdapterRegistry()
for _adapter_class in (ElementTreeAdapter, LxmlAdapter, BeautifulSoupAdapter):
    _registry.register(_adapter_class)


def get_adapter(
    name: str, correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter instance by name, or None if unknown."""
    return _registry.get(name, correlation_id)


def list_available_adapters() -> List[str]:
    """Names of adapters whose target library is installed."""
    return [
        name for name in _registry.names()
        if _registry.get(name).is_available()  # type: ignore[union-attr]
    ]


def is_available(name: str) -> bool:
    """Check whether the named adapter can be used."""
    adapter = get_adapter(name)
    return adapter is not None and adapter.is_available()


def to_elementtree(roots: Sequence[ElementNode]) -> List[Any]:
    """Convert a forest to ``xml.etree.ElementTree`` elements."""
    return ElementTreeAdapter().to_target(roots)


def from_elementtree(element: Any) -> ElementNode:
    """Convert an ElementTree element to an :class:`ElementNode`."""
    return ElementTreeAdapter().from_target(element)


def to_lxml(roots: Sequence[ElementNode]) -> List[Any]:
    """Convert a forest to ``lxml.etree`` elements."""
    return LxmlAdapter().to_target(roots)


def from_lxml(element: Any) -> ElementNode:
    """Convert an lxml element to an :class:`ElementNode`."""
    return LxmlAdapter().from_target(element)


def to_beautifulsoup(roots: Sequence[ElementNode]) -> Any:
    """Build a BeautifulSoup document from a forest."""
    return BeautifulSoupAdapter().to_target(roots)


__all__ = [
    "AdapterMetadata",
    "AdapterRegistry",
    "AdapterUnavailableError",
    "BeautifulSoupAdapter",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "from_elementtree",
    "from_lxml",
    "get_adapter",
    "is_available",
    "list_available_adapters",
    "to_beautifulsoup",
    "to_elementtree",
    "to_lxml",
]
