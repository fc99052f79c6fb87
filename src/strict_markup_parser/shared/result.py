"""Metrics collected while parsing a markup document."""

from dataclasses import dataclass


@dataclass
class ParseMetrics:
    """Performance counters for a single parse call."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    elements_built: int = 0
    text_nodes_built: int = 0

    def __post_init__(self) -> None:
        """Validate metric values."""
        if self.processing_time_ms < 0:
            raise ValueError("processing_time_ms must be >= 0")
        if self.characters_processed < 0:
            raise ValueError("characters_processed must be >= 0")

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def nodes_built(self) -> int:
        """Total number of nodes created by the parser."""
        return self.elements_built + self.text_nodes_built
