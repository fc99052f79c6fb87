"""Configuration for the strict markup parser.

``ParserConfig`` is an immutable dataclass so a single instance can be shared
between parser objects and threads. Presets cover the common cases, and
configurations round-trip through plain dicts and JSON files so the CLI can
load them from disk.
"""

import json
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

DEFAULT_MAX_DEPTH = 256
STRICT_MAX_DEPTH = 64
# Parsing costs one interpreter frame per nesting level and JSON encoding of
# the resulting tree costs two. Both must fit under the default recursion
# limit of 1000 with room for the caller's own stack.
MAX_SUPPORTED_DEPTH = 400
PERMISSIVE_MAX_DEPTH = MAX_SUPPORTED_DEPTH

VALID_LOGGING_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Settings controlling a single parse call.

    Attributes:
        max_depth: Maximum element nesting depth before the parser gives up
        single_root: Reject documents with more than one top-level element
        logging_level: Level the CLI configures for the root logger
        name: Optional preset name
        description: Optional human readable description
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    single_root: bool = False
    logging_level: str = "WARNING"

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the configuration."""
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
            raise ConfigValidationError(
                "max_depth must be an integer", field_name="max_depth"
            )
        if self.max_depth <= 0:
            raise ConfigValidationError(
                "max_depth must be > 0",
                field_name="max_depth",
                suggestions=[f"Use the default of {DEFAULT_MAX_DEPTH}"],
            )
        if self.max_depth > MAX_SUPPORTED_DEPTH:
            raise ConfigValidationError(
                f"max_depth must be <= {MAX_SUPPORTED_DEPTH}",
                field_name="max_depth",
                suggestions=["Use the permissive preset for deeply nested documents"],
            )
        if self.logging_level not in VALID_LOGGING_LEVELS:
            raise ConfigValidationError(
                f"logging_level must be one of {VALID_LOGGING_LEVELS}",
                field_name="logging_level",
            )

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> ParserConfig().override(max_depth=10).max_depth
            10
        """
        unknown = set(kwargs) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {sorted(unknown)}"
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        A ``preset`` key selects one of the preset factories as the base; the
        remaining keys override its fields. Unknown keys are rejected.
        """
        data = dict(data)
        preset = data.pop("preset", None)
        if preset is None:
            base = cls()
        elif preset in _PRESETS:
            base = getattr(cls, preset)()
        else:
            raise ConfigValidationError(
                f"Unknown preset: {preset!r}",
                field_name="preset",
                suggestions=sorted(_PRESETS),
            )
        return base.override(**data) if data else base

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ParserConfig":
        """Load configuration from a JSON file."""
        path_obj = Path(path)
        try:
            content = path_obj.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path_obj}: {e}") from e
        return cls.from_json(content)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """Forest documents, moderate nesting limit."""
        return cls(name="default")

    @classmethod
    def strict(cls) -> "ParserConfig":
        """Single-rooted documents with a shallow nesting limit."""
        return cls(
            max_depth=STRICT_MAX_DEPTH,
            single_root=True,
            name="strict",
            description="Exactly one top-level element, shallow nesting",
        )

    @classmethod
    def permissive(cls) -> "ParserConfig":
        """Forest documents with the deepest nesting the interpreter allows."""
        return cls(
            max_depth=PERMISSIVE_MAX_DEPTH,
            name="permissive",
            description="Deeply nested documents accepted",
        )


_PRESETS = ("default", "strict", "permissive")
