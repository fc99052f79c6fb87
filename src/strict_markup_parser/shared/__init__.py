"""Shared configuration, logging and metrics for the markup parser."""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParserConfig,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import ParseMetrics

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "CorrelationLogger",
    "ParseMetrics",
    "ParserConfig",
    "get_logger",
]
