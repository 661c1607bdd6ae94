"""Structured JSON logging utility."""

from src.config_resolver.utils.logging.factory import (  # noqa: F401
    TRACE,
    configure_logging,
    disable_logging,
    get_logger,
)
from src.config_resolver.utils.logging.formatters import StructuredJSONFormatter  # noqa: F401

__all__ = [
    # Factory
    "TRACE",
    "configure_logging",
    "disable_logging",
    "get_logger",
    # Formatters
    "StructuredJSONFormatter",
]
