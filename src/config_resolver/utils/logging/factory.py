"""Logger factory for creating configured loggers."""
import logging
import logging.handlers
import sys
from typing import Optional, Union

from src.config_resolver.utils.logging.formatters import StructuredJSONFormatter

_logger = logging.getLogger(__name__)

# Below DEBUG: per-resource lookup detail
TRACE = 5
logging.addLevelName(TRACE, "TRACE")


def _as_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    if level.upper() == "TRACE":
        return TRACE
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level}")
    return resolved


def configure_logging(
    service_name: str,
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    enable_console: bool = True,
) -> None:
    """Configure global logging settings.

    Args:
        service_name: Service name for all logs
        level: Global log level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional, rotated at 10MB)
        enable_console: Enable console output (stdout)
    """
    level = _as_level(level)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers.clear()

    # Create JSON formatter
    formatter = StructuredJSONFormatter(service_name=service_name)

    # Create handlers
    handlers = []

    # Console handler (optional)
    if enable_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    # File handler (optional)
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_file,
            maxBytes=10 * 1024 * 1024,  # 10MB
            backupCount=5,
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    # Add handlers to root logger
    for handler in handlers:
        root_logger.addHandler(handler)

    _logger.info(
        "Logging configured",
        extra={
            "service_name": service_name,
            "level": logging.getLevelName(level),
            "log_file": log_file,
            "handlers_count": len(handlers),
        },
    )


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Logger instance

    Example:
        logger = get_logger(__name__)
        logger.info("This will be structured JSON")
    """
    return logging.getLogger(name)


def disable_logging() -> None:
    """Disable all logging (use NullHandler).

    Useful for tests.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(logging.NullHandler())
