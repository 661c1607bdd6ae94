"""Structured JSON log formatters."""
import json
import logging
import traceback
from datetime import datetime
from typing import Any, Dict


# Attributes every LogRecord has; anything else came in through extra=
_STANDARD_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", (), None).__dict__.keys()
) | {"message", "asctime", "taskName"}


def _serialize_value(value: Any) -> Any:
    """Safely serialize value to JSON-compatible type."""
    if value is None:
        return None
    elif isinstance(value, (str, int, float, bool)):
        return value
    elif isinstance(value, (list, dict)):
        return value
    elif hasattr(value, "isoformat"):
        # Handle datetime objects
        return value.isoformat()
    else:
        # Fallback: try to convert to string
        try:
            return str(value)
        except Exception:
            return f"<unserializable: {type(value).__name__}>"

# Sensitive data patterns to redact
_SENSITIVE_PATTERNS = (
    "api_key",
    "password",
    "passwd",
    "token",
    "secret",
    "authorization",
    "bearer",
)


def _redact_sensitive(data: Any) -> Any:
    """Redact sensitive values from data.

    Config values routinely carry credentials, so any key that looks like
    one is replaced with [REDACTED] before it reaches a log line.

    Args:
        data: Data to redact (can be dict, list, or primitive)

    Returns:
        Redacted data with sensitive values replaced with [REDACTED]
    """
    if isinstance(data, dict):
        redacted = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if any(pattern in key_lower for pattern in _SENSITIVE_PATTERNS):
                redacted[key] = "[REDACTED]"
            elif isinstance(value, (dict, list)):
                redacted[key] = _redact_sensitive(value)
            else:
                redacted[key] = value
        return redacted
    elif isinstance(data, list):
        return [_redact_sensitive(item) for item in data]
    else:
        return data


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class StructuredJSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Formats log records as JSON with consistent fields:
    - timestamp (ISO 8601)
    - level (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - service_name
    - logger_name (module name)
    - message (log message)
    - source_file / source_line / source_function
    - exception and stack_trace (if applicable)
    - every field passed through extra=, with sensitive keys redacted
    """

    def __init__(self, service_name: str = "unknown"):
        """Initialize formatter.

        Args:
            service_name: Service name stamped on every record
        """
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: LogRecord to format

        Returns:
            JSON string
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "service_name": self.service_name,
            "logger_name": record.name,
            "message": record.getMessage(),
            "source_file": record.pathname,
            "source_line": record.lineno,
            "source_function": record.funcName,
        }

        # Add exception info if present
        if record.exc_info:
            exc_type, exc_value, exc_tb = record.exc_info
            log_entry["exception"] = {
                "type": exc_type.__name__ if exc_type else None,
                "message": str(exc_value) if exc_value else None,
                "module": exc_type.__module__ if exc_type else None,
            }

            # Add stack trace if available
            if exc_tb:
                log_entry["stack_trace"] = traceback.format_exception(exc_type, exc_value, exc_tb)

        # Redact sensitive data from extra fields
        log_entry.update(_redact_sensitive(_extra_fields(record)))

        # Ensure all values are JSON-serializable
        log_entry_serializable = {key: _serialize_value(value) for key, value in log_entry.items()}

        try:
            return json.dumps(log_entry_serializable, default=str)
        except (TypeError, ValueError) as e:
            # Fallback if JSON serialization fails
            return json.dumps({
                "error": "Failed to serialize log entry",
                "original_message": record.getMessage(),
                "serialization_error": str(e),
            })
