"""Diagnostics sink that records engine events as structured records."""
import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.config_resolver.utils.logging.factory import TRACE


_logger = logging.getLogger("src.config_resolver.config.loader")


@dataclass(frozen=True)
class DiagnosticEvent:
    """One recorded diagnostic.

    Attributes:
        level: logging level number (TRACE=5, DEBUG, INFO, WARNING, ...)
        message: Human readable message
        fields: Structured context (location, profile, ...)
        created: Epoch seconds when recorded
    """
    level: int
    message: str
    fields: Dict[str, Any] = field(default_factory=dict)
    created: float = field(default_factory=time.time)

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


class DiagnosticsSink:
    """Collects trace/debug/warn events emitted during a resolution pass.

    Events are kept in memory so callers (and tests) can inspect them, and
    are forwarded to a logger unless forwarding is disabled. Buffered events
    can be re-emitted later with replay(), e.g. once logging is configured.

    Example:
        sink = DiagnosticsSink(forward=False)
        ConfigurationLoader(env, diagnostics=sink).load()
        sink.replay(logging.getLogger("app.config"))
    """

    def __init__(self, logger: Optional[logging.Logger] = None, forward: bool = True):
        self.logger = logger or _logger
        self.forward = forward
        self.events: List[DiagnosticEvent] = []

    def record(self, level: int, message: str, **fields: Any) -> DiagnosticEvent:
        event = DiagnosticEvent(level=level, message=message, fields=fields)
        self.events.append(event)
        if self.forward and self.logger.isEnabledFor(level):
            self.logger.log(level, message, extra={"diagnostics": fields})
        return event

    def trace(self, message: str, **fields: Any) -> DiagnosticEvent:
        return self.record(TRACE, message, **fields)

    def debug(self, message: str, **fields: Any) -> DiagnosticEvent:
        return self.record(logging.DEBUG, message, **fields)

    def info(self, message: str, **fields: Any) -> DiagnosticEvent:
        return self.record(logging.INFO, message, **fields)

    def warning(self, message: str, **fields: Any) -> DiagnosticEvent:
        return self.record(logging.WARNING, message, **fields)

    def events_at(self, level: int) -> List[DiagnosticEvent]:
        return [event for event in self.events if event.level == level]

    @property
    def messages(self) -> List[str]:
        return [event.message for event in self.events]

    def replay(self, logger: logging.Logger) -> int:
        """Re-emit all buffered events to another logger.

        Returns:
            Number of events emitted (after the target logger's level filter)
        """
        emitted = 0
        for event in self.events:
            if logger.isEnabledFor(event.level):
                logger.log(event.level, event.message, extra={"diagnostics": event.fields})
                emitted += 1
        return emitted

    def clear(self) -> None:
        self.events.clear()
