"""Unit tests for structured logging."""
import json
import logging
import sys

import pytest

from src.config_resolver.config.diagnostics import TRACE
from src.config_resolver.utils.logging import StructuredJSONFormatter, configure_logging, disable_logging


def _record(message="Loaded config file", level=logging.INFO, **extra):
    record = logging.LogRecord("src.config_resolver.config.loader", level, __file__, 10, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formats_json_with_extra_fields():
    formatter = StructuredJSONFormatter(service_name="config-resolver")

    entry = json.loads(formatter.format(_record(location="classpath:/application.yml")))

    assert entry["message"] == "Loaded config file"
    assert entry["level"] == "INFO"
    assert entry["service_name"] == "config-resolver"
    assert entry["logger_name"] == "src.config_resolver.config.loader"
    assert entry["location"] == "classpath:/application.yml"


def test_redacts_sensitive_extra_fields():
    formatter = StructuredJSONFormatter()

    entry = json.loads(formatter.format(_record(
        db_password="hunter2",
        diagnostics={"api_key": "abc", "location": "x"},
    )))

    assert entry["db_password"] == "[REDACTED]"
    assert entry["diagnostics"] == {"api_key": "[REDACTED]", "location": "x"}


def test_trace_level_name():
    entry = json.loads(StructuredJSONFormatter().format(_record(level=TRACE)))

    assert entry["level"] == "TRACE"


def test_exception_info():
    try:
        raise ValueError("bad")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())

    entry = json.loads(StructuredJSONFormatter().format(record))

    assert entry["exception"]["type"] == "ValueError"
    assert entry["stack_trace"]


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_configure_logging(tmp_path, restore_root_logger):
    log_file = tmp_path / "resolver.log"

    configure_logging("config-resolver", level="trace", log_file=str(log_file), enable_console=False)

    assert restore_root_logger.level == TRACE
    assert len(restore_root_logger.handlers) == 1
    restore_root_logger.handlers[0].flush()
    assert json.loads(log_file.read_text().splitlines()[0])["message"] == "Logging configured"


def test_configure_logging_rejects_unknown_level(restore_root_logger):
    with pytest.raises(ValueError):
        configure_logging("config-resolver", level="verbose")


def test_disable_logging(restore_root_logger):
    disable_logging()

    assert [type(h) for h in restore_root_logger.handlers] == [logging.NullHandler]
