"""Root pytest configuration."""
import os

import pytest

from src.config_resolver.config.diagnostics import TRACE


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: resolution passes over real files on disk"
    )
    config.addinivalue_line(
        "markers", "scenario: end-to-end resolution scenarios"
    )


@pytest.fixture(autouse=True)
def _isolate_resolver_settings(monkeypatch, tmp_path):
    """Keep CONFIG_RESOLVER_* variables and a stray .env out of tests."""
    for name in list(os.environ):
        if name.startswith("CONFIG_RESOLVER_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def trace_logging(caplog):
    """Capture everything down to TRACE."""
    caplog.set_level(TRACE)
    return caplog


# Import fixtures from fixtures module to make them available globally
pytest_plugins = [
    "tests.fixtures.config_files",
]
