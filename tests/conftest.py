"""
Shared pytest fixtures for automata tests.

- Settings cache and AUTOMATA_* environment are reset around every test
- structlog context is cleared so bound machine ids don't leak
- ``recorder`` collects ordered side effects from handlers and hooks
"""

import sys
from pathlib import Path

import pytest
import structlog

# Ensure automata package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from automata.core.settings import clear_settings_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Reset cached settings and strip AUTOMATA_* variables."""
    for var in ("AUTOMATA_FAILURE_POLICY", "AUTOMATA_LOG_LEVEL", "AUTOMATA_LOG_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_log_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()
    structlog.reset_defaults()


class Recorder:
    """Ordered log of labels appended by handlers."""

    def __init__(self):
        self.calls: list = []

    def __call__(self, label):
        self.calls.append(label)


@pytest.fixture
def recorder():
    return Recorder()
