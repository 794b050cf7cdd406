"""Pytest configuration and fixtures for stablepatch tests."""

import sys
import tempfile
from pathlib import Path

import pytest

from stablepatch.core.log import ConsoleSink, FileSink, setup_logger


@pytest.fixture(autouse=True, scope="session")
def configure_logging():
    """Configure console-only logging for the whole test session."""
    test_log_root = Path(tempfile.gettempdir()) / "stablepatch-tests"
    setup_logger(
        log_root=test_log_root,
        run_name="test",
        console=ConsoleSink(level="debug"),
        file=FileSink(enabled=False),
    )


@pytest.fixture
def mock_argv():
    """Save and restore sys.argv."""
    original = sys.argv.copy()
    sys.argv = ["stablepatch"]
    yield
    sys.argv = original


@pytest.fixture
def state(mock_argv, tmp_path, monkeypatch):
    """State loaded from package defaults only.

    Runs from an empty directory so no project stablepatch.yaml is
    picked up.
    """
    from stablepatch.core.config import State

    monkeypatch.chdir(tmp_path)
    return State()
