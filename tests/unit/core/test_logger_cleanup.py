"""Tests for logger cleanup cascade via BaseCloseable."""

import tempfile
from pathlib import Path

import pytest

from stablepatch.core.log import ConsoleSink, FileSink, Logger, setup_logger


@pytest.fixture(autouse=True)
def restore_console_logger():
    yield
    setup_logger(
        log_root=Path(tempfile.gettempdir()) / "stablepatch-tests",
        run_name="test",
        console=ConsoleSink(level="debug"),
        file=FileSink(enabled=False),
    )


def _file_logger(path):
    return Logger(
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True, path=str(path)),
    )


def test_logger_closes_file_via_context_manager(tmp_path):
    """Test that logger closes files when used as context manager."""
    logger = _file_logger(tmp_path / "test.log")
    logger.setup(log_root=tmp_path, run_name="test")

    assert logger.file._file is not None
    assert not logger.file._file.closed

    with logger:
        logger.info("test message")

    assert logger.file._file.closed


def test_logger_closes_on_exception(tmp_path):
    """Test that logger closes files even when exception occurs."""
    logger = _file_logger(tmp_path / "test.log")
    logger.setup(log_root=tmp_path, run_name="test")

    with pytest.raises(ValueError), logger:
        logger.info("before exception")
        raise ValueError("test exception")

    assert logger.file._file.closed


def test_config_cascade_closes_logger(tmp_path):
    """Test Config.close() cascades to Logger then Sink.close()."""
    from stablepatch.core.config import Config

    config = Config(
        logger=_file_logger(tmp_path / "cascade.log"),
        log_root=tmp_path,
        run_name="cascade",
    )

    assert config.logger.file._file is not None
    assert not config.logger.file._file.closed

    config.close()

    assert config.logger.file._file.closed


def test_close_is_idempotent(tmp_path):
    logger = _file_logger(tmp_path / "twice.log")
    logger.setup(log_root=tmp_path, run_name="twice")

    logger.close()
    logger.close()

    assert logger.file._file.closed


def test_setup_logger_closes_previous_logger(tmp_path):
    first = setup_logger(
        log_root=tmp_path,
        run_name="first",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=True),
    )
    setup_logger(
        log_root=tmp_path,
        run_name="second",
        console=ConsoleSink(enabled=False),
        file=FileSink(enabled=False),
    )

    assert first.file._file.closed


def test_file_written_and_flushed_on_close(tmp_path):
    """Test that log file is written and flushed on close."""
    log_file = tmp_path / "written.log"
    logger = _file_logger(log_file)
    logger.setup(log_root=tmp_path, run_name="write-test")

    with logger:
        logger.info("test message to file")

    assert log_file.exists()
    assert "test message to file" in log_file.read_text()
