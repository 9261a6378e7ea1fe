import io
import logging

import pytest

from checkprint.logging_setup import configure_logging, get_logger, reset_logging, resolve_level


@pytest.fixture(autouse=True)
def _reset():
    reset_logging()
    yield
    reset_logging()


def test_resolve_level_sources(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("CHECKPRINT_LOG_LEVEL", raising=False)
    assert resolve_level() == logging.INFO
    assert resolve_level("debug") == logging.DEBUG
    assert resolve_level(" 30 ") == 30

    monkeypatch.setenv("CHECKPRINT_LOG_LEVEL", "WARNING")
    assert resolve_level() == logging.WARNING
    assert resolve_level("nonsense") == logging.WARNING

    monkeypatch.setenv("CHECKPRINT_LOG_LEVEL", "also-nonsense")
    assert resolve_level() == logging.INFO


def test_configure_logging_is_idempotent_and_writes_to_stream():
    stream = io.StringIO()
    configure_logging("DEBUG", fmt="%(name)s %(message)s", stream=stream)
    configure_logging("ERROR", stream=io.StringIO())

    get_logger("checkprint.test").debug("hello %s", "world")

    assert stream.getvalue() == "checkprint.test hello world\n"
    assert logging.getLogger("checkprint").propagate is False


def test_unconfigured_package_logger_is_silent_but_propagates():
    get_logger("checkprint.test")
    pkg_logger = logging.getLogger("checkprint")

    assert any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)
    assert pkg_logger.propagate is True
