import io
import logging

from statement_totals.logging_setup import configure_logging, get_logger, resolve_level


def test_resolve_level_prefers_argument_then_env(monkeypatch):
    monkeypatch.setenv("STATEMENT_TOTALS_LOG_LEVEL", "debug")
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(15) == 15
    assert resolve_level() == logging.DEBUG
    assert resolve_level("bogus") == logging.DEBUG

    monkeypatch.setenv("STATEMENT_TOTALS_LOG_LEVEL", "bogus")
    assert resolve_level() == logging.INFO


def test_configure_logging_installs_one_handler():
    stream = io.StringIO()
    logger = configure_logging("INFO", fmt="%(name)s %(message)s", stream=stream)
    configure_logging("DEBUG", stream=io.StringIO())

    get_logger("statement_totals.session").info("session:source_removed source=%s", "a.csv")
    get_logger("statement_totals.session").debug("hidden")

    assert stream.getvalue() == "statement_totals.session session:source_removed source=a.csv\n"
    assert not logger.propagate
    assert not any(isinstance(h, logging.NullHandler) for h in logger.handlers)
