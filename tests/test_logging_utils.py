import logging

from custom_components.quote_sync.utils.logging import clear_warning, warn_once


def test_warn_once_demotes_repeats_to_debug(caplog):
    logger = logging.getLogger("quote_sync.test")
    clear_warning("test-code")

    with caplog.at_level(logging.DEBUG, logger="quote_sync.test"):
        assert warn_once(logger, "test-code", "problem %s", 1) is True
        assert warn_once(logger, "test-code", "problem %s", 2) is False

    levels = [(record.levelno, record.getMessage()) for record in caplog.records]
    assert levels == [(logging.WARNING, "problem 1"), (logging.DEBUG, "problem 2")]
    clear_warning("test-code")


def test_clear_warning_rearms_the_code(caplog):
    logger = logging.getLogger("quote_sync.test")
    clear_warning("rearm")

    with caplog.at_level(logging.WARNING, logger="quote_sync.test"):
        warn_once(logger, "rearm", "first")
        clear_warning("rearm")
        warn_once(logger, "rearm", "second")

    assert [record.getMessage() for record in caplog.records] == ["first", "second"]
    clear_warning("rearm")


def test_window_expiry_allows_new_warning():
    logger = logging.getLogger("quote_sync.test")
    clear_warning("window")

    assert warn_once(logger, "window", "once", window=0.0) is True
    assert warn_once(logger, "window", "again", window=-1.0) is True
    clear_warning("window")
