import sys
import os
import logging
from types import SimpleNamespace

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from PySide6.QtCore import QtMsgType

from quicknotes.logging_setup import SESSION_ID, parse_level, qt_location, qt_log_level, setup_logging
from quicknotes.settings import APP_NAME


def test_parse_level():
    assert parse_level("debug") == logging.DEBUG
    assert parse_level("WARNING") == logging.WARNING
    assert parse_level("chatty") == logging.INFO


def test_qt_levels():
    assert qt_log_level(QtMsgType.QtDebugMsg) == logging.DEBUG
    assert qt_log_level(QtMsgType.QtCriticalMsg) == logging.ERROR
    assert qt_log_level(QtMsgType.QtFatalMsg) == logging.CRITICAL


def test_qt_location():
    ctx = SimpleNamespace(file="main.qml", line=12, function="onClicked")
    assert qt_location(ctx) == "main.qml:12 onClicked"
    assert qt_location(SimpleNamespace(file=None, line=0, function=None)) == "unknown"


def test_setup_logging_writes_session_stamped_file(tmp_path):
    logger = logging.getLogger(APP_NAME)
    saved = logger.handlers[:]
    logger.handlers.clear()
    log_path = tmp_path / "logs" / "quicknotes.log"
    try:
        setup_logging(console_level=logging.ERROR, log_path=log_path)
        assert len(logger.handlers) == 2
        setup_logging(log_path=log_path)
        assert len(logger.handlers) == 2

        logging.getLogger(f"{APP_NAME}.store.repo").debug("wrote notes.json")
        for handler in logger.handlers:
            handler.flush()
        text = log_path.read_text(encoding="utf-8")
        assert "wrote notes.json" in text
        assert f"sid={SESSION_ID}" in text
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved
