from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from quicknotes.settings import APP_NAME, LOG_PATH

SESSION_ID = uuid.uuid4().hex[:8]

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"
LOG_MAX_BYTES = 2 * 1024 * 1024
LOG_BACKUPS = 5


class EnsureSessionFilter(logging.Filter):
    """Module loggers don't go through SessionAdapter; stamp their records too."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


class SessionAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        kwargs.setdefault("extra", {}).setdefault("session", SESSION_ID)
        return msg, kwargs


log = SessionAdapter(logging.getLogger(APP_NAME), {})


def parse_level(name: str) -> int:
    """'debug' / 'INFO' / ... -> logging level; unknown names fall back to INFO."""
    level = logging.getLevelName(name.upper())
    return level if isinstance(level, int) else logging.INFO


def _attach(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(EnsureSessionFilter())
    logger.addHandler(handler)


def setup_logging(
    *,
    console_level: int = logging.INFO,
    log_path: Path = LOG_PATH,
) -> logging.Logger:
    """
    Everything under the "quicknotes" logger goes to a rotating file at DEBUG
    and to stdout at console_level. Calling it again is a no-op, so tests and
    main() can both call it.
    """
    logger = logging.getLogger(APP_NAME)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    if logger.handlers:
        return logger

    log_path.parent.mkdir(parents=True, exist_ok=True)
    _attach(
        logger,
        RotatingFileHandler(log_path, maxBytes=LOG_MAX_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8"),
        logging.DEBUG,
    )
    _attach(logger, logging.StreamHandler(sys.stdout or sys.stderr), console_level)

    logger.info("Logging initialized. log_file=%s console=%s",
                log_path, logging.getLevelName(console_level))
    return logger


# ───────────────────────── Qt messages ─────────────────────────

def qt_log_level(mode) -> int:
    from PySide6.QtCore import QtMsgType

    return {
        QtMsgType.QtDebugMsg: logging.DEBUG,
        QtMsgType.QtInfoMsg: logging.INFO,
        QtMsgType.QtWarningMsg: logging.WARNING,
        QtMsgType.QtCriticalMsg: logging.ERROR,
        QtMsgType.QtFatalMsg: logging.CRITICAL,
    }.get(mode, logging.WARNING)


def qt_location(context) -> str:
    file = getattr(context, "file", None)
    line = getattr(context, "line", None)
    func = getattr(context, "function", None)
    return f"{file}:{line} {func}" if file or line or func else "unknown"


def install_global_exception_hooks() -> None:
    """Log uncaught Python exceptions and route Qt messages into the log."""

    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook

    try:
        from PySide6.QtCore import qInstallMessageHandler

        def _qt_message_handler(mode, context, message):
            log.log(qt_log_level(mode), "Qt: %s | where=%s", message, qt_location(context))

        qInstallMessageHandler(_qt_message_handler)
        log.info("Qt message handler installed")
    except Exception:
        log.exception("Failed to install Qt message handler")
