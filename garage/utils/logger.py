# garage/utils/logger.py
"""
Logging setup shared by every module.

Records go to the console and, unless LOG_TO_FILE is off, to a rotating
garage.log under LOG_DIR. Each handler runs a SecretRedactor so API keys,
bearer tokens and password fields never reach a log line, whichever library
emitted it. Chatty client libraries (httpx logs full request URLs, which
carry the OpenWeather key) are held at WARNING.
"""

import logging
import os
import re
from logging.handlers import RotatingFileHandler

from garage.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
LOG_FILE_NAME = "garage.log"

REDACTED = "***"
_SECRET_PATTERNS = (
    re.compile(r"(appid=)[^&\s'\"]+", re.IGNORECASE),
    re.compile(r"(Bearer\s+)[A-Za-z0-9\-_.=]+", re.IGNORECASE),
    re.compile(r"(\"?password\"?\s*[:=]\s*\"?)[^\"\s,}]+", re.IGNORECASE),
)

_configured = False


def redact(text: str) -> str:
    for pattern in _SECRET_PATTERNS:
        text = pattern.sub(lambda m: m.group(1) + REDACTED, text)
    return text


class SecretRedactor(logging.Filter):
    """Rewrites the rendered message with secrets masked."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            message = record.getMessage()
        except (TypeError, ValueError):
            # Bad format args: leave it for the handler to report
            return True
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def default_log_dir() -> str:
    return settings.LOG_DIR or os.path.join(
        os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs"
    )


def _build_handlers(level: str) -> list:
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]

    if settings.LOG_TO_FILE:
        log_dir = default_log_dir()
        os.makedirs(log_dir, exist_ok=True)
        handlers.append(RotatingFileHandler(
            filename=os.path.join(log_dir, LOG_FILE_NAME),
            maxBytes=settings.LOG_FILE_MAX_MB * 1024 * 1024,
            backupCount=settings.LOG_FILE_BACKUPS,
            encoding="utf-8",
        ))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(fmt)
        handler.addFilter(SecretRedactor())
    return handlers


def configure_logging():
    """Attach the garage handlers to the root logger once per process."""
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    root = logging.getLogger()
    root.setLevel(level)
    for handler in _build_handlers(level):
        root.addHandler(handler)

    for name in settings.LOG_QUIET_LIBRARIES.split(","):
        if name.strip():
            logging.getLogger(name.strip()).setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    configure_logging()
    return logging.getLogger(name)
