import logging
import os
import sys

LEVEL_ENV = "IMAGE_REENCODER_LOG_LEVEL"
CATS_ENV = "IMAGE_REENCODER_LOG_CATS"

_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "critical": logging.CRITICAL,
}


class _CategoryFilter(logging.Filter):
    """Pass records whose last logger name segment is one of ``allowed``."""

    def __init__(self, allowed: set[str]):
        super().__init__()
        self.allowed = allowed

    def filter(self, record: logging.LogRecord) -> bool:
        # image_reencoder.decoder -> decoder
        return (record.name or "").rsplit(".", 1)[-1] in self.allowed


def _resolve_level(default: int) -> int:
    return _LEVELS.get((os.getenv(LEVEL_ENV) or "").strip().lower(), default)


def _stderr_handler(logger: logging.Logger) -> logging.StreamHandler:
    for h in logger.handlers:
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr:
            return h
    handler = logging.StreamHandler(stream=sys.stderr)
    logger.addHandler(handler)
    return handler


def setup_logger(level: int = logging.INFO, name: str = "image_reencoder") -> logging.Logger:
    """Configure the package logger; safe to call any number of times.

    The env vars are read on every call, so the level and category filter can
    change after import. Child loggers (``get_logger("decoder")``) share the
    single stderr handler installed here.
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    handler = _stderr_handler(logger)
    handler.setFormatter(logging.Formatter(fmt="[%(asctime)s] %(levelname)s: %(message)s", datefmt="%H:%M:%S"))

    handler.filters.clear()
    cats = {c.strip() for c in (os.getenv(CATS_ENV) or "").split(",") if c.strip()}
    if cats:
        handler.addFilter(_CategoryFilter(cats))

    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    base = setup_logger()
    return base if not name else base.getChild(name)
