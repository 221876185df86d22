import logging
import sys

from image_reencoder import logger as ir_logger


def _stderr_handlers(base: logging.Logger) -> list[logging.Handler]:
    return [
        h
        for h in base.handlers
        if isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
    ]


def test_setup_logger_idempotent_handlers():
    """Calling setup_logger() repeatedly should leave exactly one stderr StreamHandler."""
    base = ir_logger.setup_logger(level=logging.DEBUG)
    _ = ir_logger.setup_logger(level=logging.DEBUG)

    assert len(_stderr_handlers(base)) == 1
    assert base.propagate is False


def test_env_level_override(monkeypatch):
    monkeypatch.setenv("IMAGE_REENCODER_LOG_LEVEL", "warning")
    base = ir_logger.setup_logger(level=logging.DEBUG)
    assert base.level == logging.WARNING

    monkeypatch.delenv("IMAGE_REENCODER_LOG_LEVEL")
    base = ir_logger.setup_logger()
    assert base.level == logging.INFO


def test_get_logger_returns_child():
    child = ir_logger.get_logger("decoder")
    assert child.name == "image_reencoder.decoder"
    assert ir_logger.get_logger() is logging.getLogger("image_reencoder")
