"""Pytest configuration.

The Qt worker tests need a Q(Core)Application. We create a single one for the
entire session as early as possible and cleanly shut it down at the end.
Image fixtures are generated with Pillow so tests never depend on files on
disk.
"""

from __future__ import annotations

import io
from collections.abc import Callable
from typing import Any

import pytest

_APP: Any | None = None


def pytest_configure(config) -> None:  # noqa: ARG001
    """Ensure a QCoreApplication exists before collecting/running tests."""

    # Import lazily so non-Qt environments can still import this conftest.
    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    global _APP

    app = QCoreApplication.instance()
    if app is None:
        # Keep a strong ref so it isn't GC'd mid-session.
        _APP = QCoreApplication([])
    else:
        _APP = app


def pytest_sessionfinish(session, exitstatus) -> None:  # noqa: ARG001
    """Attempt a clean Qt shutdown to avoid lingering threads at interpreter exit."""

    try:
        from PySide6.QtCore import QCoreApplication
    except ImportError:
        return

    app = QCoreApplication.instance()
    if app is None:
        return

    app.quit()
    app.processEvents()


@pytest.fixture
def make_image_bytes() -> Callable[..., bytes]:
    """Factory: encode a solid-colour Pillow image to bytes."""
    from PIL import Image

    def _make(width: int = 10, height: int = 10, color: Any = (255, 0, 0), mode: str = "RGB", fmt: str = "PNG") -> bytes:
        img = Image.new(mode, (width, height), color=color)
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()

    return _make


@pytest.fixture
def red_png(make_image_bytes) -> bytes:
    return make_image_bytes(10, 10, (255, 0, 0))


@pytest.fixture(autouse=True)
def _reset_metrics():
    from image_reencoder.metrics import metrics

    metrics.reset()
    yield
    metrics.reset()
