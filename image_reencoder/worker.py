"""Qt front for the re-encoder: conversions run on a background QThread.

Completion is reported through signals; the GUI thread never blocks on
decoding or encoding.

Usage:
    controller = ReencodeController(reencoder)
    controller.converted.connect(on_converted)  # (request_id, url)
    controller.failed.connect(on_failed)  # (request_id, kind, message)
    request_id = controller.request(source, "webp")
"""

from __future__ import annotations

import itertools

from PySide6.QtCore import QObject, QThread, Signal, Slot

from .errors import ReencodeError
from .handles import ArtifactStore
from .logger import get_logger
from .models import SourceFile
from .reencoder import ImageReencoder

_logger = get_logger("worker")


class ReencodeWorker(QObject):
    """Background worker that converts one source file per call."""

    # Emits: request_id, url
    converted = Signal(int, str)
    # Emits: request_id, error kind, message
    failed = Signal(int, str, str)

    def __init__(self, reencoder: ImageReencoder):
        super().__init__()
        self._reencoder = reencoder

    @Slot(int, object, str)
    def convert(self, request_id: int, source: SourceFile, target_format: str) -> None:
        """Convert ``source`` and emit a handle URL, or the error that stopped it."""
        try:
            artifact = self._reencoder.convert(source, target_format)
        except ReencodeError as e:
            self.failed.emit(request_id, e.kind, str(e))
            return
        except Exception as e:
            _logger.error("request %d failed unexpectedly: %s", request_id, e)
            self.failed.emit(request_id, ReencodeError.kind, str(e))
            return
        url = self._reencoder.store.create_url(artifact)
        self.converted.emit(request_id, url)


class ReencodeController(QObject):
    """Owns the worker thread and forwards requests and results."""

    converted = Signal(int, str)
    failed = Signal(int, str, str)
    _requested = Signal(int, object, str)

    def __init__(self, reencoder: ImageReencoder | None = None, parent: QObject | None = None):
        super().__init__(parent)
        self.reencoder = reencoder if reencoder is not None else ImageReencoder()
        self._ids = itertools.count(1)

        self._thread = QThread(self)
        self._worker = ReencodeWorker(self.reencoder)
        self._worker.moveToThread(self._thread)
        self._requested.connect(self._worker.convert)
        self._worker.converted.connect(self.converted)
        self._worker.failed.connect(self.failed)
        self._thread.start()

    @property
    def store(self) -> ArtifactStore:
        return self.reencoder.store

    def request(self, source: SourceFile, target_format: str) -> int:
        """Queue a conversion and return its request id."""
        request_id = next(self._ids)
        _logger.debug("request %d: %s -> %s", request_id, source.filename, target_format)
        self._requested.emit(request_id, source, target_format)
        return request_id

    def shutdown(self) -> None:
        if self._thread.isRunning():
            self._thread.quit()
            self._thread.wait()
