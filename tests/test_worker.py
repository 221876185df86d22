from __future__ import annotations

import time

import pytest

pytest.importorskip("PySide6")
pytest.importorskip("pyvips")

from PySide6.QtCore import QCoreApplication

from image_reencoder import ImageReencoder, SourceFile
from image_reencoder.worker import ReencodeController, ReencodeWorker


def _wait_for(results: list, count: int, timeout: float = 10.0) -> None:
    deadline = time.monotonic() + timeout
    while len(results) < count and time.monotonic() < deadline:
        QCoreApplication.processEvents()
        time.sleep(0.01)


def test_worker_slot_emits_url_directly(red_png: bytes):
    reencoder = ImageReencoder()
    worker = ReencodeWorker(reencoder)
    converted: list = []
    worker.converted.connect(lambda rid, url: converted.append((rid, url)))

    worker.convert(7, SourceFile(red_png, "image/png", "red.png"), "jpg")

    assert len(converted) == 1
    rid, url = converted[0]
    assert rid == 7
    assert reencoder.store.resolve(url).mime_type == "image/jpeg"


def test_worker_reports_error_kind():
    worker = ReencodeWorker(ImageReencoder())
    failed: list = []
    worker.failed.connect(lambda rid, kind, msg: failed.append((rid, kind, msg)))

    worker.convert(1, SourceFile(b"text", "text/plain", "a.txt"), "png")

    assert failed and failed[0][:2] == (1, "invalid_input")


def test_controller_runs_conversions_on_thread(red_png: bytes):
    controller = ReencodeController()
    converted: list = []
    failed: list = []
    controller.converted.connect(lambda rid, url: converted.append((rid, url)))
    controller.failed.connect(lambda rid, kind, msg: failed.append((rid, kind)))
    try:
        ok_id = controller.request(SourceFile(red_png, "image/png", "red.png"), "webp")
        bad_id = controller.request(SourceFile(b"junk", "image/png", "bad.png"), "png")
        _wait_for(converted, 1)
        _wait_for(failed, 1)
    finally:
        controller.shutdown()

    assert ok_id != bad_id
    assert [rid for rid, _ in converted] == [ok_id]
    assert failed == [(bad_id, "decode")]
    url = converted[0][1]
    with controller.store.consume(url) as artifact:
        assert artifact.filename == "red.webp"
    assert len(controller.store) == 0


def test_worker_reports_unexpected_errors():
    worker = ReencodeWorker(ImageReencoder())
    converted: list = []
    failed: list = []
    worker.converted.connect(lambda rid, url: converted.append(rid))
    worker.failed.connect(lambda rid, kind, msg: failed.append((rid, kind)))

    # str instead of bytes fails inside decoding with a TypeError
    worker.convert(3, SourceFile("not-bytes", "image/png", "a.png"), "png")  # type: ignore[arg-type]

    assert converted == []
    assert failed == [(3, "reencode")]
