"""Transient handles for converted artifacts.

A handle is a ``blob:`` URL string that stays valid until it is revoked. The
caller that receives one owns it and must release it once the artifact has
been consumed (downloaded, written, displayed).
"""

from __future__ import annotations

import contextlib
import threading
import uuid
from collections.abc import Iterator
from pathlib import Path

from .errors import HandleError
from .logger import get_logger
from .models import ConvertedArtifact

_logger = get_logger("handles")

URL_PREFIX = "blob:image-reencoder/"


class ArtifactStore:
    def __init__(self) -> None:
        self._items: dict[str, ConvertedArtifact] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, url: object) -> bool:
        with self._lock:
            return url in self._items

    def create_url(self, artifact: ConvertedArtifact) -> str:
        url = f"{URL_PREFIX}{uuid.uuid4()}"
        with self._lock:
            self._items[url] = artifact
        _logger.debug("handle created: %s (%s, %d bytes)", url, artifact.mime_type, artifact.size)
        return url

    def resolve(self, url: str) -> ConvertedArtifact:
        with self._lock:
            try:
                return self._items[url]
            except KeyError:
                raise HandleError(url) from None

    def revoke(self, url: str) -> None:
        with self._lock:
            removed = self._items.pop(url, None)
        if removed is not None:
            _logger.debug("handle revoked: %s", url)

    @contextlib.contextmanager
    def consume(self, url: str) -> Iterator[ConvertedArtifact]:
        """Yield the artifact behind ``url`` and release the handle afterwards."""
        artifact = self.resolve(url)
        try:
            yield artifact
        finally:
            self.revoke(url)

    def download(self, url: str, directory: str | Path, filename: str | None = None) -> Path:
        """Write the artifact into ``directory`` and release its handle."""
        with self.consume(url) as artifact:
            target = Path(directory) / (filename or artifact.filename)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(artifact.data)
        _logger.info("saved %s (%d bytes)", target, artifact.size)
        return target
