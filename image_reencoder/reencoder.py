"""Re-encode in-memory image files to another raster format.

The conversion pipeline is validate -> decode -> draw -> encode:

- the declared MIME type must start with ``image/`` (checked before decoding)
- the target token must be on the allow-list
- the decoded image is drawn at (0, 0) onto a surface of the same size
- the surface is encoded by the encoder registered for the target format
"""

from __future__ import annotations

import asyncio

from .decoder import decode_to_surface
from .encoder import get_encoder
from .errors import InvalidInputError, ReencodeError
from .formats import converted_filename, resolve_format
from .handles import ArtifactStore
from .logger import get_logger
from .metrics import metrics
from .models import ConvertedArtifact, SourceFile
from .settings_manager import SettingsManager

_logger = get_logger("reencoder")


class ImageReencoder:
    def __init__(self, settings: SettingsManager | None = None, store: ArtifactStore | None = None) -> None:
        self._settings = settings
        self.store = store if store is not None else ArtifactStore()

    def _allowed_formats(self) -> set[str] | None:
        return self._settings.allowed_formats if self._settings is not None else None

    def _background(self) -> tuple[int, int, int]:
        return self._settings.jpeg_background if self._settings is not None else (0, 0, 0)

    def reencode(self, data: bytes, mime_type: str, target_format: str, filename: str = "") -> ConvertedArtifact:
        """Decode ``data`` and encode it again as ``target_format``.

        Raises InvalidInputError, DecodeError or EncodeError.
        """
        try:
            if not (mime_type or "").startswith("image/"):
                raise InvalidInputError(f"not an image: {mime_type!r}")
            fmt = resolve_format(target_format, self._allowed_formats())
            encoder = get_encoder(fmt, background=self._background())

            with metrics.timed("reencode.decode"):
                surface = decode_to_surface(data)
            with metrics.timed("reencode.encode"):
                out = encoder.encode(surface)
        except ReencodeError as e:
            metrics.inc(f"reencode.failed.{e.kind}")
            _logger.debug("reencode %r -> %r failed (%s): %s", filename, target_format, e.kind, e)
            raise

        metrics.inc("reencode.succeeded")
        height, width = surface.shape[0], surface.shape[1]
        _logger.info("converted %s -> %s (%dx%d)", filename or "<buffer>", encoder.mime_type, width, height)
        return ConvertedArtifact(
            data=out,
            mime_type=encoder.mime_type,
            filename=converted_filename(filename, fmt.token),
            width=width,
            height=height,
        )

    def convert(self, source: SourceFile, target_format: str) -> ConvertedArtifact:
        return self.reencode(source.data, source.mime_type, target_format, source.filename)

    async def convert_file(self, source: SourceFile, target_format: str) -> str:
        """Convert off the event loop and return a handle to the result.

        The returned URL must be released with ``store.revoke`` (or consumed
        via ``store.consume``/``store.download``) by the caller.
        """
        artifact = await asyncio.to_thread(self.convert, source, target_format)
        return self.store.create_url(artifact)


_default: ImageReencoder | None = None


def get_reencoder() -> ImageReencoder:
    global _default
    if _default is None:
        _default = ImageReencoder()
    return _default


async def convert_file(source: SourceFile, target_format: str, store: ArtifactStore | None = None) -> str:
    reencoder = get_reencoder()
    artifact = await asyncio.to_thread(reencoder.convert, source, target_format)
    return (store if store is not None else reencoder.store).create_url(artifact)
