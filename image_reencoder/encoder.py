"""Surface encoders, one per target raster format.

Every encoder takes an (H, W, 4) uint8 RGBA surface and returns the encoded
file bytes. Lossy formats use the libvips default quality.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np

from .decoder import load_pyvips
from .errors import EncodeError
from .formats import TargetFormat
from .logger import get_logger

_logger = get_logger("encoder")

_RGB_CHANNELS = 3
_EXPECTED_NDIM = 3


class SurfaceEncoder(ABC):
    suffix = ""

    def __init__(self, fmt: TargetFormat) -> None:
        self.format = fmt

    @property
    def mime_type(self) -> str:
        return self.format.mime_type

    @abstractmethod
    def prepare(self, surface: np.ndarray) -> np.ndarray:
        """Return the pixel array handed to libvips for this format."""

    def encode(self, surface: np.ndarray) -> bytes:
        if surface.ndim != _EXPECTED_NDIM or surface.shape[2] < _RGB_CHANNELS:
            raise EncodeError(f"unexpected surface shape: {surface.shape}")
        pixels = np.ascontiguousarray(self.prepare(surface), dtype=np.uint8)
        height, width, bands = pixels.shape
        pyvips = load_pyvips()
        try:
            image = pyvips.Image.new_from_memory(pixels.tobytes(), width, height, bands, "uchar")
            image = image.copy(interpretation="srgb")
            out = image.write_to_buffer(self.suffix)
        except pyvips.Error as e:
            _logger.debug("encode to %s failed: %s", self.format.token, e)
            raise EncodeError(f"cannot encode {self.format.token}: {e}") from e
        _logger.debug("encoded %dx%d surface as %s (%d bytes)", width, height, self.mime_type, len(out))
        return bytes(out)


class AlphaEncoder(SurfaceEncoder):
    """Formats that store transparency keep the RGBA surface as is."""

    def prepare(self, surface: np.ndarray) -> np.ndarray:
        return surface


class OpaqueEncoder(SurfaceEncoder):
    """Formats without an alpha channel are composited onto a solid background."""

    def __init__(self, fmt: TargetFormat, background: tuple[int, int, int] = (0, 0, 0)) -> None:
        super().__init__(fmt)
        self.background = background

    def prepare(self, surface: np.ndarray) -> np.ndarray:
        if surface.shape[2] == _RGB_CHANNELS:
            return surface
        rgb = surface[:, :, :_RGB_CHANNELS].astype(np.float32)
        alpha = surface[:, :, _RGB_CHANNELS : _RGB_CHANNELS + 1].astype(np.float32) / 255.0
        bg = np.asarray(self.background, dtype=np.float32).reshape(1, 1, _RGB_CHANNELS)
        blended = rgb * alpha + bg * (1.0 - alpha)
        return np.clip(np.rint(blended), 0, 255).astype(np.uint8)


class PngEncoder(AlphaEncoder):
    suffix = ".png"


class WebpEncoder(AlphaEncoder):
    suffix = ".webp"


class GifEncoder(AlphaEncoder):
    suffix = ".gif"


class TiffEncoder(AlphaEncoder):
    suffix = ".tif"


class JpegEncoder(OpaqueEncoder):
    suffix = ".jpg"


ENCODERS: dict[str, type[SurfaceEncoder]] = {
    "png": PngEncoder,
    "jpg": JpegEncoder,
    "jpeg": JpegEncoder,
    "webp": WebpEncoder,
    "gif": GifEncoder,
    "tiff": TiffEncoder,
}


def get_encoder(fmt: TargetFormat, background: tuple[int, int, int] = (0, 0, 0)) -> SurfaceEncoder:
    cls = ENCODERS.get(fmt.token)
    if cls is None:
        raise EncodeError(f"no encoder for {fmt.token!r}")
    if fmt.has_alpha:
        return cls(fmt)
    # formats without alpha are registered with an OpaqueEncoder subclass
    return cls(fmt, background=background)  # type: ignore[call-arg]
