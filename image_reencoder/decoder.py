"""Image decoder using pyvips.

Decodes an in-memory image file into an RGBA pixel array and draws it onto a
fresh surface the same size as the image.
"""

import contextlib
from typing import Any

import numpy as np

from .errors import DecodeError
from .logger import get_logger

_logger = get_logger("decoder")

# Constants
RGBA_CHANNELS = 4
OPAQUE = 255

_pyvips: Any | None = None


def load_pyvips() -> Any:
    global _pyvips
    if _pyvips is None:
        import pyvips  # type: ignore

        # Converted buffers are never reloaded; keep the operation cache empty
        with contextlib.suppress(AttributeError):
            pyvips.cache_set_max(0)
            pyvips.cache_set_max_mem(0)
            pyvips.cache_set_max_files(0)
        _pyvips = pyvips
    return _pyvips


def _decode_with_pyvips_from_buffer(data: bytes) -> "np.ndarray":
    """Decode image bytes into an (H, W, 4) uint8 sRGB array."""
    pyvips = load_pyvips()
    try:
        image = pyvips.Image.new_from_buffer(data, "", fail_on="error")
        image = image.autorot()
        if image.interpretation != "srgb":
            image = image.colourspace("srgb")
        if image.format != "uchar":
            image = image.cast("uchar")
        if image.bands > RGBA_CHANNELS:
            image = image.extract_band(0, n=RGBA_CHANNELS)
        elif not image.hasalpha():
            image = image.bandjoin(OPAQUE)
        mem = image.write_to_memory()
        height, width, bands = image.height, image.width, image.bands
    except pyvips.Error as e:
        _logger.debug("decode failed: %s", e)
        raise DecodeError(f"cannot decode image: {e}") from e

    if bands != RGBA_CHANNELS:
        raise DecodeError(f"Unsupported band count after conversion: {bands}")
    return np.frombuffer(mem, dtype=np.uint8).reshape(height, width, bands)


def decode_image(data: bytes) -> "np.ndarray":
    """Decode an image file held in memory.

    Raises DecodeError for empty, unsupported or corrupt buffers.
    """
    if not data:
        raise DecodeError("empty image buffer")
    return _decode_with_pyvips_from_buffer(bytes(data))


def draw_surface(pixels: "np.ndarray") -> "np.ndarray":
    """Allocate a transparent surface sized to ``pixels`` and blit them at (0, 0)."""
    height, width = pixels.shape[0], pixels.shape[1]
    surface = np.zeros((height, width, RGBA_CHANNELS), dtype=np.uint8)
    surface[0:height, 0:width] = pixels
    return surface


def decode_to_surface(data: bytes) -> "np.ndarray":
    pixels = decode_image(data)
    _logger.debug("decoded %dx%d image", pixels.shape[1], pixels.shape[0])
    return draw_surface(pixels)
