"""Image re-encoder.

Converts an in-memory image file to another raster format and hands the
result back through a transient handle that the caller releases.

Usage:
    from image_reencoder import ImageReencoder, SourceFile

    reencoder = ImageReencoder()
    source = SourceFile.from_path("photo.png")
    url = await reencoder.convert_file(source, "webp")
    reencoder.store.download(url, "out/")

The Qt controller lives in ``image_reencoder.worker`` and is not imported here
so the core can be used without PySide6.
"""

from .errors import DecodeError, EncodeError, HandleError, InvalidInputError, ReencodeError
from .formats import TARGET_FORMATS, TargetFormat
from .handles import ArtifactStore
from .models import ConvertedArtifact, SourceFile
from .reencoder import ImageReencoder, convert_file

__all__ = [
    "TARGET_FORMATS",
    "ArtifactStore",
    "ConvertedArtifact",
    "DecodeError",
    "EncodeError",
    "HandleError",
    "ImageReencoder",
    "InvalidInputError",
    "ReencodeError",
    "SourceFile",
    "TargetFormat",
    "__version__",
    "convert_file",
]

__version__ = "0.1.0"
