"""Target format allow-list and filename helpers.

Keep this module free of pyvips and Qt dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import EncodeError
from .logger import get_logger

_logger = get_logger("formats")

DEFAULT_STEM = "converted_file"


@dataclass(frozen=True)
class TargetFormat:
    token: str
    mime_type: str
    has_alpha: bool


TARGET_FORMATS: dict[str, TargetFormat] = {
    "png": TargetFormat("png", "image/png", True),
    "jpg": TargetFormat("jpg", "image/jpeg", False),
    "jpeg": TargetFormat("jpeg", "image/jpeg", False),
    "webp": TargetFormat("webp", "image/webp", True),
    "gif": TargetFormat("gif", "image/gif", True),
    "tiff": TargetFormat("tiff", "image/tiff", True),
}

# Category table of the upload picker; only "image" targets are re-encodable.
FORMAT_OPTIONS: dict[str, tuple[str, ...]] = {
    "image": ("jpg", "png", "webp", "gif", "svg"),
    "video": ("mp4", "webm", "avi", "mov"),
    "audio": ("mp3", "wav", "ogg", "aac"),
    "document": ("pdf", "docx", "txt", "md", "csv"),
}


def normalize_token(token: str) -> str:
    return (token or "").strip().lower().lstrip(".")


def resolve_format(token: str, allowed: set[str] | None = None) -> TargetFormat:
    """Look up a target format token.

    Raises EncodeError when the token is not on the allow-list (or not in
    ``allowed`` when given).
    """
    key = normalize_token(token)
    fmt = TARGET_FORMATS.get(key)
    if fmt is None or (allowed is not None and key not in allowed):
        _logger.debug("target format rejected: %r", token)
        raise EncodeError(f"unsupported target format: {token!r}")
    return fmt


def get_file_extension(filename: str) -> str:
    """Return the text after the last dot, or "" when there is none.

    A dot in the first position does not start an extension (".bashrc" -> "").
    """
    idx = filename.rfind(".")
    if idx <= 0:
        return ""
    return filename[idx + 1 :]


def detect_file_type(extension: str) -> str | None:
    ext = normalize_token(extension)
    for category, extensions in FORMAT_OPTIONS.items():
        if ext in extensions:
            return category
    return None


def converted_filename(filename: str, token: str) -> str:
    """Name for a converted download: the source stem plus the new extension."""
    name = (filename or "").replace("\\", "/").rsplit("/", 1)[-1]
    idx = name.rfind(".")
    stem = name[:idx] if idx > 0 else name
    return f"{stem or DEFAULT_STEM}.{normalize_token(token)}"
