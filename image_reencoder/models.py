from __future__ import annotations

import mimetypes
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_MIME = "application/octet-stream"


@dataclass(frozen=True)
class SourceFile:
    """A user-selected file: raw bytes plus the declared MIME type and name."""

    data: bytes = field(repr=False)
    mime_type: str
    filename: str = ""

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def size(self) -> int:
        return len(self.data)

    @classmethod
    def from_path(cls, path: str | Path, mime_type: str | None = None) -> SourceFile:
        p = Path(path)
        if mime_type is None:
            guessed, _ = mimetypes.guess_type(p.name)
            mime_type = guessed or DEFAULT_MIME
        return cls(p.read_bytes(), mime_type, p.name)


@dataclass(frozen=True)
class ConvertedArtifact:
    data: bytes = field(repr=False)
    mime_type: str
    filename: str
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)
