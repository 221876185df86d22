"""Exceptions raised by the re-encoder.

Every failure of a single conversion attempt is terminal: callers report it,
they do not retry.
"""


class ReencodeError(Exception):
    """Base class for all re-encode failures."""

    kind = "reencode"


class InvalidInputError(ReencodeError):
    """The declared MIME type is not an image type."""

    kind = "invalid_input"


class DecodeError(ReencodeError):
    """The source bytes could not be decoded as a raster image."""

    kind = "decode"


class EncodeError(ReencodeError):
    """The surface could not be encoded to the requested target format."""

    kind = "encode"


class HandleError(KeyError):
    """A transient handle is unknown or has already been released."""
