"""
Errors raised by the thumbnail pipeline.

Every error is fatal to the run: the pipeline writes one complete thumbnail
or none at all.
"""


class ThumbnailError(Exception):
    """Base class for thumbnail pipeline failures."""


class MissingAsset(ThumbnailError, FileNotFoundError):
    """An image, font file or font family could not be found or read."""


class InvalidConfiguration(ThumbnailError, ValueError):
    """A required setting is absent or a value is out of range."""


class EncodingFailure(ThumbnailError, OSError):
    """The thumbnail could not be written to disk."""
