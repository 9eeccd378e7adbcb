"""Custom exceptions for metadata extraction."""


class MetadataError(Exception):
    """Base exception for metadata extraction errors."""
    pass


class MetadataParseError(MetadataError):
    """Raised when the image container or its EXIF block cannot be decoded.

    An image that simply carries no metadata is not an error; readers
    return ``None`` in that case.
    """
    pass


class MetadataSourceError(MetadataError):
    """Raised when the image bytes cannot be read (missing file, HTTP failure)."""
    pass
