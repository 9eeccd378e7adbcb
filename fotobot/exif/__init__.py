"""EXIF metadata reading, field resolution and GPS handling."""

from fotobot.exif.exceptions import (
    MetadataError,
    MetadataParseError,
    MetadataSourceError,
)
from fotobot.exif.geo import GeoCoordinate, ReverseGeocoder, decode_gps, resolve_place
from fotobot.exif.reader import (
    HttpRangeReader,
    MetadataContainer,
    read_metadata,
    read_metadata_from_file,
    read_metadata_from_url,
)

__all__ = [
    "MetadataError",
    "MetadataParseError",
    "MetadataSourceError",
    "GeoCoordinate",
    "ReverseGeocoder",
    "decode_gps",
    "resolve_place",
    "HttpRangeReader",
    "MetadataContainer",
    "read_metadata",
    "read_metadata_from_file",
    "read_metadata_from_url",
]
