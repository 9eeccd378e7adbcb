"""Reading EXIF metadata from local files and remote (range-fetchable) URLs."""

import io
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, BinaryIO, Mapping, Optional, Tuple, Union

import requests
from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import IFD
from pillow_heif import register_heif_opener

from .exceptions import MetadataParseError, MetadataSourceError
from .tags import EXIF, GPS_INFO, IMAGE, INTEROP, Tag

register_heif_opener()

logger = logging.getLogger(__name__)

# Smallest chunk fetched per HTTP round trip when reading remote files
MIN_RANGE_REQUEST_SIZE = 500 * 1024

_CONTENT_RANGE = re.compile(r"bytes\s+(\d+)-(\d+)/(\d+|\*)")

# Pointer tags in IFD0 that reference other directories
_POINTER_TAGS = frozenset({int(IFD.Exif), int(IFD.GPSInfo), int(IFD.Interop)})


@dataclass(frozen=True)
class MetadataContainer:
    """Raw tag values read from an image, grouped by directory.

    The primary directories describe the main image; the secondary ones
    (the thumbnail IFD) are consulted only when a tag is missing from the
    primary set.

    Attributes:
        primary: Directory name -> {tag code: value} for the main image
        secondary: Same layout for the thumbnail directory
    """
    primary: Mapping[str, Mapping[int, Any]]
    secondary: Mapping[str, Mapping[int, Any]] = field(default_factory=dict)

    def get(self, tag: Tag) -> Any:
        """Return the raw value of ``tag`` or None if absent."""
        for directories in (self.primary, self.secondary):
            value = directories.get(tag.directory, {}).get(tag.code)
            if value is not None:
                return value
        return None

    def find(self, *tags: Tag) -> Any:
        """Return the value of the first tag present, in the given order."""
        for tag in tags:
            value = self.get(tag)
            if value is not None:
                return value
        return None

    def __contains__(self, tag: Tag) -> bool:
        return self.get(tag) is not None

    def __len__(self) -> int:
        return sum(
            len(entries)
            for directories in (self.primary, self.secondary)
            for entries in directories.values()
        )

    @classmethod
    def from_directories(
        cls,
        primary: Mapping[str, Mapping[int, Any]],
        secondary: Optional[Mapping[str, Mapping[int, Any]]] = None
    ) -> "MetadataContainer":
        """Build a read-only container from plain dictionaries."""
        def freeze(directories):
            return MappingProxyType({
                name: MappingProxyType(dict(entries))
                for name, entries in (directories or {}).items()
                if entries
            })

        return cls(primary=freeze(primary), secondary=freeze(secondary))


class HttpRangeReader(io.RawIOBase):
    """Seekable, read-only file object backed by HTTP range requests.

    Only the parts of the file that are actually read get downloaded. Each
    network round trip fetches at least ``min_request_size`` bytes so that
    the many small reads done while walking an image header are served from
    the local buffer.

    Examples:
        >>> with HttpRangeReader("https://example.com/photo.jpg") as reader:
        ...     header = reader.read(2)
    """

    def __init__(
        self,
        url: str,
        session: Optional[requests.Session] = None,
        min_request_size: int = MIN_RANGE_REQUEST_SIZE,
        timeout: float = 30
    ) -> None:
        super().__init__()
        self.url = url
        self.session = session or requests.Session()
        self.min_request_size = max(1, int(min_request_size))
        self.timeout = timeout
        self._position = 0
        self._size: Optional[int] = None
        self._buffer = b""
        self._buffer_start = 0
        self.requests_made = 0

    def readable(self) -> bool:
        return True

    def seekable(self) -> bool:
        return True

    def tell(self) -> int:
        return self._position

    @property
    def size(self) -> int:
        """Total size of the remote file (fetches the first chunk if unknown)."""
        if self._size is None:
            self._fetch(0)
        return self._size if self._size is not None else len(self._buffer)

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        if whence == io.SEEK_SET:
            position = offset
        elif whence == io.SEEK_CUR:
            position = self._position + offset
        elif whence == io.SEEK_END:
            position = self.size + offset
        else:
            raise ValueError(f"Invalid whence: {whence}")

        if position < 0:
            raise ValueError(f"Negative seek position {position}")
        self._position = position
        return self._position

    def readinto(self, buffer) -> int:
        view = memoryview(buffer).cast("B")
        written = 0

        while written < len(view):
            if self._size is not None and self._position >= self._size:
                break

            if not self._buffer_covers(self._position):
                self._fetch(self._position, len(view) - written)
                if not self._buffer_covers(self._position):
                    break

            offset = self._position - self._buffer_start
            chunk = self._buffer[offset:offset + len(view) - written]
            view[written:written + len(chunk)] = chunk
            written += len(chunk)
            self._position += len(chunk)

        return written

    def _buffer_covers(self, position: int) -> bool:
        return self._buffer_start <= position < self._buffer_start + len(self._buffer)

    def _fetch(self, start: int, length: int = 0) -> None:
        end = start + max(length, self.min_request_size) - 1
        if self._size is not None:
            end = min(end, self._size - 1)

        headers = {"Range": f"bytes={start}-{end}"}
        logger.debug(f"HTTP range GET {headers['Range']}")

        try:
            response = self.session.get(self.url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise MetadataSourceError(f"Failed to read image bytes: {e}") from e
        self.requests_made += 1

        if response.status_code == 416:
            # Requested range starts past the end of the file
            self._size = start if self._size is None else self._size
            self._buffer, self._buffer_start = b"", start
            return

        if not response.ok:
            raise MetadataSourceError(
                f"Image download failed with status {response.status_code}"
            )

        if response.status_code == 206:
            first, total = self._parse_content_range(response.headers.get("Content-Range"))
            self._buffer = response.content
            self._buffer_start = start if first is None else first
            if total is not None:
                self._size = total
        else:
            # Server ignored the range header and sent the whole file
            self._buffer = response.content
            self._buffer_start = 0
            self._size = len(self._buffer)

    @staticmethod
    def _parse_content_range(header: Optional[str]) -> Tuple[Optional[int], Optional[int]]:
        match = _CONTENT_RANGE.match(header or "")
        if not match:
            return None, None
        total = match.group(3)
        return int(match.group(1)), (None if total == "*" else int(total))


def _read_directory(exif: Image.Exif, ifd: IFD) -> Mapping[int, Any]:
    """Return the entries of a sub-directory, or {} when the image has none.

    Pillow raises KeyError for a directory whose pointer tag is missing
    (e.g. Interop without an Interop pointer in the Exif IFD).
    """
    try:
        return exif.get_ifd(ifd)
    except KeyError:
        logger.debug(f"No {ifd.name} directory in image")
        return {}


def read_metadata(stream: BinaryIO) -> Optional[MetadataContainer]:
    """Parse the EXIF metadata embedded in an image.

    Supports every container Pillow can open (JPEG, TIFF, PNG, WebP) plus
    HEIF/HEIC through pillow-heif.

    Args:
        stream: Seekable binary stream positioned anywhere

    Returns:
        MetadataContainer, or None if the image carries no metadata

    Raises:
        MetadataParseError: If the image or its EXIF block cannot be decoded
    """
    stream.seek(0)

    try:
        with Image.open(stream) as img:
            exif = img.getexif()
            if not exif:
                logger.debug(f"No EXIF data found in {img.format} image")
                return None

            primary = {
                IMAGE: {tag: value for tag, value in exif.items() if tag not in _POINTER_TAGS},
                EXIF: _read_directory(exif, IFD.Exif),
                GPS_INFO: _read_directory(exif, IFD.GPSInfo),
                INTEROP: _read_directory(exif, IFD.Interop),
            }
            secondary = {IMAGE: _read_directory(exif, IFD.IFD1)}
    except UnidentifiedImageError as e:
        raise MetadataParseError(f"Unrecognized image format: {e}") from e
    except MetadataSourceError:
        raise
    except (OSError, SyntaxError, ValueError, TypeError) as e:
        raise MetadataParseError(f"Failed to decode EXIF data: {e}") from e

    container = MetadataContainer.from_directories(primary, secondary)
    logger.debug(f"Read {len(container)} EXIF entries")
    return container


def read_metadata_from_file(path: Union[str, Path]) -> Optional[MetadataContainer]:
    """Read metadata from a local image file.

    Raises:
        MetadataSourceError: If the file cannot be opened
        MetadataParseError: If the image cannot be decoded
    """
    path = Path(path)
    try:
        f = open(path, 'rb')
    except OSError as e:
        raise MetadataSourceError(f"Failed to open local image at `{path}`: {e}") from e

    with f:
        return read_metadata(f)


def read_metadata_from_url(
    url: str,
    session: Optional[requests.Session] = None,
    min_request_size: int = MIN_RANGE_REQUEST_SIZE,
    timeout: float = 30
) -> Optional[MetadataContainer]:
    """Read metadata from a remote image without downloading all of it.

    Raises:
        MetadataSourceError: If the HTTP reads fail
        MetadataParseError: If the image cannot be decoded
    """
    with HttpRangeReader(url, session=session, min_request_size=min_request_size, timeout=timeout) as reader:
        container = read_metadata(reader)
        logger.debug(f"Read metadata from remote image in {reader.requests_made} request(s)")
        return container

