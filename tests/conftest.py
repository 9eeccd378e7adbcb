"""Shared fixtures and fakes for the fotobot test suite."""

import io
import re
from typing import Dict, Optional

import pytest
from PIL import Image
from PIL.ExifTags import IFD
from PIL.TiffImagePlugin import IFDRational

from fotobot.exif import tags
from fotobot.exif.reader import MetadataContainer


def container_from_tags(values: Dict[tags.Tag, object], thumbnail: Optional[Dict[tags.Tag, object]] = None) -> MetadataContainer:
    """Build a MetadataContainer from {Tag: value} mappings."""
    def group(entries):
        directories: Dict[str, Dict[int, object]] = {}
        for tag, value in (entries or {}).items():
            directories.setdefault(tag.directory, {})[tag.code] = value
        return directories

    return MetadataContainer.from_directories(group(values), group(thumbnail))


def make_jpeg(image_tags=None, exif_tags=None, gps_tags=None) -> bytes:
    """Encode a tiny JPEG carrying the given IFD0, Exif and GPS entries (keyed by code)."""
    exif = Image.Exif()
    for code, value in (image_tags or {}).items():
        exif[code] = value
    if exif_tags:
        exif[IFD.Exif] = dict(exif_tags)
    if gps_tags:
        exif[IFD.GPSInfo] = dict(gps_tags)

    buffer = io.BytesIO()
    Image.new("RGB", (8, 8), color=(200, 120, 40)).save(
        buffer, format="JPEG", exif=exif.tobytes() if len(exif) else b""
    )
    return buffer.getvalue()


class _FakeResponse:
    def __init__(self, status_code: int, content: bytes = b"", headers: Optional[dict] = None):
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400


class FakeRangeSession:
    """requests.Session stand-in serving a byte blob with range support."""

    _RANGE = re.compile(r"bytes=(\d+)-(\d+)")

    def __init__(self, blob: bytes, honour_ranges: bool = True, status_code: Optional[int] = None):
        self.blob = blob
        self.honour_ranges = honour_ranges
        self.status_code = status_code
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append((url, dict(headers or {}), timeout))

        if self.status_code is not None:
            return _FakeResponse(self.status_code)
        if not self.honour_ranges:
            return _FakeResponse(200, self.blob)

        start, end = (int(g) for g in self._RANGE.match(headers["Range"]).groups())
        if start >= len(self.blob):
            return _FakeResponse(416)

        end = min(end, len(self.blob) - 1)
        return _FakeResponse(
            206,
            self.blob[start:end + 1],
            {"Content-Range": f"bytes {start}-{end}/{len(self.blob)}"},
        )


@pytest.fixture
def canon_container():
    """Canon EOS R5 shot at 50mm f/1.8 1/200s ISO 400, no GPS."""
    return container_from_tags({
        tags.MAKE: "Canon",
        tags.MODEL: "EOS R5",
        tags.FOCAL_LENGTH: IFDRational(50, 1),
        tags.F_NUMBER: IFDRational(9, 5),
        tags.EXPOSURE_TIME: IFDRational(1, 200),
        tags.PHOTOGRAPHIC_SENSITIVITY: 400,
        tags.DATE_TIME_ORIGINAL: "2023:07:14 18:30:05",
    })


@pytest.fixture
def pittsburgh_gps():
    """GPS entries for 40°26'45.8" N, 79°56'55" W."""
    return {
        tags.GPS_LATITUDE_REF: "N",
        tags.GPS_LATITUDE: (IFDRational(40, 1), IFDRational(26, 1), IFDRational(458, 10)),
        tags.GPS_LONGITUDE_REF: "W",
        tags.GPS_LONGITUDE: (IFDRational(79, 1), IFDRational(56, 1), IFDRational(55, 1)),
    }
