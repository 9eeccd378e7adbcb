"""Caption pipeline: metadata container to caption text."""

import logging
from pathlib import Path
from typing import Optional, Union

import requests

from ..config import ConfigManager
from ..exif import fields
from ..exif.geo import ReverseGeocoder, decode_gps, resolve_place
from ..exif.reader import (
    MIN_RANGE_REQUEST_SIZE,
    MetadataContainer,
    read_metadata_from_file,
    read_metadata_from_url,
)
from .caption import build_caption, build_empty_caption
from .models import ResolvedAttributes

logger = logging.getLogger(__name__)


class ExifSummarizer:
    """Turns image metadata into a caption.

    The summarizer is stateless per request and safe to share between
    concurrent handlers. All methods block (file and network I/O, geocoding)
    and are meant to be run in a worker thread from async code.

    Attributes:
        geocoder: Reverse geocoder, or None to rely on the image's own
            area information
        range_request_size: Minimum bytes fetched per HTTP range request
        session: Shared requests session for remote reads
        timeout: HTTP timeout in seconds for remote reads
        default_language: Geocoding language used when the caller gives none
    """

    def __init__(
        self,
        geocoder: Optional[ReverseGeocoder] = None,
        range_request_size: int = MIN_RANGE_REQUEST_SIZE,
        session: Optional[requests.Session] = None,
        timeout: float = 30,
        default_language: str = "en"
    ) -> None:
        self.geocoder = geocoder
        self.range_request_size = max(range_request_size, MIN_RANGE_REQUEST_SIZE)
        self.session = session
        self.timeout = timeout
        self.default_language = default_language

    @classmethod
    def from_config(cls, config: ConfigManager) -> "ExifSummarizer":
        """Create a summarizer from the ``geocoding`` and ``http`` sections."""
        geocoder = None
        if config.get("geocoding.enabled", True):
            geocoder = ReverseGeocoder(
                user_agent=config.get("geocoding.user_agent"),
                domain=config.get("geocoding.domain"),
                timeout=config.get("geocoding.timeout", 10),
            )
        else:
            logger.info("Reverse geocoding disabled")

        return cls(
            geocoder=geocoder,
            range_request_size=config.get("http.range_request_size", MIN_RANGE_REQUEST_SIZE),
            session=requests.Session(),
            timeout=config.get("http.timeout", 30),
            default_language=config.get("geocoding.default_language", "en"),
        )

    def resolve(
        self,
        container: MetadataContainer,
        language: Optional[str] = None
    ) -> ResolvedAttributes:
        """Resolve every caption attribute from a metadata container.

        Args:
            container: Metadata read from the image
            language: Preferred language for the geocoded place name;
                ``default_language`` when None or empty

        Returns:
            ResolvedAttributes for the caption builder
        """
        focal_length, focal_length_value = fields.resolve_focal_length(container)
        focal_35mm, focal_35mm_value = fields.resolve_focal_length_35mm(container)

        coordinate = decode_gps(container)
        location, country = resolve_place(
            container, coordinate, self.geocoder, language or self.default_language
        )

        return ResolvedAttributes(
            title=fields.resolve_title(container),
            camera=fields.resolve_camera(container),
            lens=fields.resolve_lens(container),
            focal_length=focal_length,
            focal_length_value=focal_length_value,
            focal_length_35mm=focal_35mm,
            focal_length_35mm_value=focal_35mm_value,
            aperture=fields.resolve_aperture(container),
            shutter=fields.resolve_shutter(container),
            iso=fields.resolve_iso(container),
            datetime=fields.resolve_datetime(container),
            location=location,
            country=country,
            gps=coordinate.display if coordinate else None,
            latitude=coordinate.latitude if coordinate else None,
            longitude=coordinate.longitude if coordinate else None,
        )

    def summarize(
        self,
        container: Optional[MetadataContainer],
        language: Optional[str] = None
    ) -> str:
        """Build the caption for an image, or the empty caption if it has no metadata."""
        if container is None:
            logger.debug("Image has no metadata, using empty caption")
            return build_empty_caption()

        return build_caption(self.resolve(container, language))

    def summarize_url(self, url: str, language: Optional[str] = None) -> str:
        """Read metadata from a remote image through range requests and caption it.

        Raises:
            MetadataSourceError: If the HTTP reads fail
            MetadataParseError: If the image cannot be decoded
        """
        container = read_metadata_from_url(
            url,
            session=self.session,
            min_request_size=self.range_request_size,
            timeout=self.timeout,
        )
        return self.summarize(container, language)

    def summarize_file(
        self,
        path: Union[str, Path],
        language: Optional[str] = None
    ) -> str:
        """Read metadata from a local image and caption it.

        Raises:
            MetadataSourceError: If the file cannot be opened
            MetadataParseError: If the image cannot be decoded
        """
        container = read_metadata_from_file(path)
        return self.summarize(container, language)
