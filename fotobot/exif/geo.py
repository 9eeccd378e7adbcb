"""GPS decoding and reverse geocoding."""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from geopy.exc import GeopyError
from geopy.geocoders import Nominatim
from geopy.point import Point

from . import tags
from .fields import encoded_text_to_string, field_to_string, to_float
from .reader import MetadataContainer

logger = logging.getLogger(__name__)

DEFAULT_DOMAIN = "nominatim.openstreetmap.org"
DEFAULT_USER_AGENT = "fotobot/0.1 (https://github.com/fotobot/fotobot)"


@dataclass(frozen=True)
class GeoCoordinate:
    """A GPS position decoded from EXIF.

    Attributes:
        latitude: Signed latitude in decimal degrees (negative is south)
        longitude: Signed longitude in decimal degrees (negative is west)
        display: Unsigned magnitudes with hemisphere letters,
            e.g. "40.446056° N, 79.948611° W"
    """
    latitude: float
    longitude: float
    display: str

    def __str__(self) -> str:
        return self.display


def _dms_to_decimal(value: Any) -> Optional[float]:
    """Convert a (degrees, minutes, seconds) rational triplet to degrees."""
    if not isinstance(value, (tuple, list)) or len(value) < 3:
        return None

    components = [to_float(component) for component in value[:3]]
    if any(c is None or not math.isfinite(c) for c in components):
        return None

    degrees, minutes, seconds = components
    return degrees + minutes / 60.0 + seconds / 3600.0


def _hemisphere(reference: Any, allowed: str, default: str) -> str:
    """Normalize a GPS reference tag to one of ``allowed``.

    Uses the first ASCII letter of the tag; anything else (or a missing tag)
    yields ``default``.
    """
    text = field_to_string(reference) or ""
    letter = next((c.upper() for c in text if c.isascii() and c.isalpha()), None)
    if letter is not None and letter in allowed:
        return letter
    return default


def decode_gps(container: MetadataContainer) -> Optional[GeoCoordinate]:
    """Decode the GPS position of an image.

    Both latitude and longitude must be present and finite; otherwise no GPS
    data is returned at all.

    Args:
        container: Metadata read from the image

    Returns:
        GeoCoordinate, or None when the image has no usable position
    """
    latitude = _dms_to_decimal(container.get(tags.GPS_LATITUDE))
    longitude = _dms_to_decimal(container.get(tags.GPS_LONGITUDE))
    if latitude is None or longitude is None:
        return None

    lat_dir = _hemisphere(container.get(tags.GPS_LATITUDE_REF), "NS", "N")
    lon_dir = _hemisphere(container.get(tags.GPS_LONGITUDE_REF), "EW", "E")

    display = (
        f"{abs(latitude):.6f}° {lat_dir}, "
        f"{abs(longitude):.6f}° {lon_dir}"
    )

    signed_lat = -abs(latitude) if lat_dir == "S" else abs(latitude)
    signed_lon = -abs(longitude) if lon_dir == "W" else abs(longitude)

    logger.debug(f"Decoded GPS position: {signed_lat:.6f}, {signed_lon:.6f}")
    return GeoCoordinate(latitude=signed_lat, longitude=signed_lon, display=display)


def extract_country(location: str) -> Optional[str]:
    """Return the last non-empty comma-separated part of a place name.

    Examples:
        >>> extract_country("Schenley Park, Pittsburgh, Pennsylvania, United States")
        'United States'
    """
    for part in reversed(location.split(",")):
        part = part.strip()
        if part:
            return part
    return None


class ReverseGeocoder:
    """Resolves coordinates to place names through Nominatim.

    Lookups never raise: every failure (network error, bad status,
    unparseable body, missing result) is logged and reported as None so the
    caption can fall back to what the image itself records.

    Attributes:
        geolocator: geopy Nominatim geocoder
        timeout: Request timeout in seconds
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        domain: str = DEFAULT_DOMAIN,
        timeout: float = 10,
        geolocator: Optional[Nominatim] = None
    ) -> None:
        """Initialize the geocoder.

        Args:
            user_agent: Descriptive client identification sent to the service
            domain: Nominatim host
            timeout: Request timeout in seconds
            geolocator: Pre-built geolocator (mainly for tests)
        """
        self.geolocator = geolocator or Nominatim(user_agent=user_agent, domain=domain)
        self.timeout = timeout

    def lookup(
        self,
        latitude: float,
        longitude: float,
        language: Optional[str] = None
    ) -> Optional[str]:
        """Return the display name of the place at the given coordinates.

        Args:
            latitude: Signed latitude in decimal degrees
            longitude: Signed longitude in decimal degrees
            language: Preferred language for the result (accept-language)

        Returns:
            Full display name, or None if the lookup failed
        """
        point = Point(round(latitude, 6), round(longitude, 6))

        try:
            location = self.geolocator.reverse(
                point,
                exactly_one=True,
                language=language or False,
                addressdetails=False,
                timeout=self.timeout,
            )
        except (GeopyError, ValueError, TypeError) as e:
            logger.warning(
                f"Reverse geocoding failed for coordinates "
                f"({latitude:.6f}, {longitude:.6f}): {e}"
            )
            return None

        name = getattr(location, "address", None) if location is not None else None
        if not isinstance(name, str) or not name.strip():
            logger.warning(
                f"Reverse geocoding returned no display name for coordinates "
                f"({latitude:.6f}, {longitude:.6f})"
            )
            return None

        logger.debug(f"Reverse geocoded {latitude:.6f}, {longitude:.6f} to: {name}")
        return name


def resolve_place(
    container: MetadataContainer,
    coordinate: Optional[GeoCoordinate],
    geocoder: Optional[ReverseGeocoder] = None,
    language: Optional[str] = None
) -> Tuple[Optional[str], Optional[str]]:
    """Resolve the location and country shown in the caption.

    The geocoded display name is preferred, with the country taken from its
    last segment. Without a geocoding result the GPSAreaInformation text of
    the image is used, with no country.

    Returns:
        (location, country), either of which may be None
    """
    if coordinate is not None and geocoder is not None:
        name = geocoder.lookup(coordinate.latitude, coordinate.longitude, language)
        if name:
            return name, extract_country(name)

    area = (encoded_text_to_string(container.get(tag)) for tag in tags.AREA_TAGS)
    return next((text for text in area if text), None), None
