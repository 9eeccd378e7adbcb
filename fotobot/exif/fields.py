"""Resolution of logical photo attributes from raw EXIF values.

Each ``resolve_*`` function takes a MetadataContainer and returns display
strings (and numeric values where the caption needs them). Missing or
malformed tags resolve to None rather than raising.
"""

import logging
import math
from numbers import Real
from typing import Any, Iterable, Optional, Tuple

from . import tags
from .reader import MetadataContainer
from .tags import Tag

logger = logging.getLogger(__name__)

UNKNOWN_CAMERA = "Unknown Camera"
UNKNOWN_LENS = "Unknown Lens"

# Longest exposure still rendered as a 1/N fraction
MAX_SHUTTER_DENOMINATOR = 8000


def round_half_away(value: float) -> float:
    """Round to the nearest integer, halves away from zero (2.5 -> 3)."""
    return math.copysign(math.floor(abs(value) + 0.5), value)


def to_float(value: Any) -> Optional[float]:
    """Convert a numeric EXIF value (rational, int, float) to float.

    Sequences yield their first element. Returns None for anything that is
    not a real number; the result may still be NaN or infinite (e.g. a
    rational with a zero denominator).
    """
    if isinstance(value, (tuple, list)):
        if not value:
            return None
        value = value[0]
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    try:
        return float(value)
    except (ValueError, ZeroDivisionError, OverflowError):
        return None


def to_uint(value: Any) -> Optional[int]:
    """Return the first element of an unsigned-integer EXIF value."""
    if isinstance(value, (tuple, list)):
        if not value:
            return None
        value = value[0]
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return None
    return value


def field_to_string(value: Any) -> Optional[str]:
    """Decode an EXIF value to text.

    ASCII values (str) keep their first NUL-separated entry; opaque byte
    blobs are decoded as lossy UTF-8; any other value is rendered as text.
    Surrounding NULs and whitespace are stripped and empty results become
    None.
    """
    if value is None:
        return None

    if isinstance(value, str):
        text = value.split("\x00", 1)[0]
    elif isinstance(value, (bytes, bytearray)):
        if not value:
            return None
        text = bytes(value).decode("utf-8", errors="replace")
    elif isinstance(value, (tuple, list)):
        text = ", ".join(str(item) for item in value)
    else:
        text = str(value)

    text = text.strip("\x00").strip()
    return text or None


def encoded_text_to_string(value: Any) -> Optional[str]:
    """Decode a text tag that may start with an 8-byte character code.

    Tags such as GPSAreaInformation and UserComment prefix their payload
    with ``ASCII\\0\\0\\0``, ``UNICODE\\0``, ``JIS\\0\\0\\0\\0\\0`` or eight NULs.
    Values without a recognised prefix are decoded like any other field.
    """
    if isinstance(value, (bytes, bytearray)) and len(value) >= 8:
        prefix, payload = bytes(value[:8]), bytes(value[8:])
        if prefix == b"UNICODE\x00":
            encoding = "utf-16-be" if payload[:1] == b"\x00" else "utf-16-le"
            return field_to_string(payload.decode(encoding, errors="replace"))
        if prefix in (b"ASCII\x00\x00\x00", b"\x00" * 8):
            return field_to_string(payload)
    return field_to_string(value)


def first_string(container: MetadataContainer, candidates: Iterable[Tag]) -> Optional[str]:
    """Return the first candidate tag that decodes to a non-empty string."""
    for tag in candidates:
        text = field_to_string(container.get(tag))
        if text:
            return text
    return None


def format_fnumber(value: float) -> str:
    if not math.isfinite(value):
        return "f/--"

    rounded = round_half_away(value)
    if abs(value - rounded) < 0.05:
        return f"f/{rounded:.0f}"
    return f"f/{value:.1f}"


def format_focal_length(value: float) -> str:
    rounded = round_half_away(value)
    if abs(value - rounded) < 0.1:
        return f"{rounded:.0f}mm"
    return f"{value:.1f}mm"


def format_shutter(value: float) -> Optional[str]:
    """Render an exposure time in seconds.

    Sub-second exposures that are close to a 1/N fraction render as
    ``1/Ns``; everything else as decimal seconds.
    """
    if not math.isfinite(value) or value <= 0.0:
        return None

    if value >= 1.0:
        rounded = round_half_away(value)
        if abs(value - rounded) < 0.01:
            return f"{rounded:.0f}s"
        return f"{round_half_away(value * 100.0) / 100.0:.2f}s"

    reciprocal = round_half_away(1.0 / value)
    if reciprocal <= MAX_SHUTTER_DENOMINATOR and abs(1.0 / reciprocal - value) < 0.01:
        return f"1/{reciprocal:.0f}s"

    return f"{round_half_away(value * 1000.0) / 1000.0:.3f}s"


def format_datetime(text: str) -> str:
    """Turn ``YYYY:MM:DD HH:MM:SS`` into ``YYYY-MM-DD HH:MM:SS``."""
    trimmed = text.strip("\x00").strip()
    if len(trimmed) < 19:
        return trimmed
    return f"{trimmed[0:10].replace(':', '-')} {trimmed[11:19]}"


def format_lens_specification(values: Any) -> Optional[str]:
    """Render a LensSpecification (min/max focal, min/max f-number).

    Examples:
        (24, 70, 2.8, 2.8) -> "24-70mm f/2.8"
        (50, 50, 1.8, 1.8) -> "50mm f/1.8"
    """
    if not isinstance(values, (tuple, list)) or len(values) < 4:
        return None

    numbers = [to_float(v) for v in values[:4]]
    if any(n is None for n in numbers):
        return None
    focal_min, focal_max, aperture_min, aperture_max = numbers

    if not (math.isfinite(focal_min) and math.isfinite(focal_max)):
        return None

    if abs(focal_min - focal_max) < 0.5:
        focal = f"{round_half_away(focal_min):.0f}mm"
    else:
        focal = f"{round_half_away(focal_min):.0f}-{round_half_away(focal_max):.0f}mm"

    if abs(aperture_min - aperture_max) < 0.1:
        aperture = format_fnumber(aperture_min)
    else:
        aperture = f"{format_fnumber(aperture_min)}-{format_fnumber(aperture_max)}"

    return f"{focal} {aperture}"


def resolve_title(container: MetadataContainer) -> Optional[str]:
    return first_string(container, tags.TITLE_TAGS)


def resolve_camera(container: MetadataContainer) -> str:
    make = first_string(container, [tags.MAKE])
    model = first_string(container, [tags.MODEL])

    if make and model:
        return f"{make} {model}"
    return make or model or UNKNOWN_CAMERA


def resolve_lens(container: MetadataContainer) -> str:
    lens_model = first_string(container, [tags.LENS_MODEL])
    if lens_model:
        return lens_model

    spec = format_lens_specification(container.get(tags.LENS_SPECIFICATION))
    return spec or UNKNOWN_LENS


def resolve_focal_length(container: MetadataContainer) -> Tuple[Optional[str], Optional[float]]:
    value = to_float(container.get(tags.FOCAL_LENGTH))
    if value is None or not math.isfinite(value):
        return None, None
    return format_focal_length(value), value


def resolve_focal_length_35mm(container: MetadataContainer) -> Tuple[Optional[str], Optional[float]]:
    value = to_uint(container.get(tags.FOCAL_LENGTH_35MM))
    if value is None:
        return None, None
    return f"{value}mm (35mm eq)", float(value)


def resolve_aperture(container: MetadataContainer) -> Optional[str]:
    f_number = to_float(container.get(tags.F_NUMBER))
    if f_number is None and tags.F_NUMBER not in container:
        apex = to_float(container.get(tags.APERTURE_VALUE))
        # APEX aperture value: N = 2 ** (Av / 2)
        f_number = None if apex is None else _apex_power(apex / 2.0)

    if f_number is None or not math.isfinite(f_number):
        return None
    return format_fnumber(f_number)


def resolve_shutter(container: MetadataContainer) -> Optional[str]:
    exposure = to_float(container.get(tags.EXPOSURE_TIME))
    if exposure is None and tags.EXPOSURE_TIME not in container:
        apex = to_float(container.get(tags.SHUTTER_SPEED_VALUE))
        # APEX shutter speed value: t = 2 ** -Tv
        exposure = None if apex is None else _apex_power(-apex)

    if exposure is None:
        return None
    return format_shutter(exposure)


def resolve_iso(container: MetadataContainer) -> Optional[str]:
    value = to_uint(container.find(*tags.ISO_TAGS))
    if value is None:
        return None
    return f"ISO {value}"


def resolve_datetime(container: MetadataContainer) -> Optional[str]:
    value = container.find(*tags.DATETIME_TAGS)
    if not isinstance(value, str):
        return None
    return format_datetime(value)


def _apex_power(exponent: float) -> Optional[float]:
    if not math.isfinite(exponent):
        return None
    try:
        return math.pow(2.0, exponent)
    except OverflowError:
        logger.debug(f"APEX value out of range: {exponent}")
        return None
