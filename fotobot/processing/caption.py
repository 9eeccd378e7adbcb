"""Caption rendering."""

from typing import List

from .models import ResolvedAttributes

# Telegram allows 1024 characters in a media caption; stay below that.
CAPTION_LIMIT = 1000
TRUNCATION_MARKER = "... [truncated]"

SEPARATOR = "——————————"


def build_caption(data: ResolvedAttributes) -> str:
    """Render resolved attributes into the caption template.

    Camera/lens and date lines are always present; location and GPS lines
    only when the image provides them.
    """
    lines: List[str] = [
        f"💭: {data.title or ''}",
        SEPARATOR,
        f"📸: {data.camera} / {data.lens}",
    ]

    parameters = [
        value
        for value in (data.focal_length_display, data.aperture, data.shutter, data.iso)
        if value
    ]
    lines.append(f"📝: {', '.join(parameters) if parameters else 'Parameters Unknown'}")

    lines.append(f"📅: {data.datetime or 'Unknown'}")

    place = ", ".join(part for part in (data.location, data.country) if part)
    if place:
        lines.append(f"🗺️: {place}")

    if data.gps:
        lines.append(f"📍: {data.gps}")

    return "\n".join(lines).rstrip("\n")


def build_empty_caption() -> str:
    """Caption for an image without any embedded metadata."""
    return build_caption(ResolvedAttributes())


def enforce_caption_limit(caption: str, limit: int = CAPTION_LIMIT) -> str:
    """Cap a caption at ``limit`` UTF-8 bytes.

    Longer captions are cut at the last complete character that fits and get
    TRUNCATION_MARKER appended.
    """
    encoded = caption.encode("utf-8")
    if len(encoded) <= limit:
        return caption

    return encoded[:limit].decode("utf-8", errors="ignore") + TRUNCATION_MARKER
