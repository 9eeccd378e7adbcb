"""Caption pipeline for fotobot."""

from fotobot.processing.caption import (
    CAPTION_LIMIT,
    TRUNCATION_MARKER,
    build_caption,
    build_empty_caption,
    enforce_caption_limit,
)
from fotobot.processing.models import ResolvedAttributes
from fotobot.processing.summarizer import ExifSummarizer

__all__ = [
    "CAPTION_LIMIT",
    "TRUNCATION_MARKER",
    "build_caption",
    "build_empty_caption",
    "enforce_caption_limit",
    "ResolvedAttributes",
    "ExifSummarizer",
]
