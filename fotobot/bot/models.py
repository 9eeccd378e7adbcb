"""Data models for images received by the bot."""

import mimetypes
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any, Optional, Union

# Largest file the Bot API lets a bot download
MAX_INLINE_SIZE = 20 * 1024 * 1024

DEFAULT_EXTENSION = "bin"


@dataclass(frozen=True)
class ReceivedImage:
    """An image document as received from Telegram.

    Attributes:
        mime_type: Declared MIME type, e.g. "image/jpeg"
        file_name: Original file name, if the sender provided one
    """
    mime_type: Optional[str] = None
    file_name: Optional[str] = None

    @property
    def extension(self) -> str:
        """File extension (without dot) used when caching the image.

        Derived from the MIME type, then from the file name, and "bin" when
        neither gives one.
        """
        if self.mime_type:
            guessed = mimetypes.guess_extension(self.mime_type.split(";", 1)[0].strip())
            if guessed:
                return guessed.lstrip(".")

        if self.file_name:
            suffix = PurePath(self.file_name).suffix.lstrip(".")
            if suffix:
                return suffix.lower()

        return DEFAULT_EXTENSION


@dataclass(frozen=True)
class InlineImage:
    """Image small enough to be fetched through the Bot API."""
    file_id: str
    media: ReceivedImage


@dataclass(frozen=True)
class TooLargeImage:
    """Image above the Bot API download limit; fetched via the secondary client."""
    file_id: str
    media: ReceivedImage
    size: int


MediaSelection = Union[InlineImage, TooLargeImage]


def select_image(
    file_id: str,
    media: ReceivedImage,
    size: Optional[int] = None
) -> MediaSelection:
    """Decide how an image is acquired based on its reported size.

    Unknown sizes are assumed to be small enough for the Bot API.
    """
    if size is not None and size > MAX_INLINE_SIZE:
        return TooLargeImage(file_id=file_id, media=media, size=size)
    return InlineImage(file_id=file_id, media=media)


def is_image_mime_type(mime_type: Optional[str]) -> bool:
    if not mime_type:
        return False
    return mime_type.split(";", 1)[0].strip().lower().startswith("image/")


def selection_from_message(message: Any) -> Optional[MediaSelection]:
    """Select the image carried by a Telegram message, if any.

    Only documents with an ``image/*`` MIME type qualify. Compressed photos
    are rejected (Telegram strips their metadata), as is everything else.

    Args:
        message: python-telegram-bot Message

    Returns:
        MediaSelection, or None if the message has no usable image document
    """
    if getattr(message, "photo", None):
        return None

    document = getattr(message, "document", None)
    if document is None or not is_image_mime_type(document.mime_type):
        return None

    media = ReceivedImage(mime_type=document.mime_type, file_name=document.file_name)
    return select_image(document.file_id, media, document.file_size)
