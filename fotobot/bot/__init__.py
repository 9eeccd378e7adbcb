"""Telegram bot: image selection, acquisition and replies."""

from fotobot.bot.exceptions import (
    MediaAcquisitionError,
    MediaDownloadError,
    PeerNotFoundError,
)
from fotobot.bot.models import (
    MAX_INLINE_SIZE,
    InlineImage,
    MediaSelection,
    ReceivedImage,
    TooLargeImage,
    select_image,
    selection_from_message,
)
from fotobot.bot.router import MediaRouter
from fotobot.bot.secondary import SecondaryClient
from fotobot.bot.handlers import build_application, handle_message

__all__ = [
    "MediaAcquisitionError",
    "MediaDownloadError",
    "PeerNotFoundError",
    "MAX_INLINE_SIZE",
    "InlineImage",
    "MediaSelection",
    "ReceivedImage",
    "TooLargeImage",
    "select_image",
    "selection_from_message",
    "MediaRouter",
    "SecondaryClient",
    "build_application",
    "handle_message",
]
