"""Routes a selected image to the right download path and replies with its caption."""

import asyncio
import logging
from typing import Any, Optional

from ..cache import CacheManager
from ..processing import ExifSummarizer, enforce_caption_limit
from .exceptions import MediaDownloadError
from .models import InlineImage, MediaSelection, TooLargeImage
from .secondary import SecondaryClient

logger = logging.getLogger(__name__)

TELEGRAM_FILE_URL = "https://api.telegram.org/file/bot{token}/{path}"


def file_url(token: str, file_path: str) -> str:
    """Return the download URL of a Bot API file.

    python-telegram-bot already returns absolute URLs; bare paths are
    expanded with the bot token.
    """
    if file_path.startswith(("http://", "https://")):
        return file_path
    return TELEGRAM_FILE_URL.format(token=token, path=file_path.lstrip("/"))


class MediaRouter:
    """Obtains image metadata and sends the captioned document back.

    Images within the Bot API download limit are read remotely through HTTP
    range requests; larger ones are downloaded by the secondary client into
    the cache first. Blocking work runs in worker threads.

    Attributes:
        bot: python-telegram-bot Bot
        secondary: Secondary MTProto client, or None if unavailable
        summarizer: Caption pipeline
        cache: Cache for downloaded images
    """

    def __init__(
        self,
        bot: Any,
        secondary: Optional[SecondaryClient],
        summarizer: ExifSummarizer,
        cache: CacheManager
    ) -> None:
        self.bot = bot
        self.secondary = secondary
        self.summarizer = summarizer
        self.cache = cache

    async def process(
        self,
        chat_id: int,
        message_id: int,
        username: Optional[str],
        selection: MediaSelection,
        language: Optional[str] = None
    ) -> str:
        """Caption an image and re-send it to the chat as a document.

        Args:
            chat_id: Chat the image was sent in
            message_id: Id of the message carrying the image
            username: Chat username, used to find the chat from the secondary client
            selection: How the image is acquired
            language: Sender's language code, for the geocoded place name

        Returns:
            The caption that was sent

        Raises:
            MediaAcquisitionError: If a large image cannot be downloaded
            MetadataError: If the image cannot be read
            CacheError: If the downloaded image cannot be stored
        """
        if isinstance(selection, TooLargeImage):
            logger.info(
                f"Image is {selection.size} bytes, downloading through secondary client"
            )
            caption = await self._process_large(chat_id, message_id, username, selection, language)
        elif isinstance(selection, InlineImage):
            caption = await self._process_inline(selection, language)
        else:
            raise TypeError(f"Unsupported media selection: {selection!r}")

        caption = enforce_caption_limit(caption)
        await self.bot.send_document(
            chat_id=chat_id,
            document=selection.file_id,
            caption=caption,
        )
        logger.info(f"Sent caption for message {message_id} in chat {chat_id}")
        return caption

    async def _process_inline(self, selection: InlineImage, language: Optional[str]) -> str:
        telegram_file = await self.bot.get_file(selection.file_id)
        url = file_url(self.bot.token, telegram_file.file_path)
        return await asyncio.to_thread(self.summarizer.summarize_url, url, language)

    async def _process_large(
        self,
        chat_id: int,
        message_id: int,
        username: Optional[str],
        selection: TooLargeImage,
        language: Optional[str]
    ) -> str:
        if self.secondary is None:
            raise MediaDownloadError("Secondary client is not available for large files")

        peer = await self.secondary.resolve_peer(chat_id, username)
        message = await self.secondary.fetch_message(peer, message_id)
        if message is None:
            raise MediaDownloadError(
                f"Secondary client did not return message {message_id} in chat {chat_id}"
            )

        data = await self.secondary.download_media(message)
        if data is None:
            raise MediaDownloadError(
                f"Secondary client reported no downloadable media for message {message_id}"
            )

        path = await asyncio.to_thread(
            self.cache.write_temp_file,
            chat_id,
            message_id,
            selection.media.extension,
            data,
        )
        return await asyncio.to_thread(self.summarizer.summarize_file, path, language)
