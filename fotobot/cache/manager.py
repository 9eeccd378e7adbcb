"""Cache manager for images downloaded through the secondary client."""

import logging
import time
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)


class CacheError(Exception):
    """Exception raised when the cache directory or a cached file cannot be written."""
    pass


class CacheManager:
    """Stores downloaded images on disk so their metadata can be read.

    Files are named ``tmp-<chat_id>-<message_id>-<epoch_millis>.<ext>`` and
    are kept after processing; nothing in the bot removes them.

    Attributes:
        cache_dir: Directory holding cached images
    """

    def __init__(self, cache_dir: Union[str, Path] = "cache") -> None:
        """Initialize cache manager.

        The directory itself is created lazily, before each write.

        Args:
            cache_dir: Directory for cached images
        """
        self.cache_dir = Path(cache_dir).expanduser()
        logger.info(f"Cache manager initialized: {self.cache_dir}")

    def ensure_directory(self) -> Path:
        """Create the cache directory if it doesn't exist.

        Raises:
            CacheError: If the directory cannot be created
        """
        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(f"Cannot create cache directory {self.cache_dir}: {e}") from e
        return self.cache_dir

    def temp_path(
        self,
        chat_id: int,
        message_id: int,
        extension: str,
        timestamp_ms: Optional[int] = None
    ) -> Path:
        """Get the path for a newly downloaded image.

        Args:
            chat_id: Bot API chat id
            message_id: Message id within the chat
            extension: File extension without the dot
            timestamp_ms: Milliseconds since the epoch (defaults to now)

        Returns:
            Path inside the cache directory
        """
        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)
        extension = extension.lstrip(".") or "bin"
        return self.cache_dir / f"tmp-{chat_id}-{message_id}-{timestamp_ms}.{extension}"

    def write_temp_file(
        self,
        chat_id: int,
        message_id: int,
        extension: str,
        data: bytes
    ) -> Path:
        """Persist downloaded image bytes.

        Args:
            chat_id: Bot API chat id
            message_id: Message id within the chat
            extension: File extension without the dot
            data: Image bytes

        Returns:
            Path of the written file

        Raises:
            CacheError: If the directory or file cannot be written
        """
        self.ensure_directory()
        path = self.temp_path(chat_id, message_id, extension)

        try:
            path.write_bytes(data)
        except OSError as e:
            raise CacheError(f"Failed to write cached image {path}: {e}") from e

        logger.debug(f"Cached {len(data)} bytes to {path}")
        return path
