"""Secondary MTProto client for downloading files above the Bot API limit."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional

from telethon import TelegramClient
from telethon.errors import RPCError, UsernameInvalidError, UsernameNotOccupiedError

from ..config import ConfigManager
from .exceptions import MediaDownloadError, PeerNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_SESSION_FILE = "~/.config/fotobot/fotobot.session"


class SecondaryClient:
    """Telethon client signed in with the bot token.

    The Bot API cannot download files larger than 20 MiB; this client fetches
    them over MTProto instead. Once started, a supervisor task watches the
    connection and reconnects with a bounded backoff whenever it drops.

    Attributes:
        client: Underlying Telethon client
        bot_token: Token used to sign in
        reconnect_delay: Initial delay before reconnecting, in seconds
        max_reconnect_delay: Upper bound for the reconnect delay
    """

    def __init__(
        self,
        client: TelegramClient,
        bot_token: str,
        reconnect_delay: float = 1.0,
        max_reconnect_delay: float = 60.0
    ) -> None:
        self.client = client
        self.bot_token = bot_token
        self.reconnect_delay = reconnect_delay
        self.max_reconnect_delay = max_reconnect_delay
        self._supervisor: Optional[asyncio.Task] = None
        self._stopping = False

    @classmethod
    def from_config(cls, config: ConfigManager) -> "SecondaryClient":
        """Create the client from the ``telegram`` config section.

        Must be called from within the running event loop. The parent
        directory of the session file is created if needed.
        """
        session_file = Path(
            config.get("telegram.session_file") or DEFAULT_SESSION_FILE
        ).expanduser()
        session_file.parent.mkdir(parents=True, exist_ok=True)

        client = TelegramClient(
            str(session_file),
            config.api_id,
            config.api_hash,
        )
        logger.debug(f"Secondary client session: {session_file}")
        return cls(client, config.bot_token)

    async def start(self) -> None:
        """Connect, sign in with the bot token and start the supervisor."""
        logger.info("Signing in secondary Telegram client...")
        await self.client.start(bot_token=self.bot_token)
        logger.info("Secondary Telegram client signed in")

        self._stopping = False
        self._supervisor = asyncio.create_task(self._supervise())

    async def _supervise(self) -> None:
        delay = self.reconnect_delay
        while not self._stopping:
            try:
                await self.client.disconnected
            except OSError as e:
                logger.warning(f"Secondary client connection lost: {e}")
            if self._stopping:
                break

            logger.warning(f"Secondary client disconnected, reconnecting in {delay:.0f}s")
            await asyncio.sleep(delay)

            try:
                await self.client.connect()
            except (OSError, ConnectionError, RPCError) as e:
                delay = min(delay * 2, self.max_reconnect_delay)
                logger.error(f"Secondary client reconnect failed: {e}")
                continue

            delay = self.reconnect_delay
            logger.info("Secondary client reconnected")

        logger.info("Secondary client supervisor stopped")

    async def stop(self) -> None:
        """Stop the supervisor and disconnect."""
        self._stopping = True
        if self._supervisor is not None:
            self._supervisor.cancel()
            try:
                await self._supervisor
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"Secondary client supervisor failed: {e}", exc_info=True)
            self._supervisor = None

        await self.client.disconnect()
        logger.info("Secondary Telegram client stopped")

    async def resolve_peer(self, chat_id: int, username: Optional[str] = None) -> Any:
        """Find the peer for a Bot API chat id.

        The chat username is tried first; otherwise the client's dialogs are
        scanned for a matching id.

        Raises:
            PeerNotFoundError: If neither lookup finds the chat
        """
        if username:
            try:
                peer = await self.client.get_entity(username)
            except (ValueError, UsernameNotOccupiedError, UsernameInvalidError):
                logger.info(f"Secondary client could not resolve username {username}")
            else:
                logger.info(f"Resolved username {username} to peer {chat_id}")
                return peer

        try:
            async for dialog in self.client.iter_dialogs():
                if dialog.id == chat_id:
                    return dialog.entity
        except RPCError as e:
            raise PeerNotFoundError(chat_id, username) from e

        raise PeerNotFoundError(chat_id, username)

    async def fetch_message(self, peer: Any, message_id: int) -> Optional[Any]:
        """Return the message with the given id, or None if it doesn't exist."""
        return await self.client.get_messages(peer, ids=message_id)

    async def download_media(self, message: Any) -> Optional[bytes]:
        """Download the media of a message into memory.

        Returns:
            File bytes, or None if the message carries no media

        Raises:
            MediaDownloadError: If the transfer fails
        """
        try:
            return await self.client.download_media(message, file=bytes)
        except (RPCError, OSError) as e:
            raise MediaDownloadError(
                f"Failed to download media of message {getattr(message, 'id', '?')}: {e}"
            ) from e
