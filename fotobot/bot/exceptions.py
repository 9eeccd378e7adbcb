"""Custom exceptions for obtaining images from Telegram."""


class MediaAcquisitionError(Exception):
    """Base exception for errors while fetching an image from Telegram."""
    pass


class PeerNotFoundError(MediaAcquisitionError):
    """Raised when the secondary client cannot find the chat of a message.

    Attributes:
        chat_id: Bot API chat id that was looked up
        username: Chat username that was tried first, if any
    """

    def __init__(self, chat_id: int, username: str = None):
        self.chat_id = chat_id
        self.username = username
        super().__init__(f"Peer with chat_id {chat_id} not found in secondary client dialogs")


class MediaDownloadError(MediaAcquisitionError):
    """Raised when a message or its media cannot be downloaded."""
    pass
