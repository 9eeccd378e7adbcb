"""Telegram update handling and application wiring."""

import logging
from typing import Optional

from telegram import Update
from telegram.ext import Application, ApplicationBuilder, ContextTypes, MessageHandler, filters

from ..cache import CacheManager
from ..config import ConfigManager
from ..i18n import locale_from_language_code, translate
from ..processing import ExifSummarizer
from .models import selection_from_message
from .router import MediaRouter
from .secondary import SecondaryClient

logger = logging.getLogger(__name__)

# Keys of shared objects in Application.bot_data
CONFIG_KEY = "config"
ROUTER_KEY = "router"
SECONDARY_KEY = "secondary"


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Answer one incoming message.

    Compressed photos are rejected with a request to resend them as a file;
    image documents are captioned and sent back; anything else gets a prompt
    to send an image. A failure is reported to that chat only.
    """
    message = update.effective_message
    if message is None:
        return

    chat_id = message.chat.id
    username: Optional[str] = message.chat.username
    language = message.from_user.language_code if message.from_user else None
    locale = locale_from_language_code(language)

    logger.info(f"username {username or '<unknown>'}, language {language or '<unknown>'}")

    if message.photo:
        await context.bot.send_message(chat_id=chat_id, text=translate("resend_document", locale))
        return

    selection = selection_from_message(message)
    if selection is None:
        await context.bot.send_message(chat_id=chat_id, text=translate("request_image", locale))
        return

    router: MediaRouter = context.bot_data[ROUTER_KEY]
    try:
        await router.process(chat_id, message.message_id, username, selection, language)
    except Exception as e:
        logger.error(
            f"Failed to process image from message {message.message_id} in chat {chat_id}: {e}",
            exc_info=True
        )
        await context.bot.send_message(chat_id=chat_id, text=translate("process_error", locale))


async def _post_init(application: Application) -> None:
    config: ConfigManager = application.bot_data[CONFIG_KEY]

    secondary = SecondaryClient.from_config(config)
    await secondary.start()

    application.bot_data[SECONDARY_KEY] = secondary
    application.bot_data[ROUTER_KEY] = MediaRouter(
        bot=application.bot,
        secondary=secondary,
        summarizer=ExifSummarizer.from_config(config),
        cache=CacheManager(config.get("cache.directory", "cache")),
    )
    logger.info("fotobot started")


async def _post_shutdown(application: Application) -> None:
    secondary: Optional[SecondaryClient] = application.bot_data.get(SECONDARY_KEY)
    if secondary is not None:
        await secondary.stop()
    logger.info("fotobot stopped")


def build_application(config: ConfigManager) -> Application:
    """Build the bot application.

    Only new messages are handled; edited messages and channel posts are
    ignored. Updates are handled concurrently, one task per update. The
    secondary client and the router are created once the event loop is
    running.

    Args:
        config: Loaded configuration

    Returns:
        python-telegram-bot Application, ready for ``run_polling``
    """
    application = (
        ApplicationBuilder()
        .token(config.bot_token)
        .concurrent_updates(True)
        .post_init(_post_init)
        .post_shutdown(_post_shutdown)
        .build()
    )
    application.bot_data[CONFIG_KEY] = config
    application.add_handler(MessageHandler(filters.UpdateType.MESSAGE, handle_message))
    return application
