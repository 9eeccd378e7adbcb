"""Tests for message handling and localization."""

import asyncio
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from telegram import Chat, Message, Update

from fotobot.bot.exceptions import PeerNotFoundError
from fotobot.bot.handlers import ROUTER_KEY, build_application, handle_message
from fotobot.bot.models import InlineImage
from fotobot.i18n import locale_from_language_code, translate


class _RecordingBot:
    def __init__(self):
        self.messages = []

    async def send_message(self, chat_id, text):
        self.messages.append((chat_id, text))


class _FakeRouter:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    async def process(self, chat_id, message_id, username, selection, language=None):
        self.calls.append((chat_id, message_id, username, selection, language))
        if self.error is not None:
            raise self.error
        return "caption"


def _update(photo=(), document=None, language_code="en", username="alice"):
    message = SimpleNamespace(
        chat=SimpleNamespace(id=1, username=username),
        from_user=SimpleNamespace(language_code=language_code),
        message_id=10,
        photo=photo,
        document=document,
    )
    return SimpleNamespace(effective_message=message)


def _context(router=None):
    return SimpleNamespace(bot=_RecordingBot(), bot_data={ROUTER_KEY: router or _FakeRouter()})


def _image_document():
    return SimpleNamespace(file_id="doc-id", mime_type="image/jpeg", file_size=2048, file_name="a.jpg")


class TestHandleMessage:
    def test_photo_asks_for_a_file(self):
        context = _context()

        asyncio.run(handle_message(_update(photo=(SimpleNamespace(file_id="p"),)), context))

        assert context.bot.messages == [(1, translate("resend_document", "en"))]
        assert context.bot_data[ROUTER_KEY].calls == []

    def test_image_document_is_routed(self):
        context = _context()

        asyncio.run(handle_message(_update(document=_image_document(), language_code="de"), context))

        (chat_id, message_id, username, selection, language), = context.bot_data[ROUTER_KEY].calls
        assert (chat_id, message_id, username, language) == (1, 10, "alice", "de")
        assert isinstance(selection, InlineImage)
        assert context.bot.messages == []

    def test_other_messages_get_a_prompt(self):
        context = _context()

        asyncio.run(handle_message(_update(language_code="zh-hans"), context))

        assert context.bot.messages == [(1, translate("request_image", "zh-CN"))]

    def test_processing_failure_is_reported(self):
        context = _context(router=_FakeRouter(error=PeerNotFoundError(1, "alice")))

        asyncio.run(handle_message(_update(document=_image_document()), context))

        assert context.bot.messages == [(1, translate("process_error", "en"))]


class TestLocalization:
    @pytest.mark.parametrize("code, expected", [
        ("zh", "zh-CN"),
        ("zh-hans", "zh-CN"),
        ("ZH_TW", "zh-CN"),
        ("en", "en"),
        ("zhx", "en"),
        ("", "en"),
        (None, "en"),
    ])
    def test_locale_mapping(self, code, expected):
        assert locale_from_language_code(code) == expected

    def test_messages_are_localized(self):
        assert translate("process_error", "zh-CN") != translate("process_error", "en")

    def test_unknown_locale_falls_back_to_english(self):
        assert translate("request_image", "fr") == translate("request_image", "en")

    def test_unknown_key_is_returned(self):
        assert translate("no_such_message", "en") == "no_such_message"


class TestBuildApplication:
    @staticmethod
    def _message():
        return Message(
            message_id=10,
            date=datetime(2024, 1, 1, tzinfo=timezone.utc),
            chat=Chat(id=1, type=Chat.PRIVATE),
            text="hello",
        )

    def test_only_new_messages_are_dispatched(self):
        application = build_application(SimpleNamespace(bot_token="123:ABC"))
        (handler,) = application.handlers[0]

        assert handler.check_update(Update(update_id=1, message=self._message()))
        assert not handler.check_update(Update(update_id=2, edited_message=self._message()))
        assert not handler.check_update(Update(update_id=3, channel_post=self._message()))
