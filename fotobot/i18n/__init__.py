"""Localized bot replies.

Message tables live in ``locales/<locale>.yaml`` under a top-level
``messages`` key. Keys are looked up in the requested locale, then in
English; an unknown key is returned as-is.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
SIMPLIFIED_CHINESE = "zh-CN"

LOCALES_DIR = Path(__file__).parent / "locales"


def locale_from_language_code(language_code: Optional[str]) -> str:
    """Map a Telegram language code to a supported locale.

    Examples:
        >>> locale_from_language_code("zh_Hans")
        'zh-CN'
        >>> locale_from_language_code("de")
        'en'
    """
    if not language_code or not language_code.strip():
        return DEFAULT_LOCALE

    normalized = language_code.strip().replace("_", "-").lower()
    if normalized == "zh" or normalized.startswith("zh-"):
        return SIMPLIFIED_CHINESE
    return DEFAULT_LOCALE


@lru_cache(maxsize=None)
def load_messages(locale: str) -> Dict[str, str]:
    """Load the message table of a locale; empty if the locale has none."""
    path = LOCALES_DIR / f"{locale}.yaml"
    if not path.is_file():
        return {}

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    messages = data.get("messages", {})
    logger.debug(f"Loaded {len(messages)} messages for locale {locale}")
    return messages


def translate(key: str, locale: str = DEFAULT_LOCALE) -> str:
    """Return the message for ``key`` in ``locale``."""
    for candidate in (locale, DEFAULT_LOCALE):
        message = load_messages(candidate).get(key)
        if message:
            return message
    return key


__all__ = ["locale_from_language_code", "translate", "DEFAULT_LOCALE"]
