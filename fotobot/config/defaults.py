"""Default configuration values for fotobot."""

from pathlib import Path

# Default configuration dictionary
DEFAULT_CONFIG = {
    # Telegram credentials. The bot token drives both the Bot API client and
    # the MTProto client used for files above the Bot API download limit.
    "telegram": {
        "bot_token": "",
        "api_id": "",
        "api_hash": "",
        "session_file": str(Path.home() / ".config" / "fotobot" / "fotobot.session"),
    },

    # Reverse geocoding (Nominatim)
    "geocoding": {
        "enabled": True,
        "domain": "nominatim.openstreetmap.org",
        "user_agent": "fotobot/0.1 (https://github.com/fotobot/fotobot)",
        "timeout": 10,
        "default_language": "en",
    },

    # Remote reads of inline-sized files
    "http": {
        "range_request_size": 500 * 1024,
        "timeout": 30,
    },

    # Transient downloads for the large-file path
    "cache": {
        "directory": "cache",
    },

    # Logging Configuration
    "logging": {
        "level": "INFO",
        "file": "",
        "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    },
}

# Required configuration fields (must be provided by file or environment)
REQUIRED_FIELDS = [
    "telegram.bot_token",
    "telegram.api_id",
    "telegram.api_hash",
]

# Environment variables mapped onto configuration keys. The first variable
# that is set and non-empty wins for a given key.
ENV_OVERRIDES = {
    "telegram.bot_token": ["TELEGRAM_BOT_TOKEN", "BOT_TOKEN", "TELEGRAM_TOKEN"],
    "telegram.api_id": ["TG_ID"],
    "telegram.api_hash": ["TG_HASH"],
    "telegram.session_file": ["FOTOBOT_SESSION_FILE"],
    "logging.level": ["FOTOBOT_LOG_LEVEL"],
}

# Configuration field descriptions used in error messages
FIELD_DESCRIPTIONS = {
    "telegram.bot_token": "Telegram bot token from @BotFather (env: TELEGRAM_BOT_TOKEN)",
    "telegram.api_id": "Telegram API id from my.telegram.org (env: TG_ID)",
    "telegram.api_hash": "Telegram API hash from my.telegram.org (env: TG_HASH)",
}
