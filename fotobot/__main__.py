#!/usr/bin/env python3
"""fotobot - EXIF caption bot for Telegram.

This is the main CLI entry point. It loads the configuration, signs in the
bot and the secondary client, and polls Telegram until interrupted.

Usage:
    python -m fotobot
    python -m fotobot --config ~/.config/fotobot/config.yaml
    python -m fotobot --verbose
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from ._version import __version__
from .bot import build_application
from .config import ConfigManager
from .config.manager import ConfigError

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("httpx", "telethon")


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    fmt: str = DEFAULT_LOG_FORMAT
) -> None:
    """Configure logging for the application.

    Args:
        level: Root log level name, e.g. "INFO" or "DEBUG"
        log_file: Optional file that additionally receives DEBUG output
        fmt: Log record format
    """
    numeric_level = getattr(logging, str(level).upper(), logging.INFO)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(logging.Formatter(fmt))

    root_logger = logging.getLogger()
    root_logger.setLevel(min(numeric_level, logging.DEBUG) if log_file else numeric_level)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)  # Always DEBUG in file
        file_handler.setFormatter(logging.Formatter(fmt))
        root_logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def parse_arguments(argv: Optional[list] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="fotobot - reply to image documents with their EXIF details",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
  TELEGRAM_BOT_TOKEN / BOT_TOKEN / TELEGRAM_TOKEN   Bot token
  TG_ID, TG_HASH                                    MTProto API id and hash
  FOTOBOT_SESSION_FILE                              Secondary client session file
  FOTOBOT_LOG_LEVEL                                 Log level
"""
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"fotobot {__version__}"
    )
    parser.add_argument(
        "--config",
        metavar="PATH",
        help="Path to config file (default: ~/.config/fotobot/config.yaml)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose debug logging"
    )

    return parser.parse_args(argv)


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the fotobot CLI.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    args = parse_arguments(argv)
    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager.load(config_path=args.config)
    except ConfigError as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error(f"Configuration error: {e}")
        return 2

    setup_logging(
        level="DEBUG" if args.verbose else config.get("logging.level", "INFO"),
        log_file=config.get("logging.file") or None,
        fmt=config.get("logging.format", DEFAULT_LOG_FORMAT),
    )

    if config.config_path:
        logger.info(f"Configuration loaded from: {config.config_path}")
    else:
        logger.info("No config file found, using defaults and environment")

    try:
        application = build_application(config)
        application.run_polling()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"Unexpected error: {e}", exc_info=True)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
