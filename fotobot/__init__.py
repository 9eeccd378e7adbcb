"""fotobot - EXIF caption bot for Telegram.

Reads the metadata embedded in images sent as documents (camera, lens,
exposure, capture date, GPS position) and replies with the image and a
compact caption describing how it was taken.
"""

from fotobot._version import __version__, __version_info__
from fotobot.config import ConfigManager
from fotobot.processing import ExifSummarizer

__license__ = "MIT"
__all__ = [
    "__version__",
    "__version_info__",
    "ConfigManager",
    "ExifSummarizer",
]
