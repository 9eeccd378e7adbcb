"""Local storage for downloaded images."""

from fotobot.cache.manager import CacheError, CacheManager

__all__ = ["CacheError", "CacheManager"]
