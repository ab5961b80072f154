"""Database models."""
from ims.models.cache import CacheEntry

__all__ = [
    "CacheEntry",
]
