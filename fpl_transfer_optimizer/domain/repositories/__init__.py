"""Repository interfaces for data access abstraction."""

from .cache_repository import CacheRepository

__all__ = ["CacheRepository"]
