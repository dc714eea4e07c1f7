"""Repository interface for memoised engine results."""

from abc import ABC, abstractmethod
from typing import Any, Hashable, Optional


class CacheRepository(ABC):
    """
    Abstract key/value store for projections and recommendations.

    Keys are hashable tuples built from every input that affects the cached
    value, so two calls that differ only in an unrelated argument never
    share an entry. Implementations decide eviction; callers only rely on a
    miss returning ``default``.
    """

    @abstractmethod
    def get(self, key: Hashable, default: Any = None) -> Any:
        """
        Look up a cached value.

        Args:
            key: Cache key
            default: Returned on a miss or an expired entry

        Returns:
            The cached value or ``default``
        """
        pass

    @abstractmethod
    def set(self, key: Hashable, value: Any, ttl: Optional[float] = None) -> None:
        """
        Store a value.

        Args:
            key: Cache key
            value: Value to store
            ttl: Seconds until the entry expires (None = implementation default)
        """
        pass

    @abstractmethod
    def evict(self, key: Hashable) -> bool:
        """Remove one entry. Returns True if it was present."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Drop every entry."""
        pass
