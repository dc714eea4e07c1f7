"""Infrastructure adapters for repository pattern implementations."""

from .memory_cache import InMemoryTTLCache

__all__ = ["InMemoryTTLCache"]
