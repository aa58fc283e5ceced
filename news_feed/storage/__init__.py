"""Storage layer for news_feed."""

from .cache import QueryCache, make_cache_key

__all__ = [
    "QueryCache",
    "make_cache_key",
]
