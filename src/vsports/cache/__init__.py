"""Redis-backed response caching for vsports.

:func:`build_cache_key` derives the canonical key for an endpoint and its
query parameters; :class:`CacheStore` reads and writes raw response bytes
in Redis with a fixed TTL. Both are consumed by
:class:`~vsports.client.dispatcher.Dispatcher`.
"""

from vsports.cache.keys import CACHE_NAMESPACE, build_cache_key
from vsports.cache.store import CacheStore

__all__ = ["CACHE_NAMESPACE", "CacheStore", "build_cache_key"]
