"""Redis cache store adapter.

Stores the exact response bytes under a key with a TTL. No framing, no
serialisation: what the API sent is what Redis holds.

The adapter turns :mod:`redis` exceptions into vsports errors so that the
dispatcher can decide what a failure means: a failed read is treated as a
miss, a failed write fails the call.
"""

from __future__ import annotations

from typing import Optional

import redis

from vsports.exceptions import CacheReadError, CacheWriteError, ConnectionError_
from vsports.models import RedisConfig

DEFAULT_SOCKET_TIMEOUT = 5.0


class CacheStore:
    """Thin wrapper over a :class:`redis.Redis` connection.

    Args:
        client: A connected ``redis.Redis`` (or compatible) instance. It
            must be created with ``decode_responses=False``.
        ttl_seconds: Expiry applied to every write. ``0`` or less stores
            values without expiry, since Redis rejects ``EX 0``.

    Example::

        store = CacheStore.from_config(RedisConfig(addr="localhost:6379"), ttl_seconds=300)
        store.ping()
        store.set("vsports://tournaments:", b"[]")
        store.get("vsports://tournaments:")  # b"[]"
    """

    def __init__(self, client: redis.Redis, ttl_seconds: int) -> None:
        self._client = client
        self._ttl_seconds = ttl_seconds

    @classmethod
    def from_config(
        cls,
        config: RedisConfig,
        ttl_seconds: int,
        socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
    ) -> CacheStore:
        """Build a store with its own connection pool from *config*.

        *socket_timeout* bounds both connecting and every command, so a
        server that accepts connections but never answers fails the ping
        instead of hanging.
        """
        client = redis.Redis(
            host=config.host,
            port=config.port,
            password=config.password or None,
            db=config.db,
            decode_responses=False,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        return cls(client, ttl_seconds)

    @property
    def ttl_seconds(self) -> int:
        return self._ttl_seconds

    def ping(self) -> None:
        """Check that the server answers.

        Raises:
            ConnectionError_: If the server cannot be reached or refuses
                the connection (bad password, unknown db).
        """
        try:
            self._client.ping()
        except redis.exceptions.RedisError as exc:
            raise ConnectionError_(f"failed to connect to Redis: {exc}") from exc

    def get(self, key: str) -> Optional[bytes]:
        """Return the stored bytes for *key*, or ``None`` on a miss.

        Raises:
            CacheReadError: If Redis fails to answer.
        """
        try:
            value = self._client.get(key)
        except redis.exceptions.RedisError as exc:
            raise CacheReadError(f"error reading cache for {key}: {exc}") from exc
        if value is None:
            return None
        if isinstance(value, str):
            return value.encode("utf-8")
        return bytes(value)

    def set(self, key: str, value: bytes) -> None:
        """Store *value* under *key* with the configured TTL.

        Raises:
            CacheWriteError: If Redis rejects or fails the write.
        """
        expiry = self._ttl_seconds if self._ttl_seconds > 0 else None
        try:
            self._client.set(key, value, ex=expiry)
        except redis.exceptions.RedisError as exc:
            raise CacheWriteError(f"error setting cache for {key}: {exc}") from exc

    def close(self) -> None:
        """Release the connection pool."""
        self._client.close()
