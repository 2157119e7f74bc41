"""The generic request dispatcher.

Every endpoint call goes through :meth:`Dispatcher.dispatch`, which runs a
cache-aside sequence:

1. derive the cache key (always, even when caching is off);
2. when caching is on, read the key from Redis and return on a hit;
3. on a miss, fetch the endpoint over HTTP;
4. when caching is on, write the body back with the configured TTL;
5. return the body.

A failed cache read is indistinguishable from a miss for the caller; only
the diagnostic message differs. A failed cache write fails the call and
the fetched body is dropped. Each call performs at most one fetch and
there is no coalescing of concurrent identical misses.
"""

from __future__ import annotations

from typing import Mapping, Optional

from vsports.cache import CacheStore, build_cache_key
from vsports.client.transport import HTTPTransport
from vsports.exceptions import CacheReadError, CacheWriteError
from vsports.models import EndpointRequest
from vsports.output import NullOutput, OutputManager


class Dispatcher:
    """Cache-aside orchestration over a transport and a cache store.

    Holds no per-call state, so one instance can serve concurrent callers
    as long as the transport and store can (``httpx.Client`` and
    ``redis.Redis`` both can).
    """

    def __init__(
        self,
        transport: HTTPTransport,
        store: CacheStore,
        output: Optional[OutputManager] = None,
    ) -> None:
        self._transport = transport
        self._store = store
        self._output = output if output is not None else NullOutput()

    def dispatch(
        self,
        endpoint: str,
        params: Optional[Mapping[str, str]] = None,
        use_cache: bool = True,
    ) -> bytes:
        """Return the raw body for *endpoint* with *params*.

        Raises:
            RequestBuildError: See :meth:`HTTPTransport.get`.
            TransportError: See :meth:`HTTPTransport.get`.
            BodyReadError: See :meth:`HTTPTransport.get`.
            CacheWriteError: The fetch succeeded but the body could not be
                cached.
        """
        request = EndpointRequest(
            path=endpoint,
            params=dict(params) if params is not None else None,
            use_cache=use_cache,
        )
        return self.dispatch_request(request)

    def dispatch_request(self, request: EndpointRequest) -> bytes:
        key = build_cache_key(request.path, request.params)

        if request.use_cache:
            cached = self._lookup(key)
            if cached is not None:
                return cached

        body = self._transport.get(request.path, request.params)

        if request.use_cache:
            try:
                self._store.set(key, body)
            except CacheWriteError as exc:
                self._output.error(str(exc))
                raise
            self._output.debug(f"Cached response for {key}")

        return body

    def _lookup(self, key: str) -> Optional[bytes]:
        """Read *key* from the store, folding read errors into misses."""
        try:
            cached = self._store.get(key)
        except CacheReadError as exc:
            self._output.debug(f"Cache read failed for {key}: {exc}")
            return None
        if cached is None:
            self._output.debug(f"Cache miss for {key}")
            return None
        self._output.debug(f"Using cached response for {key}")
        return cached
