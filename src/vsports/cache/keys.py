"""Canonical cache keys.

A key has the shape ``vsports://<endpoint>:<pairs>`` where ``<pairs>`` is
every ``name=value`` pair sorted lexicographically and joined with ``&``.
Sorting makes the key independent of the order in which callers built
their parameter mapping, so ``{"start_date": a, "end_date": b}`` and
``{"end_date": b, "start_date": a}`` share one cache entry.

Names and values are joined literally, without escaping. A value that
itself contains ``&`` or ``=`` can therefore collide with a different
parameter set. Adding escaping would change every stored key, so callers
must keep such characters out of parameter values.
"""

from __future__ import annotations

from typing import Mapping, Optional

CACHE_NAMESPACE = "vsports"


def build_cache_key(endpoint: str, params: Optional[Mapping[str, str]] = None) -> str:
    """Return the cache key for *endpoint* called with *params*.

    Pure function of its inputs: the same endpoint and parameter set give
    the same key in every process.

    Example::

        >>> build_cache_key("events", {"start_date": "2024-01-01", "end_date": "2024-01-31"})
        'vsports://events:end_date=2024-01-31&start_date=2024-01-01'
    """
    pairs = sorted(f"{name}={value}" for name, value in (params or {}).items())
    return f"{CACHE_NAMESPACE}://{endpoint}:{'&'.join(pairs)}"
