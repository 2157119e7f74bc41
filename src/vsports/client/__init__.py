"""HTTP client module for vsports.

Classes:
    :class:`VSportsClient` -- the typed, cached API client applications use.
    :class:`Dispatcher` -- cache-aside orchestration behind every call.
    :class:`HTTPTransport` -- bearer-authenticated GET over :mod:`httpx`.

Example::

    from vsports.client import VSportsClient
    from vsports.models import ClientConfig

    with VSportsClient(ClientConfig(apiKey="secret")) as client:
        standings = client.get_standings_by_tournament(42)
"""

from vsports.client.api import VSportsClient
from vsports.client.dispatcher import Dispatcher
from vsports.client.transport import BASE_URL, HTTPTransport

__all__ = ["BASE_URL", "Dispatcher", "HTTPTransport", "VSportsClient"]
