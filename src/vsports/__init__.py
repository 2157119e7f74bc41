"""vsports -- typed client for the vsports extended sports-data API.

Every call goes through a Redis read-through cache: the first request for
an endpoint and parameter set hits the API, later identical requests are
answered from Redis until the entry expires.

Typical use::

    from vsports import ClientConfig, VSportsClient

    config = ClientConfig(apiKey="secret", redisConfig={"addr": "localhost:6379"})
    with VSportsClient(config) as client:
        events = client.get_events_by_date("2024-08-01", "2024-08-31")

Modules:
    client: The typed client, the dispatcher and the HTTP transport.
    cache: Cache key builder and Redis store adapter.
    models: Pydantic configuration and payload models.
    config: Config file discovery and environment overrides.
    exceptions: Exception hierarchy with exit-code mapping.
    output: Diagnostic sink and payload printing.
    app: The ``vsports`` command line.
"""

__version__ = "0.1.0"

from vsports.client import VSportsClient  # noqa: E402
from vsports.models import ClientConfig, RedisConfig  # noqa: E402

__all__ = ["ClientConfig", "RedisConfig", "VSportsClient", "__version__"]
