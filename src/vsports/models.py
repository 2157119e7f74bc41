"""Canonical Pydantic models shared across all vsports modules.

The models fall into three groups:

**Configuration models** -- serialised as JSON in the user's config
directory, using the camelCase keys of the upstream client configuration:
    :class:`RedisConfig` and :class:`ClientConfig`.

**Request models** -- transient values handed to the dispatcher:
    :class:`EndpointRequest`.

**Payload models** -- decoded API responses:
    :class:`Tournament`, :class:`Team`, :class:`Event`,
    :class:`Occurrence`, :class:`Media`, :class:`Person`, :class:`Squad`,
    :class:`Standings`, and :class:`Venue`.

The API does not publish a schema, so payload models declare only the
fields the client itself relies on and keep everything else via
``extra="allow"`` (accessible through ``model_extra``).
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Configuration ---


class RedisConfig(BaseModel):
    """Connection parameters for the Redis cache store."""

    model_config = ConfigDict(frozen=True)

    addr: str = Field(default="localhost:6379", description="host:port of the Redis server")
    password: str = Field(default="", description="Redis AUTH password, empty for none")
    db: int = Field(default=0, description="Redis logical database index")

    @property
    def host(self) -> str:
        host, _, _ = self.addr.rpartition(":")
        return host or self.addr

    @property
    def port(self) -> int:
        _, sep, port = self.addr.rpartition(":")
        return int(port) if sep and port.isdigit() else 6379


class ClientConfig(BaseModel):
    """Immutable configuration for :class:`~vsports.client.VSportsClient`.

    Accepts both the camelCase keys used in config files (``apiKey``,
    ``timeoutSeconds``, ``redisConfig``, ``cacheDuration``) and the
    snake_case field names.

    Example::

        ClientConfig(
            apiKey="secret",
            timeoutSeconds=10,
            redisConfig={"addr": "localhost:6379", "password": "", "db": 0},
            cacheDuration=600,
        )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    api_key: str = Field(default="", alias="apiKey", description="Bearer token for the API")
    timeout_seconds: float = Field(
        default=30, alias="timeoutSeconds", description="HTTP request timeout in seconds"
    )
    redis_config: RedisConfig = Field(default_factory=RedisConfig, alias="redisConfig")
    cache_duration: int = Field(
        default=300, alias="cacheDuration", description="TTL in seconds for every cache write"
    )


# --- Requests ---


class EndpointRequest(BaseModel):
    """A single dispatch: endpoint path, query parameters and cache eligibility."""

    model_config = ConfigDict(frozen=True)

    path: str
    params: Optional[dict[str, str]] = None
    use_cache: bool = True


# --- Payloads ---


class _Payload(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Media(_Payload):
    """A media item (video, image) attached to an event occurrence."""

    id: Optional[Any] = None
    type: Optional[str] = None
    url: Optional[str] = None


class Occurrence(_Payload):
    """Something that happened during an event (goal, card, substitution)."""

    id: Optional[Any] = None
    type: Optional[str] = None
    media: list[Media] = Field(default_factory=list)


class Tournament(_Payload):
    id: Optional[Any] = None
    name: Optional[str] = None


class Team(_Payload):
    id: Optional[Any] = None
    name: Optional[str] = None


class Event(_Payload):
    """A fixture. ``occurrence`` is filled by the occurrences endpoints."""

    id: Optional[Any] = None
    name: Optional[str] = None
    occurrence: list[Occurrence] = Field(default_factory=list)


class Person(_Payload):
    id: Optional[Any] = None
    name: Optional[str] = None


class Squad(_Payload):
    id: Optional[Any] = None
    name: Optional[str] = None


class Standings(_Payload):
    id: Optional[Any] = None
    name: Optional[str] = None


class Venue(_Payload):
    id: Optional[Any] = None
    name: Optional[str] = None
