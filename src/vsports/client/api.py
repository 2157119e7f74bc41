"""Typed client for the vsports extended API.

:class:`VSportsClient` is the long-lived handle applications create once.
It owns the HTTP transport, the Redis cache store and the dispatcher, and
exposes one method per API resource. Each method formats the endpoint
path, dispatches it, and decodes the JSON body into the payload models of
:mod:`vsports.models`.

Every method accepts ``use_cache``. With ``use_cache=False`` the call
neither reads nor writes Redis.
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, Optional, get_args, get_origin

import httpx
import redis
from pydantic import TypeAdapter, ValidationError

from vsports.cache import CacheStore
from vsports.client.dispatcher import Dispatcher
from vsports.client.transport import HTTPTransport
from vsports.exceptions import ConnectionError_, DecodeError
from vsports.models import (
    ClientConfig,
    Event,
    Media,
    Person,
    Squad,
    Standings,
    Team,
    Tournament,
    Venue,
)
from vsports.output import NullOutput, OutputManager


@functools.lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter:
    return TypeAdapter(shape)


def _is_null(body: bytes) -> bool:
    return body.strip() == b"null"


def _empty(shape: Any) -> Any:
    """The value a JSON ``null`` body decodes to: an empty list or a blank model."""
    if get_origin(shape) is list:
        return []
    return shape()


def _decode(body: bytes, shape: Any) -> Any:
    """Validate *body* as JSON of *shape*, raising :class:`DecodeError` on mismatch.

    A ``null`` body decodes to :func:`_empty` of *shape*.
    """
    if _is_null(body):
        return _empty(shape)
    try:
        return _adapter(shape).validate_json(body)
    except ValidationError as exc:
        raise DecodeError(f"cannot decode response as {_shape_name(shape)}: {exc}") from exc


def _shape_name(shape: Any) -> str:
    args = get_args(shape)
    if args:
        inner = ", ".join(_shape_name(arg) for arg in args)
        return f"{get_origin(shape).__name__}[{inner}]"
    return getattr(shape, "__name__", None) or str(shape)


class VSportsClient:
    """Client for ``https://extended.vsports.pt/api`` with a Redis read-through cache.

    Construction connects to Redis and pings it; the client is only
    returned once the cache answers.

    Args:
        config: Credentials, timeout, Redis parameters and cache TTL.
        output: Diagnostic sink. ``None`` selects :class:`NullOutput`.
        redis_client: Use this Redis connection instead of building one
            from ``config.redis_config``.
        http_transport: Optional :class:`httpx.BaseTransport` for the HTTP
            client (``httpx.MockTransport`` in tests).

    Raises:
        ConnectionError_: If Redis does not answer the ping.

    Example::

        config = ClientConfig(apiKey="secret", cacheDuration=600)
        with VSportsClient(config) as client:
            for tournament in client.get_tournaments():
                print(tournament.name)
    """

    def __init__(
        self,
        config: ClientConfig,
        output: Optional[OutputManager] = None,
        *,
        redis_client: Optional[redis.Redis] = None,
        http_transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._config = config
        self._output = output if output is not None else NullOutput()

        if redis_client is None:
            store = CacheStore.from_config(config.redis_config, config.cache_duration)
        else:
            store = CacheStore(redis_client, config.cache_duration)
        try:
            store.ping()
        except ConnectionError_ as exc:
            self._output.error(str(exc))
            store.close()
            raise

        self._store = store
        self._transport = HTTPTransport(
            config.api_key,
            config.timeout_seconds,
            transport=http_transport,
            output=self._output,
        )
        self._dispatcher = Dispatcher(self._transport, self._store, self._output)

    @classmethod
    def from_file(
        cls,
        path: Optional[str | Path] = None,
        output: Optional[OutputManager] = None,
    ) -> VSportsClient:
        """Build a client from the config file and ``VSPORTS_*`` environment variables.

        See :func:`vsports.config.load_client_config` for the lookup order.
        """
        from vsports.config import load_client_config

        return cls(load_client_config(path), output)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    def close(self) -> None:
        """Close the HTTP client and the Redis connection pool."""
        self._transport.close()
        self._store.close()

    def __enter__(self) -> VSportsClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------ #
    # Tournaments and teams
    # ------------------------------------------------------------------ #

    def get_tournaments(self, use_cache: bool = True) -> list[Tournament]:
        body = self._dispatcher.dispatch("tournaments", None, use_cache)
        return _decode(body, list[Tournament])

    def get_tournament_by_id(self, tournament_id: int, use_cache: bool = True) -> Tournament:
        body = self._dispatcher.dispatch(f"tournaments/{tournament_id}", None, use_cache)
        return _decode(body, Tournament)

    def get_team_by_id(self, team_id: int, use_cache: bool = True) -> Team:
        body = self._dispatcher.dispatch(f"teams/{team_id}", None, use_cache)
        return _decode(body, Team)

    def get_teams_by_tournament_id(self, tournament_id: int, use_cache: bool = True) -> list[Team]:
        body = self._dispatcher.dispatch(f"teams/by/tournament/{tournament_id}", None, use_cache)
        return _decode(body, list[Team])

    # ------------------------------------------------------------------ #
    # Events
    # ------------------------------------------------------------------ #

    def get_events_by_date(
        self, start_date: str, end_date: str, use_cache: bool = True
    ) -> list[Event]:
        """Events between two dates (``YYYY-MM-DD``, as the API expects them)."""
        params = {
            "start_date": start_date,
            "end_date": end_date,
        }
        body = self._dispatcher.dispatch("events", params, use_cache)
        return _decode(body, list[Event])

    def get_events_detailed_by_date(
        self, start_date: str, end_date: str, use_cache: bool = True
    ) -> list[Event]:
        params = {
            "end_date": end_date,
            "start_date": start_date,
        }
        body = self._dispatcher.dispatch("events/detailed", params, use_cache)
        return _decode(body, list[Event])

    def get_event_by_id(self, event_id: int, use_cache: bool = True) -> Event:
        body = self._dispatcher.dispatch(f"events/{event_id}", None, use_cache)
        return _decode(body, Event)

    def get_event_detailed(self, event_id: int, use_cache: bool = True) -> Event:
        body = self._dispatcher.dispatch(f"events/{event_id}/detailed", None, use_cache)
        return _decode(body, Event)

    def get_event_occurrences(self, event_id: str, use_cache: bool = True) -> list[Event]:
        """Occurrences of an event, always as a list.

        The endpoint answers with either an array or a single object; a
        single object is wrapped into a one-element list.

        Raises:
            DecodeError: If the body is neither an array of events nor an
                event.
        """
        body = self._dispatcher.dispatch(f"events/{event_id}/occurrences", None, use_cache)
        if _is_null(body):
            return []
        try:
            return _adapter(list[Event]).validate_json(body)
        except ValidationError:
            pass
        try:
            return [_adapter(Event).validate_json(body)]
        except ValidationError as exc:
            raise DecodeError(
                f"cannot decode response as list[Event] or Event: {exc}"
            ) from exc

    def get_event_media(self, event_id: str, use_cache: bool = True) -> list[Media]:
        """All media attached to the occurrences of an event, in order."""
        body = self._dispatcher.dispatch(f"events/{event_id}/occurrences", None, use_cache)
        event = _decode(body, Event)
        return [media for occurrence in event.occurrence for media in occurrence.media]

    # ------------------------------------------------------------------ #
    # People and squads
    # ------------------------------------------------------------------ #

    def get_person_by_id(self, person_id: int, use_cache: bool = True) -> Person:
        body = self._dispatcher.dispatch(f"person/{person_id}", None, use_cache)
        return _decode(body, Person)

    def get_squad(self, team_id: int, use_cache: bool = True) -> Squad:
        body = self._dispatcher.dispatch(f"squads/{team_id}", None, use_cache)
        return _decode(body, Squad)

    def get_squad_detailed(self, team_id: int, use_cache: bool = True) -> Squad:
        body = self._dispatcher.dispatch(f"squads/{team_id}/detailed", None, use_cache)
        return _decode(body, Squad)

    def get_squad_by_tournament(
        self, team_id: int, tournament_id: int, use_cache: bool = True
    ) -> Squad:
        body = self._dispatcher.dispatch(
            f"squads/{team_id}/by/tournament/{tournament_id}", None, use_cache
        )
        return _decode(body, Squad)

    def get_squad_detailed_by_tournament(
        self, team_id: int, tournament_id: int, use_cache: bool = True
    ) -> Squad:
        body = self._dispatcher.dispatch(
            f"squads/{team_id}/by/tournament/{tournament_id}/detailed", None, use_cache
        )
        return _decode(body, Squad)

    # ------------------------------------------------------------------ #
    # Standings and venues
    # ------------------------------------------------------------------ #

    def get_standings_by_tournament(self, tournament_id: int, use_cache: bool = True) -> Standings:
        body = self._dispatcher.dispatch(
            f"standings/by/tournament/{tournament_id}", None, use_cache
        )
        return _decode(body, Standings)

    def get_standings_by_tournament_live(
        self, tournament_id: int, use_cache: bool = True
    ) -> Standings:
        body = self._dispatcher.dispatch(
            f"standings/by/tournament/{tournament_id}/live", None, use_cache
        )
        return _decode(body, Standings)

    def get_venue(self, venue_id: int, use_cache: bool = True) -> Venue:
        body = self._dispatcher.dispatch(f"venues/{venue_id}", None, use_cache)
        return _decode(body, Venue)

    def get_venues_by_team(self, team_id: int, use_cache: bool = True) -> list[Venue]:
        body = self._dispatcher.dispatch(f"venues/by/team/{team_id}", None, use_cache)
        return _decode(body, list[Venue])
