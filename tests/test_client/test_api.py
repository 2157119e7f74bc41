"""Tests for VSportsClient: endpoint paths, decoding and construction."""

from __future__ import annotations

import json

import httpx
import pytest

from vsports.cache import build_cache_key
from vsports.client import VSportsClient
from vsports.exceptions import ConnectionError_, DecodeError
from vsports.models import Event, Media, Squad, Standings, Team, Tournament, Venue
from vsports.output import NullOutput


def _serve(body):
    """Handler returning *body* (JSON-encoded) and remembering request paths."""
    seen: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.url.path)
        return httpx.Response(200, content=json.dumps(body).encode())

    handler.seen = seen
    return handler


# ------------------------------------------------------------------ #
# Paths
# ------------------------------------------------------------------ #


@pytest.mark.parametrize(
    ("method", "args", "path", "body"),
    [
        ("get_tournaments", (), "/api/tournaments", []),
        ("get_tournament_by_id", (3,), "/api/tournaments/3", {}),
        ("get_team_by_id", (11,), "/api/teams/11", {}),
        ("get_teams_by_tournament_id", (3,), "/api/teams/by/tournament/3", []),
        ("get_event_by_id", (99,), "/api/events/99", {}),
        ("get_event_detailed", (99,), "/api/events/99/detailed", {}),
        ("get_event_occurrences", ("99",), "/api/events/99/occurrences", []),
        ("get_event_media", ("99",), "/api/events/99/occurrences", {}),
        ("get_person_by_id", (7,), "/api/person/7", {}),
        ("get_squad", (11,), "/api/squads/11", {}),
        ("get_squad_detailed", (11,), "/api/squads/11/detailed", {}),
        ("get_squad_by_tournament", (11, 3), "/api/squads/11/by/tournament/3", {}),
        (
            "get_squad_detailed_by_tournament",
            (11, 3),
            "/api/squads/11/by/tournament/3/detailed",
            {},
        ),
        ("get_standings_by_tournament", (3,), "/api/standings/by/tournament/3", {}),
        ("get_standings_by_tournament_live", (3,), "/api/standings/by/tournament/3/live", {}),
        ("get_venue", (5,), "/api/venues/5", {}),
        ("get_venues_by_team", (11,), "/api/venues/by/team/11", []),
    ],
)
def test_endpoint_paths(make_client, method, args, path, body) -> None:
    handler = _serve(body)
    client = make_client(handler)
    getattr(client, method)(*args)
    assert handler.seen == [path]


class TestDateRangeEndpoints:
    def test_events_by_date_params(self, make_client, fake_redis) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=b'[{"id": 1, "name": "Derby"}]')

        client = make_client(handler)
        events = client.get_events_by_date("2024-01-01", "2024-01-31")

        assert seen[0].url.path == "/api/events"
        assert seen[0].url.params["start_date"] == "2024-01-01"
        assert seen[0].url.params["end_date"] == "2024-01-31"
        assert events[0].name == "Derby"
        key = "vsports://events:end_date=2024-01-31&start_date=2024-01-01"
        assert key in fake_redis.data

    def test_events_detailed_by_date_key(self, make_client, fake_redis) -> None:
        client = make_client(_serve([]))
        assert client.get_events_detailed_by_date("2024-01-01", "2024-01-31") == []
        key = "vsports://events/detailed:end_date=2024-01-31&start_date=2024-01-01"
        assert key in fake_redis.data


# ------------------------------------------------------------------ #
# Decoding
# ------------------------------------------------------------------ #


class TestDecoding:
    def test_list_of_tournaments(self, make_client) -> None:
        client = make_client(_serve([{"id": 1, "name": "Liga"}, {"id": 2, "name": "Taça"}]))
        tournaments = client.get_tournaments()
        assert all(isinstance(t, Tournament) for t in tournaments)
        assert [t.name for t in tournaments] == ["Liga", "Taça"]

    def test_unknown_fields_are_kept(self, make_client) -> None:
        client = make_client(_serve({"id": 11, "name": "Benfica", "founded": 1904}))
        team = client.get_team_by_id(11)
        assert isinstance(team, Team)
        assert team.model_extra == {"founded": 1904}

    def test_single_object_shapes(self, make_client) -> None:
        client = make_client(_serve({"id": 1, "name": "x"}))
        assert isinstance(client.get_squad(1), Squad)
        assert isinstance(client.get_standings_by_tournament(1), Standings)
        assert isinstance(client.get_venue(1), Venue)

    def test_wrong_shape_is_decode_error(self, make_client) -> None:
        client = make_client(_serve({"id": 1}))
        with pytest.raises(DecodeError, match=r"cannot decode response as list\[Tournament\]"):
            client.get_tournaments()

    def test_object_shape_named_in_error(self, make_client) -> None:
        client = make_client(_serve([1, 2]))
        with pytest.raises(DecodeError, match="cannot decode response as Venue:"):
            client.get_venue(1)

    def test_null_body_decodes_to_empty_list(self, make_client) -> None:
        client = make_client(lambda r: httpx.Response(200, content=b"null"))
        assert client.get_tournaments() == []
        assert client.get_event_occurrences("1") == []
        assert client.get_event_media("1") == []

    def test_null_body_decodes_to_blank_model(self, make_client) -> None:
        client = make_client(lambda r: httpx.Response(200, content=b"null\n"))
        team = client.get_team_by_id(11)
        assert isinstance(team, Team)
        assert team.id is None
        assert team.name is None

    def test_non_json_is_decode_error(self, make_client) -> None:
        client = make_client(lambda r: httpx.Response(502, content=b"<html>Bad Gateway</html>"))
        with pytest.raises(DecodeError):
            client.get_venue(1)

    def test_cached_body_is_decoded_without_fetch(self, make_client, fake_redis) -> None:
        fake_redis.data[build_cache_key("venues/5")] = (b'{"id": 5, "name": "Luz"}', None)

        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("network must not be used on a hit")

        client = make_client(handler)
        assert client.get_venue(5).name == "Luz"


class TestOccurrences:
    def test_array_body(self, make_client) -> None:
        body = [{"id": 1, "occurrence": [{"id": 10, "type": "goal"}]}, {"id": 2}]
        client = make_client(_serve(body))
        events = client.get_event_occurrences("1")
        assert len(events) == 2
        assert events[0].occurrence[0].type == "goal"

    def test_object_body_is_wrapped(self, make_client) -> None:
        client = make_client(_serve({"id": 1, "occurrence": []}))
        events = client.get_event_occurrences("1")
        assert len(events) == 1
        assert isinstance(events[0], Event)
        assert events[0].id == 1

    def test_scalar_body_is_decode_error(self, make_client) -> None:
        client = make_client(_serve("nope"))
        with pytest.raises(DecodeError):
            client.get_event_occurrences("1")

    def test_malformed_json_is_decode_error(self, make_client) -> None:
        client = make_client(lambda r: httpx.Response(200, content=b"{not json"))
        with pytest.raises(DecodeError, match=r"list\[Event\] or Event"):
            client.get_event_occurrences("1")

    def test_media_is_flattened_in_order(self, make_client) -> None:
        body = {
            "id": 1,
            "occurrence": [
                {"id": 10, "media": [{"id": "a", "type": "video"}, {"id": "b"}]},
                {"id": 11, "media": []},
                {"id": 12, "media": [{"id": "c", "url": "https://cdn/c.mp4"}]},
            ],
        }
        client = make_client(_serve(body))
        media = client.get_event_media("1")
        assert all(isinstance(m, Media) for m in media)
        assert [m.id for m in media] == ["a", "b", "c"]
        assert media[2].url == "https://cdn/c.mp4"

    def test_media_without_occurrences(self, make_client) -> None:
        client = make_client(_serve({"id": 1}))
        assert client.get_event_media("1") == []


# ------------------------------------------------------------------ #
# Construction and cache flag
# ------------------------------------------------------------------ #


class TestConstruction:
    def test_ping_failure_raises_and_closes(
        self, make_client, fake_redis, recording_output
    ) -> None:
        fake_redis.fail_ping = True
        with pytest.raises(ConnectionError_, match="failed to connect to Redis"):
            make_client(_serve([]), output=recording_output)
        assert fake_redis.closed
        assert recording_output.errors

    def test_default_output_is_null(self, client_config, fake_redis) -> None:
        client = VSportsClient(
            client_config,
            redis_client=fake_redis,
            http_transport=httpx.MockTransport(_serve([])),
        )
        assert isinstance(client._output, NullOutput)

    def test_context_manager_closes_store(self, make_client, fake_redis) -> None:
        with make_client(_serve([])) as client:
            client.get_tournaments()
        assert fake_redis.closed

    def test_ttl_comes_from_config(self, make_client, fake_redis) -> None:
        make_client(_serve([])).get_tournaments()
        assert fake_redis.set_calls[0][2] == 60

    def test_use_cache_false_bypasses_store(self, make_client, fake_redis) -> None:
        handler = _serve([])
        client = make_client(handler)
        client.get_tournaments(use_cache=False)
        client.get_tournaments(use_cache=False)
        assert len(handler.seen) == 2
        assert fake_redis.get_calls == []
        assert fake_redis.set_calls == []

    def test_from_file(self, isolated_config, monkeypatch, fake_redis) -> None:
        path = isolated_config / "client.json"
        path.write_text(json.dumps({"apiKey": "from-file", "cacheDuration": 5}))
        monkeypatch.setattr("vsports.cache.store.redis.Redis", lambda **kwargs: fake_redis)

        client = VSportsClient.from_file(path)
        assert client.config.api_key == "from-file"
        assert client.config.cache_duration == 5
