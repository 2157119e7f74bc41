"""Tests for cache key construction."""

from __future__ import annotations

import pytest

from vsports.cache import CACHE_NAMESPACE, build_cache_key


class TestFormat:
    def test_namespace_endpoint_and_sorted_pairs(self) -> None:
        key = build_cache_key("events", {"start_date": "2024-01-01", "end_date": "2024-01-31"})
        assert key == "vsports://events:end_date=2024-01-31&start_date=2024-01-01"

    def test_namespace_constant(self) -> None:
        assert build_cache_key("tournaments").startswith(f"{CACHE_NAMESPACE}://")

    def test_no_params_leaves_empty_suffix(self) -> None:
        assert build_cache_key("tournaments") == "vsports://tournaments:"

    def test_empty_mapping_same_as_none(self) -> None:
        assert build_cache_key("tournaments", {}) == build_cache_key("tournaments", None)

    def test_single_param(self) -> None:
        assert build_cache_key("events", {"page": "2"}) == "vsports://events:page=2"


class TestOrderIndependence:
    def test_insertion_order_does_not_matter(self) -> None:
        forward = {"start_date": "2024-01-01", "end_date": "2024-01-31"}
        backward = {"end_date": "2024-01-31", "start_date": "2024-01-01"}
        assert build_cache_key("events", forward) == build_cache_key("events", backward)

    def test_many_params_any_order(self) -> None:
        pairs = [("d", "4"), ("a", "1"), ("c", "3"), ("b", "2")]
        keys = {
            build_cache_key("x", dict(pairs)),
            build_cache_key("x", dict(reversed(pairs))),
            build_cache_key("x", dict(sorted(pairs))),
        }
        assert keys == {"vsports://x:a=1&b=2&c=3&d=4"}

    def test_stable_across_calls(self) -> None:
        params = {"start_date": "2024-01-01", "end_date": "2024-01-31"}
        assert build_cache_key("events", params) == build_cache_key("events", dict(params))


class TestDistinctness:
    @pytest.mark.parametrize(
        "left, right",
        [
            (("events", None), ("events/detailed", None)),
            (("teams/1", None), ("teams/10", None)),
            (("events", {"start_date": "2024-01-01"}), ("events", {"start_date": "2024-01-02"})),
            (("events", {"start_date": "2024-01-01"}), ("events", {"end_date": "2024-01-01"})),
            (("events", {"a": "1"}), ("events", {"a": "1", "b": "2"})),
            (("events", {"a": "1"}), ("events", None)),
        ],
    )
    def test_different_requests_get_different_keys(self, left, right) -> None:
        assert build_cache_key(*left) != build_cache_key(*right)

    def test_delimiters_in_values_can_collide(self) -> None:
        """Values are not escaped, so embedded delimiters alias other parameter sets."""
        crafted = build_cache_key("events", {"a": "1&b=2"})
        honest = build_cache_key("events", {"a": "1", "b": "2"})
        assert crafted == honest
