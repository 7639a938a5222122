"""
Unit tests for models.endpoint module.

Tests:
- Construction from plain strings and serialization back
- Identity on (name, labels, url), stats excluded
- append_labels() skipping duplicates
- rank_endpoints() ordering
"""

import pytest
from pydantic import ValidationError

from subrpc.models import Endpoint, EndpointStats, EndpointUrl, UrlScheme, rank_endpoints


def _endpoint(name: str = "Parity", **kwargs) -> Endpoint:
    kwargs.setdefault("url", "wss://rpc.polkadot.io:443")
    return Endpoint(name=name, **kwargs)


class TestConstruction:
    def test_url_string_is_parsed(self):
        ep = _endpoint()
        assert isinstance(ep.url, EndpointUrl)
        assert ep.url.scheme == UrlScheme.WSS

    def test_accepts_endpoint_url(self):
        url = EndpointUrl("https://foo.bar")
        assert _endpoint(url=url).url is url

    def test_defaults(self):
        ep = _endpoint()
        assert ep.labels == []
        assert ep.aliases == []
        assert ep.stats == EndpointStats()

    def test_invalid_url_rejected(self):
        with pytest.raises(ValidationError, match="Invalid endpoint"):
            _endpoint(url="ftp://foo.bar")

    def test_non_string_url_rejected(self):
        with pytest.raises(ValidationError):
            _endpoint(url=123)


class TestSerialization:
    def test_url_dumped_as_bare_string(self):
        dumped = _endpoint().model_dump(mode="json")
        assert dumped["url"] == "wss://rpc.polkadot.io:443"

    def test_json_round_trip(self):
        ep = _endpoint(labels=["Parity"], aliases=["dot"])
        ep.stats.record(True, 0.25)

        restored = Endpoint.model_validate_json(ep.model_dump_json())

        assert restored == ep
        assert restored.stats == ep.stats
        assert restored.url.scheme == UrlScheme.WSS

    def test_stats_default_when_absent(self):
        ep = Endpoint.model_validate({"name": "x", "url": "http://foo.bar"})
        assert ep.stats.success == 0


class TestIdentity:
    """Equality and hashing ignore stats."""

    def test_equal_despite_stats(self):
        a = _endpoint(labels=["Parity"])
        b = _endpoint(labels=["Parity"])
        b.stats.record(True, 1.0)
        b.stats.record(False)

        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_stats_change_keeps_membership(self):
        ep = _endpoint()
        seen = {ep}
        ep.stats.record(True, 0.5)
        assert ep in seen

    def test_aliases_not_part_of_identity(self):
        assert _endpoint(aliases=["dot"]) == _endpoint(aliases=["polkadot"])

    @pytest.mark.parametrize(
        "other",
        [
            {"name": "Other"},
            {"labels": ["Other"]},
            {"url": "wss://other.polkadot.io"},
        ],
    )
    def test_differs_on_identity_fields(self, other: dict):
        base = {"name": "Parity", "labels": [], "url": "wss://rpc.polkadot.io:443"}
        assert Endpoint(**base) != Endpoint(**{**base, **other})

    def test_not_equal_to_other_types(self):
        assert _endpoint() != "Parity"


class TestAppendLabels:
    def test_extends_in_order(self):
        ep = _endpoint(labels=["Parity"])
        ep.append_labels(["A", "B"])
        assert ep.labels == ["Parity", "A", "B"]

    def test_skips_present_labels(self):
        ep = _endpoint(labels=["Parity", "A"])
        ep.append_labels(["A", "B"])
        ep.append_labels(["A", "B"])
        assert ep.labels == ["Parity", "A", "B"]


class TestRankEndpoints:
    def test_best_score_first(self):
        slow = _endpoint("slow", stats=EndpointStats(success=1, latency=2.0))
        fast = _endpoint("fast", stats=EndpointStats(success=1, latency=0.1))
        assert rank_endpoints([slow, fast]) == [fast, slow]

    def test_unranked_last_in_original_order(self):
        new1 = _endpoint("new1")
        ranked = _endpoint("ranked", stats=EndpointStats(success=1, latency=1.0))
        new2 = _endpoint("new2")
        assert [e.name for e in rank_endpoints([new1, ranked, new2])] == [
            "ranked",
            "new1",
            "new2",
        ]

    def test_negative_score_before_unranked(self):
        failing = _endpoint("failing", stats=EndpointStats(success=1, failures=5, latency=1.0))
        unknown = _endpoint("unknown")
        assert rank_endpoints([unknown, failing]) == [failing, unknown]

    def test_empty(self):
        assert rank_endpoints([]) == []
