"""
Named RPC endpoint model.

An [Endpoint][subrpc.models.endpoint.Endpoint] pairs a validated
[EndpointUrl][subrpc.models.endpoint_url.EndpointUrl] with free-form labels,
lookup aliases and mutable [EndpointStats][subrpc.models.endpoint_stats.EndpointStats].
Identity is ``(name, labels, url)``: stats change over the lifetime of an
endpoint and are left out of equality and hashing.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .endpoint_stats import EndpointStats
from .endpoint_url import EndpointUrl


class Endpoint(BaseModel):
    """A single named RPC target and its health statistics.

    Attributes:
        name: Display name of the endpoint (e.g. the provider).
        labels: Free-form tags, extended in place when a registry attaches
            its global labels.
        aliases: Alternate lookup keys such as ``"dot"``.
        url: Scheme-tagged URL. Accepts a plain string on input and is
            written back as the bare string.
        stats: Probe counters, all-zero by default.

    Examples:
        ```python
        ep = Endpoint(name="Parity", url="wss://rpc.polkadot.io:443", labels=["Parity"])
        ep.url.scheme   # UrlScheme.WSS
        ep.model_dump(mode="json")["url"]   # 'wss://rpc.polkadot.io:443'
        ```
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    name: str
    labels: list[str] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)
    url: EndpointUrl
    stats: EndpointStats = Field(default_factory=EndpointStats)

    @field_validator("url", mode="before")
    @classmethod
    def _parse_url(cls, value: Any) -> Any:
        if isinstance(value, str):
            return EndpointUrl(value)
        return value

    @field_serializer("url")
    def _serialize_url(self, url: EndpointUrl) -> str:
        return url.url

    def append_labels(self, labels: Iterable[str]) -> None:
        """Extend ``labels`` with the given ones, skipping labels already present."""
        for label in labels:
            if label not in self.labels:
                self.labels.append(label)

    def _identity(self) -> tuple[str, tuple[str, ...], EndpointUrl]:
        return (self.name, tuple(self.labels), self.url)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Endpoint):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())


def rank_endpoints(endpoints: Iterable[Endpoint]) -> list[Endpoint]:
    """Order endpoints from best to worst score.

    Endpoints whose stats have no latency sample yet are unranked and come
    last, in their original order. Ties keep their original order.
    """
    ranked: list[tuple[float, Endpoint]] = []
    unranked: list[Endpoint] = []
    for endpoint in endpoints:
        score = endpoint.stats.score()
        if score is None:
            unranked.append(endpoint)
        else:
            ranked.append((score, endpoint))
    ranked.sort(key=lambda item: item[0], reverse=True)
    return [endpoint for _, endpoint in ranked] + unranked
