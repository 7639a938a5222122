"""
Registry: a named collection of RPC endpoints grouped by chain.

A registry is either local (no ``url``) or backed by a remote JSON
document. [update()][subrpc.core.registry.Registry.update] downloads that
document and replaces the endpoint map wholesale, then attaches the
registry's own labels to every endpoint. The same model is the wire format
of the remote document and the persisted form inside
[LocalData][subrpc.core.local_data.LocalData].

Example document:

```json
{
  "name": "Polkadot Directory",
  "url": "https://example.org/registry.json",
  "labels": ["community"],
  "rpc_endpoints": {
    "Polkadot": [
      {
        "name": "Parity",
        "url": "wss://rpc.polkadot.io:443",
        "labels": ["Parity"],
        "aliases": ["dot"]
      }
    ]
  }
}
```
"""

from __future__ import annotations

import asyncio
from datetime import datetime
from pathlib import Path
from typing import Any, NamedTuple, Self

from pydantic import BaseModel, Field, ValidationError

from subrpc.models.endpoint import Endpoint
from subrpc.models.filter import Filter  # noqa: TC001
from subrpc.probe import ProbeResult, probe_endpoint
from subrpc.utils.files import atomic_write_text
from subrpc.utils.http import fetch_json

from .config import FetchConfig, ProbeConfig
from .exceptions import CorruptDataError, PersistenceError, RemoteFetchError
from .logger import Logger


logger = Logger("subrpc.registry")


class PingReport(NamedTuple):
    """One line of [Registry.ping_all()][subrpc.core.registry.Registry.ping_all] output."""

    chain: str
    endpoint: Endpoint
    result: ProbeResult


class Registry(BaseModel):
    """A named, optionally remote, collection of chain -> endpoints.

    Equality and hashing use ``name`` only.

    Attributes:
        enabled: Disabled registries are skipped by refresh and endpoint
            queries but stay in storage.
        name: Identity key, also the key under which
            [LocalData][subrpc.core.local_data.LocalData] stores it.
        url: Remote document URL, ``None`` for local registries.
        labels: Global labels attached to every endpoint on update.
        last_update: Time of the last successful update.
        rpc_endpoints: Chain name -> endpoints, in document order.
    """

    enabled: bool = True
    name: str
    url: str | None = None
    labels: list[str] = Field(default_factory=list)
    last_update: datetime | None = None
    rpc_endpoints: dict[str, list[Endpoint]] = Field(default_factory=dict)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Registry):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    @classmethod
    def new(cls, name: str, url: str) -> Self:
        """Create an enabled, empty registry pointing at ``url``."""
        return cls(name=name, url=url)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_chains(self) -> set[str]:
        """Return the set of known chain names."""
        return set(self.rpc_endpoints)

    def iter_endpoints(self) -> list[tuple[str, Endpoint]]:
        """Every ``(chain, endpoint)`` pair, in map then list order."""
        return [
            (chain, endpoint)
            for chain, endpoints in self.rpc_endpoints.items()
            for endpoint in endpoints
        ]

    def get_endpoints_filtered(self, filters: Filter | None = None) -> list[Endpoint]:
        """Return the endpoints matching ``filters``, deduplicated.

        Duplicates are endpoints equal by ``(name, labels, url)``; the first
        occurrence wins and order is otherwise preserved. ``None`` matches
        everything.
        """
        hits: dict[Endpoint, None] = {}
        for chain, endpoint in self.iter_endpoints():
            if filters is None or filters.matches(endpoint, chain):
                hits.setdefault(endpoint, None)
        return list(hits)

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add_endpoint(self, chain: str, endpoint: Endpoint) -> None:
        """Append ``endpoint`` under ``chain``, with the registry labels attached."""
        endpoint.append_labels(self.labels)
        self.rpc_endpoints.setdefault(chain, []).append(endpoint)

    def attach_registry_labels(self) -> None:
        """Attach the global registry labels to each endpoint."""
        for _, endpoint in self.iter_endpoints():
            endpoint.append_labels(self.labels)

    # -------------------------------------------------------------------------
    # Remote document
    # -------------------------------------------------------------------------

    @classmethod
    async def _fetch(cls, url: str, config: FetchConfig | None = None) -> Self:
        """Download and validate a registry document.

        Raises:
            RemoteFetchError: On any transport, status, size, JSON or schema
                failure.
        """
        cfg = config or FetchConfig()
        try:
            data = await fetch_json(url, timeout=cfg.timeout, max_size=cfg.max_size)
            return cls.model_validate(data)
        except ValidationError as e:
            raise RemoteFetchError(
                f"Invalid registry document at {url}: {e.error_count()} error(s)"
            ) from e
        except Exception as e:
            raise RemoteFetchError(f"Failed fetching {url}: {str(e) or type(e).__name__}") from e

    @classmethod
    async def load_from_url(cls, url: str, config: FetchConfig | None = None) -> Self:
        """Fetch a registry document to add as a new registry.

        The document's own global labels are attached to its endpoints.
        If the document carries no ``url``, the one it was fetched from is
        recorded so later updates can find it.

        Raises:
            RemoteFetchError: If the document cannot be fetched or decoded.
        """
        logger.debug("registry_loading", url=url)
        registry = await cls._fetch(url, config)
        if registry.url is None:
            registry.url = url
        registry.attach_registry_labels()
        return registry

    async def update(self, config: FetchConfig | None = None) -> None:
        """Fetch the registry document and replace the endpoint map.

        A disabled registry, or one without ``url``, is skipped without
        error. On success ``rpc_endpoints`` is replaced (per-endpoint stats
        are reset), the registry labels are attached and ``last_update`` is
        stamped. On failure the previous endpoints are kept.

        Raises:
            RemoteFetchError: If the document cannot be fetched or decoded.
        """
        if not self.enabled:
            logger.warning("registry_disabled_skipped", name=self.name)
            return

        if self.url is None:
            logger.warning("registry_without_url_skipped", name=self.name)
            return

        fetched = await self._fetch(self.url, config)
        self.rpc_endpoints = fetched.rpc_endpoints
        self.attach_registry_labels()
        self.last_update = datetime.now().astimezone()
        logger.debug(
            "registry_updated",
            name=self.name,
            chains=len(self.rpc_endpoints),
            endpoints=len(self.iter_endpoints()),
        )

    # -------------------------------------------------------------------------
    # Probing
    # -------------------------------------------------------------------------

    async def _probe_all(self, config: ProbeConfig | None = None) -> list[PingReport]:
        """Probe every endpoint once, at most ``max_concurrency`` at a time.

        Reports come back in ``iter_endpoints()`` order. One probe failing
        never cancels its siblings.
        """
        cfg = config or ProbeConfig()
        semaphore = asyncio.Semaphore(cfg.max_concurrency)
        pairs = self.iter_endpoints()

        async def probe(endpoint: Endpoint) -> ProbeResult:
            async with semaphore:
                return await probe_endpoint(endpoint, timeout=cfg.timeout, method=cfg.method)

        results = await asyncio.gather(
            *(probe(endpoint) for _, endpoint in pairs), return_exceptions=True
        )

        reports: list[PingReport] = []
        for (chain, endpoint), result in zip(pairs, results, strict=True):
            if isinstance(result, BaseException):
                # Re-raise CancelledError: gather(return_exceptions=True) captures it as a result
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "probe_crashed",
                    endpoint=endpoint.name,
                    error=str(result) or type(result).__name__,
                )
                result = ProbeResult.failed()
            reports.append(PingReport(chain, endpoint, result))
        return reports

    async def refresh_stats(self, config: ProbeConfig | None = None) -> None:
        """Ping all endpoints and fold each outcome into its stats."""
        reports = await self._probe_all(config)
        # Applied after the fan-in so each endpoint's stats have a single writer
        for report in reports:
            report.endpoint.stats.record(report.result.success, report.result.latency)
        logger.debug(
            "stats_refreshed",
            name=self.name,
            probed=len(reports),
            alive=sum(1 for r in reports if r.result.success),
        )

    async def ping_all(self, config: ProbeConfig | None = None) -> list[PingReport]:
        """Ping all endpoints and report the outcomes.

        Calling this does NOT refresh the stats.
        """
        reports = await self._probe_all(config)
        for report in reports:
            logger.info(
                "endpoint_pinged",
                registry=self.name,
                chain=report.chain,
                endpoint=report.endpoint.name,
                url=report.endpoint.url,
                success=report.result.success,
                latency=report.result.latency,
            )
        return reports

    # -------------------------------------------------------------------------
    # Stand-alone files
    # -------------------------------------------------------------------------

    def save(self, file: Path) -> None:
        """Write this registry as a JSON document.

        Raises:
            PersistenceError: If the file cannot be written.
        """
        try:
            atomic_write_text(file, self.model_dump_json(indent=2))
        except OSError as e:
            raise PersistenceError(f"Cannot write registry to {file}: {e}") from e

    @classmethod
    def load(cls, file: Path) -> Self:
        """Read a registry document from disk.

        Raises:
            CorruptDataError: If the file is unreadable or invalid.
        """
        try:
            return cls.model_validate_json(file.read_bytes())
        except OSError as e:
            raise CorruptDataError(f"Cannot read registry from {file}: {e}") from e
        except ValidationError as e:
            raise CorruptDataError(f"Invalid registry document in {file}: {e}") from e

    # -------------------------------------------------------------------------
    # Built-in sample
    # -------------------------------------------------------------------------

    @classmethod
    def default(cls) -> Self:
        """The built-in local registry with a few well-known Polkadot/Kusama endpoints."""
        return cls(
            name="SubRPC Default",
            url=None,
            rpc_endpoints={
                "Polkadot": [
                    Endpoint(name="Parity", url="wss://rpc.polkadot.io:443", labels=["Parity"]),
                    Endpoint(
                        name="OnFinality",
                        url="wss://polkadot.api.onfinality.io:443/public-ws",
                        labels=["OnFinality"],
                    ),
                ],
                "Kusama": [
                    Endpoint(
                        name="Parity", url="wss://kusama-rpc.polkadot.io:443", labels=["Parity"]
                    ),
                ],
            },
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dump (URLs as strings, datetimes as ISO-8601)."""
        return self.model_dump(mode="json")

    def __str__(self) -> str:
        lines = [f"Registry: {self.name} (url: {self.url or 'n/a'})"]
        for chain, endpoints in self.rpc_endpoints.items():
            lines.append(f"  - {chain}")
            for endpoint in endpoints:
                stats = endpoint.stats
                lines.append(
                    f"    - {endpoint.name}: failures={stats.failures}"
                    f" success={stats.success} latency={stats.latency:.3f}"
                )
        return "\n".join(lines)
