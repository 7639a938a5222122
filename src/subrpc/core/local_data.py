"""
Persisted root of all known registries.

[LocalData][subrpc.core.local_data.LocalData] is the single unit of
persistence: the whole tree (registries, their endpoints and stats) is
written to and read from one JSON document. The core never resolves
default locations; every path is passed in by the caller.

Document shape:

```json
{
  "file": "/home/user/.subrpc/data.json",
  "registries": {"SubRPC Default": {"name": "SubRPC Default", "...": "..."}},
  "last_update": "2024-01-01T00:00:00+00:00"
}
```

See Also:
    [Registry][subrpc.core.registry.Registry]: The per-registry operations
        this aggregate fans out to.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, NamedTuple, Self

from pydantic import BaseModel, Field, ValidationError, model_validator

from subrpc.models.endpoint import Endpoint  # noqa: TC001
from subrpc.models.filter import Filter  # noqa: TC001
from subrpc.utils.files import atomic_write_text

from .config import FetchConfig, ProbeConfig  # noqa: TC001
from .exceptions import CorruptDataError, PersistenceError, RemoteFetchError
from .logger import Logger
from .registry import PingReport, Registry


logger = Logger("subrpc.local_data")


class RegistrySummary(NamedTuple):
    """One listing row of [LocalData.summary()][subrpc.core.local_data.LocalData.summary]."""

    name: str
    enabled: bool
    url: str | None
    chains: int
    endpoints: int
    last_update: datetime | None


class LocalData(BaseModel):
    """All registries known locally, plus the last refresh time.

    Registries are keyed by their ``name``;
    [add_registry()][subrpc.core.local_data.LocalData.add_registry] is the
    only insertion path and always derives the key from the value.

    Attributes:
        file: Backing JSON document.
        registries: Registry name -> registry.
        last_update: Time of the last [refresh()][subrpc.core.local_data.LocalData.refresh].
    """

    file: Path
    registries: dict[str, Registry] = Field(default_factory=dict)
    last_update: datetime | None = None

    @model_validator(mode="after")
    def _check_registry_keys(self) -> Self:
        for key, registry in self.registries.items():
            if key != registry.name:
                raise ValueError(f"registry stored under {key!r} is named {registry.name!r}")
        return self

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @classmethod
    def init(cls, file: Path, *, force: bool = False) -> Self:
        """Load the document at ``file``, or create and persist an empty one.

        Args:
            file: Backing document path.
            force: Overwrite an existing document with empty state.

        Raises:
            CorruptDataError: If an existing document cannot be loaded.
            PersistenceError: If the new document cannot be written.
        """
        if file.exists() and not force:
            logger.debug("local_data_exists", file=file)
            return cls.load(file)

        data = cls(file=file)
        data.save()
        logger.info("local_data_initialized", file=file, forced=force)
        return data

    @classmethod
    def load(cls, file: Path) -> Self:
        """Read the whole tree from ``file``.

        The returned instance's ``file`` is the path actually read, whatever
        the document itself says.

        Raises:
            CorruptDataError: If the file is unreadable, is not JSON, does
                not match the schema, or stores a registry under a key other
                than its name.
        """
        try:
            raw = file.read_bytes()
        except OSError as e:
            raise CorruptDataError(f"Cannot read local data from {file}: {e}") from e

        try:
            data = cls.model_validate_json(raw)
        except ValidationError as e:
            raise CorruptDataError(f"Invalid local data in {file}: {e}") from e

        data.file = file
        return data

    def save(self) -> None:
        """Write the whole tree to ``file`` atomically.

        Raises:
            PersistenceError: If the document cannot be written.
        """
        try:
            self.file.parent.mkdir(parents=True, exist_ok=True)
            atomic_write_text(self.file, self.model_dump_json(indent=2))
        except OSError as e:
            raise PersistenceError(f"Cannot write local data to {self.file}: {e}") from e
        logger.debug("local_data_saved", file=self.file, registries=len(self.registries))

    # -------------------------------------------------------------------------
    # Registry management
    # -------------------------------------------------------------------------

    def add_registry(self, registry: Registry) -> Self:
        """Insert ``registry`` under its name, replacing any namesake."""
        if registry.name in self.registries:
            logger.info("registry_replaced", name=registry.name)
        self.registries[registry.name] = registry
        return self

    def remove_registry(self, name: str) -> Registry:
        """Remove and return the registry called ``name``.

        Raises:
            KeyError: If there is no such registry.
        """
        registry = self.registries.pop(name)
        logger.info("registry_removed", name=name)
        return registry

    def enable_registry(self, name: str, enabled: bool = True) -> Registry:
        """Enable or disable the registry called ``name``.

        Raises:
            KeyError: If there is no such registry.
        """
        registry = self.registries[name]
        registry.enabled = enabled
        logger.info("registry_toggled", name=name, enabled=enabled)
        return registry

    def enabled_registries(self) -> list[Registry]:
        return [r for r in self.registries.values() if r.enabled]

    # -------------------------------------------------------------------------
    # Refresh
    # -------------------------------------------------------------------------

    async def refresh(self, config: FetchConfig | None = None) -> Self:
        """Update every registry from its remote document, one at a time.

        A registry whose fetch fails is logged and keeps its previous
        endpoints; its siblings are still updated. ``last_update`` is
        stamped regardless.
        """
        failed = 0
        for registry in self.registries.values():
            try:
                await registry.update(config)
            except RemoteFetchError as e:
                failed += 1
                logger.warning("registry_update_failed", name=registry.name, error=str(e))

        self.last_update = datetime.now().astimezone()
        logger.info(
            "local_data_refreshed",
            registries=len(self.registries),
            failed=failed,
        )
        return self

    async def refresh_stats(self, config: ProbeConfig | None = None) -> None:
        """Probe every endpoint of every enabled registry and fold the outcome into its stats."""
        for registry in self.enabled_registries():
            await registry.refresh_stats(config)

    async def ping_all(self, config: ProbeConfig | None = None) -> dict[str, list[PingReport]]:
        """Probe every endpoint of every enabled registry, leaving stats untouched."""
        return {
            registry.name: await registry.ping_all(config)
            for registry in self.enabled_registries()
        }

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_endpoints(self, chain: str | None = None) -> list[Endpoint]:
        """Flatten the endpoints of every enabled registry.

        With ``chain`` set, only buckets whose chain name matches it
        case-insensitively are included. Identical endpoints advertised by
        two registries both appear.
        """
        wanted = chain.casefold() if chain is not None else None
        return [
            endpoint
            for registry in self.enabled_registries()
            for name, endpoints in registry.rpc_endpoints.items()
            if wanted is None or name.casefold() == wanted
            for endpoint in endpoints
        ]

    def get_endpoints_filtered(self, filters: Filter | None = None) -> list[Endpoint]:
        """Apply ``filters`` to every enabled registry, concatenating the results.

        Deduplication happens within each registry, not across them.
        """
        return [
            endpoint
            for registry in self.enabled_registries()
            for endpoint in registry.get_endpoints_filtered(filters)
        ]

    def summary(self) -> list[RegistrySummary]:
        """One row per registry, enabled or not, in storage order."""
        return [
            RegistrySummary(
                name=registry.name,
                enabled=registry.enabled,
                url=registry.url,
                chains=len(registry.rpc_endpoints),
                endpoints=len(registry.iter_endpoints()),
                last_update=registry.last_update,
            )
            for registry in self.registries.values()
        ]

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dump of the whole tree."""
        return self.model_dump(mode="json")
