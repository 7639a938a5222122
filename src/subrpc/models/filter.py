"""
Declarative endpoint selection query.

A [Filter][subrpc.models.filter.Filter] is an immutable value built with
``with_*`` methods, each returning a new instance. Its
[matches()][subrpc.models.filter.Filter.matches] predicate looks at one
endpoint at a time and has no side effects.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from .constants import EndpointType
from .endpoint import Endpoint


@dataclass(frozen=True, slots=True)
class Filter:
    """Optional constraints used to pick endpoints.

    Every field defaults to "unconstrained" except ``endpoint_type``, which
    defaults to [EndpointType.WEBSOCKET][subrpc.models.constants.EndpointType].

    Attributes:
        chain: Chain name, matched case-insensitively against the chain an
            endpoint is stored under.
        alias: Alias such as ``"dot"``, matched case-insensitively against
            the endpoint's aliases.
        includes: Labels that must all be present.
        excludes: Labels that must all be absent.
        ssl: ``True`` for ``https``/``wss``. Descriptive only.
        endpoint_type: Requested transport. Descriptive only.

    Note:
        ``ssl`` and ``endpoint_type`` only feed
        [get_transport()][subrpc.models.filter.Filter.get_transport];
        they do not restrict which endpoints match.

    Examples:
        ```python
        f = (
            Filter()
            .with_chain("Polkadot")
            .with_includes(["Parity"])
            .with_excludes(["Bad"])
        )
        f.matches(endpoint, "polkadot")
        ```
    """

    chain: str | None = None
    alias: str | None = None
    includes: tuple[str, ...] | None = None
    excludes: tuple[str, ...] | None = None
    ssl: bool | None = None
    endpoint_type: EndpointType | None = EndpointType.WEBSOCKET

    def with_chain(self, chain: str) -> Filter:
        return replace(self, chain=chain)

    def with_alias(self, alias: str) -> Filter:
        return replace(self, alias=alias)

    def with_includes(self, includes: Iterable[str]) -> Filter:
        return replace(self, includes=tuple(includes))

    def with_excludes(self, excludes: Iterable[str]) -> Filter:
        return replace(self, excludes=tuple(excludes))

    def with_ssl(self, ssl: bool) -> Filter:
        """Pass ``True`` for ``httpS`` or ``wsS``."""
        return replace(self, ssl=ssl)

    def with_endpoint_type(self, endpoint_type: EndpointType) -> Filter:
        return replace(self, endpoint_type=endpoint_type)

    # -------------------------------------------------------------------------
    # Predicates
    # -------------------------------------------------------------------------

    def matches(self, endpoint: Endpoint, chain: str) -> bool:
        """Whether ``endpoint``, stored under ``chain``, passes every constraint."""
        return (
            self._match_chain(chain)
            and self._match_alias(endpoint)
            and self._match_includes(endpoint)
            and self._match_excludes(endpoint)
        )

    def _match_chain(self, chain: str) -> bool:
        if self.chain is None:
            return True
        return chain.casefold() == self.chain.casefold()

    def _match_alias(self, endpoint: Endpoint) -> bool:
        if self.alias is None:
            return True
        wanted = self.alias.casefold()
        return any(alias.casefold() == wanted for alias in endpoint.aliases)

    def _match_includes(self, endpoint: Endpoint) -> bool:
        if self.includes is None:
            return True
        return all(label in endpoint.labels for label in self.includes)

    def _match_excludes(self, endpoint: Endpoint) -> bool:
        if self.excludes is None:
            return True
        return not any(label in endpoint.labels for label in self.excludes)

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def get_transport(self) -> str:
        """Render the transport constraint, e.g. ``"wss"`` or ``"http"``."""
        suffix = "s" if self.ssl else ""
        kind = str(self.endpoint_type) if self.endpoint_type is not None else "None"
        return f"{kind}{suffix}"

    def __str__(self) -> str:
        return (
            f"Chain: {self.chain!r} - alias: {self.alias!r} - with: {self.includes!r}"
            f" - without: {self.excludes!r} - {self.get_transport()}"
        )
