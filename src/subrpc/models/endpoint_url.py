"""
RPC endpoint URL tagged with its scheme.

The scheme tag is decided by the literal URL prefix (``http://``,
``https://``, ``ws://`` or ``wss://``) at construction time. Nothing past
the prefix is inspected: hosts, ports and paths are the endpoint's
business, and a bad one surfaces as a failed probe. The original string is
kept verbatim: rendering an ``EndpointUrl`` gives back exactly what was
parsed, and serialization writes the bare string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .constants import EndpointType, UrlScheme


@dataclass(frozen=True, order=True, slots=True)
class EndpointUrl:
    """Immutable, scheme-tagged endpoint URL.

    Equality, ordering and hashing use the URL string and its derived
    scheme, so two instances are equal iff they were built from the same
    string.

    Attributes:
        url: The URL exactly as given.
        scheme: [UrlScheme][subrpc.models.constants.UrlScheme] derived from
            the prefix.

    Raises:
        ValueError: If the string does not start with one of the four
            recognised schemes.

    Examples:
        ```python
        url = EndpointUrl("wss://rpc.polkadot.io:443")
        url.scheme          # UrlScheme.WSS
        str(url)            # 'wss://rpc.polkadot.io:443'
        url.endpoint_type   # EndpointType.WEBSOCKET
        ```
    """

    url: str
    scheme: UrlScheme = field(init=False)

    # Prefix tests are mutually exclusive ("http://" never matches "https://...")
    _SCHEMES: ClassVar[tuple[UrlScheme, ...]] = (
        UrlScheme.WSS,
        UrlScheme.WS,
        UrlScheme.HTTPS,
        UrlScheme.HTTP,
    )

    def __post_init__(self) -> None:
        if not isinstance(self.url, str):
            raise TypeError(f"url must be a str, got {type(self.url).__name__}")

        scheme = self._detect_scheme(self.url)
        if scheme is None:
            raise ValueError(f"Invalid endpoint: {self.url}")

        # Bypass frozen restriction to set the derived tag
        object.__setattr__(self, "scheme", scheme)

    @classmethod
    def parse(cls, raw: str) -> EndpointUrl:
        """Build an ``EndpointUrl`` from a string (alias of the constructor)."""
        return cls(raw)

    @classmethod
    def _detect_scheme(cls, raw: str) -> UrlScheme | None:
        for scheme in cls._SCHEMES:
            if raw.startswith(scheme.prefix):
                return scheme
        return None

    @property
    def is_secure(self) -> bool:
        """Whether the endpoint uses ``https`` or ``wss``."""
        return self.scheme.is_secure

    @property
    def endpoint_type(self) -> EndpointType:
        """``HTTP`` for http/https URLs, ``WEBSOCKET`` for ws/wss URLs."""
        if self.scheme in (UrlScheme.HTTP, UrlScheme.HTTPS):
            return EndpointType.HTTP
        return EndpointType.WEBSOCKET

    def __str__(self) -> str:
        return self.url
