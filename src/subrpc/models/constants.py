"""Shared constants for the models layer.

Enumerations used by more than one model module live here so that
[EndpointUrl][subrpc.models.endpoint_url.EndpointUrl] and
[Filter][subrpc.models.filter.Filter] can both depend on them without
importing each other.
"""

from __future__ import annotations

from enum import StrEnum


class UrlScheme(StrEnum):
    """URL schemes accepted for RPC endpoints.

    The scheme is derived once from the URL prefix when an
    [EndpointUrl][subrpc.models.endpoint_url.EndpointUrl] is constructed
    and never re-derived afterwards.

    Attributes:
        HTTP: Plain ``http://`` JSON-RPC over HTTP POST.
        HTTPS: ``https://`` JSON-RPC over HTTP POST with TLS.
        WS: Plain ``ws://`` JSON-RPC over a WebSocket.
        WSS: ``wss://`` JSON-RPC over a WebSocket with TLS.
    """

    HTTP = "http"
    HTTPS = "https"
    WS = "ws"
    WSS = "wss"

    @property
    def prefix(self) -> str:
        """The literal prefix a URL must start with, e.g. ``"wss://"``."""
        return f"{self.value}://"

    @property
    def is_secure(self) -> bool:
        """Whether the scheme runs over TLS."""
        return self in (UrlScheme.HTTPS, UrlScheme.WSS)


class EndpointType(StrEnum):
    """Transport kind requested by a [Filter][subrpc.models.filter.Filter].

    The string values are what ``Filter.get_transport()`` renders.
    """

    HTTP = "http"
    WEBSOCKET = "ws"
    ALL = "http/ws"
