"""Pure data models with zero I/O.

The bottom of the dependency graph: nothing here imports from
``subrpc.core``, ``subrpc.probe``, ``subrpc.utils`` or ``subrpc.commands``.

Attributes:
    EndpointUrl: Scheme-tagged endpoint URL.
        See [EndpointUrl][subrpc.models.endpoint_url.EndpointUrl].
    EndpointStats: Probe counters and score.
        See [EndpointStats][subrpc.models.endpoint_stats.EndpointStats].
    Endpoint: Named RPC target with labels, aliases and stats.
        See [Endpoint][subrpc.models.endpoint.Endpoint].
    Filter: Immutable endpoint selection query.
        See [Filter][subrpc.models.filter.Filter].
"""

from .constants import EndpointType, UrlScheme
from .endpoint import Endpoint, rank_endpoints
from .endpoint_stats import EndpointStats
from .endpoint_url import EndpointUrl
from .filter import Filter


__all__ = [
    "Endpoint",
    "EndpointStats",
    "EndpointType",
    "EndpointUrl",
    "Filter",
    "UrlScheme",
    "rank_endpoints",
]
