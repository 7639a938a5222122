"""Endpoint liveness probes.

Attributes:
    probe_endpoint: Single JSON-RPC liveness call over HTTP(S) or WS(S).
        See [probe_endpoint()][subrpc.probe.ping.probe_endpoint].
    ProbeResult: ``(success, latency)`` outcome of a probe.
        See [ProbeResult][subrpc.probe.ping.ProbeResult].

See Also:
    [Registry.refresh_stats()][subrpc.core.registry.Registry.refresh_stats]:
        Folds probe results into endpoint stats.
    [Registry.ping_all()][subrpc.core.registry.Registry.ping_all]: Probes
        without touching stats.
"""

from .ping import DEFAULT_METHOD, DEFAULT_TIMEOUT, ProbeResult, probe_endpoint


__all__ = [
    "DEFAULT_METHOD",
    "DEFAULT_TIMEOUT",
    "ProbeResult",
    "probe_endpoint",
]
