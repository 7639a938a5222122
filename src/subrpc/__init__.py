r"""subrpc -- Local directory of Substrate RPC endpoints.

Keeps a cached, filterable and health-scored list of RPC endpoints for
Polkadot, Kusama and other chains, sourced from one or more registry
documents published over HTTP.

Architecture follows a **diamond DAG** dependency structure where imports
flow strictly downward:

```text
            __main__ / commands     CLI surface, rendering, default paths
           /        |        \
        core      probe      utils  Orchestration, liveness probes, helpers
           \        |        /
               models               Pure data: URLs, stats, endpoints, filters
```

Attributes:
    models: Endpoint data model and the filter engine. Zero I/O.
    core: Registry and LocalData orchestration, config, exceptions, logging.
    probe: One JSON-RPC liveness call per endpoint over HTTP(S) or WS(S).
    utils: Bounded HTTP reads, JSON-RPC framing, atomic writes, paths.
    commands: Subcommand handlers behind ``python -m subrpc``.

Note:
    For lightweight usage, import directly from subpackages::

        from subrpc.models import Filter
        from subrpc.core import LocalData

    Top-level imports (``from subrpc import Filter``) use lazy loading
    and resolve on first access.
"""

import importlib
from importlib.metadata import version as _get_version


__version__ = _get_version("subrpc")

__all__ = [
    "Endpoint",
    "EndpointStats",
    "EndpointType",
    "EndpointUrl",
    "Filter",
    "LocalData",
    "Logger",
    "Registry",
    "SubrpcConfig",
    "SubrpcError",
    "probe_endpoint",
]

_LAZY_IMPORTS: dict[str, tuple[str, str]] = {
    "LocalData": ("subrpc.core", "LocalData"),
    "Logger": ("subrpc.core", "Logger"),
    "Registry": ("subrpc.core", "Registry"),
    "SubrpcConfig": ("subrpc.core", "SubrpcConfig"),
    "SubrpcError": ("subrpc.core", "SubrpcError"),
    "Endpoint": ("subrpc.models", "Endpoint"),
    "EndpointStats": ("subrpc.models", "EndpointStats"),
    "EndpointType": ("subrpc.models", "EndpointType"),
    "EndpointUrl": ("subrpc.models", "EndpointUrl"),
    "Filter": ("subrpc.models", "Filter"),
    "probe_endpoint": ("subrpc.probe", "probe_endpoint"),
}


def __getattr__(name: str) -> object:
    if name in _LAZY_IMPORTS:
        module_path, attr_name = _LAZY_IMPORTS[name]
        module = importlib.import_module(module_path)
        value = getattr(module, attr_name)
        globals()[name] = value  # Cache for subsequent access
        return value
    raise AttributeError(f"module 'subrpc' has no attribute {name!r}")


def __dir__() -> list[str]:
    return __all__
