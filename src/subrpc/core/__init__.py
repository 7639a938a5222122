"""Core layer: registry orchestration and the ambient infrastructure.

Sits in the middle of the diamond DAG: depends on ``subrpc.models``,
``subrpc.probe`` and ``subrpc.utils`` and is depended upon by the command
layer.

Attributes:
    Registry: Named, optionally remote, collection of chain -> endpoints
        with fetch, merge and probe operations.
        See [Registry][subrpc.core.registry.Registry].
    LocalData: Persisted root of all registries; owns load/save/refresh.
        See [LocalData][subrpc.core.local_data.LocalData].
    SubrpcConfig: Probe and fetch settings loaded from YAML.
        See [SubrpcConfig][subrpc.core.config.SubrpcConfig].
    Logger: Structured logger supporting key=value and JSON output modes.
        See [Logger][subrpc.core.logger.Logger].
    YAML: Safe YAML loading with ``yaml.safe_load()``.
        See [load_yaml()][subrpc.core.yaml.load_yaml].

Examples:
    ```python
    from pathlib import Path
    from subrpc.core import LocalData

    data = LocalData.init(Path("data.json"))
    await data.refresh()
    data.save()
    ```
"""

from .config import FetchConfig, ProbeConfig, SubrpcConfig
from .exceptions import (
    ConfigurationError,
    ConnectivityError,
    CorruptDataError,
    PersistenceError,
    RemoteFetchError,
    SubrpcError,
)
from .local_data import LocalData, RegistrySummary
from .logger import JsonFormatter, Logger, StructuredFormatter, format_kv_pairs
from .registry import PingReport, Registry
from .yaml import load_yaml


__all__ = [
    "ConfigurationError",
    "ConnectivityError",
    "CorruptDataError",
    "FetchConfig",
    "JsonFormatter",
    "LocalData",
    "Logger",
    "PersistenceError",
    "PingReport",
    "ProbeConfig",
    "Registry",
    "RegistrySummary",
    "RemoteFetchError",
    "StructuredFormatter",
    "SubrpcConfig",
    "SubrpcError",
    "format_kv_pairs",
    "load_yaml",
]
