"""subrpc exception hierarchy.

Typed exceptions let callers tell a recoverable registry download failure
apart from a fatal persistence failure without catching bare ``Exception``.

Exception hierarchy:

```text
SubrpcError (base -- never raised directly)
├── ConfigurationError       -- bad YAML, out-of-range config values
├── ConnectivityError        -- network failures talking to remote hosts
│   └── RemoteFetchError     -- registry download, non-2xx, undecodable document
└── PersistenceError         -- local data file cannot be written
    └── CorruptDataError     -- local data file unreadable or not a valid document
```

Malformed endpoint URLs are rejected with ``ValueError`` by the models
layer; probe failures are not exceptions at all (see
[ProbeResult][subrpc.probe.ProbeResult]).

See Also:
    [Registry.update()][subrpc.core.registry.Registry.update]: Raises
        [RemoteFetchError][subrpc.core.exceptions.RemoteFetchError].
    [LocalData.load()][subrpc.core.local_data.LocalData.load]: Raises
        [CorruptDataError][subrpc.core.exceptions.CorruptDataError].
"""

from __future__ import annotations


class SubrpcError(Exception):
    """Base exception for all subrpc errors.

    Never raised directly -- always use a specific subclass.
    """


class ConfigurationError(SubrpcError):
    """Invalid or unreadable configuration (YAML syntax, values out of range)."""


class ConnectivityError(SubrpcError):
    """Base for failures talking to a remote host."""


class RemoteFetchError(ConnectivityError):
    """A registry document could not be fetched or decoded.

    Covers transport errors, non-2xx responses, oversized bodies, invalid
    JSON and documents that fail schema validation (including malformed
    endpoint URLs). During
    [LocalData.refresh()][subrpc.core.local_data.LocalData.refresh] this is
    logged and the registry keeps its previous endpoints.
    """


class PersistenceError(SubrpcError):
    """The local data file could not be written.

    Fatal to the operation in progress; the command layer turns it into a
    non-zero exit status.
    """


class CorruptDataError(PersistenceError):
    """The local data file could not be read or is not a valid document."""
