"""HTTP, JSON-RPC, file and path helpers.

Depends only on stdlib and third-party libraries; has **zero** imports
from ``subrpc.core``, ``subrpc.probe`` or ``subrpc.commands``.

Attributes:
    http: Bounded JSON reads and the registry document GET.
    jsonrpc: JSON-RPC 2.0 request building and response checks.
    files: Atomic write-to-temp-then-rename.
    paths: Default ``~/.subrpc`` locations, used by the command layer only.
"""
