"""Shared plumbing for the command handlers.

Every handler has the signature ``async def handler(ctx, args) -> int``
and writes its result through [emit()][subrpc.commands.common.emit], which
picks JSON or human-readable output from the global ``--json`` flag.
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TextIO

from subrpc.core.config import SubrpcConfig
from subrpc.core.local_data import LocalData
from subrpc.core.logger import Logger
from subrpc.core.registry import Registry


if TYPE_CHECKING:
    from pathlib import Path

    from subrpc.models.endpoint import Endpoint


logger = Logger("subrpc.commands")


@dataclass(slots=True)
class CommandContext:
    """Everything a handler needs besides its own arguments.

    Attributes:
        data_file: Local data document.
        config_file: YAML configuration file (may not exist).
        config: Loaded configuration, defaults if the file is absent.
        json_output: Render results as JSON instead of text.
        out: Output stream.
    """

    data_file: Path
    config_file: Path
    config: SubrpcConfig = field(default_factory=SubrpcConfig)
    json_output: bool = False
    out: TextIO = field(default_factory=lambda: sys.stdout)


Handler = Callable[[CommandContext, argparse.Namespace], Awaitable[int]]


def open_local_data(ctx: CommandContext) -> LocalData:
    """Load the local data, creating it with the default registry on first use.

    Raises:
        CorruptDataError: If an existing document cannot be loaded.
        PersistenceError: If a new document cannot be written.
    """
    if ctx.data_file.exists():
        return LocalData.load(ctx.data_file)

    logger.info("local_data_bootstrap", file=ctx.data_file)
    data = LocalData.init(ctx.data_file)
    data.add_registry(Registry.default())
    data.save()
    return data


def emit(ctx: CommandContext, payload: Any, text: str) -> None:
    """Write ``payload`` as JSON, or ``text`` as is."""
    if ctx.json_output:
        ctx.out.write(json.dumps(payload, indent=2, default=str))
    else:
        ctx.out.write(text)
    ctx.out.write("\n")


def endpoint_line(endpoint: Endpoint) -> str:
    """One-line human rendering of an endpoint."""
    score = endpoint.stats.score()
    rendered = f"{score:.3f}" if score is not None else "n/a"
    labels = ", ".join(endpoint.labels) or "-"
    return f"{endpoint.name:<20} {endpoint.url} [{labels}] score={rendered}"


def endpoint_payload(endpoint: Endpoint) -> dict[str, Any]:
    """JSON rendering of an endpoint, stats and derived score included."""
    payload = endpoint.model_dump(mode="json")
    payload["score"] = endpoint.stats.score()
    return payload
