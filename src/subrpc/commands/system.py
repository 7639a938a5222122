"""``subrpc system`` (alias ``sys``): local state information and reset."""

from __future__ import annotations

from typing import TYPE_CHECKING

from subrpc import __version__
from subrpc.core.local_data import LocalData
from subrpc.core.registry import Registry

from .common import CommandContext, emit, open_local_data


if TYPE_CHECKING:
    import argparse


async def system_info(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Show the location of relevant files and a summary of the local data."""
    data = open_local_data(ctx)
    info = {
        "version": __version__,
        "data_file": str(ctx.data_file),
        "config_file": str(ctx.config_file),
        "config_file_exists": ctx.config_file.exists(),
        "registries": len(data.registries),
        "endpoints": len(data.get_endpoints()),
        "last_update": data.last_update.isoformat() if data.last_update else None,
    }
    emit(ctx, info, "\n".join(f"{key}: {value}" for key, value in info.items()))
    return 0


async def system_init(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Reset the local data to the default registry only."""
    data = LocalData.init(ctx.data_file, force=True)
    data.add_registry(Registry.default())
    data.save()
    emit(
        ctx,
        {"data_file": str(ctx.data_file), "registries": list(data.registries)},
        f"Initialized {ctx.data_file}",
    )
    return 0


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("system", aliases=["sys"], help="System")
    commands = parser.add_subparsers(dest="system_command", required=True)

    cmd = commands.add_parser(
        "info", help="Show general system information such as the location of relevant files"
    )
    cmd.set_defaults(handler=system_info)

    cmd = commands.add_parser(
        "init",
        help="Reset your local data. This is done automatically as needed.",
    )
    cmd.set_defaults(handler=system_init)
