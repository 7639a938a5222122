"""``subrpc registry`` (alias ``reg``): manage registries."""

from __future__ import annotations

from typing import TYPE_CHECKING

from subrpc.core.registry import Registry

from .common import CommandContext, emit, open_local_data


if TYPE_CHECKING:
    import argparse


async def list_registries(ctx: CommandContext, args: argparse.Namespace) -> int:
    data = open_local_data(ctx)
    rows = data.summary()
    lines = [
        f"{'+' if row.enabled else '-'} {row.name}: {row.url or 'local'}"
        f" ({row.chains} chains, {row.endpoints} endpoints)"
        for row in rows
    ]
    emit(
        ctx,
        [row._asdict() for row in rows],
        "\n".join(lines) if lines else "No registry",
    )
    return 0


async def show_registries(ctx: CommandContext, args: argparse.Namespace) -> int:
    data = open_local_data(ctx)
    emit(
        ctx,
        {name: registry.to_dict() for name, registry in data.registries.items()},
        "\n".join(str(registry) for registry in data.registries.values()),
    )
    return 0


async def add_registry(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Fetch the document at ``args.url`` and store it as a registry."""
    data = open_local_data(ctx)
    registry = await Registry.load_from_url(args.url, ctx.config.fetch)
    data.add_registry(registry)
    data.save()
    emit(
        ctx,
        registry.to_dict(),
        f"Added registry {registry.name!r} with {len(registry.iter_endpoints())} endpoints",
    )
    return 0


async def update_registries(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Refresh every registry from its remote document."""
    data = open_local_data(ctx)
    await data.refresh(ctx.config.fetch)
    data.save()
    emit(
        ctx,
        [row._asdict() for row in data.summary()],
        f"Updated {len(data.registries)} registries",
    )
    return 0


async def remove_registry(ctx: CommandContext, args: argparse.Namespace) -> int:
    data = open_local_data(ctx)
    if args.name not in data.registries:
        emit(ctx, {"removed": None}, f"No registry named {args.name!r}")
        return 1
    data.remove_registry(args.name)
    data.save()
    emit(ctx, {"removed": args.name}, f"Removed registry {args.name!r}")
    return 0


async def enable_registry(ctx: CommandContext, args: argparse.Namespace) -> int:
    data = open_local_data(ctx)
    if args.name not in data.registries:
        emit(ctx, {"name": args.name, "enabled": None}, f"No registry named {args.name!r}")
        return 1
    data.enable_registry(args.name, args.state)
    data.save()
    state = "enabled" if args.state else "disabled"
    emit(ctx, {"name": args.name, "enabled": args.state}, f"Registry {args.name!r} {state}")
    return 0


def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ("true", "yes", "on", "1"):
        return True
    if lowered in ("false", "no", "off", "0"):
        return False
    raise ValueError(value)


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("registry", aliases=["reg"], help="Manage your registries")
    commands = parser.add_subparsers(dest="registry_command", required=True)

    cmd = commands.add_parser("list", aliases=["ls"], help="List currently known registries")
    cmd.set_defaults(handler=list_registries)

    cmd = commands.add_parser("show", help="Show the registries and their endpoints")
    cmd.set_defaults(handler=show_registries)

    cmd = commands.add_parser("add", help="Add a new registry, enabled by default")
    cmd.add_argument("url", help="URL of the registry JSON document")
    cmd.set_defaults(handler=add_registry)

    cmd = commands.add_parser(
        "update", aliases=["up"], help="Fetch the latest data from the registries"
    )
    cmd.set_defaults(handler=update_registries)

    cmd = commands.add_parser("remove", aliases=["rm"], help="Remove a registry")
    cmd.add_argument("name", help="Registry name")
    cmd.set_defaults(handler=remove_registry)

    cmd = commands.add_parser("enable", help="Enable or disable a registry")
    cmd.add_argument("name", help="Registry name")
    cmd.add_argument("state", type=_parse_bool, metavar="true|false")
    cmd.set_defaults(handler=enable_registry)
