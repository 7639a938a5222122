"""``subrpc endpoints`` (alias ``ep``): query, probe and open endpoints."""

from __future__ import annotations

import webbrowser
from typing import TYPE_CHECKING, Final
from urllib.parse import quote

from subrpc.core.logger import Logger
from subrpc.models.endpoint import rank_endpoints

from .common import CommandContext, emit, endpoint_line, endpoint_payload, open_local_data


if TYPE_CHECKING:
    import argparse

    from subrpc.models.endpoint import Endpoint


POLKADOT_JS_APPS: Final[str] = "https://polkadot.js.org/apps/"

logger = Logger("subrpc.commands")


def polkadot_js_url(endpoint: Endpoint) -> str:
    """PolkadotJS Apps URL connecting to ``endpoint``."""
    return f"{POLKADOT_JS_APPS}?rpc={quote(endpoint.url.url, safe='')}"


async def list_endpoints(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Every endpoint of every enabled registry, grouped by registry and chain."""
    data = open_local_data(ctx)
    payload: dict[str, dict[str, list[dict[str, object]]]] = {}
    lines: list[str] = []
    for registry in data.enabled_registries():
        lines.append(registry.name)
        chains = payload.setdefault(registry.name, {})
        for chain, endpoints in registry.rpc_endpoints.items():
            lines.append(f"  {chain}")
            chains[chain] = [endpoint_payload(e) for e in endpoints]
            lines.extend(f"    {endpoint_line(e)}" for e in endpoints)
    emit(ctx, payload, "\n".join(lines) if lines else "No endpoint")
    return 0


async def get_endpoints(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Endpoints for one chain, best score first, optionally capped at ``--max``."""
    data = open_local_data(ctx)
    endpoints = rank_endpoints(data.get_endpoints(args.chain))
    if args.max is not None:
        endpoints = endpoints[: args.max]
    emit(
        ctx,
        [endpoint_payload(e) for e in endpoints],
        "\n".join(endpoint_line(e) for e in endpoints)
        if endpoints
        else f"No endpoint found for {args.chain!r}",
    )
    return 0


async def ping_endpoints(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Probe every endpoint; with ``--save`` fold the outcomes into the stored stats."""
    data = open_local_data(ctx)

    if args.save:
        await data.refresh_stats(ctx.config.probe)
        data.save()
        endpoints = data.get_endpoints()
        emit(
            ctx,
            [endpoint_payload(e) for e in endpoints],
            "\n".join(endpoint_line(e) for e in endpoints) or "No endpoint",
        )
        return 0

    reports = await data.ping_all(ctx.config.probe)
    payload = {
        name: [
            {
                "chain": r.chain,
                "name": r.endpoint.name,
                "url": r.endpoint.url.url,
                "success": r.result.success,
                "latency": r.result.latency,
            }
            for r in registry_reports
        ]
        for name, registry_reports in reports.items()
    }
    lines = [
        f"{'OK' if r.result.success else 'KO'} {r.chain:<12} {r.endpoint.name:<20}"
        f" {r.endpoint.url}"
        + (f" {r.result.latency * 1000:.0f} ms" if r.result.latency is not None else "")
        for registry_reports in reports.values()
        for r in registry_reports
    ]
    emit(ctx, payload, "\n".join(lines) if lines else "No endpoint")
    return 0


async def open_endpoint(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Open the best endpoint of a chain in PolkadotJS Apps."""
    data = open_local_data(ctx)
    endpoints = rank_endpoints(data.get_endpoints(args.chain))
    if not endpoints:
        emit(ctx, {"url": None}, f"No endpoint found for {args.chain!r}")
        return 1

    endpoint = endpoints[0]
    url = polkadot_js_url(endpoint)
    logger.info("endpoint_opening", endpoint=endpoint.name, url=url)
    opened = webbrowser.open(url)
    emit(
        ctx,
        {"endpoint": endpoint_payload(endpoint), "url": url, "opened": opened},
        f"Opening {endpoint.name} ({endpoint.url}): {url}",
    )
    return 0


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("endpoints", aliases=["ep"], help="Query endpoints")
    commands = parser.add_subparsers(dest="endpoints_command", required=True)

    cmd = commands.add_parser("list", aliases=["ls"], help="Show the list of all endpoints")
    cmd.set_defaults(handler=list_endpoints)

    cmd = commands.add_parser("get", help="Get one or some endpoints")
    cmd.add_argument("chain", help="Name of the chain, case insensitive")
    cmd.add_argument("-m", "--max", type=int, default=None, help="Return at most N endpoints")
    cmd.set_defaults(handler=get_endpoints)

    cmd = commands.add_parser("ping", help="Ping endpoints")
    cmd.add_argument(
        "--save", action="store_true", help="Record the outcomes in the endpoint stats"
    )
    cmd.set_defaults(handler=ping_endpoints)

    cmd = commands.add_parser("open", help="Pick an endpoint and open it using PolkadotJS")
    cmd.add_argument("chain", help="Name of the chain, case insensitive")
    cmd.set_defaults(handler=open_endpoint)
