"""Subcommand handlers behind ``python -m subrpc``.

Each submodule exposes ``register(subparsers)``, which adds its command
group and binds every leaf command to an async handler through
``set_defaults(handler=...)``.

Attributes:
    registry: ``registry|reg {list|ls, show, add, update|up, remove|rm, enable}``.
    endpoints: ``endpoints|ep {list|ls, get, ping, open}``.
    system: ``system|sys {info, init}``.
    config: ``config|conf {list|ls, edit}``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from . import config, endpoints, registry, system
from .common import CommandContext, Handler, open_local_data


if TYPE_CHECKING:
    import argparse


def register_all(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    """Add every command group to ``subparsers``."""
    for module in (registry, system, endpoints, config):
        module.register(subparsers)


__all__ = [
    "CommandContext",
    "Handler",
    "open_local_data",
    "register_all",
]
