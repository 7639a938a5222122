"""``subrpc config`` (alias ``conf``): show and edit the YAML configuration."""

from __future__ import annotations

import asyncio
import os
import shlex
from typing import TYPE_CHECKING, Final

import yaml

from subrpc.core.config import SubrpcConfig
from subrpc.core.logger import Logger
from subrpc.utils.files import atomic_write_text

from .common import CommandContext, emit


if TYPE_CHECKING:
    import argparse


DEFAULT_EDITOR: Final[str] = "vi"

logger = Logger("subrpc.commands")


async def list_config(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Show the effective configuration, defaults included."""
    settings = ctx.config.model_dump(mode="json")
    emit(
        ctx,
        {"file": str(ctx.config_file), "config": settings},
        f"# {ctx.config_file}\n" + yaml.safe_dump(settings, sort_keys=False).rstrip(),
    )
    return 0


async def edit_config(ctx: CommandContext, args: argparse.Namespace) -> int:
    """Open the configuration file in ``$VISUAL``/``$EDITOR``, seeding it with defaults."""
    if not ctx.config_file.exists():
        ctx.config_file.parent.mkdir(parents=True, exist_ok=True)
        defaults = SubrpcConfig().model_dump(mode="json")
        atomic_write_text(ctx.config_file, yaml.safe_dump(defaults, sort_keys=False))
        logger.info("config_created", path=ctx.config_file)

    editor = os.environ.get("VISUAL") or os.environ.get("EDITOR") or DEFAULT_EDITOR
    argv = [*shlex.split(editor), str(ctx.config_file)]
    logger.debug("config_editing", argv=argv)
    try:
        process = await asyncio.create_subprocess_exec(*argv)
    except OSError as e:
        logger.error("editor_failed", editor=editor, error=str(e))
        return 1
    returncode = await process.wait()
    if returncode != 0:
        logger.error("editor_failed", editor=editor, returncode=returncode)
        return 1

    # Surface mistakes right away rather than on the next command
    SubrpcConfig.from_yaml(ctx.config_file)
    emit(ctx, {"file": str(ctx.config_file)}, f"Saved {ctx.config_file}")
    return 0


def register(subparsers: argparse._SubParsersAction[argparse.ArgumentParser]) -> None:
    parser = subparsers.add_parser("config", aliases=["conf"], help="Config")
    commands = parser.add_subparsers(dest="config_command", required=True)

    cmd = commands.add_parser("list", aliases=["ls"], help="Show the effective configuration")
    cmd.set_defaults(handler=list_config)

    cmd = commands.add_parser("edit", help="Edit the configuration file")
    cmd.set_defaults(handler=edit_config)
