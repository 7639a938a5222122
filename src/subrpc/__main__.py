"""CLI entry point for subrpc.

Manages a local directory of RPC endpoints sourced from registry
documents. Local data is created automatically, with the built-in default
registry, the first time a command needs it.

Examples:
    ```bash
    python -m subrpc registry add https://example.org/registry.json
    python -m subrpc reg update
    python -m subrpc ep get polkadot --max 3
    python -m subrpc --json ep ping --save
    python -m subrpc --log-level DEBUG sys info
    ```
"""

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from subrpc.commands import CommandContext, register_all
from subrpc.core.config import SubrpcConfig
from subrpc.core.exceptions import SubrpcError
from subrpc.core.logger import JsonFormatter, Logger, StructuredFormatter
from subrpc.utils.paths import default_config_file, default_data_file


logger = Logger("subrpc.cli")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with every command group attached."""
    parser = argparse.ArgumentParser(
        prog="subrpc",
        description="subrpc allows managing a set of registries providing RPC nodes.",
    )

    parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output results as JSON",
    )

    parser.add_argument(
        "--data-file",
        type=Path,
        help="Local data document (default: ~/.subrpc/data.json)",
    )

    parser.add_argument(
        "--config",
        type=Path,
        help="Config path (default: ~/.subrpc/config.yaml)",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Log level (default: WARNING)",
    )

    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit log records as JSON lines",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    register_all(subparsers)
    return parser


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    return build_parser().parse_args(argv)


def setup_logging(level: str, *, json_output: bool = False) -> None:
    """Configure the root logger with structured formatting.

    Installs a ``StructuredFormatter`` (or ``JsonFormatter``) on a stderr
    handler so that all log output -- from both ``Logger`` and plain
    ``logging.getLogger()`` calls in models/probe/utils -- stays off stdout,
    where command results go.
    """
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter() if json_output else StructuredFormatter())
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level))


def load_config(path: Path) -> SubrpcConfig:
    """Load ``path``, returning defaults if the file does not exist."""
    if not path.exists():
        logger.debug("config_not_found", path=str(path))
        return SubrpcConfig()
    return SubrpcConfig.from_yaml(path)


async def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point: parse args, load config, and dispatch the command."""
    args = parse_args(argv)
    setup_logging(args.log_level, json_output=args.log_json)

    try:
        config_file = args.config or default_config_file()
        ctx = CommandContext(
            data_file=args.data_file or default_data_file(),
            config_file=config_file,
            config=load_config(config_file),
            json_output=args.json,
        )
        return await args.handler(ctx, args)
    except SubrpcError as e:
        logger.error(f"{args.command}_failed", error=str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("interrupted")
        return 130


def cli() -> None:
    """Synchronous entry point for console_scripts."""
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
