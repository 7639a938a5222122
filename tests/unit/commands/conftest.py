"""Shared fixtures for command handler tests."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from subrpc.commands import CommandContext


@pytest.fixture
def ctx(tmp_path: Path) -> CommandContext:
    """A context writing to a buffer, with data and config under ``tmp_path``."""
    return CommandContext(
        data_file=tmp_path / "data.json",
        config_file=tmp_path / "config.yaml",
        out=io.StringIO(),
    )


@pytest.fixture
def json_ctx(ctx: CommandContext) -> CommandContext:
    ctx.json_output = True
    return ctx
