"""Default on-disk locations.

Only the command layer resolves these; the core takes explicit paths.
"""

from __future__ import annotations

from pathlib import Path
from typing import Final


DATA_DIR_NAME: Final[str] = ".subrpc"
DATA_FILE_NAME: Final[str] = "data.json"
CONFIG_FILE_NAME: Final[str] = "config.yaml"


def default_data_dir() -> Path:
    """``~/.subrpc``, created if missing."""
    directory = Path.home() / DATA_DIR_NAME
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def default_data_file() -> Path:
    """``~/.subrpc/data.json``."""
    return default_data_dir() / DATA_FILE_NAME


def default_config_file() -> Path:
    """``~/.subrpc/config.yaml``."""
    return default_data_dir() / CONFIG_FILE_NAME
