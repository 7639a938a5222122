"""YAML configuration loading.

Uses ``yaml.safe_load`` so that configuration files can only produce plain
data (strings, numbers, lists, dicts), never arbitrary Python objects.
The result is validated by [SubrpcConfig][subrpc.core.config.SubrpcConfig].
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file.

    Args:
        config_path: Path to the YAML file.

    Returns:
        The parsed mapping. An empty file yields ``{}``.

    Raises:
        FileNotFoundError: If the file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        TypeError: If the top-level value is not a mapping.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise TypeError(f"Config file must contain a mapping, got {type(data).__name__}")
    return data
