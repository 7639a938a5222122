"""Configuration models.

Every field has a default, so a partial YAML file only needs the values it
wants to change:

```yaml
probe:
  timeout: 5.0
  max_concurrency: 20
fetch:
  timeout: 15.0
```

See Also:
    [load_yaml()][subrpc.core.yaml.load_yaml]: Reads the file handed to
        [SubrpcConfig.from_yaml()][subrpc.core.config.SubrpcConfig.from_yaml].
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import ConfigurationError
from .yaml import load_yaml


class ProbeConfig(BaseModel):
    """Liveness probe settings.

    Attributes:
        timeout: Upper bound in seconds for one probe, connect included.
        max_concurrency: Probes allowed in flight at once within a registry.
        method: JSON-RPC method used as the liveness call.
    """

    timeout: float = Field(default=10.0, ge=0.5, le=120.0)
    max_concurrency: int = Field(default=10, ge=1, le=200)
    method: str = Field(default="system_chain", min_length=1)


class FetchConfig(BaseModel):
    """Registry document download settings.

    Attributes:
        timeout: Total request timeout in seconds.
        max_size: Largest accepted document, in bytes.
    """

    timeout: float = Field(default=30.0, ge=1.0, le=300.0)
    max_size: int = Field(default=5 * 1024 * 1024, ge=1024)


class SubrpcConfig(BaseModel):
    """Top-level configuration."""

    probe: ProbeConfig = Field(default_factory=ProbeConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Validate a configuration mapping.

        Raises:
            ConfigurationError: If a value is missing its expected type or
                falls outside its allowed range.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> Self:
        """Load and validate a YAML configuration file.

        Raises:
            ConfigurationError: If the file is missing, is not valid YAML,
                or fails validation.
        """
        try:
            data = load_yaml(config_path)
        except (OSError, TypeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot load {config_path}: {e}") from e
        return cls.from_dict(data)
