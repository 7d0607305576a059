"""YAML configuration loading.

Safe loading through ``yaml.safe_load`` for the service factories
[BaseService.from_yaml()][relayoptimizer.core.base_service.BaseService.from_yaml]
and the CLI. Missing files and malformed documents are reported as
[ConfigurationError][relayoptimizer.core.exceptions.ConfigurationError].

Examples:
    ```python
    from relayoptimizer.core.yaml import load_yaml

    config = load_yaml("config/aggregator.yaml")
    ```
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .exceptions import ConfigurationError


def load_yaml(config_path: str | Path) -> dict[str, Any]:
    """Load and parse a YAML configuration file.

    Args:
        config_path: Path to the YAML file (absolute or relative).

    Returns:
        Parsed configuration as a dictionary. An empty file yields ``{}``.

    Raises:
        ConfigurationError: If the file does not exist, is not valid YAML,
            or its top level is not a mapping.

    Warning:
        The returned dictionary is not validated. Pass it to the service's
        Pydantic config model for schema validation.
    """
    path = Path(config_path)
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {config_path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Config file {config_path} must contain a mapping, got {type(data).__name__}"
        )
    return data


__all__ = ["load_yaml"]
