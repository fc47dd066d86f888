"""Configuration loading and management."""

from pathlib import Path
from typing import Any

import yaml

from .types import PageSettings

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent.parent / "configs" / "default.yaml"


def load_yaml(file_path: Path) -> dict[str, Any]:
    """Load YAML configuration file.

    Args:
        file_path: Path to YAML file

    Returns:
        Parsed YAML as dictionary (empty for an empty file)

    Raises:
        FileNotFoundError: If file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    with open(file_path, encoding="utf-8") as f:
        result: dict[str, Any] | None = yaml.safe_load(f)
        return result or {}


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries.

    Args:
        base: Base configuration
        override: Override configuration (takes precedence)

    Returns:
        Merged configuration
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result


def load_settings(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> PageSettings:
    """Load page settings from a YAML file and runtime overrides.

    The YAML file may either hold the settings at top level or under a
    ``page`` key.

    Args:
        config_path: Path to config file (default: configs/default.yaml).
            An explicit path must exist; the default one is optional.
        overrides: Additional runtime overrides (``None`` values are ignored)

    Returns:
        Validated PageSettings instance

    Raises:
        FileNotFoundError: If an explicit config path doesn't exist
        pydantic.ValidationError: If the merged settings are invalid
    """
    if config_path is not None:
        config_dict = load_yaml(config_path)
    elif DEFAULT_CONFIG_PATH.exists():
        config_dict = load_yaml(DEFAULT_CONFIG_PATH)
    else:
        config_dict = {}

    if isinstance(config_dict.get("page"), dict):
        config_dict = config_dict["page"]

    if overrides:
        config_dict = merge_configs(
            config_dict, {k: v for k, v in overrides.items() if v is not None}
        )

    return PageSettings(**config_dict)
