# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Config loader: reads YAML from disk and produces a validated, frozen ReleaseConfig.

The loading pipeline is linear:
  1. Read raw text from the file
  2. Parse as YAML into a plain dict
  3. Hand the dict to pydantic for schema validation
  4. Return the frozen config object

Anything going wrong at any step fails immediately with a ConfigError. A
broken config must stop the release before a single file is touched.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from binship.config.exceptions import ConfigLoadError, ConfigValidationError
from binship.config.schema import ReleaseConfig

DEFAULT_CONFIG_NAME = "binship.yaml"


def _read_yaml_file(config_path: Path) -> dict[str, Any]:
    """
    Read a YAML file and return the parsed mapping.

    Raises:
        ConfigLoadError: If the file doesn't exist, isn't readable, or isn't a YAML mapping.
    """
    if not config_path.exists():
        raise ConfigLoadError(f"Config file not found: {config_path}")

    if not config_path.is_file():
        raise ConfigLoadError(f"Config path is not a file: {config_path}")

    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as err:
        raise ConfigLoadError(f"Cannot read config file {config_path}: {err}") from err

    try:
        parsed = yaml.safe_load(raw_text)
    except yaml.YAMLError as err:
        raise ConfigLoadError(f"Invalid YAML in {config_path}: {err}") from err

    if not isinstance(parsed, dict):
        raise ConfigLoadError(
            f"Config file must contain a YAML mapping (dict), got {type(parsed).__name__}"
        )

    return parsed


def load_config(config_path: Path) -> ReleaseConfig:
    """
    Load and validate a config file into a frozen ReleaseConfig.

    Args:
        config_path: Path to a YAML config file.

    Returns:
        A fully validated, frozen ReleaseConfig instance.

    Raises:
        ConfigLoadError: File I/O or YAML parse failures.
        ConfigValidationError: Schema violations (missing fields, wrong types, unknown keys).
    """
    raw_data = _read_yaml_file(config_path)

    try:
        return ReleaseConfig.model_validate(raw_data)
    except ValidationError as err:
        raise ConfigValidationError(
            f"Config validation failed for {config_path}:\n{err}"
        ) from err


def load_or_default(project_dir: Path, config_path: Path | None = None) -> ReleaseConfig:
    """
    Load the explicit config, else <project_dir>/binship.yaml, else defaults.

    An explicit path that does not exist is an error; a missing default file
    just means the project follows the conventional layout.
    """
    if config_path is not None:
        return load_config(config_path)

    default_path = project_dir / DEFAULT_CONFIG_NAME
    if default_path.is_file():
        return load_config(default_path)

    return ReleaseConfig(config_version="1.0.0")
