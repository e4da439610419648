"""Game configuration read from a YAML file.

The file holds the round limit for a simulated game::

    # game.yaml
    turns: 100

The path defaults to ``game.yaml`` and can be overridden with the
``SETTLERS_CONFIG`` environment variable.
"""

from __future__ import annotations

import os
import pathlib

import pydantic
import yaml

MIN_TURNS = 1
MAX_TURNS = 8192

CONFIG_PATH = pathlib.Path(os.environ.get('SETTLERS_CONFIG', 'game.yaml'))


class ConfigError(ValueError):
    """Raised when a config file cannot be parsed or fails validation."""


class GameConfig(pydantic.BaseModel):
    """Represents the top-level YAML config file"""

    model_config = pydantic.ConfigDict(frozen=True)

    turns: int = pydantic.Field(ge=MIN_TURNS, le=MAX_TURNS)


def load_config(path: pathlib.Path = CONFIG_PATH) -> GameConfig:
    """Load YAML into the pydantic schema.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigError: If the file is not valid YAML or lacks a valid ``turns``.
    """
    with path.open() as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ConfigError(f'{path}: invalid YAML: {exc}') from exc
    if not isinstance(config, dict):
        raise ConfigError(
            f'{path}: must contain "turns: <value>" where value is between '
            f'{MIN_TURNS} and {MAX_TURNS}'
        )
    try:
        return GameConfig.model_validate(config)
    except pydantic.ValidationError as exc:
        raise ConfigError(f'{path}: {exc}') from exc
