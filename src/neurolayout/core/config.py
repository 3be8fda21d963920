"""
Layout configuration.

Timing constants (throttle window, focus transition, glow period, drag
release delay) default to the values the renderer was tuned for and can be
overridden per deployment from ``.neurolayout/config.yaml``:

    layout:
      theme: light
      throttle_ms: 33
      transition_ms: 600
"""

import logging
from enum import StrEnum
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".neurolayout/config.yaml")


class Theme(StrEnum):
    DARK = "dark"
    LIGHT = "light"


class LayoutConfig(BaseModel):
    """Tunable settings for the engine, focus filter and update pipeline."""
    width: float = Field(default=800.0, gt=0)
    height: float = Field(default=600.0, gt=0)
    theme: Theme = Theme.DARK

    throttle_ms: float = Field(default=16.0, ge=0)
    transition_ms: float = Field(default=800.0, gt=0)
    glow_period_ms: float = Field(default=2000.0, gt=0)
    drag_release_ms: float = Field(default=100.0, ge=0)

    # Frame interval of the scheduled tick loop when a real clock drives it
    frame_interval_ms: float = Field(default=1000.0 / 60.0, gt=0)

    model_config = ConfigDict(extra="ignore")


def load_config(path: Optional[Path] = None) -> LayoutConfig:
    """
    Load a LayoutConfig from YAML.

    A missing file yields defaults. An unreadable or invalid file raises
    ConfigError.
    """
    config_path = Path(path) if path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        logger.debug(f"No config at {config_path}, using defaults")
        return LayoutConfig()

    try:
        with open(config_path, "r") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {config_path}")

    try:
        return LayoutConfig.model_validate(data.get("layout", {}) or {})
    except ValidationError as e:
        raise ConfigError(f"Invalid layout config in {config_path}: {e}") from e
