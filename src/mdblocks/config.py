"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from mdblocks.core.reconcile import Policy, Position


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDBLOCKS_"


class Settings(BaseModel):
    app_name:         str = "mdblocks"
    db_url:           str = "sqlite:///mdblocks.db"
    default_policy:   Policy = Field(default=Policy.replace, description="Update policy when none is given")
    default_position: Position = Field(default=Position.end, description="Merge position when none is given")
    batch_size:       int = Field(default=100, ge=1, le=100, description="Blocks per append request")
    log_level:        str = Field(default="WARNING", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDBLOCKS_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
