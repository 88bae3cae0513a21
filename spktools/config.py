"""Tool configuration.

Resolution order, later wins: model defaults, YAML file, SPKTOOLS_* environment
variables, explicit command-line flags.

Example YAML:

    codec: mypkg.stoatpack:StoatpackDecoder
    rules: mypkg.shogi_rules:KingTracker
    extension: .spk
    eval_limit: 25001
    seed: 42
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from spktools.errors import ConfigurationError

logger = logging.getLogger(__name__)

__all__ = ["ENV_PREFIX", "ToolConfig", "load_config"]

ENV_PREFIX = "SPKTOOLS_"

DEFAULT_EXTENSION = ".spk"
DEFAULT_EVAL_LIMIT = 25001
DEFAULT_SEED = 42

# Scores are signed 16-bit values.
MAX_EVAL_LIMIT = 32767


class ToolConfig(BaseModel):
    """Settings shared by every subcommand"""
    model_config = ConfigDict(extra="forbid")

    extension: str = DEFAULT_EXTENSION
    recursive: bool = False
    eval_limit: int = Field(DEFAULT_EVAL_LIMIT, ge=0, le=MAX_EVAL_LIMIT)
    seed: int = Field(DEFAULT_SEED, ge=0)
    codec: Optional[str] = None
    rules: Optional[str] = None
    color: bool = True


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for key in ("codec", "rules", "extension", "eval_limit", "seed"):
        raw = env.get(ENV_PREFIX + key.upper())
        if raw:
            values[key] = raw
    if env.get(ENV_PREFIX + "NO_COLOR", "").lower() in ("1", "true", "yes"):
        values["color"] = False
    return values


def load_config(
    path: Path | None = None,
    env: Mapping[str, str] | None = None,
    **overrides: Any,
) -> ToolConfig:
    """Build a ToolConfig; ``overrides`` that are None are ignored."""
    values: dict[str, Any] = {}
    if path is not None:
        values.update(_read_yaml(Path(path)))
        logger.debug(f"Loaded config from {path}")
    values.update(_env_overrides(os.environ if env is None else env))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ToolConfig(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
