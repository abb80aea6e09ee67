"""Configuration file loading."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from ws_affected.config.schema import WsAffectedConfig
from ws_affected.errors import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("ws-affected.yaml", "ws-affected.yml")


def find_config_file(root: Path) -> Path | None:
    """Find the config file in a workspace root, if any."""
    for filename in CONFIG_FILENAMES:
        candidate = root / filename
        if candidate.is_file():
            return candidate
    return None


def load_config(root: Path) -> WsAffectedConfig:
    """Load configuration for a workspace root.

    Args:
        root: Workspace root directory.

    Returns:
        Parsed configuration, or defaults when no config file exists.

    Raises:
        ConfigurationError: If the file is not valid YAML or fails validation.
    """
    path = find_config_file(root)
    if path is None:
        return WsAffectedConfig()

    logger.debug("Loading config from %s", path)
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML: {e}", path) from e

    if data is None:
        return WsAffectedConfig()
    if not isinstance(data, dict):
        raise ConfigurationError("Config file must contain a mapping", path)

    try:
        return WsAffectedConfig.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ConfigurationError(f"Invalid configuration: {errors}", path) from e
