"""Configuration loading and schema."""

from ws_affected.config.loader import CONFIG_FILENAMES, find_config_file, load_config
from ws_affected.config.schema import WsAffectedConfig

__all__ = [
    "CONFIG_FILENAMES",
    "WsAffectedConfig",
    "find_config_file",
    "load_config",
]
