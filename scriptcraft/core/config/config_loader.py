"""Configuration loading for ScriptCraft.

Reads ``config/scriptcraft.yaml`` (directory overridable with the
``SCRIPTCRAFT_CONFIG_DIR`` environment variable, ``.env`` honoured).
A missing file or key always falls back to the caller's default.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "scriptcraft.yaml"
_DEFAULT_CONFIG_DIR = Path(__file__).parents[3] / "config"


def get_config_path() -> Path:
    """Directory holding the YAML configuration files."""
    env_dir = os.getenv("SCRIPTCRAFT_CONFIG_DIR")
    return Path(env_dir) if env_dir else _DEFAULT_CONFIG_DIR


@lru_cache(maxsize=1)
def load_unified_config() -> Dict[str, Any]:
    """Load and cache the YAML configuration.

    Returns:
        Parsed configuration dict, empty if the file is absent or unreadable.
    """
    config_file = get_config_path() / CONFIG_FILE_NAME
    if not config_file.exists():
        logger.debug(f"{config_file} not found, using built-in defaults")
        return {}

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Error loading {config_file}: {e}")
        return {}

    if not isinstance(config, dict):
        logger.error(f"{config_file} must contain a mapping at the top level")
        return {}
    return config


def reload_configs() -> None:
    """Drop cached configuration so the next read hits the file again."""
    load_unified_config.cache_clear()


def get_config_value(*keys: str, default: Any = None) -> Any:
    """Walk nested keys, e.g. ``get_config_value("parser", "quality_gate", "max_opaque_ratio")``."""
    node: Any = load_unified_config()
    for key in keys:
        if not isinstance(node, dict) or key not in node:
            return default
        node = node[key]
    return default if node is None else node
