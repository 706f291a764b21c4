"""YAML configuration file handling.

Values from the file are merged over the built-in defaults, so a config file
only needs the keys it changes. A missing file is created with the defaults
so users have something to edit.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from civicscore.config.defaults import DEFAULT_CONFIG_DICT
from civicscore.config.settings import Settings
from civicscore.errors import ConfigError
from civicscore.logging_config import get_logger

logger = get_logger(__name__)

CONFIG_ENV_VAR = "CIVICSCORE_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "civicscore" / "config.yaml"


def get_config_path() -> Path:
    """Config file location: ``$CIVICSCORE_CONFIG`` or the per-user default."""
    return Path(os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH)


def merge_over_defaults(
    overrides: dict[str, Any], defaults: dict[str, Any] = DEFAULT_CONFIG_DICT
) -> dict[str, Any]:
    """Merge ``overrides`` into a copy of ``defaults``, section by section."""
    merged = dict(defaults)
    for key, value in overrides.items():
        base = merged.get(key)
        if isinstance(base, dict) and isinstance(value, dict):
            merged[key] = merge_over_defaults(value, base)
        else:
            merged[key] = value
    return merged


def _write_yaml(data: dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Path | str | None = None) -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Config file (default: :func:`get_config_path`)

    Returns:
        Settings with file values merged over the defaults.

    Raises:
        ConfigError: If the file does not hold a mapping.
        yaml.YAMLError, ValidationError, OSError: If the file cannot be read,
            parsed or validated.
    """
    path = Path(path) if path else get_config_path()

    if not path.exists():
        logger.info("config_not_found", path=str(path), using_defaults=True)
        try:
            _write_yaml(DEFAULT_CONFIG_DICT, path)
            logger.info("default_config_saved", path=str(path))
        except OSError as e:
            logger.warning("default_config_save_failed", path=str(path), error=str(e))
        return Settings(**DEFAULT_CONFIG_DICT)

    try:
        with path.open() as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping", path=str(path))
        settings = Settings(**merge_over_defaults(data))
    except (yaml.YAMLError, ValidationError, OSError, ConfigError) as e:
        logger.error("config_load_failed", path=str(path), error=str(e))
        raise

    logger.info("config_loaded", path=str(path))
    return settings


def save_config(settings: Settings, path: Path | str | None = None) -> Path:
    """Write settings to a YAML file and return the path written."""
    path = Path(path) if path else get_config_path()
    try:
        _write_yaml(settings.model_dump(mode="json", exclude_none=True), path)
    except OSError as e:
        logger.error("config_save_error", path=str(path), error=str(e))
        raise

    logger.info("config_saved", path=str(path))
    return path
