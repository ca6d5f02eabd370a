"""
Configuration loader — reads trellis-setup.yml into Settings.

The file is optional. Pins and sources default to the values baked
into the Settings model; a file only needs the keys it overrides.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml

from src.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default config filename
SETTINGS_FILE = "trellis-setup.yml"

# Env var pointing at an explicit config file
SETTINGS_ENV_VAR = "TRELLIS_SETUP_CONFIG"


class ConfigError(Exception):
    """Raised when the settings file is invalid or unreadable."""


def find_settings_file(start_dir: Path | None = None) -> Path | None:
    """Locate the settings file.

    ``TRELLIS_SETUP_CONFIG`` wins when set; otherwise only the
    invocation directory is searched (no walking up, the file
    belongs next to the checkout being provisioned).
    """
    explicit = os.environ.get(SETTINGS_ENV_VAR)
    if explicit:
        return Path(explicit)

    candidate = (start_dir or Path.cwd()) / SETTINGS_FILE
    return candidate if candidate.is_file() else None


def load_settings(path: Path | None = None, start_dir: Path | None = None) -> Settings:
    """Load and validate run settings.

    Args:
        path: Explicit settings file. If None, uses ``find_settings_file``.
        start_dir: Directory searched when ``path`` is None.

    Returns:
        Validated Settings (defaults when no file exists).

    Raises:
        ConfigError: If the file is missing (when explicit) or invalid.
    """
    if path is None:
        path = find_settings_file(start_dir)

    if path is None:
        logger.debug("No %s found, using default settings", SETTINGS_FILE)
        return Settings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return Settings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        settings = Settings.model_validate(data)
    except Exception as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings from %s", path)
    return settings
