"""Settings loader for extcap executables.

An extcap executable can ship an optional TOML file next to it (or point to
one with the ``EXTCAP_SETTINGS`` environment variable) to override the version
preamble and the default log level without code changes::

    [extcap]
    version = "1.2.0"
    help_url = "https://example.org/my-extcap"
    log_level = "INFO"

Usage::

    from extcap.settings import load_settings

    settings = load_settings("extcap.toml")   # explicit path
    settings = load_settings(None)            # pure defaults (no file)

Precedence when the app assembles its version info: values set on the app
itself, then the settings file, then the built-in defaults.
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from extcap.models.interface import DEFAULT_HELP_URL, DEFAULT_VERSION

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = "EXTCAP_SETTINGS"

_VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_DEFAULTS: dict[str, str] = {
    "version": DEFAULT_VERSION,
    "help_url": DEFAULT_HELP_URL,
    "log_level": "WARNING",
}


@dataclass
class ExtcapSettings:
    """Top-level settings container."""

    version: str = DEFAULT_VERSION
    help_url: str = DEFAULT_HELP_URL
    log_level: str = "WARNING"
    settings_path: str | None = None  # path that was loaded, for diagnostics


def settings_path_from_env() -> str | None:
    """Return the settings path named by ``EXTCAP_SETTINGS``, if any."""
    return os.environ.get(SETTINGS_ENV_VAR) or None


def load_settings(path: str | Path | None) -> ExtcapSettings:
    """Load settings from a TOML file, falling back to defaults.

    Args:
        path: Path to the settings file. If ``None``, returns pure defaults
              without reading any file. If the file doesn't exist, logs a
              debug message and returns defaults.

    Returns:
        An ``ExtcapSettings`` instance with all values populated.
    """
    settings = ExtcapSettings()

    if path is None:
        logger.debug("Settings: using built-in defaults (no file specified)")
        return settings

    toml_path = Path(path)
    if not toml_path.is_file():
        logger.debug("Settings: %s not found, using built-in defaults", toml_path)
        return settings

    try:
        with open(toml_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Settings: failed to parse %s, using defaults", toml_path, exc_info=True)
        return settings

    settings.settings_path = str(toml_path)

    for key, value in data.get("extcap", {}).items():
        if key not in _DEFAULTS:
            logger.warning("Settings: unknown key 'extcap.%s' — ignored", key)
            continue

        if not isinstance(value, str):
            logger.warning(
                "Settings: extcap.%s expected str, got %s — using default",
                key,
                type(value).__name__,
            )
            continue

        if key == "log_level":
            value = value.upper()
            if value not in _VALID_LOG_LEVELS:
                logger.warning("Settings: extcap.log_level %r is not a log level — using default", value)
                continue

        setattr(settings, key, value)

    logger.info("Settings: loaded from %s", toml_path)
    return settings
