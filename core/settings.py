"""Runtime settings for the asset tooling.

Environment variables are loaded from a .env file at module import time via
python-dotenv. Optional YAML settings files are read with a strict/non-strict
policy: strict mode raises ``ConfigValidationError``, non-strict mode logs a
warning and lets the caller fall back to its defaults.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Idempotent; does nothing if already loaded or missing
load_dotenv()

STRICT_ENV_VAR = "STRICT_CONFIG_VALIDATION"
LOG_LEVEL_ENV_VAR = "ASSET_EXTRACT_LOG_LEVEL"
SETTINGS_PATH_ENV_VAR = "ASSET_EXTRACT_CONFIG"


class ConfigValidationError(RuntimeError):
    """Raised when strict settings validation fails."""


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag(STRICT_ENV_VAR, default=default)


def resolve_log_level(default: int = logging.INFO) -> int:
    """Resolve the logging level from ``ASSET_EXTRACT_LOG_LEVEL`` env.

    Accepts level names (``DEBUG``) or numbers (``10``). Unknown values fall
    back to ``default``.
    """
    raw = os.getenv(LOG_LEVEL_ENV_VAR, "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if isinstance(level, int):
        return level
    logger.warning("Unknown log level %r in %s; using default", raw, LOG_LEVEL_ENV_VAR)
    return default


def resolve_settings_path() -> Optional[str]:
    """Resolve the settings file path from ``ASSET_EXTRACT_CONFIG`` env."""
    raw = os.getenv(SETTINGS_PATH_ENV_VAR, "").strip()
    return raw or None


def report_invalid(msg: str, strict: bool, exc: Optional[BaseException] = None) -> None:
    """Raise in strict mode, otherwise log a warning and return."""
    if strict:
        raise ConfigValidationError(msg) from exc
    logger.warning("%s; continuing with defaults", msg)


def load_settings_file(settings_path: str, strict: bool = False) -> dict[str, Any]:
    """Read a YAML settings file into a mapping.

    Returns an empty dict when the file is missing, unreadable, unparsable,
    empty, or not a mapping (non-strict mode only).

    Raises:
        ConfigValidationError: On any of those problems in strict mode.
    """
    try:
        with open(settings_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        report_invalid(f"Settings file not found: {settings_path}", strict, exc)
        return {}
    except OSError as exc:
        report_invalid(f"Failed to read settings file {settings_path}: {exc}", strict, exc)
        return {}
    except yaml.YAMLError as exc:
        report_invalid(f"Failed to parse settings YAML at {settings_path}: {exc}", strict, exc)
        return {}

    if payload is None:
        report_invalid(f"Settings file is empty: {settings_path}", strict)
        return {}

    if not isinstance(payload, dict):
        report_invalid(f"Unexpected settings payload type: {type(payload).__name__}", strict)
        return {}

    return payload


def string_list(payload: dict[str, Any], key: str, strict: bool) -> Optional[list[str]]:
    """Read ``payload[key]`` as a list of non-empty strings.

    Returns None when the key is absent or (non-strict) invalid.
    """
    raw = payload.get(key)
    if raw is None:
        return None
    if not isinstance(raw, list) or not all(isinstance(item, str) and item.strip() for item in raw):
        report_invalid(f"Settings key '{key}' must be a list of non-empty strings", strict)
        return None
    return [item.strip() for item in raw]
