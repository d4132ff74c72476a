"""Core shared settings and logging utilities."""

from core.log_context import (
    LogContext,
    configure_logging,
    current_log_context,
    log_context,
)
from core.settings import (
    ConfigValidationError,
    load_settings_file,
    report_invalid,
    resolve_log_level,
    resolve_settings_path,
    resolve_strict_config_validation,
    string_list,
)

__all__ = [
    "LogContext",
    "configure_logging",
    "current_log_context",
    "log_context",
    "ConfigValidationError",
    "load_settings_file",
    "report_invalid",
    "resolve_log_level",
    "resolve_settings_path",
    "resolve_strict_config_validation",
    "string_list",
]
