"""
Extraction settings loaded from an optional YAML file.

Recognized keys:

- ``extra_properties``: names appended to the built-in property catalog
- ``distance_key_substrings``: replaces the distance-key substrings
- ``spawner_pattern``: replaces the spawner name regex
"""

import logging
import re
from dataclasses import dataclass
from typing import Optional, Tuple

from core.settings import load_settings_file, report_invalid, string_list
from extraction.config import (
    DISTANCE_KEY_SUBSTRINGS,
    PROPERTY_CATALOG,
    SPAWNER_NAME_PATTERN,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExtractionSettings:
    """Tables driving node extraction and spawner queries."""

    property_catalog: Tuple[str, ...] = PROPERTY_CATALOG
    distance_key_substrings: Tuple[str, ...] = DISTANCE_KEY_SUBSTRINGS
    spawner_pattern: str = SPAWNER_NAME_PATTERN


def load_extraction_settings(
    settings_path: Optional[str],
    strict: bool = False,
) -> ExtractionSettings:
    """Load extraction settings from a YAML file.

    A ``None`` path returns the defaults. In non-strict mode read/parse
    failures and invalid entries are logged and ignored.

    Raises:
        ConfigValidationError: If ``strict`` and the file or an entry is invalid.
    """
    defaults = ExtractionSettings()
    if settings_path is None:
        return defaults

    payload = load_settings_file(settings_path, strict=strict)
    if not payload:
        return defaults

    catalog = list(defaults.property_catalog)
    for name in string_list(payload, "extra_properties", strict) or []:
        if name not in catalog:
            catalog.append(name)

    substrings = string_list(payload, "distance_key_substrings", strict)
    distance_keys = (
        tuple(s.lower() for s in substrings) if substrings else defaults.distance_key_substrings
    )

    spawner_pattern = defaults.spawner_pattern
    raw_pattern = payload.get("spawner_pattern")
    if raw_pattern is not None:
        try:
            re.compile(str(raw_pattern))
        except re.error as exc:
            report_invalid(f"Invalid spawner_pattern {raw_pattern!r}: {exc}", strict, exc)
        else:
            spawner_pattern = str(raw_pattern)

    settings = ExtractionSettings(
        property_catalog=tuple(catalog),
        distance_key_substrings=distance_keys,
        spawner_pattern=spawner_pattern,
    )
    logger.debug("Loaded extraction settings from %s: %s", settings_path, settings)
    return settings
