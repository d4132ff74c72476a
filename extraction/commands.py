"""
Bodies of the extraction CLI commands.

Each command takes the raw asset text and writes a human-readable report to
``out``. Bad requests (unknown kind, missing property name) raise
``ValueError``; a property that matches nothing is reported, not raised.
"""

import json
import logging
import re
import sys
from collections import Counter
from typing import Optional, Sequence, TextIO

from extraction.config import (
    DISTANCE_KEY_SUBSTRINGS,
    PROPERTY_CATALOG,
    SPAWNER_NAME_PATTERN,
)
from extraction.extractor import extract_nodes
from extraction.query import spawner_distance_properties

logger = logging.getLogger(__name__)

EXTRACTION_KINDS = ("spawners", "nodes", "property")


def validate_request(kind: str, property_name: Optional[str]) -> None:
    """Reject malformed command requests before any file is read.

    Raises:
        ValueError: If ``kind`` is unknown or ``property`` lacks a name.
    """
    if kind not in EXTRACTION_KINDS:
        raise ValueError(f"unknown extraction type: {kind}")
    if kind == "property" and not property_name:
        raise ValueError("property extraction requires --property flag")


def extract_spawners(
    content: str,
    property_catalog: Sequence[str] = PROPERTY_CATALOG,
    key_substrings: Sequence[str] = DISTANCE_KEY_SUBSTRINGS,
    spawner_pattern: str = SPAWNER_NAME_PATTERN,
    out: Optional[TextIO] = None,
) -> int:
    """Print every spawner with its distance properties.

    Returns:
        Number of spawners reported.
    """
    out = sys.stdout if out is None else out
    nodes = extract_nodes(content, property_catalog)
    distances = spawner_distance_properties(nodes, key_substrings, spawner_pattern)

    if not distances:
        print("No spawners with distance properties found", file=out)
        return 0

    for label, properties in distances.items():
        print(f"{label}:", file=out)
        for key, value in properties.items():
            print(f"  {key}: {value}", file=out)
        print(file=out)
    print(f"Total spawners found: {len(distances)}", file=out)
    return len(distances)


def list_nodes(
    content: str,
    property_catalog: Sequence[str] = PROPERTY_CATALOG,
    as_json: bool = False,
    out: Optional[TextIO] = None,
) -> int:
    """Print the names of all nodes (or the full nodes as JSON).

    Returns:
        Number of nodes.
    """
    out = sys.stdout if out is None else out
    nodes = extract_nodes(content, property_catalog)

    if as_json:
        print(json.dumps([node.to_dict() for node in nodes], indent=2), file=out)
        return len(nodes)

    for node in nodes:
        print(f"- {node.name}", file=out)
    print(f"\nTotal nodes: {len(nodes)}", file=out)
    return len(nodes)


def property_values(content: str, property_name: str, out: Optional[TextIO] = None) -> int:
    """Print each distinct value of ``property_name`` with its count.

    The property is matched anywhere in the text, not only on named nodes.
    Values are listed in order of first appearance.

    Returns:
        Number of distinct values; 0 when the property was not found.
    """
    out = sys.stdout if out is None else out
    pattern = re.compile(rf"{re.escape(property_name)}:\s*(.+)")
    values = Counter(match.group(1).strip() for match in pattern.finditer(content))

    if not values:
        print(f"Property '{property_name}' not found", file=out)
        return 0

    print(f"Property '{property_name}' values:", file=out)
    for value, count in values.items():
        print(f"  {value}: {count} occurrences", file=out)
    return len(values)
