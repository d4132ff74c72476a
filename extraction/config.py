"""
Configuration constants for Unity graph-node extraction.

Defines the document separator, the field patterns matched against each raw
document, and the property catalog recognized on graph nodes.
"""

import re
from typing import Tuple

# Literal token the raw text is split on
DOCUMENT_SEPARATOR: str = "---"

# Document header: "--- !u!114 &-8676750429411634268"
HEADER_ID_RE = re.compile(r"!u!\d+\s*&(-?\d+)")

# Display name; value must be on the same line
NAME_RE = re.compile(r"m_Name:[ \t]*(.+)")

# Script reference: "m_Script: {fileID: 11500000, guid: 0a1b..., type: 3}"
SCRIPT_GUID_RE = re.compile(r"m_Script:\s*\{fileID:\s*\d+,\s*guid:\s*([a-f0-9]+)")

# Opaque single-quoted payload
PAYLOAD_RE = re.compile(r"serializedData:\s*'([^']*)'")

# Scalar properties captured on every node, in report order
PROPERTY_CATALOG: Tuple[str, ...] = (
    "Extents",
    "GridCellSize",
    "MinimumDistance",
    "RoadPoseDistance",
    "Spacing",
    "Jittering",
    "EligibleForInjection",
)

# Names treated as spawner-like nodes
SPAWNER_NAME_PATTERN: str = r"(?i)(spawner|pose.*set)"

# Lower-case substrings marking a property key as distance-like
DISTANCE_KEY_SUBSTRINGS: Tuple[str, ...] = (
    "distance",
    "extent",
    "spacing",
    "cell",
    "radius",
)

# Intra-file reference to a given id: "{fileID: 1234}"
REFERENCE_TEMPLATE: str = r"\{{fileID:\s*{file_id}\}}"


def property_pattern(name: str) -> "re.Pattern[str]":
    """Build the value pattern for a catalog property name."""
    return re.compile(rf"{re.escape(name)}:\s*(.+)")
