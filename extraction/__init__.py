"""
Layer 1b: Graph-Node Extraction

Pattern-based extractor for Unity asset graphs. Recovers named nodes, their
ids, script GUIDs, catalog properties and payloads from the raw dialect
text, plus query helpers and CLI/operator bindings on top.
"""

from extraction.models import GraphNode
from extraction.extractor import extract_node, extract_nodes, extract_file, parse_header_id
from extraction.query import (
    filter_by_name,
    spawner_distance_properties,
    find_by_id,
    referencing_document_ids,
)
from extraction.operators import (
    Context,
    OPERATORS,
    graph_nodes_operator,
    spawner_distances_operator,
)
from extraction.commands import (
    EXTRACTION_KINDS,
    validate_request,
    extract_spawners,
    list_nodes,
    property_values,
)
from extraction.settings import ExtractionSettings, load_extraction_settings

__all__ = [
    # Data models
    "GraphNode",
    # Extraction
    "extract_node",
    "extract_nodes",
    "extract_file",
    "parse_header_id",
    # Queries
    "filter_by_name",
    "spawner_distance_properties",
    "find_by_id",
    "referencing_document_ids",
    # Operator bindings
    "Context",
    "OPERATORS",
    "graph_nodes_operator",
    "spawner_distances_operator",
    # Commands
    "EXTRACTION_KINDS",
    "validate_request",
    "extract_spawners",
    "list_nodes",
    "property_values",
    # Settings
    "ExtractionSettings",
    "load_extraction_settings",
]
