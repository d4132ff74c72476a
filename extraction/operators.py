"""
Query-operator bindings over the graph-node extractor.

Each operator takes a ``Context`` of matched ``DocumentNode``s. A node with a
``filename`` is re-read from disk (the extractor needs the raw dialect
text); otherwise a scalar node's value is used as inline text. The result is
one ``!!map`` node per input node, ready for further querying such as
``.keys()``.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List

from decoding.models import (
    DocumentNode,
    NodeKind,
    create_mapping_node,
    create_scalar_node,
)
from extraction.extractor import extract_nodes
from extraction.query import spawner_distance_properties

logger = logging.getLogger(__name__)


@dataclass
class Context:
    """Nodes currently matched by a query expression."""

    matching_nodes: List[DocumentNode] = field(default_factory=list)

    def child_context(self, results: List[DocumentNode]) -> "Context":
        return Context(matching_nodes=list(results))


def _source_text(candidate: DocumentNode) -> str:
    if candidate.filename:
        try:
            with open(candidate.filename, "r", encoding="utf-8") as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Failed to read asset file %s: %s", candidate.filename, e)
            raise
    if candidate.kind == NodeKind.SCALAR:
        return candidate.value
    return ""


def _string_map(values: Dict[str, str]) -> DocumentNode:
    return create_mapping_node(
        [(create_scalar_node(key), create_scalar_node(value)) for key, value in values.items()]
    )


def graph_nodes_operator(context: Context) -> Context:
    """Map each node name to ``{FileID, <properties>}``.

    Nodes sharing a name produce repeated keys, one entry per node.
    """
    results = []
    for candidate in context.matching_nodes:
        pairs = []
        for node in extract_nodes(_source_text(candidate)):
            values = {}
            if node.file_id is not None:
                values["FileID"] = str(node.file_id)
            values.update(node.properties)
            pairs.append((create_scalar_node(node.name), _string_map(values)))
        results.append(create_mapping_node(pairs))
    return context.child_context(results)


def spawner_distances_operator(context: Context) -> Context:
    """Map each spawner label to its distance-like properties."""
    results = []
    for candidate in context.matching_nodes:
        distances = spawner_distance_properties(extract_nodes(_source_text(candidate)))
        results.append(
            create_mapping_node(
                [(create_scalar_node(label), _string_map(props)) for label, props in distances.items()]
            )
        )
    return context.child_context(results)


OPERATORS: Dict[str, Callable[[Context], Context]] = {
    "graph_nodes": graph_nodes_operator,
    "spawner_distances": spawner_distances_operator,
}
