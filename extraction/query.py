"""
Query helpers over extracted graph nodes.

Pure functions: name filtering, spawner distance reports, id lookup and
reverse-reference discovery in the raw text.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence, Union

from extraction.config import (
    DISTANCE_KEY_SUBSTRINGS,
    DOCUMENT_SEPARATOR,
    REFERENCE_TEMPLATE,
    SPAWNER_NAME_PATTERN,
)
from extraction.extractor import parse_header_id
from extraction.models import GraphNode

logger = logging.getLogger(__name__)

Pattern = Union[str, "re.Pattern[str]"]


def filter_by_name(nodes: Sequence[GraphNode], pattern: Pattern) -> List[GraphNode]:
    """Keep nodes whose name matches ``pattern`` (``re.search`` semantics).

    Case sensitivity is whatever the pattern says, e.g. ``(?i)spawner``.
    Input order is preserved.
    """
    compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
    return [node for node in nodes if compiled.search(node.name)]


def is_distance_key(key: str, substrings: Sequence[str] = DISTANCE_KEY_SUBSTRINGS) -> bool:
    lowered = key.lower()
    return any(sub in lowered for sub in substrings)


def spawner_distance_properties(
    nodes: Sequence[GraphNode],
    key_substrings: Sequence[str] = DISTANCE_KEY_SUBSTRINGS,
    spawner_pattern: Pattern = SPAWNER_NAME_PATTERN,
) -> Dict[str, Dict[str, str]]:
    """Collect distance-like properties of spawner nodes.

    Args:
        nodes: Extracted graph nodes.
        key_substrings: Lower-case substrings that mark a property key as
            distance-like.
        spawner_pattern: Name pattern selecting spawner nodes.

    Returns:
        Mapping of ``node.label`` to the qualifying properties. Nodes with no
        qualifying property are omitted. When two nodes share a label the
        later one replaces the earlier one.
    """
    result: Dict[str, Dict[str, str]] = {}
    for node in filter_by_name(nodes, spawner_pattern):
        distances = {
            key: value
            for key, value in node.properties.items()
            if is_distance_key(key, key_substrings)
        }
        if not distances:
            continue
        if node.label in result:
            logger.debug("Duplicate spawner label %r; keeping the later node", node.label)
        result[node.label] = distances
    return result


def find_by_id(nodes: Sequence[GraphNode], file_id: int) -> Optional[GraphNode]:
    """Return the first node with ``file_id``; later duplicates are ignored."""
    for node in nodes:
        if node.file_id == file_id:
            return node
    return None


def referencing_document_ids(text: str, node: GraphNode) -> List[int]:
    """Find the ids of documents that reference ``node`` by ``{fileID: <id>}``.

    For every reference in the raw text, the enclosing document is taken to
    start at the nearest preceding separator and run to the next one; its
    header id is reported. One id per reference, duplicates included.

    The separator search is plain substring search, so a ``---`` inside a
    value can shift the document boundaries.
    """
    if node.file_id is None:
        return []

    pattern = re.compile(REFERENCE_TEMPLATE.format(file_id=re.escape(str(node.file_id))))
    sep_len = len(DOCUMENT_SEPARATOR)

    ids = []
    for match in pattern.finditer(text):
        doc_start = text.rfind(DOCUMENT_SEPARATOR, 0, match.start())
        if doc_start < 0:
            continue
        doc_end = text.find(DOCUMENT_SEPARATOR, doc_start + sep_len)
        document = text[doc_start:doc_end] if doc_end >= 0 else text[doc_start:]
        referencing_id = parse_header_id(document)
        if referencing_id is not None:
            ids.append(referencing_id)
    return ids
