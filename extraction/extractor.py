"""
Graph-node extraction from raw Unity asset text.

Works on the original dialect text rather than the normalized stream,
because the document headers it needs are exactly what normalization
discards. Every field is an independent pattern match; a miss only leaves
that field empty.
"""

import logging
from functools import lru_cache
from typing import List, Optional, Sequence, Tuple

from extraction.config import (
    DOCUMENT_SEPARATOR,
    HEADER_ID_RE,
    NAME_RE,
    PAYLOAD_RE,
    PROPERTY_CATALOG,
    SCRIPT_GUID_RE,
    property_pattern,
)
from extraction.models import GraphNode

logger = logging.getLogger(__name__)


@lru_cache(maxsize=32)
def _catalog_patterns(catalog: Tuple[str, ...]):
    return tuple((name, property_pattern(name)) for name in catalog)


def parse_header_id(document: str) -> Optional[int]:
    """Return the signed id from a document's ``!u!<class> &<id>`` header."""
    match = HEADER_ID_RE.search(document)
    return int(match.group(1)) if match else None


def _search_stripped(pattern, document: str) -> Optional[str]:
    match = pattern.search(document)
    if match is None:
        return None
    value = match.group(1).strip()
    return value or None


def extract_node(
    document: str,
    property_catalog: Sequence[str] = PROPERTY_CATALOG,
) -> Optional[GraphNode]:
    """Extract one graph node from a single raw document.

    Args:
        document: Text between two document separators.
        property_catalog: Property names to capture.

    Returns:
        The ``GraphNode``, or None if the document has no name.
    """
    name = _search_stripped(NAME_RE, document)
    if name is None:
        return None

    properties = {}
    for prop_name, pattern in _catalog_patterns(tuple(property_catalog)):
        match = pattern.search(document)
        if match:
            properties[prop_name] = match.group(1).strip()

    payload_match = PAYLOAD_RE.search(document)

    return GraphNode(
        name=name,
        file_id=parse_header_id(document),
        script_type=_search_stripped(SCRIPT_GUID_RE, document),
        properties=properties,
        payload=payload_match.group(1) if payload_match else None,
    )


def extract_nodes(
    text: str,
    property_catalog: Sequence[str] = PROPERTY_CATALOG,
) -> List[GraphNode]:
    """Extract all named graph nodes from raw asset text.

    The text is split on the literal document separator; blank segments and
    segments without a name are skipped. Never raises on malformed input.

    Example:
        >>> nodes = extract_nodes(open("Graph.asset").read())
        >>> [node.name for node in nodes]
        ['Grid Spawner', 'Rock']
    """
    nodes = []
    skipped = 0
    for document in text.split(DOCUMENT_SEPARATOR):
        if not document.strip():
            continue
        node = extract_node(document, property_catalog)
        if node is None:
            skipped += 1
            continue
        nodes.append(node)

    logger.debug("Extracted %d nodes (%d unnamed documents skipped)", len(nodes), skipped)
    return nodes


def extract_file(
    file_path: str,
    property_catalog: Sequence[str] = PROPERTY_CATALOG,
) -> List[GraphNode]:
    """Read an asset file and extract its graph nodes.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not UTF-8 text.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise
    except UnicodeDecodeError as e:
        logger.error("File %s is not valid UTF-8: %s", file_path, e)
        raise

    nodes = extract_nodes(text, property_catalog)
    logger.info("Extracted %d nodes from %s", len(nodes), file_path)
    return nodes
