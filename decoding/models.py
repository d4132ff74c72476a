"""
Internal node representation produced by the document decoder.

``DocumentNode`` is the unit handed to downstream query evaluation: one node
per decoded document root, with children for mappings and sequences.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

import yaml
from yaml.constructor import SafeConstructor

YAML_TAG_PREFIX = "tag:yaml.org,2002:"

_SCALAR_CONSTRUCTOR = SafeConstructor()


class NodeKind(str, Enum):
    """Structural kind of a ``DocumentNode``."""

    SCALAR = "scalar"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    ALIAS = "alias"


def short_tag(tag: Optional[str]) -> str:
    """Shorten a resolved YAML core tag (``tag:yaml.org,2002:str`` -> ``!!str``)."""
    if not tag:
        return ""
    if tag.startswith(YAML_TAG_PREFIX):
        return "!!" + tag[len(YAML_TAG_PREFIX):]
    return tag


def long_tag(tag: str) -> str:
    """Expand a short core tag back to its resolved form."""
    if tag.startswith("!!"):
        return YAML_TAG_PREFIX + tag[2:]
    return tag


@dataclass(eq=False)
class DocumentNode:
    """A decoded YAML node.

    Attributes:
        kind: Structural kind (scalar, mapping, sequence, alias)
        tag: Short tag, e.g. ``!!str`` or ``!!map``
        value: Raw scalar text (anchor label for aliases)
        content: Children; ``(key, value)`` tuples for mappings,
            nodes for sequences, empty for scalars and aliases
        anchor: Anchor label declared on this node, if any
        alias: Target node when ``kind`` is ``ALIAS``
        head_comment: Comment text preceding the node
        line_comment: Comment text on the node's line
        foot_comment: Comment text following the node
        leading_content: Raw header text that preceded the first document
        document: Index of the document this node was decoded from
        filename: Source file path, when decoded from disk
        line: 1-indexed line in the normalized stream
        column: 1-indexed column in the normalized stream
    """

    kind: NodeKind
    tag: str = ""
    value: str = ""
    content: List[Any] = field(default_factory=list)
    anchor: Optional[str] = None
    alias: Optional["DocumentNode"] = field(default=None, repr=False)
    head_comment: str = ""
    line_comment: str = ""
    foot_comment: str = ""
    leading_content: str = ""
    document: int = 0
    filename: str = ""
    line: int = 0
    column: int = 0

    def keys(self) -> List["DocumentNode"]:
        """Return the key nodes of a mapping (empty for other kinds)."""
        target = self.resolved()
        if target.kind != NodeKind.MAPPING:
            return []
        return [key for key, _ in target.content]

    def get(self, key: str) -> Optional["DocumentNode"]:
        """Look up a mapping value by the scalar text of its key."""
        target = self.resolved()
        if target.kind != NodeKind.MAPPING:
            return None
        for key_node, value_node in target.content:
            if key_node.value == key:
                return value_node
        return None

    def resolved(self) -> "DocumentNode":
        """Follow alias links to the anchored node."""
        node = self
        while node.kind == NodeKind.ALIAS and node.alias is not None:
            node = node.alias
        return node

    def to_python(self) -> Any:
        """Convert to plain Python values using the YAML core schema."""
        if self.kind == NodeKind.ALIAS:
            return self.resolved().to_python() if self.alias is not None else None
        if self.kind == NodeKind.MAPPING:
            result = {}
            for key_node, value_node in self.content:
                key = key_node.to_python()
                if isinstance(key, (dict, list)):
                    key = str(key)
                result[key] = value_node.to_python()
            return result
        if self.kind == NodeKind.SEQUENCE:
            return [child.to_python() for child in self.content]
        constructor = SafeConstructor.yaml_constructors.get(long_tag(self.tag))
        if constructor is None or self.tag in ("", "!!str"):
            return self.value
        return constructor(_SCALAR_CONSTRUCTOR, yaml.ScalarNode(long_tag(self.tag), self.value))


def create_scalar_node(value: Any, tag: str = "!!str") -> DocumentNode:
    """Build a scalar node; ``None`` becomes an empty ``!!null`` scalar."""
    if value is None:
        return DocumentNode(kind=NodeKind.SCALAR, tag="!!null", value="")
    return DocumentNode(kind=NodeKind.SCALAR, tag=tag, value=str(value))


def create_mapping_node(pairs: Optional[List[tuple]] = None) -> DocumentNode:
    """Build a ``!!map`` node from ``(key_node, value_node)`` pairs."""
    return DocumentNode(kind=NodeKind.MAPPING, tag="!!map", content=list(pairs or []))
