"""
Document decoder for Unity-dialect YAML.

Runs the normalizer once per source, feeds the result to PyYAML's composer
and converts each document into ``DocumentNode`` trees. Anchors persist for
the whole session so a later document can alias a node anchored earlier.
Comments, which PyYAML drops, are recovered by line and attached to the
nodes (see ``decoding.comments``).
"""

import io
import logging
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

import yaml
from yaml.composer import ComposerError

from decoding.comments import LeafSpan, attach_comments, split_lines
from decoding.models import DocumentNode, NodeKind, create_scalar_node, short_tag
from decoding.normalizer import normalize_stream, restore_separators

logger = logging.getLogger(__name__)


class _AliasNode(yaml.Node):
    """Composer-level marker for an alias occurrence."""

    id = "alias"

    def __init__(self, anchor, target, start_mark=None, end_mark=None):
        super().__init__(target.tag, anchor, start_mark, end_mark)
        self.target = target


class _SessionLoader(yaml.SafeLoader):
    """SafeLoader whose composer records anchor labels on nodes and keeps
    anchors across documents instead of resetting them per document."""

    def __init__(self, stream):
        super().__init__(stream)
        self.session_anchors: Dict[str, yaml.Node] = {}
        # Line span of the last composed document, end exclusive
        self.document_lines: Tuple[int, int] = (0, 0)

    def compose_document(self):
        start_mark = self.get_event().start_mark
        node = self.compose_node(None, None)
        # An implicit end is marked at the next token, past trailing comments
        end_mark = self.get_event().start_mark
        self.anchors = {}
        end_line = end_mark.line + (1 if end_mark.column > 0 else 0)
        self.document_lines = (start_mark.line, end_line)
        return node

    def compose_node(self, parent, index):
        if self.check_event(yaml.AliasEvent):
            event = self.get_event()
            target = self.anchors.get(event.anchor)
            if target is None:
                target = self.session_anchors.get(event.anchor)
            if target is None:
                raise ComposerError(
                    None, None, f"found undefined alias {event.anchor!r}", event.start_mark
                )
            return _AliasNode(event.anchor, target, event.start_mark, event.end_mark)

        event = self.peek_event()
        node = super().compose_node(parent, index)
        if event.anchor is not None:
            node.anchor = event.anchor
            self.session_anchors[event.anchor] = node
        return node


class DocumentDecoder:
    """Decode one source into a sequence of ``DocumentNode`` documents.

    Usage:
        >>> decoder = DocumentDecoder()
        >>> decoder.init(open("Scene.unity", "rb"), filename="Scene.unity")
        >>> for document in decoder:
        ...     print(document.keys())

    ``decode_next()`` returns ``None`` once the source is exhausted. Errors
    raised by the YAML engine propagate unchanged and end the session.
    """

    def __init__(self):
        self._loader: Optional[_SessionLoader] = None
        self._leading_content = ""
        self._read_anything = False
        self._document_index = 0
        self._anchor_map: Dict[str, DocumentNode] = {}
        self._filename = ""
        self._lines: List[str] = []

    @property
    def document_index(self) -> int:
        return self._document_index

    @property
    def anchor_map(self) -> Dict[str, DocumentNode]:
        return self._anchor_map

    def init(self, source: BinaryIO, filename: str = "") -> None:
        """Start a session over ``source``.

        Raises:
            OSError: If reading the source fails during normalization.
        """
        self._close_loader()
        normalized = normalize_stream(source)

        self._leading_content = restore_separators(normalized.header).decode(
            "utf-8", errors="replace"
        )
        self._read_anything = False
        self._document_index = 0
        self._anchor_map = {}
        self._filename = filename
        self._lines = []

        # Comments and directives only: nothing for the engine to parse
        if normalized.body_started:
            content = restore_separators(normalized.content)
            self._lines = split_lines(content.decode("utf-8", errors="replace"))
            self._loader = _SessionLoader(content)

    def decode_next(self) -> Optional[DocumentNode]:
        """Decode the next document, or return ``None`` when exhausted.

        Raises:
            yaml.YAMLError: If the normalized stream is not valid YAML.
        """
        try:
            has_node = self._loader is not None and self._loader.check_node()
            yaml_node = self._loader.get_node() if has_node else None
        except yaml.YAMLError as e:
            logger.error("Failed to decode document %d: %s", self._document_index, e)
            self._read_anything = True
            self._close_loader()
            raise

        if yaml_node is None:
            self._close_loader()
            if self._leading_content and not self._read_anything:
                self._read_anything = True
                return self._blank_node_with_comment()
            return None

        leaves: List[LeafSpan] = []
        document = self._convert(yaml_node, leaves)
        first_line, end_line = self._loader.document_lines
        attach_comments(self._lines, document, leaves, first_line, end_line)
        if self._leading_content:
            document.leading_content = self._leading_content
            self._leading_content = ""

        self._read_anything = True
        self._document_index += 1
        return document

    def __iter__(self) -> Iterator[DocumentNode]:
        while True:
            document = self.decode_next()
            if document is None:
                return
            yield document

    def _blank_node_with_comment(self) -> DocumentNode:
        node = create_scalar_node(None)
        node.leading_content = self._leading_content
        node.filename = self._filename
        return node

    def _close_loader(self) -> None:
        if self._loader is not None:
            self._loader.dispose()
            self._loader = None

    def _convert(self, node: yaml.Node, leaves: List[LeafSpan]) -> DocumentNode:
        result = DocumentNode(
            kind=NodeKind.SCALAR,
            tag=short_tag(node.tag),
            document=self._document_index,
            filename=self._filename,
        )
        if node.start_mark is not None:
            result.line = node.start_mark.line + 1
            result.column = node.start_mark.column + 1

        if isinstance(node, _AliasNode):
            result.kind = NodeKind.ALIAS
            result.value = node.value
            result.alias = self._anchor_map.get(node.value)
            self._add_leaf(node, result, leaves)
            return result

        result.anchor = getattr(node, "anchor", None)
        if result.anchor is not None:
            # Registered before children so self-references resolve
            self._anchor_map[result.anchor] = result

        if isinstance(node, yaml.MappingNode):
            result.kind = NodeKind.MAPPING
            for key, value in node.value:
                key_node = self._convert(key, leaves)
                result.content.append((key_node, self._convert(value, leaves)))
        elif isinstance(node, yaml.SequenceNode):
            result.kind = NodeKind.SEQUENCE
            result.content = [self._convert(child, leaves) for child in node.value]
        else:
            result.value = node.value

        if not result.content:
            self._add_leaf(node, result, leaves)
        return result

    @staticmethod
    def _add_leaf(node: yaml.Node, result: DocumentNode, leaves: List[LeafSpan]) -> None:
        if node.start_mark is None or node.end_mark is None:
            return
        leaves.append(
            LeafSpan(
                node=result,
                start_line=node.start_mark.line,
                end_line=node.end_mark.line,
                end_column=node.end_mark.column,
            )
        )


def decode_bytes(data: bytes, filename: str = "") -> List[DocumentNode]:
    """Decode every document of an in-memory asset."""
    decoder = DocumentDecoder()
    decoder.init(io.BytesIO(data), filename=filename)
    return list(decoder)


def decode_file(file_path: str) -> List[DocumentNode]:
    """Decode every document of an asset file on disk.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        yaml.YAMLError: If the normalized text is not valid YAML.
    """
    try:
        with open(file_path, "rb") as f:
            decoder = DocumentDecoder()
            decoder.init(f, filename=file_path)
    except FileNotFoundError:
        logger.error("File not found: %s", file_path)
        raise
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise

    documents = list(decoder)
    logger.info("Decoded %d documents from %s", len(documents), file_path)
    return documents
