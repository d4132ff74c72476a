"""
Comment recovery for decoded documents.

PyYAML's scanner discards comments, so they are read back from the
normalized text by line number and attached to the decoded nodes using the
marks the composer recorded:

- a run of full-line comments becomes the ``head_comment`` of the first
  leaf node starting on the next content line
- a comment after content becomes the ``line_comment`` of the last leaf
  node on that line
- comments after the last node of a document become the root's
  ``foot_comment``

Only lines inside the document's own span are considered; comments before
the first document are already carried as leading content.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from decoding.config import COMMENT_MARKER, LINE_BREAK_RE, QUOTE_OPENERS
from decoding.models import DocumentNode

logger = logging.getLogger(__name__)


@dataclass
class LeafSpan:
    """Position of a leaf node (scalar, alias or empty collection).

    Lines and columns are 0-indexed, as in PyYAML marks.
    """

    node: DocumentNode
    start_line: int
    end_line: int
    end_column: int

    @property
    def last_line(self) -> int:
        """Last line holding the node's text (block scalars end on the next line)."""
        if self.end_line > self.start_line and self.end_column == 0:
            return self.end_line - 1
        return self.end_line


def split_lines(text: str) -> List[str]:
    """Split text on the same line breaks the YAML scanner counts."""
    return LINE_BREAK_RE.split(text)


def split_comment(line: str) -> Tuple[str, Optional[str]]:
    """Split a line into its content and trailing comment.

    A ``#`` starts a comment at the start of the line or after whitespace,
    outside single- and double-quoted scalars.

    Example:
        >>> split_comment("b: 2  # trailing")
        ('b: 2  ', '# trailing')
        >>> split_comment("url: 'a # b'")
        ("url: 'a # b'", None)
    """
    quote = None
    i = 0
    while i < len(line):
        ch = line[i]
        if quote == '"':
            if ch == "\\":
                i += 2
                continue
            if ch == '"':
                quote = None
        elif quote == "'":
            if ch == "'":
                quote = None
        elif ch in "\"'" and (i == 0 or line[i - 1] in QUOTE_OPENERS):
            quote = ch
        elif ch == COMMENT_MARKER and (i == 0 or line[i - 1] in " \t"):
            return line[:i], line[i:].rstrip()
        i += 1
    return line, None


def _join(existing: str, comments: Sequence[str]) -> str:
    return "\n".join(([existing] if existing else []) + list(comments))


def attach_comments(
    lines: Sequence[str],
    root: DocumentNode,
    leaves: Sequence[LeafSpan],
    first_line: int,
    end_line: int,
) -> int:
    """Attach the comments found in ``lines[first_line:end_line]``.

    Args:
        lines: Normalized text split with ``split_lines``.
        root: Document root; receives comments after the last node.
        leaves: Leaf spans of the document in pre-order.
        first_line: First line of the document (its separator, if any).
        end_line: Line after the document.

    Returns:
        Number of comment lines attached.
    """
    starts: Dict[int, LeafSpan] = {}
    on_line: Dict[int, LeafSpan] = {}
    # Scalar text spanning lines: column before which the line is scalar text
    masked: Dict[int, int] = {}

    for leaf in leaves:
        starts.setdefault(leaf.start_line, leaf)
        on_line[leaf.start_line] = leaf
        on_line[leaf.last_line] = leaf
        if leaf.end_line > leaf.start_line:
            for n in range(leaf.start_line + 1, leaf.end_line):
                masked[n] = -1
            if leaf.end_column > 0:
                masked[leaf.end_line] = leaf.end_column

    pending: List[str] = []
    attached = 0
    for n in range(first_line, min(end_line, len(lines))):
        column = masked.get(n, 0)
        if column < 0:
            continue
        line = lines[n].rstrip("\r")
        content, comment = split_comment(line[column:])
        content = line[:column] + content

        if not content.strip():
            if comment:
                pending.append(comment)
            continue

        if pending and n in starts:
            target = starts[n].node
            target.head_comment = _join(target.head_comment, pending)
            attached += len(pending)
            pending = []

        if comment:
            if n in on_line:
                on_line[n].node.line_comment = comment
                attached += 1
            else:
                pending.append(comment)

    if pending:
        root.foot_comment = _join(root.foot_comment, pending)
        attached += len(pending)

    if attached:
        logger.debug("Attached %d comment lines to document %d", attached, root.document)
    return attached
