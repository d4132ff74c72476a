"""
Streaming normalizer for Unity-dialect YAML.

Rewrites the handful of dialect constructs that a standard YAML engine
rejects (the Unity %TAG directive, typed document separators, inline
``!u!`` tags and ``{fileID: ...}`` references) and passes everything else
through byte-for-byte. Header lines seen before the first document body are
also captured in a side channel so the decoder can re-attach them.
"""

import io
import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Callable, Dict

from decoding.config import (
    CROSS_REFERENCE_RE,
    CROSS_REFERENCE_REPLACEMENT,
    COMMENT_LINE_RE,
    DOC_SEPARATOR,
    DOC_SEPARATOR_PLACEHOLDER,
    INLINE_TYPE_TAG_RE,
    LOOKAHEAD_BYTES,
    PLACEHOLDER_LINE_RE,
    PLAIN_SEPARATOR_LINE,
    READ_CHUNK_SIZE,
    TAG_DIRECTIVE_RE,
    TYPED_SEPARATOR_PREFIX,
    VENDOR_TAG_NAMESPACE,
    YAML_DIRECTIVE_RE,
)

logger = logging.getLogger(__name__)


class NormalizerState(Enum):
    """States of the line-classification state machine."""

    SCANNING_HEADER = "scanning_header"
    BULK_REWRITE = "bulk_rewrite"
    DONE = "done"


class LineKind(Enum):
    """Classification of the upcoming line from the peeked bytes."""

    END = "end"
    BLANK = "blank"
    TAG_DIRECTIVE = "tag_directive"
    TYPED_SEPARATOR = "typed_separator"
    PLAIN_SEPARATOR = "plain_separator"
    COMMENT_OR_DIRECTIVE = "comment_or_directive"
    CONTENT = "content"


# Checked in order, most specific first
_LINE_CLASSIFIERS = (
    (LineKind.BLANK, lambda peek: peek[:1] == b"\n"),
    (LineKind.TAG_DIRECTIVE, lambda peek: TAG_DIRECTIVE_RE.match(peek) is not None),
    (LineKind.TYPED_SEPARATOR, lambda peek: peek == TYPED_SEPARATOR_PREFIX),
    (LineKind.PLAIN_SEPARATOR, lambda peek: peek == PLAIN_SEPARATOR_LINE),
    (
        LineKind.COMMENT_OR_DIRECTIVE,
        lambda peek: COMMENT_LINE_RE.match(peek) is not None
        or YAML_DIRECTIVE_RE.match(peek) is not None,
    ),
)


def classify_line(peek: bytes) -> LineKind:
    """Classify the next line from its first few bytes.

    Args:
        peek: Up to ``LOOKAHEAD_BYTES`` bytes at the current position.

    Returns:
        The matching ``LineKind``; ``END`` for an exhausted stream and
        ``CONTENT`` when no structural classifier matches.
    """
    if not peek:
        return LineKind.END
    for kind, matches in _LINE_CLASSIFIERS:
        if matches(peek):
            return kind
    return LineKind.CONTENT


@dataclass
class NormalizedStream:
    """Result of a normalization pass.

    Attributes:
        content: Bytes a standard YAML engine can parse once placeholder
            separator lines are restored
        header: Raw header lines seen before the first document body
        dialect: Whether the Unity tag directive was seen
        body_started: Whether a separator or content line was reached
    """

    content: bytes
    header: bytes
    dialect: bool
    body_started: bool

    @property
    def leading_content(self) -> str:
        """Header side channel as text."""
        return self.header.decode("utf-8", errors="replace")


class _LookaheadReader:
    """Forward-only reader with a small peek window over a binary stream."""

    def __init__(self, stream: BinaryIO, chunk_size: int = READ_CHUNK_SIZE):
        self._stream = stream
        self._chunk_size = chunk_size
        self._buffer = bytearray()
        self._eof = False

    def _read_chunk(self) -> None:
        chunk = self._stream.read(self._chunk_size)
        if not chunk:
            self._eof = True
        else:
            self._buffer.extend(chunk)

    def peek(self, size: int) -> bytes:
        while len(self._buffer) < size and not self._eof:
            self._read_chunk()
        return bytes(self._buffer[:size])

    def read_until(self, delimiter: bytes) -> bytes:
        """Consume through ``delimiter`` (inclusive), or to end of stream."""
        start = 0
        while True:
            idx = self._buffer.find(delimiter, start)
            if idx >= 0:
                return self._take(idx + len(delimiter))
            if self._eof:
                return self._take(len(self._buffer))
            start = max(0, len(self._buffer) - len(delimiter) + 1)
            self._read_chunk()

    def read_rest(self) -> bytes:
        while not self._eof:
            self._read_chunk()
        return self._take(len(self._buffer))

    def _take(self, size: int) -> bytes:
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        return data


class DialectNormalizer:
    """Single-pass rewrite of one input stream.

    The header is scanned line by line until the first content line; from
    there the remainder is read in one piece and only the two inline
    rewrites apply (in dialect mode).
    """

    def __init__(self, stream: BinaryIO):
        self._reader = _LookaheadReader(stream)
        self._content = bytearray()
        self._header = bytearray()
        self.dialect = False
        self.body_started = False
        self.state = NormalizerState.SCANNING_HEADER
        self._handlers: Dict[LineKind, Callable[[], NormalizerState]] = {
            LineKind.END: self._finish,
            LineKind.BLANK: self._copy_line,
            LineKind.TAG_DIRECTIVE: self._tag_directive,
            LineKind.TYPED_SEPARATOR: self._typed_separator,
            LineKind.PLAIN_SEPARATOR: self._plain_separator,
            LineKind.COMMENT_OR_DIRECTIVE: self._copy_line,
            LineKind.CONTENT: self._enter_body,
        }

    def run(self) -> NormalizedStream:
        while self.state is not NormalizerState.DONE:
            if self.state is NormalizerState.SCANNING_HEADER:
                kind = classify_line(self._reader.peek(LOOKAHEAD_BYTES))
                self.state = self._handlers[kind]()
            else:
                self.state = self._rewrite_bulk()
        return NormalizedStream(
            content=bytes(self._content),
            header=bytes(self._header),
            dialect=self.dialect,
            body_started=self.body_started,
        )

    def _finish(self) -> NormalizerState:
        return NormalizerState.DONE

    def _enter_body(self) -> NormalizerState:
        return NormalizerState.BULK_REWRITE

    def _copy_line(self) -> NormalizerState:
        line = self._reader.read_until(b"\n")
        self._header += line
        self._content += line
        return NormalizerState.SCANNING_HEADER

    def _tag_directive(self) -> NormalizerState:
        line = self._reader.read_until(b"\n")
        self._header += line
        if VENDOR_TAG_NAMESPACE in line:
            # Standard engines reject the unknown tag prefix; drop it
            logger.debug("Unity tag directive found; dialect rewrites enabled")
            self.dialect = True
        else:
            self._content += line
        return NormalizerState.SCANNING_HEADER

    def _typed_separator(self) -> NormalizerState:
        self.body_started = True
        prefix = self._reader.read_until(b" ")
        if not self.dialect:
            # The rest of the line stays in the stream and is classified next
            self._write_placeholder()
            return NormalizerState.SCANNING_HEADER

        rest = self._reader.read_until(b"\n")
        self._content += DOC_SEPARATOR
        if b"&" in rest:
            # Anchor token only; the type tag and suffixes like "stripped" go
            anchor = rest.split(b"&")[1].split()
            if anchor:
                self._content += b" &" + anchor[0]
        self._content += b"\n"
        self._header += prefix + rest
        return NormalizerState.SCANNING_HEADER

    def _plain_separator(self) -> NormalizerState:
        self.body_started = True
        self._reader.read_until(b"\n")
        self._write_placeholder()
        return NormalizerState.SCANNING_HEADER

    def _write_placeholder(self) -> None:
        line = DOC_SEPARATOR_PLACEHOLDER + b"\n"
        self._header += line
        self._content += line

    def _rewrite_bulk(self) -> NormalizerState:
        self.body_started = True
        rest = self._reader.read_rest()
        if self.dialect:
            rest = CROSS_REFERENCE_RE.sub(CROSS_REFERENCE_REPLACEMENT, rest)
            rest = INLINE_TYPE_TAG_RE.sub(b"", rest)
        self._content += rest
        return NormalizerState.DONE


def normalize_stream(stream: BinaryIO) -> NormalizedStream:
    """Normalize a readable binary stream.

    Args:
        stream: Binary stream positioned at the start of the asset text.

    Returns:
        The ``NormalizedStream`` for the whole input.

    Raises:
        OSError: If reading the underlying stream fails.
    """
    try:
        result = DialectNormalizer(stream).run()
    except OSError as e:
        logger.error("Error reading stream during normalization: %s", e)
        raise

    logger.debug(
        "Normalized %d bytes (dialect=%s, header=%d bytes)",
        len(result.content),
        result.dialect,
        len(result.header),
    )
    return result


def normalize_bytes(data: bytes) -> NormalizedStream:
    """Normalize an in-memory asset.

    Raises:
        TypeError: If data is not bytes.
    """
    if not isinstance(data, (bytes, bytearray)):
        raise TypeError(f"Source must be bytes, got {type(data).__name__}")
    return normalize_stream(io.BytesIO(bytes(data)))


def restore_separators(data: bytes) -> bytes:
    """Turn placeholder separator lines back into bare ``---`` lines."""
    return PLACEHOLDER_LINE_RE.sub(DOC_SEPARATOR, data)
