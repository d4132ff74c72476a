"""
Configuration constants for Unity-dialect YAML normalization.

Defines the look-ahead size, the vendor tag namespace, the line classifiers
and the inline rewrite patterns applied once document content begins.
"""

import re

# Bytes peeked to classify the next line
LOOKAHEAD_BYTES: int = 4

# Tag prefix declared by the Unity tag directive (%TAG !u! tag:unity3d.com,2011:)
VENDOR_TAG_NAMESPACE: bytes = b"tag:unity3d.com,2011:"

# Reserved line standing in for a real document break in the normalized
# stream; the decoder turns it back into "---" before parsing.
DOC_SEPARATOR_PLACEHOLDER: bytes = b"$docSeparator$"

DOC_SEPARATOR: bytes = b"---"
TYPED_SEPARATOR_PREFIX: bytes = b"--- "
PLAIN_SEPARATOR_LINE: bytes = b"---\n"

# Line classifiers, matched against the peeked bytes
TAG_DIRECTIVE_RE = re.compile(rb"^\s*%TAG")
COMMENT_LINE_RE = re.compile(rb"^\s*#")
YAML_DIRECTIVE_RE = re.compile(rb"^\s*%YA")

# Inline rewrites applied to the bulk remainder in dialect mode
CROSS_REFERENCE_RE = re.compile(
    rb"\{fileID:\s*-?\d+(?:,\s*guid:\s*[a-f0-9]+,\s*type:\s*\d+)?\}"
)
INLINE_TYPE_TAG_RE = re.compile(rb"!u!\d+")
CROSS_REFERENCE_REPLACEMENT: bytes = b"null"

# Placeholder lines restored to bare separators before the engine reads them
PLACEHOLDER_LINE_RE = re.compile(
    rb"^" + re.escape(DOC_SEPARATOR_PLACEHOLDER) + rb"$", re.MULTILINE
)

# Chunk size for forward reads past the look-ahead window
READ_CHUNK_SIZE: int = 8192

# Line breaks as counted by the YAML scanner when it reports marks
LINE_BREAK_RE = re.compile("\r\n|[\n\r\x85\u2028\u2029]")

COMMENT_MARKER: str = "#"

# Characters after which a quote opens a quoted scalar
QUOTE_OPENERS: str = " \t[{,"
