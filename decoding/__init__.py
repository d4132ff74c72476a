"""
Layer 1a: Dialect Decoding

Streaming normalizer that rewrites Unity-dialect YAML into standard YAML,
and a PyYAML-backed decoder producing ``DocumentNode`` trees.
"""

from decoding.models import (
    DocumentNode,
    NodeKind,
    create_mapping_node,
    create_scalar_node,
)
from decoding.normalizer import (
    DialectNormalizer,
    LineKind,
    NormalizedStream,
    NormalizerState,
    classify_line,
    normalize_bytes,
    normalize_stream,
    restore_separators,
)
from decoding.decoder import DocumentDecoder, decode_bytes, decode_file

__all__ = [
    # Data models
    "DocumentNode",
    "NodeKind",
    "create_mapping_node",
    "create_scalar_node",
    # Normalization
    "DialectNormalizer",
    "LineKind",
    "NormalizedStream",
    "NormalizerState",
    "classify_line",
    "normalize_bytes",
    "normalize_stream",
    "restore_separators",
    # Decoding
    "DocumentDecoder",
    "decode_bytes",
    "decode_file",
]
