"""Document model and decoding for stored rich-text documents."""

from docmark.formatting.ir import (
    LEAF_NODE_TYPES,
    Content,
    DocumentNode,
    Mark,
    TextRun,
    mark,
    node,
    text,
)
from docmark.formatting.decoder import DocumentDecodeError, decode_document

__all__ = [
    "LEAF_NODE_TYPES",
    "Content",
    "DocumentNode",
    "Mark",
    "TextRun",
    "mark",
    "node",
    "text",
    "DocumentDecodeError",
    "decode_document",
]
