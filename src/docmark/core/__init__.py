"""Core transformation logic for docmark."""

from docmark.core.transformer import (
    ContentTransformer,
    InvalidDocumentStructureError,
    TransformationError,
    render,
)

__all__ = [
    "ContentTransformer",
    "InvalidDocumentStructureError",
    "TransformationError",
    "render",
]
