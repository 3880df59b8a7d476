"""Decoder for documents in their stored JSON form."""

import json
from collections.abc import Mapping
from typing import Any, Union

from docmark.formatting.ir import Content, DocumentNode, Mark, TextRun


class DocumentDecodeError(ValueError):
    """Stored document could not be decoded into a document tree."""

    pass


RawDocument = Union[bytes, bytearray, memoryview, str, Mapping]

TEXT_TYPE = "text"


def decode_document(data: RawDocument) -> DocumentNode:
    """Convert a stored document to a DocumentNode tree.

    Args:
        data: UTF-8 encoded JSON bytes as kept by the document store,
            a JSON string, or an already parsed mapping

    Returns:
        The root DocumentNode

    Raises:
        DocumentDecodeError: If the data is not a well-formed document
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            data = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DocumentDecodeError(f"Document is not valid UTF-8: {e}") from e

    try:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError as e:
                raise DocumentDecodeError(f"Document is not valid JSON: {e}") from e

        root = _decode_content(data, "$")
    except RecursionError as e:
        raise DocumentDecodeError("Document is nested too deeply to decode") from e

    if isinstance(root, TextRun):
        raise DocumentDecodeError("$: document root must be a node, not a text run")
    return root


def _decode_content(raw: Any, path: str) -> Content:
    """Decode one node or text run found at the given JSON path."""
    if not isinstance(raw, Mapping):
        raise DocumentDecodeError(f"{path}: expected an object, got {type(raw).__name__}")

    node_type = raw.get("type")
    if not isinstance(node_type, str) or not node_type:
        raise DocumentDecodeError(f"{path}: missing or invalid 'type'")

    if node_type == TEXT_TYPE:
        value = raw.get("text", "")
        if not isinstance(value, str):
            raise DocumentDecodeError(f"{path}.text: expected a string")
        marks = [
            _decode_mark(item, f"{path}.marks[{i}]")
            for i, item in enumerate(_list_field(raw, "marks", path))
        ]
        return TextRun(text=value, marks=marks)

    children = [
        _decode_content(item, f"{path}.content[{i}]")
        for i, item in enumerate(_list_field(raw, "content", path))
    ]
    return DocumentNode(
        type=node_type,
        attrs=_attrs_field(raw, path),
        content=children,
    )


def _decode_mark(raw: Any, path: str) -> Mark:
    if not isinstance(raw, Mapping):
        raise DocumentDecodeError(f"{path}: expected an object, got {type(raw).__name__}")
    mark_type = raw.get("type")
    if not isinstance(mark_type, str) or not mark_type:
        raise DocumentDecodeError(f"{path}: missing or invalid 'type'")
    return Mark(type=mark_type, attrs=_attrs_field(raw, path))


def _list_field(raw: Mapping, key: str, path: str) -> list:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise DocumentDecodeError(f"{path}.{key}: expected a list")
    return value


def _attrs_field(raw: Mapping, path: str) -> dict[str, Any]:
    value = raw.get("attrs")
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise DocumentDecodeError(f"{path}.attrs: expected an object")
    return dict(value)
