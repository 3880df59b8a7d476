"""Intermediate Representation for rich-text documents.

This module defines the tree the transformer walks: typed nodes carrying
open attribute mappings, and text runs carrying ordered inline marks. The
shape follows the editor's document JSON so stored documents map onto it
one to one.
"""

from dataclasses import dataclass, field
from typing import Any, Union


# Node types that can never carry children
LEAF_NODE_TYPES = frozenset({"image", "horizontalRule"})


@dataclass
class Mark:
    """An inline formatting annotation applied to a text run.

    Attributes:
        type: Mark tag (e.g. "bold", "link")
        attrs: Mark attributes (e.g. {"href": ...} for links)
    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)


@dataclass
class TextRun:
    """A contiguous run of literal text with ordered inline marks.

    Marks are listed in application order: the first mark wraps the
    literal text, every following mark wraps the result of the previous.

    Attributes:
        text: The text content
        marks: Marks applied to this run, innermost first
    """

    text: str
    marks: list[Mark] = field(default_factory=list)

    @property
    def mark_types(self) -> list[str]:
        """Get the mark tags in application order."""
        return [mark.type for mark in self.marks]

    def has_mark(self, mark_type: str) -> bool:
        """Check if this run carries a mark of the given type."""
        return any(mark.type == mark_type for mark in self.marks)

    def __str__(self) -> str:
        return self.text


@dataclass
class DocumentNode:
    """A typed element of the document tree.

    Attributes:
        type: Node tag (e.g. "paragraph", "bulletList", or an extension tag)
        attrs: Node attributes (heading level, list start, ...)
        content: Child nodes and text runs, in document order
    """

    type: str
    attrs: dict[str, Any] = field(default_factory=dict)
    content: list["Content"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        """Check if this node's type is a void type that takes no children."""
        return self.type in LEAF_NODE_TYPES

    @property
    def plain_text(self) -> str:
        """Get all literal text below this node without formatting."""
        parts: list[str] = []
        stack: list[Content] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, TextRun):
                parts.append(item.text)
            else:
                stack.extend(reversed(item.content))
        return "".join(parts)

    def append(self, child: "Content") -> "DocumentNode":
        """Add a child and return self for chaining."""
        self.content.append(child)
        return self

    def __str__(self) -> str:
        return self.plain_text


Content = Union[DocumentNode, TextRun]


def node(node_type: str, *content: Content, **attrs: Any) -> DocumentNode:
    """Helper to create a document node."""
    return DocumentNode(type=node_type, attrs=dict(attrs), content=list(content))


def text(value: str, *marks: Mark) -> TextRun:
    """Helper to create a text run."""
    return TextRun(text=value, marks=list(marks))


def mark(mark_type: str, **attrs: Any) -> Mark:
    """Helper to create a mark."""
    return Mark(type=mark_type, attrs=dict(attrs))
