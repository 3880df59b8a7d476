"""Tree walker that renders document trees through a formatting rule set."""

import logging
from collections.abc import Iterable
from typing import Optional

from docmark.config import get_settings
from docmark.formatting.ir import (
    LEAF_NODE_TYPES,
    Content,
    DocumentNode,
    Mark,
    TextRun,
)
from docmark.rules.base import RuleSet

logger = logging.getLogger(__name__)


class TransformationError(Exception):
    """Error during document transformation."""

    pass


class InvalidDocumentStructureError(TransformationError):
    """Document tree breaks a structural invariant and cannot be rendered."""

    pass


class ContentTransformer:
    """Renders a document tree into a target syntax.

    The transformer owns traversal: children are rendered bottom-up, text
    runs have their marks applied in declared order, and each node's
    rendered children are handed to the rule set, whose return value
    becomes the node's rendered form. All syntax decisions belong to the
    rule set.

    Pipeline:
    1. Validate the whole tree (child types, leaf nodes, cycles, depth)
    2. Render the root recursively
    """

    def __init__(
        self,
        rule_set: RuleSet,
        max_depth: Optional[int] = None,
        leaf_types: Iterable[str] = LEAF_NODE_TYPES,
    ) -> None:
        """Initialize the transformer.

        Args:
            rule_set: Rule set supplying the inline and block hooks
            max_depth: Deepest node nesting accepted (default from settings)
            leaf_types: Node types that must not carry children
        """
        if max_depth is not None and max_depth < 1:
            raise ValueError(f"max_depth must be at least 1, got {max_depth}")

        settings = get_settings()
        self.rule_set = rule_set
        self.max_depth = max_depth or settings.max_depth
        self.leaf_types = frozenset(leaf_types)
        self._escape_text = getattr(rule_set, "escape_text", None)

    def render(self, root: DocumentNode) -> str:
        """Render a document tree to a string.

        Args:
            root: Root node, usually a "doc" node holding top-level blocks

        Returns:
            The rendered document

        Raises:
            InvalidDocumentStructureError: If the tree is structurally invalid
        """
        self.validate(root)
        logger.debug("Rendering %r tree with %r", root.type, self.rule_set)
        try:
            output = self._render_node(root)
        except RecursionError as e:
            raise InvalidDocumentStructureError(
                f"Document is nested too deeply to render (max_depth={self.max_depth})"
            ) from e
        logger.debug("Rendered %r tree to %d characters", root.type, len(output))
        return output

    def validate(self, root: DocumentNode) -> None:
        """Check structural invariants without rendering.

        Walks the tree iteratively so arbitrarily deep input cannot exhaust
        the call stack before the depth guard trips.

        Raises:
            InvalidDocumentStructureError: On a non-node child, a leaf node
                with children, a cycle, or nesting beyond max_depth
        """
        if not isinstance(root, DocumentNode):
            self._reject(f"Document root must be a DocumentNode, got {type(root).__name__}")

        # Ids of the nodes on the current root-to-node path
        path: set[int] = set()
        # (node, depth, leaving) entries; leaving pops the node off the path
        stack: list[tuple[DocumentNode, int, bool]] = [(root, 1, False)]

        while stack:
            current, depth, leaving = stack.pop()
            if leaving:
                path.discard(id(current))
                continue

            if depth > self.max_depth:
                self._reject(
                    f"Document nesting exceeds maximum depth of {self.max_depth}"
                )
            if id(current) in path:
                self._reject(f"Cycle detected at {current.type!r} node")
            if current.content and current.type in self.leaf_types:
                self._reject(
                    f"{current.type!r} node cannot have children "
                    f"(has {len(current.content)})"
                )

            path.add(id(current))
            stack.append((current, depth, True))
            for child in reversed(current.content):
                if isinstance(child, DocumentNode):
                    stack.append((child, depth + 1, False))
                elif isinstance(child, TextRun):
                    if not isinstance(child.text, str):
                        self._reject(
                            f"Text run in {current.type!r} node has non-string text "
                            f"of type {type(child.text).__name__}"
                        )
                    if not all(isinstance(m, Mark) for m in child.marks):
                        self._reject(
                            f"Text run in {current.type!r} node has an invalid mark"
                        )
                else:
                    self._reject(
                        f"{current.type!r} node has invalid child of type "
                        f"{type(child).__name__}"
                    )

    def _reject(self, message: str) -> None:
        logger.warning("Refusing to render document: %s", message)
        raise InvalidDocumentStructureError(message)

    def _render_node(self, node: DocumentNode) -> str:
        content = self._render_content(node.content)
        return self.rule_set.transform_node(node.type, node.attrs or {}, content)

    def _render_content(self, children: list[Content]) -> str:
        """Concatenate rendered children with no separator.

        Blocks carry their own framing newlines, so nothing is added or
        trimmed here.
        """
        parts: list[str] = []
        for child in children:
            if isinstance(child, TextRun):
                parts.append(self._render_text(child))
            else:
                parts.append(self._render_node(child))
        return "".join(parts)

    def _render_text(self, run: TextRun) -> str:
        output = run.text
        if self._escape_text is not None:
            output = self._escape_text(output)
        for mark in run.marks:
            output = self.rule_set.apply_inline_formatting(
                mark.type, mark.attrs or {}, output
            )
        return output


def render(
    root: DocumentNode,
    rule_set: RuleSet,
    max_depth: Optional[int] = None,
) -> str:
    """Render a document tree with the given rule set.

    Args:
        root: Root node of the document
        rule_set: Rule set supplying the inline and block hooks
        max_depth: Deepest node nesting accepted (default from settings)

    Returns:
        The rendered document
    """
    return ContentTransformer(rule_set, max_depth=max_depth).render(root)
