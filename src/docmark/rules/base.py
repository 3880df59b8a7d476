"""Base types for formatting rule sets.

A rule set is the only part of docmark that knows a target syntax. The
transformer talks to it through two hooks:

- ``apply_inline_formatting(mark_type, attrs, content)`` decorates already
  rendered inline text with one mark;
- ``transform_node(node_type, attrs, content)`` turns a node's rendered
  content into its final rendered form.

A rule set may also define ``escape_text(text)`` for syntaxes where literal
text must be escaped before any mark is applied.
"""

from collections.abc import Callable, Mapping
from typing import Any, Optional, Protocol, runtime_checkable

# (attrs, content) -> rendered text
Rule = Callable[[Mapping[str, Any], str], str]

# (type, attrs, content) -> rendered text
Hook = Callable[[str, Mapping[str, Any], str], str]


@runtime_checkable
class RuleSet(Protocol):
    """Protocol for formatting rule sets.

    Both hooks must be pure: same input, same output, no side effects.
    Unknown types must come back unchanged.
    """

    def apply_inline_formatting(
        self, mark_type: str, attrs: Mapping[str, Any], content: str
    ) -> str:
        ...

    def transform_node(
        self, node_type: str, attrs: Mapping[str, Any], content: str
    ) -> str:
        ...


def identity(content: str) -> str:
    """Return content unchanged (the fallback for unregistered types)."""
    return content


class FormattingRuleSet:
    """Registry-backed rule set mapping type tags to rule functions.

    Each rule receives the node or mark attributes and the already
    rendered content. Tags with no registered rule render as their
    content unchanged, so documents using editor extensions the rule
    set has never heard of still render.
    """

    def __init__(
        self,
        name: str,
        extension: str = ".txt",
        inline_rules: Optional[Mapping[str, Rule]] = None,
        block_rules: Optional[Mapping[str, Rule]] = None,
        text_escaper: Optional[Callable[[str], str]] = None,
    ) -> None:
        """Initialize the rule set.

        Args:
            name: Registry name (e.g. "gfm")
            extension: File extension for rendered output (e.g. ".md")
            inline_rules: Mark tag -> rule
            block_rules: Node tag -> rule
            text_escaper: Optional function applied to literal text
        """
        self.name = name
        self.extension = extension
        self._inline_rules: dict[str, Rule] = dict(inline_rules or {})
        self._block_rules: dict[str, Rule] = dict(block_rules or {})
        self._text_escaper = text_escaper or identity

    @property
    def inline_types(self) -> tuple[str, ...]:
        """Get the mark tags with a registered rule."""
        return tuple(self._inline_rules)

    @property
    def block_types(self) -> tuple[str, ...]:
        """Get the node tags with a registered rule."""
        return tuple(self._block_rules)

    def has_inline_rule(self, mark_type: str) -> bool:
        return mark_type in self._inline_rules

    def has_block_rule(self, node_type: str) -> bool:
        return node_type in self._block_rules

    def apply_inline_formatting(
        self, mark_type: str, attrs: Mapping[str, Any], content: str
    ) -> str:
        """Decorate rendered inline content with one mark."""
        rule = self._inline_rules.get(mark_type)
        if rule is None:
            return identity(content)
        return rule(attrs, content)

    def transform_node(
        self, node_type: str, attrs: Mapping[str, Any], content: str
    ) -> str:
        """Turn a node's rendered content into its final form."""
        rule = self._block_rules.get(node_type)
        if rule is None:
            return identity(content)
        return rule(attrs, content)

    def escape_text(self, value: str) -> str:
        """Escape literal text before marks are applied."""
        return self._text_escaper(value)

    def extend(
        self,
        name: Optional[str] = None,
        inline_rules: Optional[Mapping[str, Rule]] = None,
        block_rules: Optional[Mapping[str, Rule]] = None,
    ) -> "FormattingRuleSet":
        """Create a new rule set with additional or overriding rules.

        The current rule set is left untouched.

        Args:
            name: Name of the new rule set (defaults to this one's)
            inline_rules: Mark rules to add or replace
            block_rules: Node rules to add or replace

        Returns:
            The extended rule set
        """
        return FormattingRuleSet(
            name=name or self.name,
            extension=self.extension,
            inline_rules={**self._inline_rules, **(inline_rules or {})},
            block_rules={**self._block_rules, **(block_rules or {})},
            text_escaper=self._text_escaper,
        )

    def __repr__(self) -> str:
        return (
            f"FormattingRuleSet(name={self.name!r}, "
            f"inline={len(self._inline_rules)}, block={len(self._block_rules)})"
        )


class CallbackRuleSet:
    """Rule set built from two plain hook functions.

    Lets callers plug in a syntax as a pair of functions with
    ``(type, attrs, content)`` signatures instead of a rule registry.
    """

    def __init__(
        self,
        apply_inline_formatting: Hook,
        transform_node: Hook,
        name: str = "custom",
        extension: str = ".txt",
    ) -> None:
        self._apply_inline_formatting = apply_inline_formatting
        self._transform_node = transform_node
        self.name = name
        self.extension = extension

    def apply_inline_formatting(
        self, mark_type: str, attrs: Mapping[str, Any], content: str
    ) -> str:
        return self._apply_inline_formatting(mark_type, attrs, content)

    def transform_node(
        self, node_type: str, attrs: Mapping[str, Any], content: str
    ) -> str:
        return self._transform_node(node_type, attrs, content)


def int_attr(attrs: Mapping[str, Any], key: str, default: int) -> int:
    """Read an integer attribute, falling back to default when absent or malformed."""
    value = attrs.get(key)
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def str_attr(attrs: Mapping[str, Any], key: str, default: str = "") -> str:
    """Read a string attribute, treating None and empty values as absent."""
    value = attrs.get(key)
    if value is None or value == "":
        return default
    return str(value)


def heading_level(attrs: Mapping[str, Any]) -> int:
    """Get a heading level of at least 1, defaulting to 1."""
    level = int_attr(attrs, "level", 1)
    if level < 1:
        return 1
    return level
