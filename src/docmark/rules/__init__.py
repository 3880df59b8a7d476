"""Formatting rule sets for docmark."""

from docmark.rules.base import (
    CallbackRuleSet,
    FormattingRuleSet,
    RuleSet,
    identity,
)
from docmark.rules.gfm import GFM_RULE_SET, LIST_ITEM_PATTERN
from docmark.rules.html import HTML_RULE_SET

__all__ = [
    "CallbackRuleSet",
    "FormattingRuleSet",
    "RuleSet",
    "identity",
    "GFM_RULE_SET",
    "LIST_ITEM_PATTERN",
    "HTML_RULE_SET",
    "RULE_SET_MAP",
    "SUPPORTED_SYNTAXES",
    "get_rule_set",
]

# Map syntax names to rule sets
RULE_SET_MAP: dict[str, FormattingRuleSet] = {
    "gfm": GFM_RULE_SET,
    "html": HTML_RULE_SET,
}

SUPPORTED_SYNTAXES = tuple(RULE_SET_MAP.keys())


def get_rule_set(name: str) -> FormattingRuleSet:
    """Get the rule set registered under a syntax name."""
    key = name.lower()
    if key not in RULE_SET_MAP:
        raise ValueError(
            f"Unsupported syntax: {name}. "
            f"Supported syntaxes: {', '.join(SUPPORTED_SYNTAXES)}"
        )
    return RULE_SET_MAP[key]
