"""GitHub-Flavored Markdown rule set."""

import re
from collections.abc import Mapping
from typing import Any

from docmark.rules.base import FormattingRuleSet, heading_level, int_attr, str_attr

# A rendered line that already starts a list item ("- " or "12. ").
# Matched against the stripped line so nested lists rendered by a child
# list node are re-indented by the parent instead of prefixed twice.
LIST_ITEM_PATTERN = re.compile(r"^(?:-|\d+\.)\s")


def is_list_item_line(line: str) -> bool:
    """Check if a rendered line is already a formatted list item."""
    return LIST_ITEM_PATTERN.match(line.strip()) is not None


def _list_lines(content: str) -> list[str]:
    return [line for line in content.strip().split("\n") if line]


# =============================================================================
# Inline marks
# =============================================================================

def _link(attrs: Mapping[str, Any], content: str) -> str:
    return f"[{content}]({str_attr(attrs, 'href')})"


def _bold(attrs: Mapping[str, Any], content: str) -> str:
    return f"**{content}**"


def _code(attrs: Mapping[str, Any], content: str) -> str:
    return f"`{content}`"


def _italic(attrs: Mapping[str, Any], content: str) -> str:
    return f"*{content}*"


def _strike(attrs: Mapping[str, Any], content: str) -> str:
    return f"~~{content}~~"


# =============================================================================
# Blocks
# =============================================================================

def _paragraph(attrs: Mapping[str, Any], content: str) -> str:
    return f"\n{content}\n"


def _heading(attrs: Mapping[str, Any], content: str) -> str:
    return f"\n{'#' * heading_level(attrs)} {content}\n"


def _blockquote(attrs: Mapping[str, Any], content: str) -> str:
    quoted = "\n".join(f"> {line}" for line in content.split("\n"))
    return f"\n{quoted}\n"


def _image(attrs: Mapping[str, Any], content: str) -> str:
    return f"\n![{str_attr(attrs, 'alt')}]({str_attr(attrs, 'src')})\n"


def _code_block(attrs: Mapping[str, Any], content: str) -> str:
    lang = str_attr(attrs, "lang") or str_attr(attrs, "language")
    return f"\n```{lang}\n{content}\n```\n"


def _bullet_list(attrs: Mapping[str, Any], content: str) -> str:
    lines: list[str] = []
    for line in _list_lines(content):
        if is_list_item_line(line):
            lines.append(f"  {line}")
        else:
            lines.append(f"- {line.strip()}")
    return "\n" + "\n".join(lines) + "\n"


def _ordered_list(attrs: Mapping[str, Any], content: str) -> str:
    number = int_attr(attrs, "start", 1)
    lines: list[str] = []
    for line in _list_lines(content):
        if is_list_item_line(line):
            # Nested items keep their own numbering
            lines.append(f"  {line}")
        else:
            lines.append(f"{number}. {line.strip()}")
            number += 1
    return "\n" + "\n".join(lines) + "\n"


def _task_list(attrs: Mapping[str, Any], content: str) -> str:
    box = "[x]" if attrs.get("checked") else "[ ]"
    items = [f"- {box} {line}\n" for line in content.split("\n") if line]
    return "\n" + "\n".join(items) + "\n"


def _horizontal_rule(attrs: Mapping[str, Any], content: str) -> str:
    return "\n---\n"


GFM_RULE_SET = FormattingRuleSet(
    name="gfm",
    extension=".md",
    inline_rules={
        "link": _link,
        "bold": _bold,
        "code": _code,
        "italic": _italic,
        "strike": _strike,
    },
    block_rules={
        "paragraph": _paragraph,
        "heading": _heading,
        "blockquote": _blockquote,
        "image": _image,
        "codeBlock": _code_block,
        "bulletList": _bullet_list,
        "orderedList": _ordered_list,
        "taskList": _task_list,
        "horizontalRule": _horizontal_rule,
    },
)
