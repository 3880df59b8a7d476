"""HTML rule set.

Literal text and attribute values are escaped; rendered content handed to
the rules is already HTML and is inserted as is.
"""

import html
from collections.abc import Mapping
from typing import Any

from docmark.rules.base import FormattingRuleSet, heading_level, int_attr, str_attr


def escape_html(value: str) -> str:
    """Escape &, <, >, double and single quotes."""
    return html.escape(value, quote=True)


def _element(tag: str, content: str, **attributes: str) -> str:
    rendered = "".join(
        f' {name.replace("_", "-")}="{escape_html(value)}"'
        for name, value in attributes.items()
    )
    return f"<{tag}{rendered}>{content}</{tag}>"


def _block(tag: str, content: str, **attributes: str) -> str:
    return _element(tag, content, **attributes) + "\n"


def _link(attrs: Mapping[str, Any], content: str) -> str:
    return _element("a", content, href=str_attr(attrs, "href"))


def _bold(attrs: Mapping[str, Any], content: str) -> str:
    return _element("strong", content)


def _code(attrs: Mapping[str, Any], content: str) -> str:
    return _element("code", content)


def _italic(attrs: Mapping[str, Any], content: str) -> str:
    return _element("em", content)


def _strike(attrs: Mapping[str, Any], content: str) -> str:
    return _element("s", content)


def _paragraph(attrs: Mapping[str, Any], content: str) -> str:
    return _block("p", content)


def _heading(attrs: Mapping[str, Any], content: str) -> str:
    # HTML stops at h6
    return _block(f"h{min(heading_level(attrs), 6)}", content)


def _blockquote(attrs: Mapping[str, Any], content: str) -> str:
    return _block("blockquote", f"\n{content}")


def _image(attrs: Mapping[str, Any], content: str) -> str:
    src = escape_html(str_attr(attrs, "src"))
    alt = escape_html(str_attr(attrs, "alt"))
    return f'<img src="{src}" alt="{alt}">\n'


def _code_block(attrs: Mapping[str, Any], content: str) -> str:
    lang = str_attr(attrs, "lang") or str_attr(attrs, "language")
    if lang:
        code = _element("code", content, **{"class": f"language-{lang}"})
    else:
        code = _element("code", content)
    return _block("pre", code)


def _bullet_list(attrs: Mapping[str, Any], content: str) -> str:
    return _block("ul", f"\n{content}")


def _ordered_list(attrs: Mapping[str, Any], content: str) -> str:
    start = int_attr(attrs, "start", 1)
    if start != 1:
        return _block("ol", f"\n{content}", start=str(start))
    return _block("ol", f"\n{content}")


def _list_item(attrs: Mapping[str, Any], content: str) -> str:
    return _block("li", content.strip("\n"))


def _task_list(attrs: Mapping[str, Any], content: str) -> str:
    return _block("ul", f"\n{content}", data_type="taskList")


def _task_item(attrs: Mapping[str, Any], content: str) -> str:
    checked = "true" if attrs.get("checked") else "false"
    return _block("li", content.strip("\n"), data_checked=checked)


def _horizontal_rule(attrs: Mapping[str, Any], content: str) -> str:
    return "<hr>\n"


HTML_RULE_SET = FormattingRuleSet(
    name="html",
    extension=".html",
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
        "listItem": _list_item,
        "taskList": _task_list,
        "taskItem": _task_item,
        "horizontalRule": _horizontal_rule,
    },
    text_escaper=escape_html,
)
