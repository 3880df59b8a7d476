"""Tests for the content transformer."""

import copy
from concurrent.futures import ThreadPoolExecutor

import pytest

from docmark.core.transformer import (
    ContentTransformer,
    InvalidDocumentStructureError,
    TransformationError,
    render,
)
from docmark.formatting.ir import DocumentNode, Mark, TextRun, mark, node, text
from docmark.rules import GFM_RULE_SET, HTML_RULE_SET, CallbackRuleSet, FormattingRuleSet


def bracket_rule_set(calls: list) -> CallbackRuleSet:
    """Rule set that spells out every hook call as type(content)."""

    def inline(mark_type, attrs, content):
        calls.append(("inline", mark_type, content))
        return f"{mark_type}({content})"

    def block(node_type, attrs, content):
        calls.append(("block", node_type, content))
        return f"{node_type}[{content}]"

    return CallbackRuleSet(inline, block)


def nested_chain(depth: int) -> DocumentNode:
    """Build a chain of nested nodes `depth` levels deep."""
    root = node("doc")
    current = root
    for _ in range(depth - 1):
        child = node("section")
        current.append(child)
        current = child
    return root


class TestInlineMarks:
    """Tests for mark composition on text runs."""

    def test_marks_apply_in_declared_order(self):
        """Test that the first mark wraps the text and later marks wrap it."""
        calls: list = []
        transformer = ContentTransformer(bracket_rule_set(calls))

        result = transformer.render(node("p", text("x", mark("bold"), mark("italic"))))

        assert result == "p[italic(bold(x))]"

    def test_reversed_marks_change_output(self):
        """Test that mark order is never normalized."""
        forward = render(node("p", text("x", mark("bold"), mark("italic"))), bracket_rule_set([]))
        backward = render(node("p", text("x", mark("italic"), mark("bold"))), bracket_rule_set([]))

        assert forward != backward

    def test_gfm_bold_then_italic(self, gfm: ContentTransformer):
        """Test that bold then italic nests italic outermost."""
        result = gfm.render(node("doc", text("x", mark("bold"), mark("italic"))))

        assert result == "***x***"

    def test_gfm_order_sensitive_with_link(self, gfm: ContentTransformer):
        """Test that swapping bold and link changes the rendered string."""
        inner_bold = gfm.render(node("doc", text("x", mark("bold"), mark("link", href="h"))))
        outer_bold = gfm.render(node("doc", text("x", mark("link", href="h"), mark("bold"))))

        assert inner_bold == "[**x**](h)"
        assert outer_bold == "**[x](h)**"

    def test_link_around_bold_in_paragraph(self, gfm: ContentTransformer):
        """Test a paragraph holding a link around bold text."""
        doc = node("paragraph", text("x", mark("bold"), mark("link", href="h")))

        assert gfm.render(doc) == "\n[**x**](h)\n"

    def test_unknown_mark_is_identity(self, gfm: ContentTransformer):
        """Test that unregistered marks leave text unchanged."""
        result = gfm.render(node("doc", text("x", mark("highlight", color="red"))))

        assert result == "x"

    def test_text_runs_concatenate_directly(self, gfm: ContentTransformer):
        """Test that adjacent runs join with no separator."""
        doc = node("paragraph", text("a"), text("b", mark("bold")), text("c"))

        assert gfm.render(doc) == "\na**b**c\n"

    def test_escape_hook_runs_before_marks(self):
        """Test that literal text is escaped before marks wrap it."""
        rule_set = FormattingRuleSet(
            name="upper",
            inline_rules={"bold": lambda attrs, content: f"<{content}>"},
            text_escaper=str.upper,
        )

        result = render(node("doc", text("ab", mark("bold"))), rule_set)

        assert result == "<AB>"

    def test_rule_set_without_escape_hook(self):
        """Test that rule sets with only the two hooks are accepted."""
        result = render(node("doc", text("a<b")), bracket_rule_set([]))

        assert result == "doc[a<b]"


class TestBlockAssembly:
    """Tests for how rendered children are assembled into nodes."""

    def test_children_render_before_parent(self):
        """Test bottom-up rendering order."""
        calls: list = []
        transformer = ContentTransformer(bracket_rule_set(calls))

        transformer.render(node("doc", node("p", text("a")), node("p", text("b"))))

        assert [call[1] for call in calls] == ["p", "p", "doc"]
        assert calls[-1] == ("block", "doc", "p[a]p[b]")

    def test_framed_blocks_concatenate_without_separator(self, gfm: ContentTransformer):
        """Test that blocks framing themselves with newlines are joined as is."""
        doc = node("doc", node("paragraph", text("a")), node("paragraph", text("b")))

        assert gfm.render(doc) == "\na\n\nb\n"

    def test_adjacent_inline_nodes_join_directly(self, gfm: ContentTransformer):
        """Test that unregistered inline nodes sit flush against each other."""
        doc = node(
            "paragraph",
            text("Hi "),
            node("mention", text("@a")),
            node("mention", text("@b")),
            text("!"),
        )

        assert gfm.render(doc) == "\nHi @a@b!\n"

    def test_list_items_separated_by_their_paragraphs(self, gfm: ContentTransformer):
        """Test that item lines come from paragraph framing, not the walker."""
        doc = node(
            "orderedList",
            node("listItem", node("paragraph", text("first"))),
            node("listItem", node("paragraph", text("second"))),
        )

        assert gfm.render(doc) == "\n1. first\n2. second\n"

    def test_rule_set_receives_attrs(self):
        """Test that node attributes reach the block hook."""
        seen: list = []

        def block(node_type, attrs, content):
            seen.append(dict(attrs))
            return content

        render(node("heading", text("t"), level=3), CallbackRuleSet(lambda t, a, c: c, block))

        assert seen == [{"level": 3}]

    def test_return_value_threaded_verbatim(self):
        """Test that whatever a rule returns is passed up untouched."""
        rule_set = FormattingRuleSet(
            name="odd",
            block_rules={"leaf": lambda attrs, content: "  <raw>  "},
        )

        result = render(node("doc", text("a"), node("leaf"), text("b")), rule_set)

        assert result == "a  <raw>  b"

    @pytest.mark.parametrize("content", ["", "plain", "\n- item\n", "  spaced  "])
    def test_unknown_node_is_identity(self, gfm: ContentTransformer, content: str):
        """Test that unregistered node types return their content unchanged."""
        assert gfm.render(node("callout", text(content), tone="info")) == content

    def test_input_not_mutated(self, gfm: ContentTransformer):
        """Test that rendering leaves the tree untouched."""
        doc = node(
            "doc",
            node("heading", text("T", mark("bold"))),
            node("bulletList", node("listItem", node("paragraph", text("a")))),
        )
        before = copy.deepcopy(doc)

        gfm.render(doc)

        assert doc == before

    def test_shared_subtree_is_not_a_cycle(self, gfm: ContentTransformer):
        """Test that the same node may appear in two places."""
        shared = node("paragraph", text("x"))

        assert gfm.render(node("doc", shared, shared)) == "\nx\n\nx\n"

    def test_concurrent_renders(self, gfm: ContentTransformer):
        """Test that one transformer can serve several threads."""
        doc = node("doc", node("orderedList", *[node("listItem", text(str(i))) for i in range(20)]))
        expected = gfm.render(doc)

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(lambda _: gfm.render(doc), range(16)))

        assert results == [expected] * 16


class TestStructuralValidation:
    """Tests for rejection of structurally invalid trees."""

    def test_leaf_node_with_children(self, gfm: ContentTransformer):
        """Test that void nodes carrying children are refused."""
        doc = node("doc", node("image", text("oops"), src="a.png"))

        with pytest.raises(InvalidDocumentStructureError, match="cannot have children"):
            gfm.render(doc)

    def test_cycle_detected(self, gfm: ContentTransformer):
        """Test that a node inside its own subtree is refused."""
        loop = node("blockquote")
        loop.append(node("paragraph", loop))

        with pytest.raises(InvalidDocumentStructureError, match="Cycle"):
            gfm.render(node("doc", loop))

    def test_invalid_child_type(self, gfm: ContentTransformer):
        """Test that content must hold nodes or text runs."""
        doc = DocumentNode(type="paragraph", content=["raw string"])

        with pytest.raises(InvalidDocumentStructureError, match="invalid child"):
            gfm.render(doc)

    def test_invalid_mark(self, gfm: ContentTransformer):
        """Test that marks must be Mark instances."""
        doc = node("paragraph", TextRun(text="x", marks=["bold"]))

        with pytest.raises(InvalidDocumentStructureError, match="invalid mark"):
            gfm.render(doc)

    def test_non_string_text(self, gfm: ContentTransformer):
        """Test that a text run without a string is refused."""
        doc = node("paragraph", TextRun(text=None))

        with pytest.raises(InvalidDocumentStructureError, match="non-string text"):
            gfm.render(doc)

    def test_non_string_text_html(self):
        """Test that the escaping rule set never sees a non-string run."""
        doc = node("paragraph", TextRun(text=42))

        with pytest.raises(InvalidDocumentStructureError, match="non-string text"):
            render(doc, HTML_RULE_SET)

    def test_root_must_be_node(self, gfm: ContentTransformer):
        """Test that a bare text run is not a document."""
        with pytest.raises(InvalidDocumentStructureError, match="root"):
            gfm.render(text("x"))

    def test_max_depth_exceeded(self):
        """Test the nesting guard."""
        transformer = ContentTransformer(GFM_RULE_SET, max_depth=5)

        assert transformer.render(nested_chain(5)) == ""
        with pytest.raises(InvalidDocumentStructureError, match="maximum depth"):
            transformer.render(nested_chain(6))

    def test_pathological_depth_fails_fast(self, gfm: ContentTransformer):
        """Test that very deep input raises instead of overflowing the stack."""
        with pytest.raises(InvalidDocumentStructureError):
            gfm.render(nested_chain(20000))

    def test_no_hook_called_for_invalid_tree(self):
        """Test that validation happens before any output is produced."""
        calls: list = []
        doc = node(
            "doc",
            node("paragraph", text("fine", mark("bold"))),
            node("horizontalRule", text("bad")),
        )

        with pytest.raises(InvalidDocumentStructureError):
            render(doc, bracket_rule_set(calls))

        assert calls == []

    def test_custom_leaf_types(self):
        """Test that leaf types can be configured per transformer."""
        transformer = ContentTransformer(GFM_RULE_SET, leaf_types={"mention"})

        assert transformer.render(node("image", text("alt"))) == "\n![]()\n"
        with pytest.raises(InvalidDocumentStructureError):
            transformer.render(node("mention", text("@bob")))

    def test_structure_error_is_transformation_error(self):
        """Test the exception hierarchy."""
        assert issubclass(InvalidDocumentStructureError, TransformationError)


class TestConfiguration:
    """Tests for transformer configuration."""

    def test_default_max_depth_from_settings(self):
        """Test the built-in depth limit."""
        assert ContentTransformer(GFM_RULE_SET).max_depth == 200

    def test_max_depth_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test DOCMARK_MAX_DEPTH."""
        monkeypatch.setenv("DOCMARK_MAX_DEPTH", "3")

        transformer = ContentTransformer(GFM_RULE_SET)

        assert transformer.max_depth == 3

    def test_invalid_max_depth(self):
        """Test that a non-positive limit is refused."""
        with pytest.raises(ValueError, match="max_depth"):
            ContentTransformer(GFM_RULE_SET, max_depth=0)

    def test_render_function(self):
        """Test the module-level entry point."""
        doc = node("doc", node("paragraph", text("hi")))

        assert render(doc, GFM_RULE_SET) == "\nhi\n"
        with pytest.raises(InvalidDocumentStructureError):
            render(nested_chain(3), GFM_RULE_SET, max_depth=2)

    def test_mark_attrs_reach_hook(self):
        """Test that mark attributes reach the inline hook."""
        seen: list = []

        def inline(mark_type, attrs, content):
            seen.append((mark_type, dict(attrs)))
            return content

        render(node("doc", TextRun("x", [Mark("link", {"href": "h"})])), CallbackRuleSet(inline, lambda t, a, c: c))

        assert seen == [("link", {"href": "h"})]
