"""Tests for the output tree and its render sink."""

from translator.options import RenderOptions, TraversalStrategy
from translator.otree import NO_SYNTAX, OTree, OTreeSink, UnknownSyntax, render_tree

WORKLIST = RenderOptions(strategy=TraversalStrategy.WORKLIST)


def _render_both(tree: OTree) -> str:
    recursive = render_tree(tree)
    assert render_tree(tree, WORKLIST) == recursive
    return recursive


class TestIndentationAndSeparators:
    def test_literal_block_case(self):
        tree = OTree(["{"], ["\na", "\nb", "\nc"], separator=", ", indent=4, suffix="\n}")
        assert _render_both(tree) == "{\n    a,\n    b,\n    c\n}"

    def test_newline_option_breaks_after_prefix(self):
        tree = OTree(["if x:"], ["pass"], newline=True, indent=4)
        assert _render_both(tree) == "if x:\n    pass"

    def test_nested_indentation(self):
        inner = OTree(["def f():"], ["return 1"], newline=True, indent=4)
        outer = OTree(["class A:"], [inner], newline=True, indent=4)
        assert _render_both(outer) == "class A:\n    def f():\n        return 1"

    def test_indent_restored_after_children(self):
        block = OTree(["a:"], ["b"], newline=True, indent=4)
        tree = OTree([], [block, "\nc"])
        assert _render_both(tree) == "a:\n    b\nc"

    def test_indent_without_newline_is_never_applied(self):
        tree = OTree([], [OTree(["x"], ["y"], indent=4), "\nz"])
        assert _render_both(tree) == "xy\nz"

    def test_separator_only_between_visible_children(self):
        tree = OTree(["("], ["a", " ", "b"], separator=", ", suffix=")")
        assert _render_both(tree) == "(a,  b)"

    def test_trailing_whitespace_stripped_per_line(self):
        tree = OTree(["a   "], ["\n", "b\t"])
        assert _render_both(tree) == "a\nb"


class TestEmptyNodes:
    def test_empty_node_is_filtered(self):
        tree = OTree([], ["a", NO_SYNTAX, OTree([], []), "b"], separator=", ")
        assert tree.children == ("a", "b")
        assert _render_both(tree) == "a, b"

    def test_none_and_empty_strings_dropped(self):
        tree = OTree([None, "", "x"], [None, ""])
        assert tree.prefix == ("x",)
        assert tree.is_empty is False

    def test_no_syntax_is_empty(self):
        assert NO_SYNTAX.is_empty
        assert render_tree(NO_SYNTAX) == ""

    def test_empty_children_contribute_no_separator(self):
        tree = OTree([], [OTree([None], [None]), "a", OTree([]), "b"], separator="; ")
        assert _render_both(tree) == "a; b"


class TestRenderOnce:
    def test_second_occurrence_renders_nothing(self):
        tree = OTree(
            [],
            [OTree(["x"], render_once="k"), OTree(["x"], render_once="k")],
            separator=", ",
        )
        assert _render_both(tree) == "x"

    def test_first_preorder_occurrence_wins(self):
        first = OTree(["first"], render_once="k")
        second = OTree(["second"], render_once="k")
        tree = OTree([], [OTree([], [first]), second])
        assert _render_both(tree) == "first"

    def test_skipped_node_keeps_separators_around_it(self):
        tagged = OTree(["t"], render_once="k")
        tree = OTree([], ["a", tagged, tagged, "b"], separator=", ")
        assert _render_both(tree) == "a, t, b"

    def test_skipped_node_does_not_change_indent(self):
        tagged = OTree(["t"], ["\nchild"], indent=4, render_once="k")
        tree = OTree([], [tagged, tagged, "\nz"])
        assert _render_both(tree) == "t\n    child\nz"

    def test_keys_are_per_render(self):
        tree = OTree(["x"], render_once="k")
        assert render_tree(tree) == "x"
        assert render_tree(tree) == "x"


class TestSink:
    def test_mark_tracks_non_whitespace(self):
        sink = OTreeSink()
        mark = sink.mark()
        sink.write("  \n ")
        assert not mark.wrote_non_whitespace_since_mark
        sink.write("a")
        assert mark.wrote_non_whitespace_since_mark

    def test_pending_indent_applied_at_next_newline(self):
        sink = OTreeSink()
        pop = sink.request_indent_change(2)
        sink.write("a")
        assert sink.current_indent == 0
        sink.write("\nb")
        assert sink.current_indent == 2
        pop()
        assert sink.current_indent == 0
        assert str(sink) == "a\n  b"

    def test_pop_clears_unapplied_change(self):
        sink = OTreeSink()
        pop = sink.request_indent_change(4)
        pop()
        sink.write("\nx")
        assert str(sink) == "\nx"


class TestUnknownSyntax:
    def test_renders_like_a_tree(self):
        tree = UnknownSyntax(["(foo"], ["\n", "bar"], indent=2, suffix=")")
        assert _render_both(tree) == "(foo\n  bar)"


class TestWorklistStrategy:
    def test_deep_tree_renders_without_recursion(self):
        tree: OTree = OTree(["leaf"])
        for _ in range(5000):
            tree = OTree([], [tree])
        assert render_tree(tree, WORKLIST) == "leaf"
