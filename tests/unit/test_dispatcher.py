"""Tests for the dispatcher, using hand-built syntax trees."""

import sys

import pytest

from translator.diagnostics import Severity
from translator.dispatcher import Dispatcher, visit_tree
from translator.errors import ContextStackError
from translator.languages.default import CurlyBracesVisitor
from translator.languages.python import PythonVisitor
from translator.options import VisitOptions
from translator.otree import OTree, render_tree
from translator.syntax import SimpleNode, SourceFile
from translator.visitor import AstVisitor


def _node(kind, start, end, *children, full_start=-1, **fields):
    return SimpleNode(kind, start, end, full_start, tuple(children), fields)


def _statement(start, end, full_start=-1):
    """``<identifier>;`` spanning [start, end)."""
    ident = _node("identifier", start, end - 1, full_start=full_start)
    return _node("expression_statement", start, end, ident, full_start=full_start)


def _program(text, *statements):
    return _node("program", 0, len(text), *statements, full_start=0)


def _translate(text, root, visitor=None, **options):
    result = visit_tree(
        SourceFile(text), root, visitor or CurlyBracesVisitor(), VisitOptions(**options)
    )
    return render_tree(result.tree), result.diagnostics


class RecordingVisitor(AstVisitor[dict]):
    """Pushes a context for every program child and records what identifiers see."""

    default_context = {"level": 0}

    def __init__(self):
        self.seen: list[int] = []

    def merge_context(self, old, update):
        return {**old, **update}

    def comment_range(self, span, context):
        return OTree([context.text_at(span.start, span.end)])

    def program(self, node, context):
        return OTree([], context.convert_all(node.children, {"level": 1}), separator=" ")

    def expression_statement(self, node, context):
        return context.convert(node.children[0], {"level": context.current_context["level"] + 1})

    def identifier(self, node, context):
        self.seen.append(context.current_context["level"])
        return OTree([context.text_of(node)])


class LeakingVisitor(RecordingVisitor):
    def __init__(self, dispatcher_box: list):
        super().__init__()
        self.dispatcher_box = dispatcher_box

    def identifier(self, node, context):
        self.dispatcher_box[0].context_stack.push({"leak": True})
        return OTree([context.text_of(node)])


class TestStatementLayout:
    def test_two_blank_lines_collapse_to_one(self):
        text = "a;\n\n\nb;"
        root = _program(text, _statement(0, 2), _statement(5, 7, full_start=2))
        output, diagnostics = _translate(text, root)
        assert output == "a;\n\nb;"
        assert diagnostics == []

    def test_adjacent_lines_stay_adjacent(self):
        text = "a;\nb;"
        root = _program(text, _statement(0, 2), _statement(3, 5, full_start=2))
        output, _ = _translate(text, root)
        assert output == "a;\nb;"

    def test_blank_lines_before_comment_belong_to_separator(self):
        text = "a;\n\n// c\nb;"
        root = _program(text, _statement(0, 2), _statement(9, 11, full_start=2))
        output, _ = _translate(text, root)
        assert output == "a;\n\n// c\nb;"


class TestUnknownKinds:
    SOURCE = "a;\nfoo bar;"

    def _root(self):
        unknown = _node(
            "frobnicate_statement",
            3,
            11,
            _node("identifier", 3, 6, full_start=3),
            full_start=2,
        )
        return _program(self.SOURCE, _statement(0, 2), unknown)

    def test_best_effort_copies_verbatim(self):
        output, diagnostics = _translate(self.SOURCE, self._root())
        assert output == "a;\nfoo bar;"
        assert len(diagnostics) == 1
        assert diagnostics[0].node_kind == "frobnicate_statement"
        assert diagnostics[0].severity == Severity.ERROR
        assert "frobnicate_statement" in diagnostics[0].message

    def test_strict_renders_placeholder_with_children(self):
        output, diagnostics = _translate(self.SOURCE, self._root(), best_effort=False)
        assert output == "a;\n<frobnicate_statement foo bar;>\n  foo"
        assert len(diagnostics) == 1

    def test_diagnostic_location_is_one_based_line(self):
        _, diagnostics = _translate(self.SOURCE, self._root())
        location = diagnostics[0].location
        assert (location.start_line, location.start_col) == (2, 0)
        assert (location.end_line, location.end_col) == (2, 8)

    def test_unimplemented_handler_reports_and_renders_placeholder(self):
        text = "x"
        root = _node("number", 0, 1, full_start=0)
        output, diagnostics = _translate(text, root, visitor=RecordingVisitor())
        assert output == "(number x)"
        assert len(diagnostics) == 1


class TestEmptyStatements:
    def test_empty_statement_produces_nothing(self):
        text = "a;;"
        root = _program(text, _statement(0, 2), _node("empty_statement", 2, 3, full_start=2))
        output, diagnostics = _translate(text, root)
        assert output == "a;"
        assert diagnostics == []


class TestContextBalance:
    def test_pushes_equal_pops(self):
        text = "a;\nb;"
        root = _program(text, _statement(0, 2), _statement(3, 5, full_start=2))
        visitor = RecordingVisitor()
        dispatcher = Dispatcher(SourceFile(text), visitor)
        result = dispatcher.visit(root)

        assert render_tree(result.tree) == "a b"
        assert visitor.seen == [2, 2]
        stack = dispatcher.context_stack
        assert stack.push_count == stack.pop_count == 3
        assert stack.top == {"level": 0}

    def test_unbalanced_visitor_fails_fast(self):
        text = "a;"
        root = _program(text, _statement(0, 2))
        box: list = []
        visitor = LeakingVisitor(box)
        dispatcher = Dispatcher(SourceFile(text), visitor)
        box.append(dispatcher)
        with pytest.raises(ContextStackError):
            dispatcher.visit(root)


class TestLeadingTrivia:
    def test_comment_rendered_once_when_nested_nodes_share_it(self):
        text = "// note\nfoo();"
        call = _node(
            "call_expression",
            8,
            13,
            full_start=0,
            function=_node("identifier", 8, 11, full_start=0),
            arguments=_node("arguments", 11, 13, full_start=11),
        )
        statement = _node("expression_statement", 8, 14, call, full_start=0)
        output, _ = _translate(text, _program(text, statement), visitor=PythonVisitor())
        assert output == "# note\nfoo()"

    def test_blank_line_after_comment_kept(self):
        text = "// c\n\nfoo;"
        statement = _statement(6, 10, full_start=0)
        output, _ = _translate(text, _program(text, statement), visitor=PythonVisitor())
        assert output == "# c\n\nfoo"


class TestRecursionLimit:
    def test_limit_restored_after_visit(self):
        before = sys.getrecursionlimit()
        text = "a;"
        _translate(text, _program(text, _statement(0, 2)), recursion_limit=before + 1000)
        assert sys.getrecursionlimit() == before


class TestParseErrorNodes:
    def test_error_node_copied_without_second_report(self):
        text = "a;\n= ;"
        error = _node("ERROR", 3, 6, full_start=2)
        output, diagnostics = _translate(text, _program(text, _statement(0, 2), error))
        assert output == "a;\n= ;"
        assert diagnostics == []
