"""Tests for the syntax adapter: offsets, locations and tree-sitter wrapping."""

from translator.parser import parse_source, syntax_errors
from translator.syntax import SimpleNode, SourceFile, SyntaxKind


class TestSourceFile:
    def test_ascii_offsets_unchanged(self):
        assert SourceFile("abc").char_offset(2) == 2

    def test_multibyte_offsets_converted(self):
        source_file = SourceFile("é = 1")
        # "é" is two bytes in UTF-8
        assert source_file.char_offset(2) == 1
        assert source_file.char_offset(len(source_file.data)) == len(source_file.text)

    def test_location_is_one_based_line_zero_based_column(self):
        location = SourceFile("a;\n  bc;").location(5, 8)
        assert (location.start_line, location.start_col) == (2, 2)
        assert (location.end_line, location.end_col) == (2, 5)


class TestSimpleNode:
    def test_full_start_defaults_to_start(self):
        assert SimpleNode("identifier", 4, 6).full_start == 4

    def test_children_of(self):
        a = SimpleNode("identifier", 0, 1)
        b = SimpleNode("number", 2, 3)
        parent = SimpleNode("arguments", 0, 3, child_nodes=(a, b))
        assert parent.children_of("number") == [b]
        assert parent.first_child("identifier") is a


class TestSyntaxKind:
    def test_lookup_known(self):
        assert SyntaxKind.lookup("call_expression") is SyntaxKind.CALL_EXPRESSION

    def test_lookup_unknown(self):
        assert SyntaxKind.lookup("frobnicate") is None


class TestTreeSitterNode:
    def test_comments_are_not_children(self):
        _, root = parse_source("// note\nfoo;\n", "typescript")
        assert [c.kind for c in root.children] == ["expression_statement"]

    def test_full_start_covers_leading_trivia(self):
        text = "a;\n// note\nb;\n"
        _, root = parse_source(text, "typescript")
        second = root.children[1]
        assert second.full_start == 2
        assert text[second.start:second.end] == "b;"

    def test_fields(self):
        _, root = parse_source("foo(1);", "typescript")
        call = root.children[0].children[0]
        assert call.kind == "call_expression"
        assert call.field("function").kind == "identifier"
        assert call.field("nope") is None

    def test_offsets_are_characters(self):
        text = 'const s = "é"; x;'
        _, root = parse_source(text, "typescript")
        last = root.children[-1]
        assert text[last.start:last.end] == "x;"


class TestSyntaxErrors:
    def test_clean_source_has_none(self):
        source_file, root = parse_source("foo(1);\n", "typescript")
        assert syntax_errors(source_file, root) == []

    def test_errors_located_in_source(self):
        source_file, root = parse_source("a;\nlet x = ;\n", "typescript")
        errors = syntax_errors(source_file, root)
        assert errors
        assert all(e.location.start_line == 2 for e in errors)
        assert all(e.is_error for e in errors)
