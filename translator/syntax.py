"""Syntax tree adapter — the engine's view of front-end parser output."""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Sequence

from tree_sitter import Node

from . import constants
from .diagnostics import SourceLocation


class SyntaxKind(str, Enum):
    """Node kinds of the TypeScript tree-sitter grammar known to the dispatcher."""

    PROGRAM = "program"
    # Statements
    EXPRESSION_STATEMENT = "expression_statement"
    EMPTY_STATEMENT = "empty_statement"
    STATEMENT_BLOCK = "statement_block"
    RETURN_STATEMENT = "return_statement"
    IF_STATEMENT = "if_statement"
    ELSE_CLAUSE = "else_clause"
    FOR_IN_STATEMENT = "for_in_statement"
    IMPORT_STATEMENT = "import_statement"
    LEXICAL_DECLARATION = "lexical_declaration"
    VARIABLE_DECLARATION = "variable_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    # Declarations
    FUNCTION_DECLARATION = "function_declaration"
    FORMAL_PARAMETERS = "formal_parameters"
    REQUIRED_PARAMETER = "required_parameter"
    OPTIONAL_PARAMETER = "optional_parameter"
    CLASS_DECLARATION = "class_declaration"
    CLASS_BODY = "class_body"
    METHOD_DEFINITION = "method_definition"
    PUBLIC_FIELD_DEFINITION = "public_field_definition"
    INTERFACE_DECLARATION = "interface_declaration"
    PROPERTY_SIGNATURE = "property_signature"
    # Expressions
    CALL_EXPRESSION = "call_expression"
    NEW_EXPRESSION = "new_expression"
    ARGUMENTS = "arguments"
    MEMBER_EXPRESSION = "member_expression"
    BINARY_EXPRESSION = "binary_expression"
    UNARY_EXPRESSION = "unary_expression"
    PARENTHESIZED_EXPRESSION = "parenthesized_expression"
    AS_EXPRESSION = "as_expression"
    NON_NULL_EXPRESSION = "non_null_expression"
    OBJECT = "object"
    PAIR = "pair"
    ARRAY = "array"
    SPREAD_ELEMENT = "spread_element"
    TEMPLATE_STRING = "template_string"
    # Leaves
    STRING = "string"
    NUMBER = "number"
    TRUE = "true"
    FALSE = "false"
    NULL = "null"
    UNDEFINED = "undefined"
    THIS = "this"
    SUPER = "super"
    IDENTIFIER = "identifier"
    PROPERTY_IDENTIFIER = "property_identifier"
    SHORTHAND_PROPERTY_IDENTIFIER = "shorthand_property_identifier"
    TYPE_IDENTIFIER = "type_identifier"
    TYPE_ANNOTATION = "type_annotation"

    @classmethod
    def lookup(cls, kind: str) -> SyntaxKind | None:
        try:
            return cls(kind)
        except ValueError:
            return None


class SyntaxNode(ABC):
    """Immutable syntax node with character offsets into a ``SourceFile``.

    ``full_start`` is where the node's leading trivia begins; ``start`` is
    its first real token.
    """

    kind: str
    start: int
    end: int
    full_start: int

    @property
    @abstractmethod
    def children(self) -> Sequence[SyntaxNode]: ...

    @abstractmethod
    def field(self, name: str) -> SyntaxNode | None: ...

    def first_child(self, *kinds: str) -> SyntaxNode | None:
        return next((c for c in self.children if c.kind in kinds), None)

    def children_of(self, *kinds: str) -> list[SyntaxNode]:
        return [c for c in self.children if c.kind in kinds]


@dataclass(frozen=True, eq=False)
class SimpleNode(SyntaxNode):
    """In-memory syntax node, for front-ends that do not come from tree-sitter."""

    kind: str
    start: int
    end: int
    full_start: int = -1
    child_nodes: tuple[SyntaxNode, ...] = ()
    fields: dict[str, SyntaxNode] = dataclass_field(default_factory=dict)

    def __post_init__(self):
        if self.full_start < 0:
            object.__setattr__(self, "full_start", self.start)

    @property
    def children(self) -> Sequence[SyntaxNode]:
        return self.child_nodes

    def field(self, name: str) -> SyntaxNode | None:
        return self.fields.get(name)


class SourceFile:
    """Source text plus the byte/character offset bookkeeping tree-sitter needs."""

    def __init__(self, text: str, name: str = "<snippet>"):
        self.text = text
        self.name = name
        self.data = text.encode("utf-8")
        self._byte_to_char: list[int] | None = None
        self._line_starts: list[int] | None = None

    def text_at(self, start: int, end: int) -> str:
        return self.text[start:end]

    def char_offset(self, byte_offset: int) -> int:
        if len(self.data) == len(self.text):
            return byte_offset
        if self._byte_to_char is None:
            table: list[int] = []
            for index, ch in enumerate(self.text):
                table.extend([index] * len(ch.encode("utf-8")))
            table.append(len(self.text))
            self._byte_to_char = table
        return self._byte_to_char[min(byte_offset, len(self._byte_to_char) - 1)]

    def location(self, start: int, end: int) -> SourceLocation:
        start_line, start_col = self._line_col(start)
        end_line, end_col = self._line_col(end)
        return SourceLocation(
            start_line=start_line,
            start_col=start_col,
            end_line=end_line,
            end_col=end_col,
        )

    def _line_col(self, offset: int) -> tuple[int, int]:
        if self._line_starts is None:
            self._line_starts = [0] + [
                i + 1 for i, ch in enumerate(self.text) if ch == "\n"
            ]
        line = bisect.bisect_right(self._line_starts, offset) - 1
        return line + 1, offset - self._line_starts[line]


class TreeSitterNode(SyntaxNode):
    """Adapts a tree-sitter node to ``SyntaxNode``.

    Comment nodes are dropped from the children: comments are trivia and
    are recovered by scanning the text between nodes. A child's
    ``full_start`` is the end of its previous non-comment sibling, or its
    parent's ``full_start`` when it comes first.
    """

    __slots__ = ("raw", "source_file", "full_start", "_all_children")

    def __init__(self, raw: Node, source_file: SourceFile, full_start: int = 0):
        self.raw = raw
        self.source_file = source_file
        self.full_start = full_start
        self._all_children: list[TreeSitterNode] | None = None

    @property
    def kind(self) -> str:
        return self.raw.type

    @property
    def start(self) -> int:
        return self.source_file.char_offset(self.raw.start_byte)

    @property
    def end(self) -> int:
        return self.source_file.char_offset(self.raw.end_byte)

    @property
    def is_named(self) -> bool:
        return self.raw.is_named

    @property
    def children(self) -> Sequence[SyntaxNode]:
        return [c for c in self._wrapped_children() if c.is_named]

    def field(self, name: str) -> SyntaxNode | None:
        raw_child = self.raw.child_by_field_name(name)
        if raw_child is None:
            return None
        return next((c for c in self._wrapped_children() if c.raw == raw_child), None)

    def _wrapped_children(self) -> list[TreeSitterNode]:
        if self._all_children is None:
            wrapped: list[TreeSitterNode] = []
            previous_end = self.full_start
            for raw_child in self.raw.children:
                if raw_child.type == constants.COMMENT_NODE_TYPE:
                    continue
                child = TreeSitterNode(raw_child, self.source_file, previous_end)
                wrapped.append(child)
                previous_end = child.end
            self._all_children = wrapped
        return self._all_children

    def __repr__(self) -> str:
        return f"TreeSitterNode({self.kind}, {self.start}:{self.end})"
