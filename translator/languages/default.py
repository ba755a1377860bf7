"""DefaultVisitor — a basic visitor that applies for most curly-braces-based languages."""

from __future__ import annotations

from typing import TypeVar

from .. import constants
from ..dispatcher import AstContext
from ..layout import convert_children_with_newlines, convert_statements, visible_nodes
from ..otree import NO_SYNTAX, OTree
from ..syntax import SyntaxNode
from ..trivia import TriviaKind, TriviaSpan
from ..visitor import AstVisitor

C = TypeVar("C")


def string_value(literal_text: str) -> str:
    """Contents of a quoted string literal, with the quote escapes undone."""
    if len(literal_text) < 2:
        return literal_text
    quote, inner = literal_text[0], literal_text[1:-1]
    return inner.replace("\\" + quote, quote)


def double_quoted(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


class DefaultVisitor(AstVisitor[C]):
    STATEMENT_TERMINATOR: str = ";"

    def comment_range(self, span: TriviaSpan, context: AstContext) -> OTree:
        return OTree(
            [
                context.text_at(span.start, span.end),
                "\n" if span.has_trailing_newline else "",
            ]
        )

    def program(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([], convert_statements(node.children, context))

    def expression_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        if not node.children:
            return NO_SYNTAX
        return OTree(
            [context.convert(node.children[0]), self.STATEMENT_TERMINATOR], attach_comment=True
        )

    def block(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            ["{"],
            convert_statements(node.children, context),
            newline=True,
            indent=constants.BLOCK_INDENT,
            suffix="\n}",
        )

    def return_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        if not node.children:
            return OTree(["return", self.STATEMENT_TERMINATOR], attach_comment=True)
        return OTree(
            ["return ", context.convert(node.children[0]), self.STATEMENT_TERMINATOR],
            attach_comment=True,
        )

    def binary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        operator = node.field("operator")
        return OTree(
            [
                context.convert(node.field("left")),
                " ",
                context.text_of(operator) if operator is not None else "?",
                " ",
                context.convert(node.field("right")),
            ]
        )

    def unary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        operator = node.field("operator")
        return OTree(
            [
                context.text_of(operator) if operator is not None else "",
                context.convert(node.field("argument")),
            ]
        )

    def property_access_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.field("object")),
                ".",
                context.convert(node.field("property")),
            ]
        )

    def call_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [
                context.convert(node.field("function")),
                "(",
                context.convert(node.field("arguments")),
                ")",
            ]
        )

    def arguments(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([], context.convert_all(visible_nodes(node.children, context)), separator=", ")

    def parenthesized_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(["(", context.convert_all(node.children)[0] if node.children else "", ")"])

    def variable_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        # Declarations are copied; only comments and layout are of interest here
        return OTree([context.text_of(node)], attach_comment=True)

    def array_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return convert_children_with_newlines(
            node,
            node.children,
            context,
            prefix="[",
            suffix="]",
            indent=constants.BLOCK_INDENT,
        )

    def spread_element(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(["...", context.convert_all(node.children)[0] if node.children else ""])

    def non_null_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        # Non-null assertions are dropped
        return context.convert(node.children[0]) if node.children else NO_SYNTAX

    def as_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return context.convert(node.children[0]) if node.children else NO_SYNTAX

    def string_literal(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([double_quoted(string_value(context.text_of(node)))])

    def literal(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([context.text_of(node)])

    def keyword(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([context.text_of(node)])

    def identifier(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([context.text_of(node)])

    def shorthand_property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([context.text_of(node)])

    def type_annotation(self, node: SyntaxNode, context: AstContext) -> OTree:
        return NO_SYNTAX


class CurlyBracesVisitor(DefaultVisitor[None]):
    """Stateless default visitor, usable as-is."""

    default_context = None

    def merge_context(self, old: None, update: None) -> None:
        return None


def is_block_comment(span: TriviaSpan) -> bool:
    return span.kind == TriviaKind.BLOCK_COMMENT
