"""The per-kind handler table a backend implements."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Generic, TypeVar

from . import constants
from .otree import OTree, UnknownSyntax
from .syntax import SyntaxNode
from .trivia import TriviaSpan

if TYPE_CHECKING:
    from .dispatcher import AstContext

C = TypeVar("C")


def nimpl(node: SyntaxNode, context: AstContext, additional_info: str = "") -> OTree:
    """Placeholder rendering ``(kind {info} text ...)`` with converted children."""
    children = [context.convert(c) for c in node.children]

    parts = [f"({node.kind}"]
    if additional_info:
        parts.append(f"{{{additional_info}}}")
    parts.append(context.text_of(node))

    return UnknownSyntax(
        [" ".join(parts)],
        ["\n", *children] if children else [],
        indent=constants.PLACEHOLDER_INDENT,
        suffix=")",
        separator="\n",
    )


class AstVisitor(ABC, Generic[C]):
    """Backend interface: one handler per dispatch-table entry.

    Handlers receive the syntax node and the ``AstContext`` of the running
    visit, and return an ``OTree``. Every handler defaults to
    ``not_implemented``, which reports the node and renders a placeholder.
    """

    @property
    @abstractmethod
    def default_context(self) -> C: ...

    @abstractmethod
    def merge_context(self, old: C, update: C) -> C: ...

    @abstractmethod
    def comment_range(self, span: TriviaSpan, context: AstContext) -> OTree: ...

    def not_implemented(self, node: SyntaxNode, context: AstContext) -> OTree:
        context.report_unsupported(node)
        return nimpl(node, context)

    # ── statements ───────────────────────────────────────────────

    def program(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree([], context.convert_all(node.children))

    def expression_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def block(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def return_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def if_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def else_clause(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def for_of_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def import_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def variable_statement(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def variable_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    # ── declarations ─────────────────────────────────────────────

    def function_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def parameter_list(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def parameter_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def class_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def class_body(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def method_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def property_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def interface_declaration(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def property_signature(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    # ── expressions ──────────────────────────────────────────────

    def call_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def new_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def arguments(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def property_access_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def binary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def unary_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def parenthesized_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def as_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def non_null_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def object_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def array_literal_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def spread_element(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def template_expression(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    # ── leaves ───────────────────────────────────────────────────

    def string_literal(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def literal(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def keyword(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def identifier(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def shorthand_property_assignment(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def type_annotation(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)
