"""Dispatcher — recursive syntax-tree walk that drives a visitor."""

from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, TypeVar

from . import constants
from .context_stack import ContextStack
from .diagnostics import Diagnostic, DiagnosticsCollector, Severity
from .errors import ContextStackError
from .options import VisitOptions
from .otree import NO_SYNTAX, OTree, UnknownSyntax
from .syntax import SourceFile, SyntaxKind, SyntaxNode
from .trivia import TriviaKind, count_naked_newlines, count_newlines, scan_text
from .type_oracle import NullTypeOracle, TypeInfo, TypeOracle
from .visitor import AstVisitor

logger = logging.getLogger(__name__)

C = TypeVar("C")

# Handler method on AstVisitor for every known node kind.
HANDLER_NAMES: dict[SyntaxKind, str] = {
    SyntaxKind.PROGRAM: "program",
    SyntaxKind.EXPRESSION_STATEMENT: "expression_statement",
    SyntaxKind.STATEMENT_BLOCK: "block",
    SyntaxKind.RETURN_STATEMENT: "return_statement",
    SyntaxKind.IF_STATEMENT: "if_statement",
    SyntaxKind.ELSE_CLAUSE: "else_clause",
    SyntaxKind.FOR_IN_STATEMENT: "for_of_statement",
    SyntaxKind.IMPORT_STATEMENT: "import_statement",
    SyntaxKind.LEXICAL_DECLARATION: "variable_statement",
    SyntaxKind.VARIABLE_DECLARATION: "variable_statement",
    SyntaxKind.VARIABLE_DECLARATOR: "variable_declaration",
    SyntaxKind.FUNCTION_DECLARATION: "function_declaration",
    SyntaxKind.FORMAL_PARAMETERS: "parameter_list",
    SyntaxKind.REQUIRED_PARAMETER: "parameter_declaration",
    SyntaxKind.OPTIONAL_PARAMETER: "parameter_declaration",
    SyntaxKind.CLASS_DECLARATION: "class_declaration",
    SyntaxKind.CLASS_BODY: "class_body",
    SyntaxKind.METHOD_DEFINITION: "method_declaration",
    SyntaxKind.PUBLIC_FIELD_DEFINITION: "property_declaration",
    SyntaxKind.INTERFACE_DECLARATION: "interface_declaration",
    SyntaxKind.PROPERTY_SIGNATURE: "property_signature",
    SyntaxKind.CALL_EXPRESSION: "call_expression",
    SyntaxKind.NEW_EXPRESSION: "new_expression",
    SyntaxKind.ARGUMENTS: "arguments",
    SyntaxKind.MEMBER_EXPRESSION: "property_access_expression",
    SyntaxKind.BINARY_EXPRESSION: "binary_expression",
    SyntaxKind.UNARY_EXPRESSION: "unary_expression",
    SyntaxKind.PARENTHESIZED_EXPRESSION: "parenthesized_expression",
    SyntaxKind.AS_EXPRESSION: "as_expression",
    SyntaxKind.NON_NULL_EXPRESSION: "non_null_expression",
    SyntaxKind.OBJECT: "object_literal_expression",
    SyntaxKind.PAIR: "property_assignment",
    SyntaxKind.ARRAY: "array_literal_expression",
    SyntaxKind.SPREAD_ELEMENT: "spread_element",
    SyntaxKind.TEMPLATE_STRING: "template_expression",
    SyntaxKind.STRING: "string_literal",
    SyntaxKind.NUMBER: "literal",
    SyntaxKind.TRUE: "literal",
    SyntaxKind.FALSE: "literal",
    SyntaxKind.NULL: "literal",
    SyntaxKind.UNDEFINED: "literal",
    SyntaxKind.THIS: "keyword",
    SyntaxKind.SUPER: "keyword",
    SyntaxKind.IDENTIFIER: "identifier",
    SyntaxKind.PROPERTY_IDENTIFIER: "identifier",
    SyntaxKind.TYPE_IDENTIFIER: "identifier",
    SyntaxKind.SHORTHAND_PROPERTY_IDENTIFIER: "shorthand_property_assignment",
    SyntaxKind.TYPE_ANNOTATION: "type_annotation",
}


@dataclass
class TranslateResult:
    tree: OTree
    diagnostics: list[Diagnostic]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)


class AstContext(Generic[C]):
    """Services a handler may use while converting its node."""

    def __init__(self, dispatcher: Dispatcher[C]):
        self._dispatcher = dispatcher

    @property
    def current_context(self) -> C:
        return self._dispatcher.context_stack.top

    @property
    def source_file(self) -> SourceFile:
        return self._dispatcher.source_file

    @property
    def type_oracle(self) -> TypeOracle:
        return self._dispatcher.type_oracle

    # ── conversion ───────────────────────────────────────────────

    def convert(self, node: SyntaxNode | None, context_update: C | None = None) -> OTree:
        if node is None:
            return NO_SYNTAX
        with self._dispatcher.context_stack.scoped(context_update):
            return self._dispatcher.recurse(node)

    def convert_all(
        self, nodes: Iterable[SyntaxNode], context_update: C | None = None
    ) -> list[OTree]:
        with self._dispatcher.context_stack.scoped(context_update):
            return [self._dispatcher.recurse(n) for n in nodes]

    # ── source text ──────────────────────────────────────────────

    def text_of(self, node: SyntaxNode) -> str:
        return self.source_file.text_at(node.start, node.end)

    def text_at(self, start: int, end: int) -> str:
        return self.source_file.text_at(start, end)

    def text_between(self, node1: SyntaxNode, node2: SyntaxNode) -> str:
        return self.source_file.text_at(node1.end, node2.start)

    def text_from_to(self, node1: SyntaxNode, node2: SyntaxNode) -> str:
        return self.source_file.text_at(node1.start, node2.start)

    def separating_span(self, node1: SyntaxNode, node2: SyntaxNode) -> str:
        """Text after the line *node1* ends on, up to *node2* or its first leading comment."""
        text = self.source_file.text
        line_end = text.find("\n", node1.end, node2.start)
        if line_end == -1:
            return ""
        stop = node2.start
        for span in scan_text(text, line_end + 1, node2.start):
            if span.is_comment:
                stop = span.start
                break
        return text[line_end + 1 : stop]

    def blank_lines_between(self, node1: SyntaxNode, node2: SyntaxNode) -> int:
        return count_naked_newlines(self.separating_span(node1, node2))

    # ── diagnostics ──────────────────────────────────────────────

    def report(
        self, node: SyntaxNode, message: str, severity: Severity = Severity.ERROR
    ) -> None:
        self._dispatcher.diagnostics.add(
            Diagnostic(
                node_kind=node.kind,
                message=message,
                severity=severity,
                start=node.start,
                end=node.end,
                location=self.source_file.location(node.start, node.end),
            )
        )

    def report_unsupported(self, node: SyntaxNode) -> None:
        logger.warning("Unsupported construct %s at offset %d", node.kind, node.start)
        self.report(node, constants.UNSUPPORTED_MESSAGE_TEMPLATE.format(kind=node.kind))

    # ── trivia ───────────────────────────────────────────────────

    def attach_leading_trivia(self, node: SyntaxNode, transformed: OTree) -> OTree:
        """Prefix *transformed* with the comments found before *node*.

        Blank lines between a comment and what follows it are kept. Blank
        lines before the first comment belong to the enclosing statement
        separator and are left out.
        """
        text = self.source_file.text
        precede: list[OTree] = []
        previous = None
        for span in scan_text(text, node.full_start, node.start):
            if span.is_comment:
                precede.append(self._dispatcher.visitor.comment_range(span, self))
            elif previous is not None:
                newlines = count_newlines(span.text_in(text))
                if previous.kind == TriviaKind.BLOCK_COMMENT and previous.has_trailing_newline:
                    newlines -= 1
                if newlines > 0:
                    precede.append(
                        OTree(
                            ["\n" * newlines],
                            render_once=f"{constants.WHITESPACE_KEY_PREFIX}{span.start}",
                        )
                    )
            if span.is_comment:
                previous = span

        if not precede or transformed.is_empty:
            return transformed
        trivia = OTree(
            precede,
            render_once=f"{constants.TRIVIA_KEY_PREFIX}{node.full_start}",
        )
        return OTree([trivia, transformed])

    # ── types ────────────────────────────────────────────────────

    def type_of_expression(self, node: SyntaxNode) -> TypeInfo | None:
        return self.type_oracle.type_of_expression(node)

    def type_of_type(self, node: SyntaxNode) -> TypeInfo | None:
        return self.type_oracle.type_of_type(node)


class Dispatcher(Generic[C]):
    """Owns the state of one visit: context stack, diagnostics and the handler lookup."""

    def __init__(
        self,
        source_file: SourceFile,
        visitor: AstVisitor[C],
        options: VisitOptions = VisitOptions(),
        type_oracle: TypeOracle | None = None,
    ):
        self.source_file = source_file
        self.visitor = visitor
        self.options = options
        self.type_oracle = type_oracle or NullTypeOracle()
        self.context_stack: ContextStack[C] = ContextStack(
            visitor.default_context, visitor.merge_context
        )
        self.diagnostics = DiagnosticsCollector()
        self.context: AstContext[C] = AstContext(self)

    def visit(self, root: SyntaxNode) -> TranslateResult:
        with _recursion_limit(self.options.recursion_limit):
            tree = self.recurse(root)
        if self.context_stack.depth != 0:
            raise ContextStackError(
                f"Context stack left at depth {self.context_stack.depth} after visit"
            )
        return TranslateResult(tree=tree, diagnostics=self.diagnostics.to_list())

    def recurse(self, node: SyntaxNode) -> OTree:
        transformed = self.transform(node)
        if not transformed.attach_comment:
            return transformed
        return self.context.attach_leading_trivia(node, transformed)

    def transform(self, node: SyntaxNode) -> OTree:
        if node.kind == SyntaxKind.EMPTY_STATEMENT:
            return NO_SYNTAX

        kind = SyntaxKind.lookup(node.kind)
        if kind is not None and kind in HANDLER_NAMES:
            handler = getattr(self.visitor, HANDLER_NAMES[kind])
            return handler(node, self.context)

        if node.kind != constants.ERROR_NODE_TYPE:
            # Parse errors are reported once, before the visit
            self.context.report_unsupported(node)
        if self.options.best_effort:
            # Unknown syntax is copied through as-is
            return OTree([self.context.text_of(node)])

        logger.debug("Rendering placeholder for %s", node.kind)
        return UnknownSyntax(
            [f"<{node.kind} {self.context.text_of(node)}>"],
            ["\n", *[self.recurse(c) for c in node.children]],
            indent=constants.PLACEHOLDER_INDENT,
        )


@contextmanager
def _recursion_limit(limit: int | None) -> Iterator[None]:
    if limit is None:
        yield
        return
    previous = sys.getrecursionlimit()
    sys.setrecursionlimit(max(limit, previous))
    try:
        yield
    finally:
        sys.setrecursionlimit(previous)


def visit_tree(
    source_file: SourceFile,
    root: SyntaxNode,
    visitor: AstVisitor[C],
    options: VisitOptions = VisitOptions(),
    type_oracle: TypeOracle | None = None,
) -> TranslateResult:
    """Convert *root* with *visitor* into a single output tree plus diagnostics."""
    return Dispatcher(source_file, visitor, options, type_oracle).visit(root)
