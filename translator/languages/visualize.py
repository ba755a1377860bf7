"""Renders the syntax tree itself, for debugging handlers."""

from __future__ import annotations

from ..dispatcher import HANDLER_NAMES, AstContext
from ..otree import OTree
from ..syntax import SyntaxKind, SyntaxNode
from ..trivia import TriviaSpan
from ..visitor import AstVisitor, nimpl


class VisualizeVisitor(AstVisitor[None]):
    """Prints every node as ``(kind {handler} text ...)``.

    Every handler of ``AstVisitor`` falls back to ``not_implemented``, so
    overriding it (and ``program``, which converts its children directly)
    is enough to visualise every kind in the dispatch table without
    reporting it.
    ``include_handler_names`` adds the handler each node dispatches to.
    """

    default_context = None

    def __init__(self, include_handler_names: bool = False):
        self.include_handler_names = include_handler_names

    def merge_context(self, old: None, update: None) -> None:
        return None

    def comment_range(self, span: TriviaSpan, context: AstContext) -> OTree:
        return OTree(["(Comment ", context.text_at(span.start, span.end), ")\n"])

    def not_implemented(self, node: SyntaxNode, context: AstContext) -> OTree:
        return OTree(
            [nimpl(node, context, self._handler_info(node))],
            attach_comment=True,
        )

    def program(self, node: SyntaxNode, context: AstContext) -> OTree:
        return self.not_implemented(node, context)

    def _handler_info(self, node: SyntaxNode) -> str:
        if not self.include_handler_names:
            return ""
        kind = SyntaxKind.lookup(node.kind)
        return HANDLER_NAMES.get(kind, "") if kind is not None else ""
