"""Layout helpers shared by visitors: newline preservation and statement lists."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Sequence

from . import constants
from .otree import OTree
from .syntax import SyntaxKind, SyntaxNode
from .trivia import contains_newline, repeat_newlines

if TYPE_CHECKING:
    from .dispatcher import AstContext

_DIRECTIVE_RE = re.compile(r"void\s+(['\"])(\w+)\1\s*;?")
_ARGUMENT_DIRECTIVE_RE = re.compile(r"\(\s*void\s+(['\"])(\w+)\1\s*,")


def statement_separator(blank_lines: int) -> str:
    """Line break between two statements; runs of blank lines collapse to one."""
    return "\n\n" if blank_lines > 0 else "\n"


def hiding_directive(node: SyntaxNode, context: AstContext) -> str | None:
    """Return ``"hide"`` / ``"show"`` for a hiding directive, else None.

    Statements are directives when they read ``void 'hide';``. Arguments
    are directives when they read ``(void 'hide', expr)``.
    """
    if node.kind == SyntaxKind.EXPRESSION_STATEMENT:
        match = _DIRECTIVE_RE.fullmatch(context.text_of(node).strip())
    elif node.kind == SyntaxKind.PARENTHESIZED_EXPRESSION:
        match = _ARGUMENT_DIRECTIVE_RE.match(context.text_of(node))
    else:
        return None
    if match is None or match.group(2) not in (
        constants.HIDE_DIRECTIVE,
        constants.SHOW_DIRECTIVE,
    ):
        return None
    return match.group(2)


def visible_nodes(nodes: Iterable[SyntaxNode], context: AstContext) -> list[SyntaxNode]:
    """Drop hiding directives and the nodes they hide.

    Hiding lasts until a ``show`` directive or the end of the list.
    """
    return [node for node, visible in _classify(nodes, context) if visible]


def _classify(
    nodes: Iterable[SyntaxNode], context: AstContext
) -> Iterator[tuple[SyntaxNode, bool]]:
    hidden = False
    for node in nodes:
        directive = hiding_directive(node, context)
        if directive is not None:
            hidden = directive == constants.HIDE_DIRECTIVE
            yield node, False
        else:
            yield node, not hidden


def convert_statements(
    nodes: Iterable[SyntaxNode],
    context: AstContext,
    context_update=None,
    separator_for: Callable[[SyntaxNode, SyntaxNode, int], str] | None = None,
) -> list[OTree]:
    """Convert a statement list, separating statements by their source blank lines.

    Blank lines are counted from the last statement written or hidden, so a
    hidden region does not leave a gap behind. ``separator_for(previous,
    node, blank_lines)`` overrides the default separator, for targets with
    their own conventions around definitions.
    """
    ret: list[OTree] = []
    previous: SyntaxNode | None = None
    anchor: SyntaxNode | None = None
    for node, visible in _classify(nodes, context):
        if not visible:
            anchor = node
            continue
        converted = context.convert(node, context_update)
        if converted.is_empty:
            continue
        if previous is None or anchor is None:
            ret.append(converted)
        else:
            blank_lines = context.blank_lines_between(anchor, node)
            if separator_for is not None:
                separator = separator_for(previous, node, blank_lines)
            else:
                separator = statement_separator(blank_lines)
            ret.append(OTree([separator, converted]))
        previous = anchor = node
    return ret


def preserve_separating_newlines(
    rendered: Sequence[OTree | str],
    source_nodes: Sequence[SyntaxNode],
    context: AstContext,
) -> list[OTree | str]:
    """Insert a line break wherever two consecutive source nodes were on different lines."""
    ret: list[OTree | str] = []
    last_node: SyntaxNode | None = None
    for index, rend in enumerate(rendered):
        node = source_nodes[index] if index < len(source_nodes) else None
        if last_node is not None and node is not None and contains_newline(
            context.text_between(last_node, node)
        ):
            ret.append("\n")
        last_node = node
        ret.append(rend)
    return ret


def convert_children_with_newlines(
    parent_node: SyntaxNode,
    child_nodes: Sequence[SyntaxNode],
    context: AstContext,
    context_update=None,
    prefix: str = "",
    suffix: str = "",
    indent: int = 0,
    separator: str = ", ",
) -> OTree:
    """Convert children of *parent_node*, reproducing the line breaks between them."""
    initial_newlines = (
        repeat_newlines(context.text_from_to(parent_node, child_nodes[0]))
        if child_nodes
        else ""
    )

    ret: list[OTree] = []
    separators = initial_newlines
    last_node: SyntaxNode | None = None
    for node in child_nodes:
        converted = context.convert(node, context_update)
        if last_node is not None:
            separators = repeat_newlines(context.text_between(last_node, node))
        last_node = node
        ret.append(OTree([separators, converted]) if separators else converted)

    return OTree(
        [prefix],
        ret,
        indent=indent,
        # As a general rule, if you can insert newlines you can attach comments
        attach_comment=True,
        separator=separator,
        suffix=("\n" if initial_newlines else "") + suffix,
    )
