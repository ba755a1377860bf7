"""Tree-Sitter Parsing Layer."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from . import constants
from .diagnostics import Diagnostic
from .errors import UnsupportedLanguageError
from .syntax import SourceFile, TreeSitterNode

logger = logging.getLogger(__name__)


class ParserFactory(ABC):
    """Abstract factory for obtaining a language parser."""

    @abstractmethod
    def get_parser(self, language: str): ...


class TreeSitterParserFactory(ParserFactory):
    """Concrete factory that delegates to tree-sitter-language-pack."""

    def get_parser(self, language: str):
        import tree_sitter_language_pack as tslp

        try:
            return tslp.get_parser(language)
        except (LookupError, ValueError) as exc:
            raise UnsupportedLanguageError(
                f"No tree-sitter grammar for language: {language}"
            ) from exc


class Parser:
    """Thin wrapper around a parser factory."""

    def __init__(self, parser_factory: ParserFactory):
        self._factory = parser_factory

    def parse(self, source: str, language: str):
        parser = self._factory.get_parser(language)
        tree = parser.parse(source.encode("utf-8"))
        return tree


def parse_source(
    source: str,
    language: str,
    parser_factory: ParserFactory | None = None,
    name: str = "<snippet>",
) -> tuple[SourceFile, TreeSitterNode]:
    """Parse *source* and return it as a ``SourceFile`` plus the adapted root node."""
    logger.debug("Parsing %d characters of %s", len(source), language)
    tree = Parser(parser_factory or TreeSitterParserFactory()).parse(source, language)
    source_file = SourceFile(source, name=name)
    return source_file, TreeSitterNode(tree.root_node, source_file, full_start=0)


def syntax_errors(source_file: SourceFile, root: TreeSitterNode) -> list[Diagnostic]:
    """Report the ``ERROR`` and ``MISSING`` nodes tree-sitter recovered from.

    Error recovery always yields a tree; without this check a syntax error
    would be translated as if the recovered tree were the input.
    """
    if not root.raw.has_error:
        return []

    diagnostics: list[Diagnostic] = []
    stack = [root.raw]
    while stack:
        raw = stack.pop()
        if raw.is_missing:
            message = constants.MISSING_TOKEN_MESSAGE_TEMPLATE.format(token=raw.type)
            kind = constants.MISSING_NODE_KIND
        elif raw.is_error:
            message = constants.SYNTAX_ERROR_MESSAGE
            kind = constants.ERROR_NODE_TYPE
        else:
            stack.extend(reversed([c for c in raw.children if c.has_error or c.is_missing]))
            continue
        start = source_file.char_offset(raw.start_byte)
        end = source_file.char_offset(raw.end_byte)
        logger.warning("%s in %s at %s", message, source_file.name, source_file.location(start, end))
        diagnostics.append(
            Diagnostic(
                node_kind=kind,
                message=message,
                start=start,
                end=end,
                location=source_file.location(start, end),
            )
        )
    return diagnostics
