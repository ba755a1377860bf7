"""Composable API functions for the translation pipeline.

Each function corresponds to a CLI workflow (translate, ``-t visualize``,
``-d``) but is callable programmatically without argparse.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from . import constants
from .diagnostics import Diagnostic, format_diagnostics
from .dispatcher import visit_tree
from .languages import get_visitor
from .options import TranslateOptions
from .otree import render_tree
from .parser import ParserFactory, parse_source, syntax_errors
from .type_oracle import DeclarationTypeOracle

logger = logging.getLogger(__name__)


@dataclass
class Translation:
    """Rendered target text plus everything reported while producing it."""

    text: str
    diagnostics: list[Diagnostic]

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)


def translate(
    source: str,
    options: TranslateOptions = TranslateOptions(),
    name: str = "<snippet>",
    parser_factory: ParserFactory | None = None,
) -> Translation:
    """Parse, visit and render *source* in one go.

    Composes: parse_source → DeclarationTypeOracle.from_tree → visit_tree →
    render_tree. Unsupported constructs never abort the translation; they
    show up in ``Translation.diagnostics``, after the syntax errors found
    while parsing.

    Args:
        source: The source code text.
        options: Source language, target visitor, fallback and render strategy.
        name: File name used in diagnostics.
        parser_factory: Parser factory override (tests inject fakes here).

    Returns:
        A Translation with the rendered text and the diagnostics.

    Raises:
        UnsupportedLanguageError: If the language or target is unknown.
    """
    logger.info("Translating %s (%s → %s)", name, options.language, options.target)
    visitor = get_visitor(options.target)
    source_file, root = parse_source(source, options.language, parser_factory, name)
    parse_diagnostics = syntax_errors(source_file, root)
    oracle = DeclarationTypeOracle.from_tree(source_file, root)

    result = visit_tree(source_file, root, visitor, options.visit_options(), oracle)
    text = render_tree(result.tree, options.render_options())
    diagnostics = parse_diagnostics + result.diagnostics
    if diagnostics:
        logger.info("%d diagnostic(s) for %s", len(diagnostics), name)
    return Translation(text=text, diagnostics=diagnostics)


def translate_source(
    source: str,
    language: str = constants.DEFAULT_SOURCE_LANGUAGE,
    target: str = constants.DEFAULT_TARGET,
    best_effort: bool = True,
) -> str:
    """Translate source text and return only the rendered target text.

    Args:
        source: The source code text.
        language: Source language name (tree-sitter grammar).
        target: Target visitor name (e.g. "python", "default").
        best_effort: Copy unsupported syntax verbatim instead of a placeholder.

    Returns:
        The rendered target text.
    """
    options = TranslateOptions(language=language, target=target, best_effort=best_effort)
    return translate(source, options).text


def translate_typescript(source: str, target: str = constants.DEFAULT_TARGET) -> str:
    """Translate a TypeScript snippet to *target*."""
    return translate_source(source, constants.DEFAULT_SOURCE_LANGUAGE, target)


def visualize_source(
    source: str,
    language: str = constants.DEFAULT_SOURCE_LANGUAGE,
) -> str:
    """Return the syntax tree of *source* as a ``(kind text ...)`` listing.

    Args:
        source: The source code text.
        language: Source language name.

    Returns:
        One line per node, children indented under their parent.
    """
    options = TranslateOptions(language=language, target=constants.VISITOR_VISUALIZE)
    return translate(source, options).text


def dump_diagnostics(
    source: str,
    language: str = constants.DEFAULT_SOURCE_LANGUAGE,
    target: str = constants.DEFAULT_TARGET,
) -> str:
    """Translate *source* and return its diagnostics, one per line."""
    options = TranslateOptions(language=language, target=target)
    return format_diagnostics(translate(source, options).diagnostics)
