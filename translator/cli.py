"""Command-line entry point: translate a source snippet and print the result."""

from __future__ import annotations

import argparse
import logging
import sys

from . import constants
from .api import translate
from .diagnostics import format_diagnostics
from .errors import UnsupportedLanguageError
from .languages import SUPPORTED_VISITORS
from .options import TranslateOptions, TraversalStrategy

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Translate source snippets between languages"
    )
    parser.add_argument("file", nargs="?",
                        help="Source file to translate (default: stdin)")
    parser.add_argument("--language", "-l", default=constants.DEFAULT_SOURCE_LANGUAGE,
                        help="Source language (default: typescript)")
    parser.add_argument("--target", "-t", default=constants.DEFAULT_TARGET,
                        choices=sorted(SUPPORTED_VISITORS),
                        help="Target visitor (default: python)")
    parser.add_argument("--strict", action="store_true",
                        help="Render unsupported syntax as placeholders instead of copying it")
    parser.add_argument("--worklist", action="store_true",
                        help="Render with an explicit stack instead of recursion")
    parser.add_argument("--recursion-limit", type=int, default=None,
                        help="Raise the recursion limit while visiting deep trees")
    parser.add_argument("--diagnostics", "-d", action="store_true",
                        help="Print diagnostics to stderr")
    parser.add_argument("--fail-on-error", action="store_true",
                        help="Exit with status 1 if any error diagnostic was reported")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.file:
        with open(args.file, encoding="utf-8") as f:
            source = f.read()
        name = args.file
    else:
        source = sys.stdin.read()
        name = "<stdin>"

    options = TranslateOptions(
        language=args.language,
        target=args.target,
        best_effort=not args.strict,
        strategy=TraversalStrategy.WORKLIST if args.worklist else TraversalStrategy.RECURSIVE,
        recursion_limit=args.recursion_limit,
    )
    try:
        translation = translate(source, options, name=name)
    except UnsupportedLanguageError as exc:
        logger.error("%s", exc)
        return 2

    sys.stdout.write(translation.text)
    if not translation.text.endswith("\n"):
        sys.stdout.write("\n")

    if args.diagnostics and translation.diagnostics:
        print(format_diagnostics(translation.diagnostics), file=sys.stderr)

    if args.fail_on_error and translation.has_errors:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
