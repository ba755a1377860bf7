"""Named constants — eliminates magic strings across the codebase."""

from __future__ import annotations

DEFAULT_SOURCE_LANGUAGE = "typescript"
DEFAULT_TARGET = "python"

LINE_COMMENT_MARKER = "//"
BLOCK_COMMENT_OPEN = "/*"
BLOCK_COMMENT_CLOSE = "*/"

WHITESPACE_CHARS = frozenset({" ", "\t", "\r", "\n", "\f", "\v"})

TRIVIA_KEY_PREFIX = "trivia-"
WHITESPACE_KEY_PREFIX = "ws-"

PLACEHOLDER_INDENT = 2
BLOCK_INDENT = 4

COMMENT_NODE_TYPE = "comment"

UNSUPPORTED_MESSAGE_TEMPLATE = (
    "This language feature ({kind}) is not supported in examples because "
    "it cannot be translated. Please rewrite this example."
)

HIDE_DIRECTIVE = "hide"
SHOW_DIRECTIVE = "show"

VISITOR_PYTHON = "python"
VISITOR_DEFAULT = "default"
VISITOR_VISUALIZE = "visualize"

ERROR_NODE_TYPE = "ERROR"
MISSING_NODE_KIND = "MISSING"
SYNTAX_ERROR_MESSAGE = "Syntax error: this code could not be parsed"
MISSING_TOKEN_MESSAGE_TEMPLATE = "Syntax error: missing {token!r}"
