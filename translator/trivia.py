"""Whitespace and comments between meaningful tokens."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from . import constants


class TriviaKind(str, Enum):
    TEXT = "text"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"


class TriviaSpan(BaseModel):
    """A classified range of source text produced by ``scan_text``."""

    model_config = ConfigDict(frozen=True)

    kind: TriviaKind
    start: int
    end: int
    has_trailing_newline: bool = False

    @property
    def is_comment(self) -> bool:
        return self.kind != TriviaKind.TEXT

    def text_in(self, source: str) -> str:
        return source[self.start : self.end]


@dataclass(frozen=True)
class CommentSyntax:
    """Comment markers of the source language."""

    line: str = constants.LINE_COMMENT_MARKER
    block_open: str = constants.BLOCK_COMMENT_OPEN
    block_close: str = constants.BLOCK_COMMENT_CLOSE


TYPESCRIPT_COMMENTS = CommentSyntax()


def scan_text(
    text: str,
    start: int,
    end: int | None = None,
    syntax: CommentSyntax = TYPESCRIPT_COMMENTS,
) -> list[TriviaSpan]:
    """Classify ``text[start:end]`` into text, line-comment and block-comment spans.

    Without ``end`` the scan stops at the first character that is neither
    whitespace nor the start of a comment (the leading trivia of a node).
    With ``end`` the whole range is classified and anything outside a
    comment is reported as text.

    The scanner is total: an unterminated comment runs to the end of the
    scanned range.
    """
    bounded = end is not None
    limit = len(text) if end is None else min(end, len(text))
    spans: list[TriviaSpan] = []
    text_start = -1
    pos = start

    def flush_text(upto: int) -> None:
        nonlocal text_start
        if text_start != -1 and upto > text_start:
            spans.append(TriviaSpan(kind=TriviaKind.TEXT, start=text_start, end=upto))
        text_start = -1

    while pos < limit:
        if text.startswith(syntax.line, pos):
            flush_text(pos)
            nl = _find_next(text, "\n", pos + len(syntax.line), limit)
            comment_end = nl
            if comment_end > pos and text[comment_end - 1] == "\r":
                comment_end -= 1
            spans.append(
                TriviaSpan(
                    kind=TriviaKind.LINE_COMMENT,
                    start=pos,
                    end=comment_end,
                    has_trailing_newline=nl < limit,
                )
            )
            # The line break belongs to the comment
            pos = nl + 1
            continue

        if text.startswith(syntax.block_open, pos):
            flush_text(pos)
            close = _find_next(text, syntax.block_close, pos + len(syntax.block_open), limit)
            comment_end = min(close + len(syntax.block_close), limit)
            spans.append(
                TriviaSpan(
                    kind=TriviaKind.BLOCK_COMMENT,
                    start=pos,
                    end=comment_end,
                    has_trailing_newline=comment_end < limit
                    and text[comment_end] in ("\n", "\r"),
                )
            )
            pos = comment_end
            continue

        if text[pos] not in constants.WHITESPACE_CHARS and not bounded:
            break

        if text_start == -1:
            text_start = pos
        pos += 1

    flush_text(min(pos, limit))
    return spans


def _find_next(text: str, needle: str, start: int, limit: int) -> int:
    found = text.find(needle, start, limit)
    return limit if found == -1 else found


def count_naked_newlines(text: str, syntax: CommentSyntax = TYPESCRIPT_COMMENTS) -> int:
    """Count line breaks outside of comments.

    A block comment directly followed by a line break discounts one newline,
    since that break ends the line the comment itself sits on.
    """
    count = 0
    for span in scan_text(text, 0, len(text), syntax):
        if span.kind == TriviaKind.TEXT:
            count += count_newlines(span.text_in(text))
        elif span.kind == TriviaKind.BLOCK_COMMENT and span.has_trailing_newline:
            count -= 1
    return max(count, 0)


def count_newlines(text: str) -> int:
    return text.count("\n")


def repeat_newlines(text: str) -> str:
    return "\n" * count_newlines(text)


def contains_newline(text: str) -> bool:
    return "\n" in text


_BLOCK_OPEN_RE = re.compile(r"^\s*/\*+ ?", re.MULTILINE)
_BLOCK_CLOSE_RE = re.compile(r"\s*\*/\s*$", re.MULTILINE)
_BLOCK_STAR_RE = re.compile(r"^\s*\* ?", re.MULTILINE)
_LINE_RE = re.compile(r"^\s*// ?", re.MULTILINE)


def strip_comment_markers(comment: str, multiline: bool) -> str:
    """Remove ``//``, ``/* */`` and leading `` * `` markers from a comment."""
    if multiline:
        stripped = _BLOCK_OPEN_RE.sub("", comment)
        stripped = _BLOCK_CLOSE_RE.sub("", stripped)
        return _BLOCK_STAR_RE.sub("", stripped)
    return _LINE_RE.sub("", comment)
