"""Output tree — the intermediate representation of generated text, and its render sink."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable, Union

from .options import RenderOptions, TraversalStrategy

Element = Union["OTree", str]


@dataclass(frozen=True)
class OTreeOptions:
    """Layout directives of a single output tree node.

    ``newline`` writes a line break after the prefix, subject to the new
    indentation. ``render_once`` is a key: of all nodes carrying the same
    key, only the first one met in pre-order is rendered.
    """

    indent: int = 0
    newline: bool = False
    separator: str | None = None
    suffix: str | None = None
    render_once: str | None = None
    attach_comment: bool = False


_NO_OPTIONS = OTreeOptions()


class OTree:
    """Immutable n-ary tree of text fragments with layout directives."""

    __slots__ = ("prefix", "children", "options")

    def __init__(
        self,
        prefix: Iterable[Element | None],
        children: Iterable[Element | None] | None = None,
        options: OTreeOptions | None = None,
        **kwargs,
    ):
        if options is None:
            options = OTreeOptions(**kwargs) if kwargs else _NO_OPTIONS
        self.prefix: tuple[Element, ...] = simplify(prefix)
        self.children: tuple[Element, ...] = simplify(children or ())
        self.options: OTreeOptions = options

    @property
    def attach_comment(self) -> bool:
        return self.options.attach_comment

    @property
    def is_empty(self) -> bool:
        return not self.prefix and not self.children

    def write(self, sink: OTreeSink) -> None:
        for step in self.steps(sink):
            sink.perform(step)

    def steps(self, sink: OTreeSink) -> list[Step]:
        """Return the ordered rendering steps of this node against *sink*.

        Elements are text or subtrees to write; callables mutate sink state
        (indentation, separator marks) at the moment they are reached.
        """
        opts = self.options
        if not sink.tag_once(opts.render_once):
            return []

        steps: list[Step] = list(self.prefix)
        pop_indent: list[Callable[[], None]] = []
        mark: list[SinkMark] = []

        def open_children() -> None:
            pop_indent.append(sink.request_indent_change(opts.indent))
            if opts.newline:
                sink.newline()
            mark.append(sink.mark())

        def before_child(child: Element) -> None:
            # A child whose render-once key already fired produces nothing
            if isinstance(child, OTree) and sink.already_rendered(child.options.render_once):
                return
            if opts.separator and mark[-1].wrote_non_whitespace_since_mark:
                sink.write(opts.separator)
            mark.append(sink.mark())

        steps.append(open_children)
        for child in self.children:
            steps.append(partial(before_child, child))
            steps.append(child)
        steps.append(lambda: pop_indent.pop()())
        if opts.suffix:
            steps.append(opts.suffix)
        return steps

    def __repr__(self) -> str:
        return f"OTree(prefix={list(self.prefix)!r}, children={list(self.children)!r})"

    def __str__(self) -> str:
        return f"<INCORRECTLY STRINGIFIED {list(self.prefix)}>"


Step = Union[OTree, str, Callable[[], None]]


def simplify(elements: Iterable[Element | None]) -> tuple[Element, ...]:
    """Drop ``None``, empty strings and empty trees."""
    return tuple(
        x
        for x in elements
        if x is not None and (not x.is_empty if isinstance(x, OTree) else x != "")
    )


NO_SYNTAX = OTree([])


class UnknownSyntax(OTree):
    """Placeholder output for syntax that no handler could translate."""

    __slots__ = ()


class SinkMark:
    """Snapshot of the sink used to ask whether visible text followed it."""

    __slots__ = ("_sink", "_count")

    def __init__(self, sink: OTreeSink):
        self._sink = sink
        self._count = sink.non_whitespace_fragments

    @property
    def wrote_non_whitespace_since_mark(self) -> bool:
        return self._sink.non_whitespace_fragments > self._count


_NON_WHITESPACE = re.compile(r"\S")
_TRAILING_WHITESPACE = re.compile(r"[ \t]+$", re.MULTILINE)


class OTreeSink:
    """Single-pass interpreter that turns an output tree into text.

    Indentation changes are lazy: a requested change only takes effect at
    the next written line break, so a prefix and its first child can share
    a line while the following lines are indented.
    """

    def __init__(self):
        self._indent_levels: list[int] = [0]
        self._pending_indent_change = 0
        self._fragments: list[str] = []
        self._rendered_once: set[str] = set()
        self.non_whitespace_fragments = 0

    # ── state ────────────────────────────────────────────────────

    @property
    def current_indent(self) -> int:
        return self._indent_levels[-1]

    def tag_once(self, key: str | None) -> bool:
        if key is None:
            return True
        if key in self._rendered_once:
            return False
        self._rendered_once.add(key)
        return True

    def already_rendered(self, key: str | None) -> bool:
        return key is not None and key in self._rendered_once

    def mark(self) -> SinkMark:
        return SinkMark(self)

    def request_indent_change(self, delta: int) -> Callable[[], None]:
        if delta == 0:
            return _noop

        self._pending_indent_change = delta
        depth = len(self._indent_levels)

        # Resets to the current indent state whether or not the change was
        # ever applied.
        def pop() -> None:
            del self._indent_levels[depth:]
            self._pending_indent_change = 0

        return pop

    # ── writing ──────────────────────────────────────────────────

    def write(self, element: Element) -> None:
        if isinstance(element, OTree):
            element.write(self)
            return
        if "\n" in element:
            self._apply_pending_indent_change()
            element = element.replace("\n", "\n" + " " * self.current_indent)
        self._append(element)

    def perform(self, step: Step) -> None:
        if isinstance(step, (OTree, str)):
            self.write(step)
        else:
            step()

    def write_iteratively(self, root: OTree) -> None:
        """Render *root* with an explicit stack instead of Python recursion."""
        stack: list[Step] = [root]
        while stack:
            step = stack.pop()
            if isinstance(step, OTree):
                stack.extend(reversed(step.steps(self)))
            else:
                self.perform(step)

    def newline(self) -> None:
        self.write("\n")

    def __str__(self) -> str:
        return _TRAILING_WHITESPACE.sub("", "".join(self._fragments))

    def _append(self, text: str) -> None:
        self._fragments.append(text)
        if _NON_WHITESPACE.search(text):
            self.non_whitespace_fragments += 1

    def _apply_pending_indent_change(self) -> None:
        if self._pending_indent_change != 0:
            self._indent_levels.append(self.current_indent + self._pending_indent_change)
            self._pending_indent_change = 0


def _noop() -> None:
    return None


def render_tree(tree: OTree, options: RenderOptions = RenderOptions()) -> str:
    sink = OTreeSink()
    if options.strategy == TraversalStrategy.WORKLIST:
        sink.write_iteratively(tree)
    else:
        tree.write(sink)
    return str(sink)
