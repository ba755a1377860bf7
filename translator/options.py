"""Translation pipeline configuration types (pure data, no business logic)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from . import constants


class TraversalStrategy(Enum):
    """How the render sink walks an output tree."""

    RECURSIVE = "recursive"
    WORKLIST = "worklist"


@dataclass(frozen=True)
class VisitOptions:
    """Groups dispatcher configuration.

    ``best_effort`` controls what happens to syntax no handler recognizes:
    when true its source text is copied verbatim, otherwise a placeholder
    tagged with the node kind is produced. ``recursion_limit`` raises the
    interpreter recursion limit for the duration of one visit, for
    pathologically deep syntax trees.
    """

    best_effort: bool = True
    recursion_limit: int | None = None


@dataclass(frozen=True)
class RenderOptions:
    """Groups render sink configuration."""

    strategy: TraversalStrategy = TraversalStrategy.RECURSIVE


@dataclass(frozen=True)
class TranslateOptions:
    """Everything the composable API needs to run one translation."""

    language: str = constants.DEFAULT_SOURCE_LANGUAGE
    target: str = constants.DEFAULT_TARGET
    best_effort: bool = True
    strategy: TraversalStrategy = TraversalStrategy.RECURSIVE
    recursion_limit: int | None = None

    def visit_options(self) -> VisitOptions:
        return VisitOptions(
            best_effort=self.best_effort, recursion_limit=self.recursion_limit
        )

    def render_options(self) -> RenderOptions:
        return RenderOptions(strategy=self.strategy)
