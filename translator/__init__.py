"""Snippet translator package."""

from .api import (  # noqa: F401
    Translation,
    dump_diagnostics,
    translate,
    translate_source,
    translate_typescript,
    visualize_source,
)
from .dispatcher import TranslateResult, visit_tree  # noqa: F401
from .otree import OTree, render_tree  # noqa: F401
