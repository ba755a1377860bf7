"""Target-language visitors, looked up by name."""

from __future__ import annotations

import logging
from typing import Any, Callable

from .. import constants
from ..errors import UnsupportedLanguageError
from ..visitor import AstVisitor

logger = logging.getLogger(__name__)


def _python_visitor() -> AstVisitor[Any]:
    from .python import PythonVisitor

    return PythonVisitor()


def _default_visitor() -> AstVisitor[Any]:
    from .default import CurlyBracesVisitor

    return CurlyBracesVisitor()


def _visualize_visitor() -> AstVisitor[Any]:
    from .visualize import VisualizeVisitor

    return VisualizeVisitor()


_VISITOR_FACTORIES: dict[str, Callable[[], AstVisitor[Any]]] = {
    constants.VISITOR_PYTHON: _python_visitor,
    constants.VISITOR_DEFAULT: _default_visitor,
    constants.VISITOR_VISUALIZE: _visualize_visitor,
}

SUPPORTED_VISITORS = frozenset(_VISITOR_FACTORIES)


def get_visitor(name: str) -> AstVisitor[Any]:
    """Return a fresh visitor for the target *name*.

    Raises:
        UnsupportedLanguageError: If no visitor is registered under *name*.
    """
    factory = _VISITOR_FACTORIES.get(name)
    if factory is None:
        raise UnsupportedLanguageError(
            f"Unsupported target: {name!r}. "
            f"Supported: {', '.join(sorted(SUPPORTED_VISITORS))}"
        )
    logger.debug("Creating %s visitor", name)
    return factory()
