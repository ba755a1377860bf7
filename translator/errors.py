"""Exception hierarchy for the translation engine."""

from __future__ import annotations


class TranslatorError(Exception):
    """Base class for programming-contract failures inside the engine."""


class ContextStackError(TranslatorError):
    """Context push/pop calls were not balanced in LIFO order."""


class UnsupportedLanguageError(TranslatorError, ValueError):
    """No parser grammar or visitor is registered under the requested name."""
