"""Unsupported-construct reports collected during one translation."""

from __future__ import annotations

from enum import Enum
from typing import Iterable, Iterator

from pydantic import BaseModel


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class SourceLocation(BaseModel):
    """Structured source span of the syntax node a diagnostic refers to."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def is_unknown(self) -> bool:
        return (
            self.start_line == 0
            and self.start_col == 0
            and self.end_line == 0
            and self.end_col == 0
        )

    def __str__(self) -> str:
        if self.is_unknown():
            return "<unknown>"
        return f"{self.start_line}:{self.start_col}-{self.end_line}:{self.end_col}"


NO_SOURCE_LOCATION = SourceLocation(start_line=0, start_col=0, end_line=0, end_col=0)


class Diagnostic(BaseModel):
    node_kind: str
    message: str
    severity: Severity = Severity.ERROR
    start: int = 0
    end: int = 0
    location: SourceLocation = NO_SOURCE_LOCATION

    @property
    def is_error(self) -> bool:
        return self.severity == Severity.ERROR

    def __str__(self) -> str:
        return f"{self.location} {self.severity.value}: {self.message}"


class DiagnosticsCollector:
    """Append-only, ordered list of diagnostics."""

    def __init__(self):
        self._diagnostics: list[Diagnostic] = []

    def add(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self._diagnostics)

    def to_list(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)


def format_diagnostics(diagnostics: Iterable[Diagnostic]) -> str:
    return "\n".join(str(d) for d in diagnostics)
