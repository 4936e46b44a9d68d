"""Structured diagnostics collected while reading a document.

Diagnostics are returned alongside the Document instead of being pushed
through a global channel; each one is also logged at WARNING level so that
applications which configure logging see them as they happen.
"""

import logging
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger("openapi_graph.diagnostics")


class DiagnosticKind(str, Enum):
    MISSING_REQUIRED_PROPERTY = "missing-required-property"
    TYPE_MISMATCH = "type-mismatch"
    UNRESOLVED_REFERENCE = "unresolved-reference"
    MALFORMED_POINTER = "malformed-pointer"
    UNSUPPORTED_ROOT_SHAPE = "unsupported-root-shape"
    CYCLIC_REFERENCE = "cyclic-reference"


class Severity(str, Enum):
    WARNING = "warning"
    ERROR = "error"


class Diagnostic(BaseModel):
    """A single problem found in the input document."""

    kind: DiagnosticKind
    severity: Severity
    message: str
    location: str = ""  # JSON pointer of the node the problem was found at
    pointer: str | None = None  # the offending $ref value, for reference problems

    def __str__(self) -> str:
        prefix = f"{self.location}: " if self.location else ""
        return f"[{self.severity.value}] {prefix}{self.message} ({self.kind.value})"


class Diagnostics:
    """Ordered accumulator of Diagnostic records."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def add(
        self,
        kind: DiagnosticKind,
        message: str,
        location: str = "",
        severity: Severity = Severity.WARNING,
        pointer: str | None = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            kind=kind,
            severity=severity,
            message=message,
            location=location,
            pointer=pointer,
        )
        self._items.append(diagnostic)
        logger.warning("%s", diagnostic)
        return diagnostic

    def of_kind(self, kind: DiagnosticKind) -> list[Diagnostic]:
        return [d for d in self._items if d.kind == kind]

    @property
    def warnings(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == Severity.WARNING]

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self._items if d.severity == Severity.ERROR]

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self._items)

    def __iter__(self):
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)
