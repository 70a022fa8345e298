"""Process-wide diagnostic reporting."""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional

from .logging import get_logger
from .models import DeclarationNode, Diagnostic, DiagnosticCode, Severity


class DiagnosticReporter:
    """Append-only collector for diagnostics raised while processing a round.

    Reporting never raises; each diagnostic is also forwarded to the
    ``recordgen.diagnostics`` logger.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._diagnostics: List[Diagnostic] = []
        self.logger = logger or get_logger("diagnostics")

    def report(
        self,
        severity: Severity,
        message: str,
        element: Optional[DeclarationNode] = None,
        code: Optional[DiagnosticCode] = None,
    ) -> Diagnostic:
        diagnostic = Diagnostic(severity=severity, message=message, element=element, code=code)
        self._diagnostics.append(diagnostic)
        level = logging.ERROR if severity is Severity.ERROR else logging.INFO
        self.logger.log(level, "%s: %s", describe_element(element), message)
        return diagnostic

    def error(
        self,
        message: str,
        element: Optional[DeclarationNode] = None,
        code: Optional[DiagnosticCode] = None,
    ) -> Diagnostic:
        return self.report(Severity.ERROR, message, element, code)

    def note(self, message: str, element: Optional[DeclarationNode] = None) -> Diagnostic:
        return self.report(Severity.NOTE, message, element)

    @property
    def diagnostics(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    @property
    def errors(self) -> List[Diagnostic]:
        return [item for item in self._diagnostics if item.severity is Severity.ERROR]

    def has_errors(self) -> bool:
        return any(item.severity is Severity.ERROR for item in self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._diagnostics))

    def __len__(self) -> int:
        return len(self._diagnostics)


def describe_element(element: Optional[DeclarationNode]) -> str:
    if element is None:
        return "<unknown>"
    name = element.qualified_name
    return name or "<root>"


__all__ = ["DiagnosticReporter", "describe_element"]
