"""Declaration kind checks applied before generation."""

from __future__ import annotations

from .diagnostics import DiagnosticReporter
from .models import DeclarationNode, DiagnosticCode, DirectiveKind
from .namespaces import kind_name

# Kinds are compared by symbolic name so a host whose kind enumeration has no
# VALUE_TYPE member simply never matches.
_REQUIRED_KINDS = {
    DirectiveKind.BUILDER: (
        "VALUE_TYPE",
        "record_builder only valid for value types (frozen dataclasses, NamedTuples).",
    ),
    DirectiveKind.INTERFACE: (
        "INTERFACE",
        "record_interface only valid for interface-like declarations (Protocols, abstract classes).",
    ),
}


def validate_declaration(
    element: DeclarationNode,
    directive: DirectiveKind,
    reporter: DiagnosticReporter,
) -> bool:
    """Return True when ``element`` may be processed by ``directive``'s generation path."""
    expected, message = _REQUIRED_KINDS[_generation_path(directive)]
    if kind_name(element) == expected:
        return True
    reporter.error(message, element, DiagnosticCode.INVALID_DECLARATION_KIND)
    return False


def _generation_path(directive: DirectiveKind) -> DirectiveKind:
    if directive in (DirectiveKind.BUILDER, DirectiveKind.BUILDER_INCLUDE):
        return DirectiveKind.BUILDER
    if directive in (DirectiveKind.INTERFACE, DirectiveKind.INTERFACE_INCLUDE):
        return DirectiveKind.INTERFACE
    raise ValueError(f"No generation path for directive kind {directive!r}")


__all__ = ["validate_declaration"]
