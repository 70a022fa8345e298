"""Enclosing-namespace lookup and output namespace pattern substitution."""

from __future__ import annotations

from typing import Optional

from .diagnostics import DiagnosticReporter
from .models import DeclarationNode, DiagnosticCode

TARGET_TOKEN = "*"
HOST_TOKEN = "@"
DEFAULT_PATTERN = TARGET_TOKEN


def kind_name(node: DeclarationNode) -> str:
    """Return the symbolic name of ``node``'s kind (enum member name or raw string)."""
    kind = node.kind
    name = getattr(kind, "name", kind)
    return name if isinstance(name, str) else str(name)


def is_namespace(node: Optional[DeclarationNode]) -> bool:
    return node is not None and kind_name(node) == "NAMESPACE"


def resolve_enclosing_namespace(
    node: DeclarationNode, reporter: DiagnosticReporter
) -> Optional[DeclarationNode]:
    """Return the nearest enclosing namespace of ``node``.

    Reports an error at ``node`` and returns None when the enclosing chain ends
    without reaching a namespace.
    """
    current = node.enclosing
    while current is not None:
        if is_namespace(current):
            return current
        current = current.enclosing
    reporter.error("Element has no enclosing namespace", node, DiagnosticCode.UNRESOLVABLE_NAMESPACE)
    return None


def build_namespace_name(
    pattern: str,
    host: DeclarationNode,
    target: DeclarationNode,
    reporter: DiagnosticReporter,
) -> Optional[str]:
    """Render ``pattern`` into an output namespace for ``target``.

    ``*`` becomes the target's enclosing namespace and ``@`` the host's
    namespace (the host itself when it is one).
    """
    target_namespace = resolve_enclosing_namespace(target, reporter)
    if target_namespace is None:
        return None
    replaced = pattern.replace(TARGET_TOKEN, target_namespace.qualified_name)
    if HOST_TOKEN not in replaced:
        return replaced
    if is_namespace(host):
        return replaced.replace(HOST_TOKEN, host.qualified_name)
    host_namespace = resolve_enclosing_namespace(host, reporter)
    if host_namespace is None:
        return None
    return replaced.replace(HOST_TOKEN, host_namespace.qualified_name)


__all__ = [
    "DEFAULT_PATTERN",
    "build_namespace_name",
    "is_namespace",
    "kind_name",
    "resolve_enclosing_namespace",
]
