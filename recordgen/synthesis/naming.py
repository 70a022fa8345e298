"""Names and namespaces of generated classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..models import DeclarationKind

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..host.symbols import Declaration


def generated_class_name(element: "Declaration", suffix: str, prefix_enclosing: bool) -> str:
    """Return ``element``'s name plus ``suffix``, optionally prefixed by its outer classes."""
    parts = [outer.simple_name for outer in element.enclosing_classes()] if prefix_enclosing else []
    parts.append(element.simple_name)
    return "".join(parts) + suffix


def default_namespace(element: "Declaration") -> str:
    """Return the package that contains ``element``'s module."""
    module = element.module
    if module.kind is DeclarationKind.NAMESPACE or module.enclosing is None:
        return module.qualified_name
    return module.enclosing.qualified_name


def class_reference(element: "Declaration") -> str:
    """Return the dotted name of ``element`` relative to its module."""
    return ".".join([outer.simple_name for outer in element.enclosing_classes()] + [element.simple_name])


def top_level_name(element: "Declaration") -> str:
    """Return the module-level class that ``element`` is, or is nested in."""
    outer = element.enclosing_classes()
    return outer[0].simple_name if outer else element.simple_name


__all__ = ["class_reference", "default_namespace", "generated_class_name", "top_level_name"]
