"""Runtime directive markers recognised by the recordgen scanner.

The decorators are no-ops at runtime; generation happens from the source text.
"""

from __future__ import annotations

from typing import Any, Callable, TypeVar

T = TypeVar("T")

RECORD_BUILDER = "recordgen.record_builder"
RECORD_BUILDER_INCLUDE = "recordgen.record_builder.include"
RECORD_INTERFACE = "recordgen.record_interface"
RECORD_INTERFACE_INCLUDE = "recordgen.record_interface.include"
GENERATED = "recordgen.generated"


def _identity(obj: T) -> T:
    return obj


def record_builder(cls: T) -> T:
    """Mark a frozen dataclass or NamedTuple for builder generation."""
    return cls


def _record_builder_include(*targets: Any, namespace_pattern: str = "*") -> Callable[[T], T]:
    """Generate builders for ``targets`` declared elsewhere."""
    return _identity


def record_interface(cls: Any = None, *, add_builder: bool = True) -> Any:
    """Mark a Protocol or abstract class for conversion into a value type."""
    if cls is None:
        return _identity
    return cls


def _record_interface_include(
    *targets: Any, namespace_pattern: str = "*", add_builder: bool = True
) -> Callable[[T], T]:
    """Convert ``targets`` declared elsewhere into value types."""
    return _identity


def generated(identity: str) -> Callable[[T], T]:
    """Tag a class emitted by recordgen with the directive that produced it."""
    return _identity


record_builder.include = _record_builder_include  # type: ignore[attr-defined]
record_interface.include = _record_interface_include  # type: ignore[attr-defined]


__all__ = [
    "GENERATED",
    "RECORD_BUILDER",
    "RECORD_BUILDER_INCLUDE",
    "RECORD_INTERFACE",
    "RECORD_INTERFACE_INCLUDE",
    "generated",
    "record_builder",
    "record_interface",
]
