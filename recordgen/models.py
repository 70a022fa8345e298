"""Core data models shared across recordgen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Protocol

from .directives import (
    RECORD_BUILDER,
    RECORD_BUILDER_INCLUDE,
    RECORD_INTERFACE,
    RECORD_INTERFACE_INCLUDE,
)


class DirectiveKind(Enum):
    """The directive kinds the processor claims, keyed by qualified identity."""

    BUILDER = RECORD_BUILDER
    BUILDER_INCLUDE = RECORD_BUILDER_INCLUDE
    INTERFACE = RECORD_INTERFACE
    INTERFACE_INCLUDE = RECORD_INTERFACE_INCLUDE
    UNKNOWN = ""

    @classmethod
    def from_identity(cls, identity: str) -> "DirectiveKind":
        for kind in cls:
            if kind is not cls.UNKNOWN and kind.value == identity:
                return kind
        return cls.UNKNOWN

    @property
    def is_include(self) -> bool:
        return self in (DirectiveKind.BUILDER_INCLUDE, DirectiveKind.INTERFACE_INCLUDE)


class DeclarationKind(Enum):
    NAMESPACE = "namespace"
    MODULE = "module"
    VALUE_TYPE = "value_type"
    INTERFACE = "interface"
    CLASS = "class"
    OTHER = "other"


class Severity(Enum):
    ERROR = "error"
    NOTE = "note"


class DiagnosticCode(Enum):
    """Failure categories reported through the diagnostic reporter."""

    DIRECTIVE_ATTRIBUTE_MISSING = "directive-attribute-missing"
    UNRESOLVABLE_REFERENCE = "unresolvable-reference"
    UNRESOLVABLE_NAMESPACE = "unresolvable-namespace"
    INVALID_DECLARATION_KIND = "invalid-declaration-kind"
    EMISSION_IO_ERROR = "emission-io-error"
    INVALID_CONFIGURATION = "invalid-configuration"
    INVALID_COMPONENT = "invalid-component"


@dataclass(frozen=True)
class DirectiveUsage:
    """A directive attached to a declaration together with its attribute values."""

    identity: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def get(self, name: str, default: Any = None) -> Any:
        return self.attributes.get(name, default)

    def flag(self, name: str, default: bool) -> bool:
        value = self.attributes.get(name)
        return value if isinstance(value, bool) else default


class DeclarationNode(Protocol):
    """Narrow view of a host declaration used by the generation engine."""

    @property
    def kind(self) -> Any:
        ...

    @property
    def enclosing(self) -> Optional["DeclarationNode"]:
        ...

    @property
    def simple_name(self) -> str:
        ...

    @property
    def qualified_name(self) -> str:
        ...

    def find_directive(self, identity: str) -> Optional[DirectiveUsage]:
        ...


@dataclass(frozen=True)
class Diagnostic:
    """A message attached to the declaration it concerns."""

    severity: Severity
    message: str
    element: Optional[DeclarationNode]
    code: Optional[DiagnosticCode] = None


@dataclass
class SynthesizedArtifact:
    """In-memory source model handed to the emitter for rendering."""

    namespace: str
    simple_name: str
    template: str
    context: Dict[str, Any] = field(default_factory=dict)

    @property
    def qualified_name(self) -> str:
        return qualified_name(self.namespace, self.simple_name)


def qualified_name(namespace: str, simple_name: str) -> str:
    """Join ``namespace`` and ``simple_name``; the root namespace is empty."""
    if not namespace:
        return simple_name
    return f"{namespace}.{simple_name}"


__all__ = [
    "DeclarationKind",
    "DeclarationNode",
    "Diagnostic",
    "DiagnosticCode",
    "DirectiveKind",
    "DirectiveUsage",
    "Severity",
    "SynthesizedArtifact",
    "qualified_name",
]
