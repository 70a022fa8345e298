"""Symbol model for Python sources: packages, modules and classes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from ..models import DeclarationKind, DeclarationNode, DirectiveUsage, qualified_name

_SCOPE_KINDS = (DeclarationKind.NAMESPACE, DeclarationKind.MODULE)


@dataclass
class Component:
    """A named, typed member of a value type or interface."""

    name: str
    annotation: str
    default: Optional[str] = None


@dataclass
class Method:
    """A function defined in a class body."""

    name: str
    parameters: List[str]
    returns: Optional[str]
    abstract: bool
    is_property: bool
    is_static: bool
    source: str


class Declaration:
    """A package, module or class discovered in the scanned source tree."""

    def __init__(
        self,
        kind: DeclarationKind,
        simple_name: str,
        enclosing: Optional["Declaration"] = None,
        *,
        path: Optional[Path] = None,
        line: Optional[int] = None,
    ) -> None:
        self.kind = kind
        self.simple_name = simple_name
        self.enclosing = enclosing
        self.path = path
        self.line = line
        self.directives: List[DirectiveUsage] = []
        self.components: List[Component] = []
        self.methods: List[Method] = []
        self.imports: Dict[str, str] = {}
        self.import_lines: List[str] = []
        self.members: Dict[str, Declaration] = {}
        self._qualified_name = qualified_name(
            enclosing.qualified_name if enclosing is not None else "", simple_name
        )
        if enclosing is not None:
            enclosing.members[simple_name] = self

    @property
    def qualified_name(self) -> str:
        return self._qualified_name

    @property
    def module(self) -> "Declaration":
        """Return the module (or package ``__init__``) this declaration lives in."""
        current: Declaration = self
        while current.kind not in _SCOPE_KINDS and current.enclosing is not None:
            current = current.enclosing
        return current

    @property
    def is_scope(self) -> bool:
        return self.kind in _SCOPE_KINDS

    def enclosing_classes(self) -> List["Declaration"]:
        """Return the classes lexically enclosing this one, outermost first."""
        chain: List[Declaration] = []
        current = self.enclosing
        while current is not None and not current.is_scope:
            chain.append(current)
            current = current.enclosing
        chain.reverse()
        return chain

    def find_directive(self, identity: str) -> Optional[DirectiveUsage]:
        for usage in self.directives:
            if usage.identity == identity:
                return usage
        return None

    def __repr__(self) -> str:
        return f"Declaration({self.kind.name}, {self.qualified_name!r})"


class SymbolTable:
    """Index of every declaration by fully qualified name."""

    def __init__(self) -> None:
        self.root = Declaration(DeclarationKind.NAMESPACE, "")
        self._by_name: Dict[str, Declaration] = {"": self.root}

    def namespace(self, name: str) -> Declaration:
        """Return the package called ``name``, creating missing parents."""
        existing = self._by_name.get(name)
        if existing is not None:
            return existing
        parent_name, _, simple = name.rpartition(".")
        parent = self.namespace(parent_name)
        package = Declaration(DeclarationKind.NAMESPACE, simple, parent)
        self._by_name[name] = package
        return package

    def add(self, declaration: Declaration) -> Declaration:
        self._by_name[declaration.qualified_name] = declaration
        return declaration

    def get(self, name: str) -> Optional[Declaration]:
        return self._by_name.get(name)

    def __iter__(self) -> Iterator[Declaration]:
        return iter(list(self._by_name.values()))

    def resolve(self, reference: str, context: DeclarationNode) -> Optional[Declaration]:
        """Resolve ``reference`` as written in the module enclosing ``context``.

        Lookup order: the module's imports, the module's own declarations, then
        absolute names.
        """
        if not reference:
            return None
        scope = context.module if isinstance(context, Declaration) else None
        head, _, rest = reference.partition(".")
        if scope is not None:
            imported = scope.imports.get(head)
            if imported is not None:
                found = self.get(qualified_name(imported, rest) if rest else imported)
                if found is not None:
                    return found
            found = self.get(qualified_name(scope.qualified_name, reference))
            if found is not None:
                return found
        return self.get(reference)


__all__ = ["Component", "Declaration", "Method", "SymbolTable"]
