"""Builds the symbol table for a Python source tree using ``ast``."""

from __future__ import annotations

import ast
import textwrap
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence

from ..directives import RECORD_BUILDER_INCLUDE, RECORD_INTERFACE_INCLUDE
from ..emitter import is_generated_source
from ..logging import get_logger
from ..models import DeclarationKind, DirectiveKind, DirectiveUsage
from .symbols import Component, Declaration, Method, SymbolTable

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
    "build",
    "dist",
}

_DIRECTIVE_PREFIX = "recordgen.directives."
_INCLUDE_IDENTITIES = {RECORD_BUILDER_INCLUDE, RECORD_INTERFACE_INCLUDE}
_KNOWN_IDENTITIES = {kind.value for kind in DirectiveKind if kind is not DirectiveKind.UNKNOWN}

_DATACLASS = {"dataclasses.dataclass"}
_NAMED_TUPLE = {"typing.NamedTuple", "typing_extensions.NamedTuple"}
_PROTOCOL = {"typing.Protocol", "typing_extensions.Protocol"}
_ABC = {"abc.ABC"}
_ABC_META = {"abc.ABCMeta"}
_ABSTRACT = {"abc.abstractmethod"}
_PROPERTY = {"property", "functools.cached_property"}
_STATIC = {"staticmethod", "classmethod"}
_CLASS_VAR = {"typing.ClassVar", "ClassVar"}


class SourceScanner:
    """Walks a source root and records packages, modules and classes.

    Directories map to namespaces, ``__init__.py`` contents belong to their
    package, and other ``.py`` files become modules.
    """

    def __init__(self, root: Path, table: SymbolTable | None = None) -> None:
        self.root = root.expanduser().resolve()
        self.table = table or SymbolTable()
        self.logger = get_logger("scanner")

    def scan(self) -> List[Declaration]:
        """Scan every hand-written source file; return declarations carrying directives."""
        if not self.root.is_dir():
            raise FileNotFoundError(f"Source root does not exist: {self.root}")
        annotated: List[Declaration] = []
        for path in self._iter_sources(self.root):
            annotated.extend(self.add_file(path, self.root, skip_generated=True))
        self.logger.debug("Scanned %s: %d annotated declaration(s)", self.root, len(annotated))
        return annotated

    def add_file(self, path: Path, root: Path, *, skip_generated: bool = False) -> List[Declaration]:
        """Parse ``path`` (relative to ``root``) into the table."""
        scope = self._scope_for(path, root)
        if scope is None:
            self.logger.debug("Skipping %s: not an importable module path", path)
            return []
        try:
            text = path.read_text(encoding="utf-8")
        except (UnicodeDecodeError, OSError) as exc:
            self.logger.warning("Skipping %s: %s", path, exc)
            return []
        if skip_generated and is_generated_source(text):
            self.logger.debug("Skipping generated source %s", path)
            return []
        try:
            tree = ast.parse(text, filename=str(path))
        except SyntaxError as exc:
            self.logger.warning("Skipping %s: %s", path, exc)
            return []
        reader = _ModuleReader(self.table, scope, path, text)
        return reader.read(tree)

    def _scope_for(self, path: Path, root: Path) -> Optional[Declaration]:
        relative = path.resolve().relative_to(root.resolve())
        package_parts = list(relative.parts[:-1])
        if not all(part.isidentifier() for part in package_parts):
            return None
        package = self.table.namespace(".".join(package_parts))
        if package.path is None:
            package.path = path.parent
        if path.name == "__init__.py":
            package.path = path
            package.line = 1
            return package
        if not path.stem.isidentifier():
            return None
        module = Declaration(DeclarationKind.MODULE, path.stem, package, path=path, line=1)
        return self.table.add(module)

    def _iter_sources(self, directory: Path) -> Iterable[Path]:
        for entry in sorted(directory.iterdir()):
            if entry.is_dir():
                if entry.name in _EXCLUDED_DIRS or entry.name.startswith("."):
                    continue
                yield from self._iter_sources(entry)
            elif entry.suffix == ".py":
                yield entry


class _ModuleReader:
    """Reads one parsed module into declarations under ``scope``."""

    def __init__(self, table: SymbolTable, scope: Declaration, path: Path, text: str) -> None:
        self.table = table
        self.scope = scope
        self.path = path
        self.text = text
        self.lines = text.splitlines()

    def read(self, tree: ast.Module) -> List[Declaration]:
        annotated: List[Declaration] = []
        for node in tree.body:
            if isinstance(node, (ast.Import, ast.ImportFrom)):
                self._record_import(node)
        for node in tree.body:
            if isinstance(node, ast.Expr) and isinstance(node.value, ast.Call):
                usage = self._directive_usage(node.value)
                if usage is not None and usage.identity in _INCLUDE_IDENTITIES:
                    self.scope.directives.append(usage)
            elif isinstance(node, ast.ClassDef):
                self._read_class(node, self.scope, annotated)
        if self.scope.directives:
            annotated.insert(0, self.scope)
        return annotated

    # imports ---------------------------------------------------------------

    def _record_import(self, node: ast.Import | ast.ImportFrom) -> None:
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    self.scope.imports[alias.asname] = alias.name
                else:
                    head = alias.name.split(".", 1)[0]
                    self.scope.imports[head] = head
            if not any(alias.name.split(".")[0] == "recordgen" for alias in node.names):
                self.scope.import_lines.append(ast.unparse(node))
            return
        module = self._absolute_module(node)
        if module is None:
            return
        for alias in node.names:
            if alias.name == "*":
                continue
            self.scope.imports[alias.asname or alias.name] = f"{module}.{alias.name}" if module else alias.name
        if module and module != "__future__" and module.split(".")[0] != "recordgen":
            absolute = ast.ImportFrom(module=module, names=node.names, level=0)
            self.scope.import_lines.append(ast.unparse(absolute))

    def _absolute_module(self, node: ast.ImportFrom) -> Optional[str]:
        if not node.level:
            return node.module or ""
        package = self.scope if self.scope.kind is DeclarationKind.NAMESPACE else self.scope.enclosing
        parts = package.qualified_name.split(".") if package is not None and package.qualified_name else []
        up = node.level - 1
        if up > len(parts):
            return None
        base = parts[: len(parts) - up]
        if node.module:
            base.append(node.module)
        return ".".join(base)

    def _resolve_name(self, expr: ast.expr) -> Optional[str]:
        dotted = _dotted(expr)
        if dotted is None:
            return None
        head, _, rest = dotted.partition(".")
        imported = self.scope.imports.get(head)
        if imported is not None:
            dotted = f"{imported}.{rest}" if rest else imported
        if dotted.startswith(_DIRECTIVE_PREFIX):
            dotted = "recordgen." + dotted[len(_DIRECTIVE_PREFIX):]
        return dotted

    # directives ------------------------------------------------------------

    def _directive_usage(self, expr: ast.expr) -> Optional[DirectiveUsage]:
        call = expr if isinstance(expr, ast.Call) else None
        identity = self._resolve_name(call.func if call is not None else expr)
        if identity not in _KNOWN_IDENTITIES:
            return None
        attributes: Dict[str, object] = {}
        if call is not None:
            targets = [ref for arg in call.args for ref in _references(arg)]
            for keyword in call.keywords:
                if keyword.arg is None:
                    continue
                if keyword.arg == "targets":
                    targets.extend(_references(keyword.value))
                    continue
                try:
                    attributes[keyword.arg] = ast.literal_eval(keyword.value)
                except ValueError:
                    continue
            if identity in _INCLUDE_IDENTITIES:
                attributes["targets"] = tuple(targets)
        return DirectiveUsage(identity=identity, attributes=attributes)

    # classes ---------------------------------------------------------------

    def _read_class(self, node: ast.ClassDef, enclosing: Declaration, annotated: List[Declaration]) -> None:
        declaration = Declaration(
            DeclarationKind.CLASS,
            node.name,
            enclosing,
            path=self.path,
            line=node.lineno,
        )
        self.table.add(declaration)
        for decorator in node.decorator_list:
            usage = self._directive_usage(decorator)
            if usage is not None and declaration.find_directive(usage.identity) is None:
                declaration.directives.append(usage)
        declaration.kind = self._classify(node)
        declaration.components = self._components(node)
        declaration.methods = [
            self._method(item) for item in node.body if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef))
        ]
        if declaration.directives:
            annotated.append(declaration)
        for item in node.body:
            if isinstance(item, ast.ClassDef):
                self._read_class(item, declaration, annotated)

    def _decorator_name(self, decorator: ast.expr) -> Optional[str]:
        target = decorator.func if isinstance(decorator, ast.Call) else decorator
        return self._resolve_name(target)

    def _classify(self, node: ast.ClassDef) -> DeclarationKind:
        bases = {self._resolve_name(base) for base in node.bases}
        for decorator in node.decorator_list:
            if self._decorator_name(decorator) in _DATACLASS and _keyword_true(decorator, "frozen"):
                return DeclarationKind.VALUE_TYPE
        if bases & _NAMED_TUPLE:
            return DeclarationKind.VALUE_TYPE
        if bases & _PROTOCOL:
            return DeclarationKind.INTERFACE
        metaclass = next((kw.value for kw in node.keywords if kw.arg == "metaclass"), None)
        is_abc = bool(bases & _ABC) or (metaclass is not None and self._resolve_name(metaclass) in _ABC_META)
        if is_abc and not _has_state(node):
            return DeclarationKind.INTERFACE
        return DeclarationKind.CLASS

    def _components(self, node: ast.ClassDef) -> List[Component]:
        components: List[Component] = []
        for item in node.body:
            if not isinstance(item, ast.AnnAssign) or not isinstance(item.target, ast.Name):
                continue
            annotation_root = item.annotation.value if isinstance(item.annotation, ast.Subscript) else item.annotation
            if self._resolve_name(annotation_root) in _CLASS_VAR:
                continue
            components.append(
                Component(
                    name=item.target.id,
                    annotation=ast.unparse(item.annotation),
                    default=ast.unparse(item.value) if item.value is not None else None,
                )
            )
        return components

    def _method(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> Method:
        decorators = {self._decorator_name(item) for item in node.decorator_list}
        is_static = bool(decorators & _STATIC)
        positional = [arg.arg for arg in node.args.posonlyargs + node.args.args]
        if not is_static or "classmethod" in decorators:
            positional = positional[1:]
        parameters = positional + [arg.arg for arg in node.args.kwonlyargs]
        if node.args.vararg is not None:
            parameters.append("*" + node.args.vararg.arg)
        if node.args.kwarg is not None:
            parameters.append("**" + node.args.kwarg.arg)
        return Method(
            name=node.name,
            parameters=parameters,
            returns=ast.unparse(node.returns) if node.returns is not None else None,
            abstract=bool(decorators & _ABSTRACT) or _is_stub_body(node.body),
            is_property=bool(decorators & _PROPERTY),
            is_static=is_static,
            source=self._source_of(node),
        )

    def _source_of(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> str:
        start = min([node.lineno] + [item.lineno for item in node.decorator_list])
        end = node.end_lineno or node.lineno
        return textwrap.dedent("\n".join(self.lines[start - 1 : end]))


def _dotted(expr: ast.expr) -> Optional[str]:
    if isinstance(expr, ast.Name):
        return expr.id
    if isinstance(expr, ast.Attribute):
        head = _dotted(expr.value)
        return f"{head}.{expr.attr}" if head is not None else None
    return None


def _references(expr: ast.expr) -> List[str]:
    if isinstance(expr, (ast.List, ast.Tuple)):
        return [ref for item in expr.elts for ref in _references(item)]
    if isinstance(expr, ast.Constant) and isinstance(expr.value, str):
        return [expr.value]
    dotted = _dotted(expr)
    return [dotted] if dotted is not None else [ast.unparse(expr)]


def _keyword_true(decorator: ast.expr, name: str) -> bool:
    if not isinstance(decorator, ast.Call):
        return False
    for keyword in decorator.keywords:
        if keyword.arg == name:
            return isinstance(keyword.value, ast.Constant) and keyword.value.value is True
    return False


def _has_state(node: ast.ClassDef) -> bool:
    for item in node.body:
        if isinstance(item, ast.Assign):
            return True
        if isinstance(item, ast.AnnAssign) and item.value is not None:
            return True
        if isinstance(item, (ast.FunctionDef, ast.AsyncFunctionDef)) and item.name == "__init__":
            return True
    return False


def _is_stub_body(body: Sequence[ast.stmt]) -> bool:
    statements = list(body)
    if statements and isinstance(statements[0], ast.Expr) and isinstance(statements[0].value, ast.Constant):
        if isinstance(statements[0].value.value, str):
            statements = statements[1:]
    if not statements:
        return True
    if len(statements) != 1:
        return False
    only = statements[0]
    if isinstance(only, ast.Pass):
        return True
    if isinstance(only, ast.Expr) and isinstance(only.value, ast.Constant) and only.value.value is Ellipsis:
        return True
    return isinstance(only, ast.Raise) and _dotted(
        only.exc.func if isinstance(only.exc, ast.Call) else only.exc  # type: ignore[arg-type]
    ) == "NotImplementedError"


__all__ = ["SourceScanner"]
