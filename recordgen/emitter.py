"""Rendering synthesized artifacts and committing them to an emission sink."""

from __future__ import annotations

import re
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from typing import Callable, ContextManager, Iterator, List, Optional, Protocol, Set, TextIO

from jinja2 import Environment, FileSystemLoader, TemplateError

from .config import GenerationConfig
from .diagnostics import DiagnosticReporter
from .logging import get_logger
from .models import DeclarationNode, DiagnosticCode, SynthesizedArtifact
from .synthesis.rewriter import RewriteError

GENERATED_HEADER = "# @generated by recordgen"
_HEADER_LINES = 5

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


class EmissionSink(Protocol):
    """Write target for generated sources, opened at most once per name."""

    def open(self, qualified_name: str) -> ContextManager[TextIO]:
        ...


def module_name_for(simple_name: str) -> str:
    """Return the snake_case module stem used for a generated class."""
    return _CAMEL_BOUNDARY.sub("_", simple_name).lower()


class FileSystemSink:
    """Writes each generated class to ``<root>/<namespace path>/<snake_name>.py``."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self._opened: Set[str] = set()
        self.created: List[Path] = []

    def path_for(self, qualified_name: str) -> Path:
        *namespace, simple_name = qualified_name.split(".")
        return self.root.joinpath(*namespace, f"{module_name_for(simple_name)}.py")

    @contextmanager
    def open(self, qualified_name: str) -> Iterator[TextIO]:
        if qualified_name in self._opened:
            raise FileExistsError(f"Attempt to recreate a file for type {qualified_name}")
        path = self.path_for(qualified_name)
        if path.exists() and not is_generated_source(path.read_text(encoding="utf-8", errors="replace")):
            raise FileExistsError(f"Refusing to overwrite hand-written source {path}")
        self._opened.add(qualified_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as handle:
            yield handle
        self.created.append(path)


def is_generated_source(text: str) -> bool:
    """Return True when ``text`` starts with the recordgen generated header."""
    return GENERATED_HEADER in text.splitlines()[:_HEADER_LINES]


@lru_cache(maxsize=8)
def _environment(templates_dir: Optional[Path]) -> Environment:
    directories = []
    if templates_dir is not None:
        directories.append(str(templates_dir))
    directories.append(str(_TEMPLATES_DIR))
    loader = FileSystemLoader(directories)
    return Environment(
        loader=loader,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )


class ArtifactEmitter:
    """Renders artifacts to source text and commits them exactly once."""

    def __init__(self, sink: EmissionSink, reporter: DiagnosticReporter) -> None:
        self.sink = sink
        self.reporter = reporter
        self.logger = get_logger("emitter")

    def render(self, artifact: SynthesizedArtifact, config: GenerationConfig) -> str:
        template = _environment(config.templates_dir).get_template(artifact.template)
        body = template.render(indent=config.file_indent, **artifact.context)
        lines = [GENERATED_HEADER]
        if config.file_comment:
            lines.extend(f"# {line}".rstrip() for line in config.file_comment.splitlines())
        return "\n".join(lines) + "\n\n" + body.strip() + "\n"

    def emit(
        self,
        element: DeclarationNode,
        artifact: SynthesizedArtifact,
        config: GenerationConfig,
    ) -> bool:
        try:
            text = self.render(artifact, config)
        except TemplateError as exc:
            self._handle_render_error(element, artifact, exc)
            return False
        return self._commit(element, artifact.qualified_name, text)

    def emit_rewritten(
        self,
        element: DeclarationNode,
        artifact: SynthesizedArtifact,
        config: GenerationConfig,
        marker: str,
        rewrite: Callable[[str], str],
    ) -> bool:
        """Render ``artifact``, strip the ``marker`` line, rewrite, then commit."""
        try:
            text = rewrite(strip_marker(self.render(artifact, config), marker))
        except (TemplateError, RewriteError) as exc:
            self._handle_render_error(element, artifact, exc)
            return False
        return self._commit(element, artifact.qualified_name, text)

    def _commit(self, element: DeclarationNode, qualified_name: str, text: str) -> bool:
        try:
            with self.sink.open(qualified_name) as writer:
                writer.write(text)
        except OSError as exc:
            self._handle_write_error(element, exc)
            return False
        self.logger.debug("Generated %s", qualified_name)
        return True

    def _handle_write_error(self, element: DeclarationNode, exc: OSError) -> None:
        message = "Could not create source file"
        detail = str(exc)
        if detail:
            message = f"{message}: {detail}"
        self.reporter.error(message, element, DiagnosticCode.EMISSION_IO_ERROR)

    def _handle_render_error(
        self, element: DeclarationNode, artifact: SynthesizedArtifact, exc: Exception
    ) -> None:
        self.reporter.error(
            f"Could not render {artifact.template} for {artifact.qualified_name}: {exc}",
            element,
            DiagnosticCode.INVALID_CONFIGURATION,
        )


def strip_marker(source: str, marker: str) -> str:
    """Remove the line carrying ``marker`` from ``source``, if present."""
    index = source.find(marker)
    if index == -1:
        return source
    start = source.rfind("\n", 0, index) + 1
    end = source.find("\n", index)
    end = len(source) if end == -1 else end + 1
    return source[:start] + source[end:]


__all__ = [
    "ArtifactEmitter",
    "EmissionSink",
    "FileSystemSink",
    "GENERATED_HEADER",
    "is_generated_source",
    "module_name_for",
    "strip_marker",
]
