"""Host services shared by the processor for the duration of a compilation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Protocol

from .config import GenerationConfig, load_config
from .diagnostics import DiagnosticReporter
from .emitter import EmissionSink
from .models import DeclarationNode


class SymbolResolver(Protocol):
    """Resolves a type reference written at ``context`` to a declaration."""

    def resolve(self, reference: str, context: DeclarationNode) -> Optional[DeclarationNode]:
        ...


@dataclass
class ProcessingEnvironment:
    """Reporter, sink and symbol lookup handed to the processor by the host."""

    reporter: DiagnosticReporter
    sink: EmissionSink
    symbols: SymbolResolver
    config_path: Optional[Path] = None

    def load_config(self, element: DeclarationNode) -> GenerationConfig:
        """Load a fresh configuration, echoing non-default options as notes on ``element``."""
        return load_config(self.config_path, note=lambda message: self.reporter.note(message, element))


__all__ = ["ProcessingEnvironment", "SymbolResolver"]
