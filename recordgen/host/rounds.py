"""Round-based compilation driver for a Python source tree."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional

from ..diagnostics import DiagnosticReporter
from ..dispatcher import RecordProcessor
from ..emitter import FileSystemSink
from ..environment import ProcessingEnvironment
from ..logging import get_logger
from ..models import Diagnostic, Severity
from .scanner import SourceScanner
from .symbols import Declaration


class SourceRound:
    """Directives that fired on the declarations of one round."""

    def __init__(self, elements: Iterable[Declaration], supported: FrozenSet[str]) -> None:
        self._by_identity: Dict[str, List[Declaration]] = defaultdict(list)
        for element in elements:
            for usage in element.directives:
                if usage.identity not in supported:
                    continue
                carriers = self._by_identity[usage.identity]
                if element not in carriers:
                    carriers.append(element)

    def directives(self) -> List[str]:
        return list(self._by_identity)

    def elements_with(self, identity: str) -> List[Declaration]:
        return list(self._by_identity.get(identity, []))

    def __bool__(self) -> bool:
        return bool(self._by_identity)


@dataclass
class CompilationResult:
    """Outcome of a full compilation: generated files and every diagnostic."""

    generated: List[Path] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    rounds: int = 0

    @property
    def errors(self) -> List[Diagnostic]:
        return [item for item in self.diagnostics if item.severity is Severity.ERROR]

    @property
    def ok(self) -> bool:
        return not self.errors


class Compilation:
    """Runs processing rounds until a round generates no new sources.

    Round one covers the hand-written sources under ``source_root``; each later
    round covers the files the previous round generated.
    """

    def __init__(
        self,
        source_root: Path,
        *,
        output_root: Optional[Path] = None,
        config_path: Optional[Path] = None,
        reporter: Optional[DiagnosticReporter] = None,
    ) -> None:
        self.source_root = source_root.expanduser().resolve()
        self.output_root = (output_root or self.source_root).expanduser().resolve()
        self.config_path = config_path or self.source_root
        self.reporter = reporter or DiagnosticReporter()
        self.logger = get_logger("compilation")

    def run(self) -> CompilationResult:
        scanner = SourceScanner(self.source_root)
        pending = scanner.scan()
        sink = FileSystemSink(self.output_root)
        env = ProcessingEnvironment(
            reporter=self.reporter,
            sink=sink,
            symbols=scanner.table,
            config_path=self.config_path,
        )
        processor = RecordProcessor(env)
        supported = processor.supported_directives()

        rounds = 0
        while True:
            current = SourceRound(pending, supported)
            if not current:
                break
            rounds += 1
            already_created = len(sink.created)
            self.logger.debug("Round %d: %d directive kind(s)", rounds, len(current.directives()))
            processor.process_round(current)
            pending = []
            for path in sink.created[already_created:]:
                pending.extend(scanner.add_file(path, self.output_root))

        return CompilationResult(
            generated=list(sink.created),
            diagnostics=self.reporter.diagnostics,
            rounds=rounds,
        )


__all__ = ["Compilation", "CompilationResult", "SourceRound"]
