"""Directive dispatch: routes each fired directive to its generation path."""

from __future__ import annotations

from typing import Callable, FrozenSet, Iterable, Optional, Protocol

from .config import ConfigError, GenerationConfig
from .diagnostics import DiagnosticReporter
from .emitter import ArtifactEmitter
from .environment import ProcessingEnvironment
from .includes import IncludeResolver
from .logging import get_logger
from .models import DeclarationNode, DiagnosticCode, DirectiveKind, SynthesizedArtifact
from .synthesis import InterfaceConversion, synthesize_builder, synthesize_interface
from .validators import validate_declaration

BuilderSynthesizer = Callable[[DeclarationNode, GenerationConfig, Optional[str]], SynthesizedArtifact]
InterfaceSynthesizer = Callable[
    [DeclarationNode, bool, GenerationConfig, DiagnosticReporter, Optional[str]],
    Optional[InterfaceConversion],
]


class UnknownDirectiveError(RuntimeError):
    """Raised when the processor is handed a directive identity it never claimed."""


class RoundEnvironment(Protocol):
    """Directives that fired in the current round and the elements carrying them."""

    def directives(self) -> Iterable[str]:
        ...

    def elements_with(self, identity: str) -> Iterable[DeclarationNode]:
        ...


class RecordProcessor:
    """Claims the recordgen directives and generates their companion sources."""

    def __init__(
        self,
        env: ProcessingEnvironment,
        *,
        builder_synthesizer: BuilderSynthesizer | None = None,
        interface_synthesizer: InterfaceSynthesizer | None = None,
    ) -> None:
        self.env = env
        self.emitter = ArtifactEmitter(env.sink, env.reporter)
        self.includes = IncludeResolver(self)
        self._synthesize_builder = builder_synthesizer or synthesize_builder
        self._synthesize_interface = interface_synthesizer or synthesize_interface
        self.logger = get_logger("processor")

    @staticmethod
    def supported_directives() -> FrozenSet[str]:
        return frozenset(kind.value for kind in DirectiveKind if kind is not DirectiveKind.UNKNOWN)

    def process_round(self, round_env: RoundEnvironment) -> bool:
        """Process every (directive, element) pair of the round; always claims them."""
        for identity in round_env.directives():
            for element in round_env.elements_with(identity):
                self.process(identity, element)
        return True

    def process(self, identity: str, element: DeclarationNode) -> None:
        kind = DirectiveKind.from_identity(identity)
        if kind is DirectiveKind.UNKNOWN:
            raise UnknownDirectiveError(f"Unknown directive: {identity}")

        config = self._load_config(element)
        if config is None:
            return
        self.logger.debug("Processing %s on %s", identity, element.qualified_name)

        if kind is DirectiveKind.BUILDER:
            self.process_builder(element, config)
        elif kind is DirectiveKind.INTERFACE:
            usage = element.find_directive(identity)
            add_builder = usage.flag("add_builder", True) if usage is not None else True
            self.process_interface(element, add_builder, config)
        else:
            self.includes.process(element, kind, config)

    def process_builder(
        self,
        element: DeclarationNode,
        config: GenerationConfig,
        namespace: Optional[str] = None,
    ) -> None:
        if not validate_declaration(element, DirectiveKind.BUILDER, self.env.reporter):
            return
        artifact = self._synthesize_builder(element, config, namespace)
        self.emitter.emit(element, artifact, config)

    def process_interface(
        self,
        element: DeclarationNode,
        add_builder: bool,
        config: GenerationConfig,
        namespace: Optional[str] = None,
    ) -> None:
        if not validate_declaration(element, DirectiveKind.INTERFACE, self.env.reporter):
            return
        conversion = self._synthesize_interface(element, add_builder, config, self.env.reporter, namespace)
        if conversion is None:
            return
        self.emitter.emit_rewritten(element, conversion.artifact, config, conversion.marker, conversion.rewrite)

    def _load_config(self, element: DeclarationNode) -> Optional[GenerationConfig]:
        try:
            return self.env.load_config(element)
        except (ConfigError, OSError) as exc:
            self.env.reporter.error(
                f"Could not load recordgen configuration: {exc}",
                element,
                DiagnosticCode.INVALID_CONFIGURATION,
            )
            return None


__all__ = ["RecordProcessor", "RoundEnvironment", "UnknownDirectiveError"]
