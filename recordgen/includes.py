"""Expansion of include directives into per-target generation calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from .config import GenerationConfig
from .logging import get_logger
from .models import DeclarationNode, DiagnosticCode, DirectiveKind
from .namespaces import DEFAULT_PATTERN, build_namespace_name

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from .dispatcher import RecordProcessor


class IncludeResolver:
    """Applies an include directive to each declaration listed in its targets.

    Targets are handled in list order and independently: a target that cannot
    be resolved, placed, or generated is reported and the batch moves on.
    """

    def __init__(self, processor: "RecordProcessor") -> None:
        self.processor = processor
        self.logger = get_logger("includes")

    def process(self, element: DeclarationNode, kind: DirectiveKind, config: GenerationConfig) -> None:
        env = self.processor.env
        reporter = env.reporter
        identity = kind.value

        usage = element.find_directive(identity)
        if usage is None:
            reporter.error(
                f"Could not resolve directive for: {identity}",
                element,
                DiagnosticCode.DIRECTIVE_ATTRIBUTE_MISSING,
            )
            return

        targets = _as_references(usage.get("targets"))
        if not targets:
            reporter.error(
                f"Could not resolve target list for: {identity}",
                element,
                DiagnosticCode.DIRECTIVE_ATTRIBUTE_MISSING,
            )
            return

        pattern = usage.get("namespace_pattern")
        if not isinstance(pattern, str):
            pattern = DEFAULT_PATTERN
        self.logger.debug(
            "Expanding %s on %s: %d target(s), pattern %r",
            identity,
            element.qualified_name,
            len(targets),
            pattern,
        )

        for reference in targets:
            target = env.symbols.resolve(reference, element)
            if target is None:
                reporter.error(
                    f"Could not resolve element for: {reference}",
                    element,
                    DiagnosticCode.UNRESOLVABLE_REFERENCE,
                )
                continue
            namespace = build_namespace_name(pattern, element, target, reporter)
            if namespace is None:
                continue
            if kind is DirectiveKind.INTERFACE_INCLUDE:
                add_builder = usage.flag("add_builder", True)
                self.processor.process_interface(target, add_builder, config, namespace)
            else:
                self.processor.process_builder(target, config, namespace)


def _as_references(value: object) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, str) and item]
    return []


__all__ = ["IncludeResolver"]
