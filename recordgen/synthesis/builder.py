"""Builder synthesis for value types."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..config import GenerationConfig
from ..directives import RECORD_BUILDER
from ..models import SynthesizedArtifact
from .naming import class_reference, default_namespace, generated_class_name, top_level_name

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..host.symbols import Declaration

BUILDER_TEMPLATE = "builder.py.j2"


def synthesize_builder(
    record: "Declaration",
    config: GenerationConfig,
    namespace: Optional[str] = None,
) -> SynthesizedArtifact:
    """Describe the builder class for ``record``.

    The builder lands in ``namespace`` when given, otherwise next to the
    record's module.
    """
    class_name = generated_class_name(record, config.suffix, config.prefix_enclosing_class_names)
    components = [
        {"name": component.name, "annotation": component.annotation}
        for component in record.components
    ]
    context = {
        "directive": RECORD_BUILDER,
        "class_name": class_name,
        "record_module": record.module.qualified_name,
        "record_import": top_level_name(record),
        "record_ref": class_reference(record),
        "record_qualified_name": record.qualified_name,
        "components": components,
        "slots": _tuple_literal(f'"_{item["name"]}"' for item in components),
        "builder_method": config.builder_method_name,
        "copy_method": config.copy_method_name,
        "build_method": config.build_method_name,
    }
    return SynthesizedArtifact(
        namespace=namespace if namespace is not None else default_namespace(record),
        simple_name=class_name,
        template=BUILDER_TEMPLATE,
        context=context,
    )


def _tuple_literal(items) -> str:
    values = list(items)
    if len(values) == 1:
        return f"({values[0]},)"
    return "(" + ", ".join(values) + ")"


__all__ = ["BUILDER_TEMPLATE", "synthesize_builder"]
