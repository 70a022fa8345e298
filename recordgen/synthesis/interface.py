"""Value type synthesis for interface-like declarations."""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from functools import partial
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from ..config import GenerationConfig
from ..diagnostics import DiagnosticReporter
from ..directives import RECORD_INTERFACE
from ..models import DiagnosticCode, SynthesizedArtifact
from .naming import class_reference, default_namespace, generated_class_name, top_level_name
from .rewriter import rewrite_as_value_type

if TYPE_CHECKING:  # pragma: no cover - typing aid
    from ..host.symbols import Declaration

INTERFACE_TEMPLATE = "value_type.py.j2"
GENERATED_MARKER = f'@generated("{RECORD_INTERFACE}")'


@dataclass
class InterfaceConversion:
    """Placeholder artifact plus the rewrite that turns it into a value type."""

    artifact: SynthesizedArtifact
    marker: str
    rewrite: Callable[[str], str]


def synthesize_interface(
    element: "Declaration",
    add_builder: bool,
    config: GenerationConfig,
    reporter: DiagnosticReporter,
    namespace: Optional[str] = None,
) -> Optional[InterfaceConversion]:
    """Describe the value type implementing ``element``, or None if it cannot be built.

    Annotated attributes and zero-argument abstract methods become fields;
    concrete methods are copied into the value type, which is registered as a
    virtual subclass of ``element``.
    """
    fields: Dict[str, str] = {component.name: component.annotation for component in element.components}
    methods: List[str] = []
    valid = True
    for method in element.methods:
        if method.name.startswith("__"):
            continue
        if not method.abstract:
            methods.append(textwrap.indent(method.source, config.file_indent))
            continue
        if method.is_static:
            continue
        if method.parameters:
            reporter.error(
                f"Non-static, non-default methods must take no arguments: {method.name}",
                element,
                DiagnosticCode.INVALID_COMPONENT,
            )
            valid = False
            continue
        fields.setdefault(method.name, method.returns or "object")
    if not valid:
        return None

    class_name = generated_class_name(element, config.interface_suffix, config.prefix_enclosing_class_names)
    context = {
        "marker": GENERATED_MARKER,
        "class_name": class_name,
        "interface_qualified_name": element.qualified_name,
        "interface_module": element.module.qualified_name,
        "interface_import": top_level_name(element),
        "interface_ref": class_reference(element),
        "import_lines": list(element.module.import_lines),
        "components": [{"name": name, "annotation": annotation} for name, annotation in fields.items()],
        "methods": methods,
    }
    artifact = SynthesizedArtifact(
        namespace=namespace if namespace is not None else default_namespace(element),
        simple_name=class_name,
        template=INTERFACE_TEMPLATE,
        context=context,
    )
    rewrite = partial(rewrite_as_value_type, class_name=class_name, add_builder=add_builder)
    return InterfaceConversion(artifact=artifact, marker=GENERATED_MARKER, rewrite=rewrite)


__all__ = ["GENERATED_MARKER", "INTERFACE_TEMPLATE", "InterfaceConversion", "synthesize_interface"]
