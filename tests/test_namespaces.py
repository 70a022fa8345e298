"""Tests for recordgen.namespaces."""

from __future__ import annotations

import pytest

from recordgen.diagnostics import DiagnosticReporter
from recordgen.models import DeclarationKind, DiagnosticCode
from recordgen.namespaces import build_namespace_name, resolve_enclosing_namespace
from tests._fixtures.engine import FakeNode, namespace, value_type


def test_resolve_enclosing_namespace_skips_modules_and_outer_classes(reporter: DiagnosticReporter) -> None:
    package = namespace("com.example")
    module = FakeNode("models", DeclarationKind.MODULE, package)
    outer = FakeNode("Outer", DeclarationKind.CLASS, module)
    inner = FakeNode("Inner", DeclarationKind.VALUE_TYPE, outer)

    assert resolve_enclosing_namespace(inner, reporter) is package
    assert len(reporter) == 0


def test_resolve_enclosing_namespace_reports_dead_end(reporter: DiagnosticReporter) -> None:
    orphan_parent = FakeNode("Detached", DeclarationKind.CLASS)
    orphan = FakeNode("Point", DeclarationKind.VALUE_TYPE, orphan_parent)

    assert resolve_enclosing_namespace(orphan, reporter) is None

    [diagnostic] = reporter.errors
    assert diagnostic.message == "Element has no enclosing namespace"
    assert diagnostic.element is orphan
    assert diagnostic.code is DiagnosticCode.UNRESOLVABLE_NAMESPACE


def test_resolve_enclosing_namespace_handles_deep_chains(reporter: DiagnosticReporter) -> None:
    package = namespace("deep")
    node = FakeNode("Level0", DeclarationKind.CLASS, package)
    for depth in range(1, 5000):
        node = FakeNode(f"Level{depth}", DeclarationKind.CLASS, node)

    assert resolve_enclosing_namespace(node, reporter) is package


@pytest.mark.parametrize("host_kind", [DeclarationKind.CLASS, DeclarationKind.NAMESPACE])
def test_target_token_uses_target_namespace_regardless_of_host(
    reporter: DiagnosticReporter, host_kind: DeclarationKind
) -> None:
    target = value_type("Point", namespace("geometry.shapes"))
    host = FakeNode("Host", host_kind, namespace("app") if host_kind is DeclarationKind.CLASS else None)

    assert build_namespace_name("*", host, target, reporter) == "geometry.shapes"


def test_host_token_uses_host_enclosing_namespace(reporter: DiagnosticReporter) -> None:
    host = FakeNode("Includes", DeclarationKind.CLASS, namespace("app.config"))

    for target_package in ("geometry", "billing.invoices"):
        target = value_type("Point", namespace(target_package))
        assert build_namespace_name("@", host, target, reporter) == "app.config"


def test_host_token_uses_host_itself_when_it_is_a_namespace(reporter: DiagnosticReporter) -> None:
    host = namespace("app.generated")
    target = value_type("Point", namespace("geometry"))

    assert build_namespace_name("@.builders", host, target, reporter) == "app.generated.builders"


def test_combined_pattern_substitutes_both_tokens(reporter: DiagnosticReporter) -> None:
    host = FakeNode("Includes", DeclarationKind.CLASS, namespace("bar"))
    target = value_type("Point", namespace("foo"))

    assert build_namespace_name("*.@", host, target, reporter) == "foo.bar"
    assert build_namespace_name("@.*", host, target, reporter) == "bar.foo"
    assert build_namespace_name("*.generated", host, target, reporter) == "foo.generated"


def test_every_token_occurrence_is_replaced(reporter: DiagnosticReporter) -> None:
    host = FakeNode("Includes", DeclarationKind.CLASS, namespace("bar"))
    target = value_type("Point", namespace("foo"))

    assert build_namespace_name("*.@.*.@", host, target, reporter) == "foo.bar.foo.bar"


def test_pattern_without_tokens_is_used_verbatim(reporter: DiagnosticReporter) -> None:
    host = FakeNode("Includes", DeclarationKind.CLASS, namespace("bar"))
    target = value_type("Point", namespace("foo"))

    assert build_namespace_name("fixed.location", host, target, reporter) == "fixed.location"


def test_root_namespace_substitutes_empty_name(reporter: DiagnosticReporter) -> None:
    host = FakeNode("Includes", DeclarationKind.CLASS, namespace("bar"))
    target = value_type("Point", namespace(""))

    assert build_namespace_name("*", host, target, reporter) == ""


def test_unresolvable_target_namespace_returns_none(reporter: DiagnosticReporter) -> None:
    host = FakeNode("Includes", DeclarationKind.CLASS, namespace("bar"))
    target = FakeNode("Point", DeclarationKind.VALUE_TYPE)

    assert build_namespace_name("*", host, target, reporter) is None
    assert [item.message for item in reporter.errors] == ["Element has no enclosing namespace"]
