"""Tests for recordgen.emitter."""

from __future__ import annotations

from pathlib import Path

import pytest

from recordgen.config import GenerationConfig
from recordgen.diagnostics import DiagnosticReporter
from recordgen.emitter import (
    GENERATED_HEADER,
    ArtifactEmitter,
    FileSystemSink,
    is_generated_source,
    module_name_for,
    strip_marker,
)
from recordgen.models import DeclarationKind, DiagnosticCode, SynthesizedArtifact
from recordgen.synthesis import RewriteError
from tests._fixtures.engine import STUB_TEMPLATE, FailingSink, FakeNode, RecordingSink, namespace


@pytest.fixture
def stub_config(tmp_path: Path) -> GenerationConfig:
    (tmp_path / STUB_TEMPLATE).write_text("class {{ name }}:\n{{ indent }}pass\n", encoding="utf-8")
    return GenerationConfig(templates_dir=tmp_path)


def _artifact(namespace_name: str, name: str = "PointBuilder") -> SynthesizedArtifact:
    return SynthesizedArtifact(namespace_name, name, STUB_TEMPLATE, {"name": name})


def _element() -> FakeNode:
    return FakeNode("Point", DeclarationKind.VALUE_TYPE, namespace("geometry"))


def test_qualified_name_joins_namespace_and_simple_name() -> None:
    assert _artifact("geometry.shapes").qualified_name == "geometry.shapes.PointBuilder"
    assert _artifact("").qualified_name == "PointBuilder"


def test_emit_commits_rendered_source(reporter: DiagnosticReporter, stub_config: GenerationConfig) -> None:
    sink = RecordingSink()
    emitter = ArtifactEmitter(sink, reporter)

    assert emitter.emit(_element(), _artifact("geometry"), stub_config) is True

    text = sink.files["geometry.PointBuilder"]
    assert text.startswith(GENERATED_HEADER + "\n# Auto generated by recordgen\n\n")
    assert text.endswith("class PointBuilder:\n    pass\n")
    assert len(reporter) == 0


def test_render_applies_indent_and_multiline_comment(
    reporter: DiagnosticReporter, stub_config: GenerationConfig, tmp_path: Path
) -> None:
    config = GenerationConfig(file_indent="\t", file_comment="Line one\nLine two", templates_dir=tmp_path)
    text = ArtifactEmitter(RecordingSink(), reporter).render(_artifact("geometry"), config)

    assert "# Line one\n# Line two\n" in text
    assert "class PointBuilder:\n\tpass\n" in text


def test_render_omits_empty_comment(reporter: DiagnosticReporter, tmp_path: Path, stub_config: GenerationConfig) -> None:
    config = GenerationConfig(file_comment="", templates_dir=tmp_path)
    text = ArtifactEmitter(RecordingSink(), reporter).render(_artifact("geometry"), config)

    assert text == f"{GENERATED_HEADER}\n\nclass PointBuilder:\n    pass\n"


def test_sink_open_failure_reports_detail(reporter: DiagnosticReporter, stub_config: GenerationConfig) -> None:
    element = _element()
    emitter = ArtifactEmitter(FailingSink(PermissionError("disk is read-only")), reporter)

    assert emitter.emit(element, _artifact("geometry"), stub_config) is False

    [diagnostic] = reporter.errors
    assert diagnostic.message == "Could not create source file: disk is read-only"
    assert diagnostic.element is element
    assert diagnostic.code is DiagnosticCode.EMISSION_IO_ERROR


def test_sink_open_failure_without_detail(reporter: DiagnosticReporter, stub_config: GenerationConfig) -> None:
    emitter = ArtifactEmitter(FailingSink(OSError()), reporter)

    emitter.emit(_element(), _artifact("geometry"), stub_config)

    assert [item.message for item in reporter.errors] == ["Could not create source file"]


def test_second_commit_of_same_name_fails_locally(reporter: DiagnosticReporter, stub_config: GenerationConfig) -> None:
    sink = RecordingSink()
    emitter = ArtifactEmitter(sink, reporter)

    assert emitter.emit(_element(), _artifact("geometry"), stub_config) is True
    assert emitter.emit(_element(), _artifact("geometry"), stub_config) is False
    assert emitter.emit(_element(), _artifact("geometry", "LineBuilder"), stub_config) is True

    [diagnostic] = reporter.errors
    assert diagnostic.message.startswith("Could not create source file: Attempt to recreate")
    assert set(sink.files) == {"geometry.PointBuilder", "geometry.LineBuilder"}


def test_emit_rewritten_strips_marker_before_rewrite(reporter: DiagnosticReporter, tmp_path: Path) -> None:
    (tmp_path / "marked.py.j2").write_text("@marker\nclass {{ name }}:\n{{ indent }}pass\n", encoding="utf-8")
    config = GenerationConfig(templates_dir=tmp_path)
    artifact = SynthesizedArtifact("geometry", "ShapeRecord", "marked.py.j2", {"name": "ShapeRecord"})
    sink = RecordingSink()
    seen = []

    def rewrite(source: str) -> str:
        seen.append(source)
        return source.replace("class ShapeRecord:", "@frozen\nclass ShapeRecord:")

    ArtifactEmitter(sink, reporter).emit_rewritten(_element(), artifact, config, "@marker", rewrite)

    assert "@marker" not in seen[0]
    assert sink.files["geometry.ShapeRecord"] == rewrite(seen[0])
    assert "@frozen\nclass ShapeRecord:" in sink.files["geometry.ShapeRecord"]


def test_strip_marker_removes_only_marker_line() -> None:
    source = "a = 1\n@generated(\"x\")\nclass A:\n    pass\n"

    assert strip_marker(source, '@generated("x")') == "a = 1\nclass A:\n    pass\n"
    assert strip_marker(source, "missing") == source


def test_module_name_for_uses_snake_case() -> None:
    assert module_name_for("PointBuilder") == "point_builder"
    assert module_name_for("HTTPRequestRecord") == "http_request_record"
    assert module_name_for("Outer2InnerBuilder") == "outer2_inner_builder"


def test_file_system_sink_writes_under_namespace_directories(tmp_path: Path) -> None:
    sink = FileSystemSink(tmp_path)

    with sink.open("geometry.shapes.PointBuilder") as writer:
        writer.write("x = 1\n")

    path = tmp_path / "geometry" / "shapes" / "point_builder.py"
    assert path.read_text(encoding="utf-8") == "x = 1\n"
    assert sink.created == [path]


def test_file_system_sink_opens_each_name_once(tmp_path: Path) -> None:
    sink = FileSystemSink(tmp_path)
    with sink.open("PointBuilder") as writer:
        writer.write("")

    with pytest.raises(FileExistsError):
        with sink.open("PointBuilder"):
            pass
    assert sink.created == [tmp_path / "point_builder.py"]


def test_file_system_sink_keeps_hand_written_sources(tmp_path: Path) -> None:
    existing = tmp_path / "geometry" / "point_builder.py"
    existing.parent.mkdir()
    existing.write_text("HAND_WRITTEN = True\n", encoding="utf-8")
    sink = FileSystemSink(tmp_path)

    with pytest.raises(FileExistsError, match="hand-written"):
        with sink.open("geometry.PointBuilder"):
            pass

    assert existing.read_text(encoding="utf-8") == "HAND_WRITTEN = True\n"
    assert sink.created == []


def test_file_system_sink_replaces_previous_output(tmp_path: Path) -> None:
    existing = tmp_path / "point_builder.py"
    existing.write_text(f"{GENERATED_HEADER}\nOLD = True\n", encoding="utf-8")
    sink = FileSystemSink(tmp_path)

    with sink.open("PointBuilder") as writer:
        writer.write(f"{GENERATED_HEADER}\nNEW = True\n")

    assert "NEW = True" in existing.read_text(encoding="utf-8")


def test_hand_written_collision_is_reported(reporter: DiagnosticReporter, stub_config: GenerationConfig, tmp_path: Path) -> None:
    (tmp_path / "geometry").mkdir()
    (tmp_path / "geometry" / "point_builder.py").write_text("HAND_WRITTEN = True\n", encoding="utf-8")
    emitter = ArtifactEmitter(FileSystemSink(tmp_path), reporter)

    assert emitter.emit(_element(), _artifact("geometry"), stub_config) is False

    [diagnostic] = reporter.errors
    assert diagnostic.message.startswith("Could not create source file: Refusing to overwrite hand-written source")
    assert diagnostic.code is DiagnosticCode.EMISSION_IO_ERROR


def test_broken_template_is_reported_per_element(reporter: DiagnosticReporter, tmp_path: Path) -> None:
    (tmp_path / "broken.py.j2").write_text("{% if %}\n", encoding="utf-8")
    config = GenerationConfig(templates_dir=tmp_path)
    sink = RecordingSink()
    emitter = ArtifactEmitter(sink, reporter)
    first, second = _element(), _element()

    assert emitter.emit(first, SynthesizedArtifact("geometry", "PointBuilder", "broken.py.j2"), config) is False
    assert emitter.emit(second, SynthesizedArtifact("geometry", "LineBuilder", "broken.py.j2"), config) is False

    assert [item.element for item in reporter.errors] == [first, second]
    assert all(item.code is DiagnosticCode.INVALID_CONFIGURATION for item in reporter.errors)
    assert reporter.errors[0].message.startswith("Could not render broken.py.j2 for geometry.PointBuilder:")
    assert sink.files == {}


def test_missing_template_is_reported(reporter: DiagnosticReporter, tmp_path: Path) -> None:
    config = GenerationConfig(templates_dir=tmp_path)

    assert ArtifactEmitter(RecordingSink(), reporter).emit(
        _element(), SynthesizedArtifact("geometry", "PointBuilder", "absent.py.j2"), config
    ) is False
    assert len(reporter.errors) == 1


def test_failed_rewrite_is_reported(reporter: DiagnosticReporter, stub_config: GenerationConfig) -> None:
    sink = RecordingSink()

    def rewrite(source: str) -> str:
        raise RewriteError("class ShapeRecord not found in rendered source")

    assert ArtifactEmitter(sink, reporter).emit_rewritten(
        _element(), _artifact("geometry"), stub_config, "@marker", rewrite
    ) is False

    [diagnostic] = reporter.errors
    assert diagnostic.message.endswith("class ShapeRecord not found in rendered source")
    assert sink.files == {}


def test_is_generated_source_checks_leading_lines() -> None:
    assert is_generated_source(f"{GENERATED_HEADER}\nx = 1\n")
    assert not is_generated_source("x = 1\n")
    assert not is_generated_source("\n" * 10 + GENERATED_HEADER)
