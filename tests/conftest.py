from __future__ import annotations

from pathlib import Path

import pytest

from recordgen.diagnostics import DiagnosticReporter
from tests._fixtures.engine import Engine
from tests._fixtures.source_tree import SourceTreeBuilder


@pytest.fixture
def source_tree(tmp_path: Path) -> SourceTreeBuilder:
    """Provide a reusable source tree builder rooted at the pytest tmp_path."""
    return SourceTreeBuilder(tmp_path)


@pytest.fixture
def reporter() -> DiagnosticReporter:
    return DiagnosticReporter()


@pytest.fixture
def engine(tmp_path: Path) -> Engine:
    """Processor backed by in-memory sink and symbols."""
    return Engine(tmp_path)
