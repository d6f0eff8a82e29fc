"""Unit tests for the import boundary checking script.

Tests verify that the hexagonal layering rules are enforced, and that the
project's own source tree obeys them.
"""

import ast
import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "scripts"))

from check_imports import (  # noqa: E402
    ALLOWED_IMPORTS,
    LAYER_HIERARCHY,
    check_file_imports,
    check_import_boundaries,
    format_violations,
    get_import_module,
)


class TestLayerRules:
    """Test that the layer rules are correctly defined."""

    def test_domain_is_innermost(self) -> None:
        assert LAYER_HIERARCHY["domain"] == min(LAYER_HIERARCHY.values())

    def test_bootstrap_is_outermost(self) -> None:
        assert LAYER_HIERARCHY["bootstrap"] == max(LAYER_HIERARCHY.values())

    def test_domain_imports_nothing(self) -> None:
        assert ALLOWED_IMPORTS["domain"] == set()

    def test_application_imports_domain_and_config(self) -> None:
        assert ALLOWED_IMPORTS["application"] == {"domain", "config"}

    def test_layers_only_import_inner_layers(self) -> None:
        """No layer may import a layer further out than itself."""
        for layer, allowed in ALLOWED_IMPORTS.items():
            for target in allowed:
                assert LAYER_HIERARCHY[target] < LAYER_HIERARCHY[layer]


class TestGetImportModule:
    """Test the get_import_module helper function."""

    def test_import_from_statement(self) -> None:
        node = ast.parse("from src.domain.models import Motion").body[0]
        assert isinstance(node, ast.ImportFrom)
        assert get_import_module(node) == "src.domain.models"

    def test_import_statement(self) -> None:
        node = ast.parse("import src.domain.models").body[0]
        assert isinstance(node, ast.Import)
        assert get_import_module(node) == "src.domain.models"

    def test_none_for_relative_import(self) -> None:
        node = ast.parse("from . import something").body[0]
        assert isinstance(node, ast.ImportFrom)
        assert get_import_module(node) is None


class TestCheckFileImports:
    """Test check_file_imports against a temporary src tree."""

    @pytest.fixture
    def src_dir(self, tmp_path: Path) -> Iterator[Path]:
        src = tmp_path / "src"
        for layer in LAYER_HIERARCHY:
            (src / layer).mkdir(parents=True)
            (src / layer / "__init__.py").write_text("")
        yield src

    def _write(self, src_dir: Path, layer: str, code: str) -> Path:
        py_file = src_dir / layer / "module.py"
        py_file.write_text(code)
        return py_file

    def test_domain_may_import_stdlib(self, src_dir: Path) -> None:
        py_file = self._write(src_dir, "domain", "import os\nfrom uuid import UUID")
        assert check_file_imports(py_file, src_dir) == []

    def test_application_may_import_config(self, src_dir: Path) -> None:
        py_file = self._write(
            src_dir, "application", "from src.config.motion_config import MotionConfig"
        )
        assert check_file_imports(py_file, src_dir) == []

    def test_bootstrap_may_import_infrastructure(self, src_dir: Path) -> None:
        py_file = self._write(
            src_dir, "bootstrap", "from src.infrastructure.stubs import RosterStub"
        )
        assert check_file_imports(py_file, src_dir) == []

    def test_domain_importing_application_is_a_violation(self, src_dir: Path) -> None:
        py_file = self._write(
            src_dir, "domain", "from src.application.ports import RosterProtocol"
        )

        violations = check_file_imports(py_file, src_dir)

        assert len(violations) == 1
        assert violations[0][1] == 1
        assert "domain layer cannot import from application" in violations[0][2]

    def test_domain_importing_config_is_a_violation(self, src_dir: Path) -> None:
        py_file = self._write(src_dir, "domain", "import src.config.motion_config")

        violations = check_file_imports(py_file, src_dir)

        assert "domain layer cannot import from config" in violations[0][2]

    def test_application_importing_infrastructure_is_a_violation(
        self, src_dir: Path
    ) -> None:
        py_file = self._write(
            src_dir,
            "application",
            "from src.infrastructure.stubs import JobSchedulerStub",
        )

        violations = check_file_imports(py_file, src_dir)

        assert "application layer cannot import from infrastructure" in violations[0][2]

    def test_infrastructure_importing_bootstrap_is_a_violation(
        self, src_dir: Path
    ) -> None:
        py_file = self._write(
            src_dir,
            "infrastructure",
            "from src.bootstrap.motion_engine import get_roster",
        )

        assert len(check_file_imports(py_file, src_dir)) == 1

    def test_multiple_violations_are_all_reported(self, src_dir: Path) -> None:
        py_file = self._write(
            src_dir,
            "domain",
            "from src.infrastructure import a\n"
            "from src.application import b\n"
            "from src.bootstrap import c\n",
        )

        assert [v[1] for v in check_file_imports(py_file, src_dir)] == [1, 2, 3]


class TestCheckImportBoundaries:
    """Test the directory scan."""

    def test_nonexistent_directory(self) -> None:
        assert check_import_boundaries(Path("/nonexistent/path")) == []

    def test_scans_nested_files(self, tmp_path: Path) -> None:
        nested = tmp_path / "src" / "domain" / "models"
        nested.mkdir(parents=True)
        (nested / "nested.py").write_text("from src.infrastructure import something")

        violations = check_import_boundaries(tmp_path / "src")

        assert len(violations) == 1
        assert "nested.py" in violations[0][0]
        assert "Total: 1 violation(s)" in format_violations(violations)

    def test_project_source_tree_has_no_violations(self) -> None:
        violations = check_import_boundaries(PROJECT_ROOT / "src")
        assert violations == [], format_violations(violations)
