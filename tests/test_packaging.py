"""Tests for project metadata."""

from pathlib import Path

import pytest

tomllib = pytest.importorskip("tomllib")

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


class TestPyproject:
    """Tests for pyproject.toml."""

    @pytest.fixture
    def project(self):
        with open(PYPROJECT, "rb") as f:
            return tomllib.load(f)["project"]

    def test_no_readme_pointing_at_requirements(self, project):
        """Test that the package metadata does not use the requirements document as readme."""
        assert project.get("readme") != "SPEC_FULL.md"

    def test_console_script(self, project):
        """Test that the tasklist command points at the CLI entry point."""
        assert project["scripts"]["tasklist"] == "tasklist.cli:main"
