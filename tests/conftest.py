"""
Shared fixtures for the checker tests.
"""

from pathlib import Path

import pytest


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """Create a project with the complete required layout."""
    root = tmp_path / "project"
    (root / "styles").mkdir(parents=True)
    (root / "fonts").mkdir()
    (root / "index.html").write_text("<!DOCTYPE html><title>Site</title>", encoding="utf-8")
    (root / "styles" / "style.css").write_text("body { font-family: Inter, sans-serif; }\n", encoding="utf-8")
    (root / "fonts" / "fonts.css").write_text("", encoding="utf-8")
    return root
