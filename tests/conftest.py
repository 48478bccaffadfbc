"""Shared test fixtures for the mdserve test suite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture()
def docs_dir(tmp_path: Path) -> Path:
    """A small document tree with nested, hidden and non-Markdown entries."""
    root = tmp_path / "docs"
    (root / "guide" / "advanced").mkdir(parents=True)
    (root / ".git").mkdir()
    (root / ".hidden-dir").mkdir()

    (root / "README.md").write_text(
        "# Project\n\n## Install\n\n### From source\n\n## Usage\n\n```sh\n# not a heading\n```\n",
        encoding="utf-8",
    )
    (root / "notes.MD").write_text("# Notes\n", encoding="utf-8")
    (root / "guide" / "intro.md").write_text("# Intro\n\n## Intro\n", encoding="utf-8")
    (root / "guide" / "advanced" / "tuning.md").write_text("# Tuning\n", encoding="utf-8")
    (root / "guide" / "image.png").write_bytes(b"\x89PNG")
    (root / ".draft.md").write_text("# Draft\n", encoding="utf-8")
    (root / ".git" / "HEAD.md").write_text("# Hidden\n", encoding="utf-8")
    (root / ".hidden-dir" / "secret.md").write_text("# Secret\n", encoding="utf-8")
    (tmp_path / "outside.md").write_text("# Outside\n", encoding="utf-8")
    return root
