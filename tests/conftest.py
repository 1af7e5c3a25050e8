"""Shared pytest fixtures for dutchie tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from dutchie.runtime.line_rules import load_line_rules
from dutchie.runtime.paths import reset_paths


@pytest.fixture(autouse=True)
def isolated_project_root(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point DUTCHIE_HOME at an empty directory so no local config leaks into tests."""
    monkeypatch.setenv("DUTCHIE_HOME", str(tmp_path))
    monkeypatch.delenv("DUTCHIE_OCR_URL", raising=False)
    reset_paths()
    load_line_rules.cache_clear()
    yield tmp_path
    reset_paths()
    load_line_rules.cache_clear()
