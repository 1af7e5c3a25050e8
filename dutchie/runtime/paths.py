"""Centralized path management for dutchie.

Single source of truth for the project-level configuration files the runtime
layer reads. Nothing here is written to; the core keeps no state on disk.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path


def _get_project_root() -> Path:
    """Determine the project root: $DUTCHIE_HOME, else the working directory."""
    env_root = os.environ.get("DUTCHIE_HOME", "").strip()
    if env_root:
        return Path(env_root).expanduser()
    return Path.cwd()


@dataclass
class ProjectPaths:
    """Container for project-related paths."""

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def line_rules(self) -> Path:
        """Project-level line rules TOML file (extends the defaults)."""
        return self.config / "line_rules.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Drop the cached singleton so the next get_paths() re-reads the environment."""
    global _paths
    _paths = None
