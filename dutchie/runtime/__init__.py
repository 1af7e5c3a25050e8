"""Runtime infrastructure for dutchie.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Line classification rules via load_line_rules()

Usage:
    from dutchie.runtime import get_logger, get_paths, load_line_rules

    logger = get_logger(__name__)
    rules = load_line_rules()
"""

from dutchie.runtime.line_rules import load_line_rules
from dutchie.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from dutchie.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_line_rules",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
