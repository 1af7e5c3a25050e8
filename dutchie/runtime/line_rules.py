"""Runtime loader for receipt line classification rules."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dutchie.receipt.line_rules import DEFAULT_LINE_RULES, LineRules, build_line_rules
from dutchie.runtime.logging import get_logger
from dutchie.runtime.paths import get_paths

logger = get_logger(__name__)


@lru_cache(maxsize=4)
def load_line_rules(config_path: str | None = None) -> LineRules:
    """
    Load line rules: built-in defaults extended by a TOML file.

    Without ``config_path`` the project file (config/line_rules.toml) is used
    when present; an explicit path must exist.
    """
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Line rules file not found: {path}")
    else:
        path = get_paths().line_rules
        if not path.exists():
            logger.debug("No project line rules at %s; using built-in defaults", path)
            return DEFAULT_LINE_RULES

    with open(path, "rb") as f:
        config = tomllib.load(f)

    rules = build_line_rules([config.get("line_rules", config)])
    logger.debug(
        "Loaded line rules from %s (%d noise terms, y_tolerance=%s)", path, len(rules.noise_terms), rules.y_tolerance
    )
    return rules
