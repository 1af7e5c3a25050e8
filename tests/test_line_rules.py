from pathlib import Path

import pytest

from dutchie.receipt.line_rules import DEFAULT_LINE_RULES, build_line_rules
from dutchie.runtime.line_rules import load_line_rules


def test_defaults_used_without_project_file() -> None:
    assert load_line_rules() is DEFAULT_LINE_RULES


def test_project_file_extends_defaults(isolated_project_root: Path) -> None:
    config_dir = isolated_project_root / "config"
    config_dir.mkdir()
    (config_dir / "line_rules.toml").write_text(
        'noise_terms = ["loyalty", "points earned"]\ny_tolerance = 12\n',
        encoding="utf-8",
    )

    rules = load_line_rules()

    assert "loyalty" in rules.noise_terms
    assert "visa" in rules.noise_terms
    assert rules.y_tolerance == 12.0


def test_explicit_path_with_table(tmp_path: Path) -> None:
    path = tmp_path / "rules.toml"
    path.write_text('[line_rules]\nsummary_prefixes = "grand\\\\s+total"\n', encoding="utf-8")

    rules = load_line_rules(str(path))

    assert rules.summary_regex.match("GRAND  TOTAL 9.99")


def test_explicit_missing_path_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_line_rules(str(tmp_path / "missing.toml"))


@pytest.mark.parametrize("tolerance", [7, 15, "wide"])
def test_y_tolerance_out_of_range_is_rejected(tolerance: object) -> None:
    with pytest.raises(ValueError):
        build_line_rules([{"y_tolerance": tolerance}])


def test_invalid_pattern_is_rejected() -> None:
    with pytest.raises(ValueError, match="noise_terms"):
        build_line_rules([{"noise_terms": ["(unclosed"]}])


def test_later_configs_win_and_terms_are_deduplicated() -> None:
    rules = build_line_rules([{"noise_terms": "visa", "y_tolerance": 9}, {"y_tolerance": 13}])

    assert rules.noise_terms.count("visa") == 1
    assert rules.y_tolerance == 13.0
