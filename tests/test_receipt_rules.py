"""Tests for receipt keyword rule layering and TOML loading."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from dompet.receipt.keyword_rules import DENYLIST, build_receipt_keyword_rules, get_default_receipt_rules
from dompet.runtime import load_receipt_keyword_rules
from dompet.runtime.receipt_rules import load_toml


def _config_dir() -> Path:
    path = Path(os.environ["DOMPET_CONFIG_DIR"])
    path.mkdir(parents=True, exist_ok=True)
    return path


def test_builtin_rules_have_original_tables() -> None:
    rules = get_default_receipt_rules()

    assert rules.denylist == DENYLIST
    assert [f.name for f in rules.families] == ["food", "beverage", "household"]
    assert rules.item_bounds == (1_000, 1_000_000)
    assert rules.fallback_bounds == (1_000, 10_000_000)


def test_packaged_rules_are_layered_on_builtin_tables() -> None:
    rules = load_receipt_keyword_rules()

    assert "total" in rules.denylist
    assert "kasir" in rules.denylist
    food = next(f for f in rules.families if f.name == "food")
    assert "indomi" in food.keywords
    assert "roti" in food.keywords
    assert [f.name for f in rules.families][-2:] == ["personal_care", "transport"]


def test_project_override_extends_and_replaces() -> None:
    (_config_dir() / "receipt_rules.toml").write_text(
        """
denylist = ["promo"]

[[families]]
name = "beverage"
keywords = ["boba"]

[fallback]
description = "Belanja"

[amounts]
item_max = 2000000
""",
        encoding="utf-8",
    )

    rules = load_receipt_keyword_rules()

    assert "promo" in rules.denylist
    assert "kasir" in rules.denylist
    beverage = next(f for f in rules.families if f.name == "beverage")
    assert beverage.keywords[0] == "teh"
    assert "boba" in beverage.keywords
    assert rules.fallback_description == "Belanja"
    assert rules.fallback_keyword == "pembelian"
    assert rules.item_bounds == (1_000, 2_000_000)


def test_explicit_rule_paths(tmp_path: Path) -> None:
    rule_file = tmp_path / "rules.toml"
    rule_file.write_text('denylist = ["promo"]\n', encoding="utf-8")

    rules = load_receipt_keyword_rules((str(rule_file),))

    assert "promo" in rules.denylist
    assert "kasir" not in rules.denylist


def test_invalid_bounds_are_rejected() -> None:
    with pytest.raises(ValueError, match="item_min"):
        build_receipt_keyword_rules([{"amounts": {"item_min": 5000, "item_max": 1000}}])


def test_confidence_override() -> None:
    rules = build_receipt_keyword_rules([{"confidence": {"fallback": 0.5}}])

    assert rules.fallback_confidence == 0.5
    assert rules.bare_confidence == 0.85


def test_missing_toml_is_empty(tmp_path: Path) -> None:
    assert load_toml(tmp_path / "missing.toml") == {}
