"""Shared pytest fixtures for dompet tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from dompet.domain.category import CategoryRef, CategoryType
from dompet.runtime import load_receipt_keyword_rules, load_recommendation_thresholds, reset_paths


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch) -> Iterator[None]:
    """Point DOMPET_CONFIG_DIR at an empty directory and drop cached rule tables."""
    monkeypatch.setenv("DOMPET_CONFIG_DIR", str(tmp_path / "config"))
    monkeypatch.delenv("DOMPET_AI_API_KEY", raising=False)
    reset_paths()
    load_receipt_keyword_rules.cache_clear()
    load_recommendation_thresholds.cache_clear()
    yield
    reset_paths()
    load_receipt_keyword_rules.cache_clear()
    load_recommendation_thresholds.cache_clear()


@pytest.fixture
def categories() -> list[CategoryRef]:
    return [
        CategoryRef(id="cat_salary", name="Gaji", type=CategoryType.INCOME),
        CategoryRef(id="cat_misc", name="Belanja Lain", type=CategoryType.EXPENSE),
        CategoryRef(id="cat_food", name="Makanan", type=CategoryType.EXPENSE),
        CategoryRef(id="cat_drink", name="Minuman", type=CategoryType.EXPENSE),
        CategoryRef(id="cat_home", name="Rumah Tangga", type=CategoryType.EXPENSE),
    ]
