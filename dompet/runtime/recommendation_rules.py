"""Runtime loader for recommendation threshold overrides."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dompet.domain.recommendations import RecommendationThresholds, build_recommendation_thresholds
from dompet.runtime.paths import get_paths
from dompet.runtime.receipt_rules import load_toml


@lru_cache(maxsize=8)
def load_recommendation_thresholds(rules_path: str | None = None) -> RecommendationThresholds:
    """Defaults merged with ``recommendation_rules.toml`` from the config directory, if present."""
    path = Path(rules_path) if rules_path is not None else get_paths().recommendation_rules
    return build_recommendation_thresholds(load_toml(path))
