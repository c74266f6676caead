"""Runtime loader for receipt keyword rules."""

from __future__ import annotations

import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from dompet.receipt.keyword_rules import ReceiptKeywordRules, build_receipt_keyword_rules
from dompet.runtime.paths import get_paths


def load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    if not path.exists():
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    return data if isinstance(data, dict) else {}


@lru_cache(maxsize=8)
def load_receipt_keyword_rules(rule_paths: tuple[str, ...] | None = None) -> ReceiptKeywordRules:
    """Load receipt keyword tables from the packaged defaults plus the project override."""
    if rule_paths is None:
        p = get_paths()
        seen_paths: set[Path] = set()
        rule_files: list[Path] = []
        for candidate in (p.default_receipt_rules, p.receipt_rules):
            resolved = candidate.resolve()
            if resolved in seen_paths:
                continue
            seen_paths.add(resolved)
            rule_files.append(candidate)
    else:
        rule_files = [Path(path) for path in rule_paths]

    return build_receipt_keyword_rules(tuple(load_toml(path) for path in rule_files))
