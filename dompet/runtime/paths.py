"""Centralized path management for dompet configuration files."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

_PACKAGE_ROOT = Path(__file__).resolve().parent.parent


def _get_config_dir() -> Path:
    """Config directory from DOMPET_CONFIG_DIR, else ./config."""
    raw = os.environ.get("DOMPET_CONFIG_DIR", "").strip()
    return Path(raw).expanduser() if raw else Path.cwd() / "config"


@dataclass
class ProjectPaths:
    """Container for configuration paths.

    Packaged defaults live next to the code; project overrides live in the
    config directory and are optional.
    """

    config: Path = field(default_factory=_get_config_dir)

    def __post_init__(self) -> None:
        self.config = self.config.resolve()

    # --- Packaged defaults ---
    @property
    def default_receipt_rules(self) -> Path:
        """Packaged receipt keyword tables (denylist, category families, bounds)."""
        return _PACKAGE_ROOT / "receipt" / "rules" / "default_receipt_rules.toml"

    # --- Project overrides ---
    @property
    def receipt_rules(self) -> Path:
        """Project-level receipt keyword overrides."""
        return self.config / "receipt_rules.toml"

    @property
    def recommendation_rules(self) -> Path:
        """Project-level recommendation threshold overrides."""
        return self.config / "recommendation_rules.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance."""
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached paths so the next call re-reads DOMPET_CONFIG_DIR."""
    global _paths
    _paths = None
