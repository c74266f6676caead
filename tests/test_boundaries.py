"""Pure packages (domain, receipt) must not import runtime or I/O libraries."""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

_PACKAGE = Path(__file__).resolve().parents[1] / "dompet"
_PURE_DIRS = ("domain", "receipt")
_FORBIDDEN_PREFIXES = ("dompet.runtime", "dompet.application", "dompet.cli", "httpx", "pandas")


def _module_imports(path: Path) -> set[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    names: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            names.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
            names.add(node.module)
    return names


def _pure_files() -> list[Path]:
    return sorted(path for sub in _PURE_DIRS for path in (_PACKAGE / sub).rglob("*.py"))


def test_pure_packages_exist() -> None:
    assert _pure_files()


@pytest.mark.parametrize("path", _pure_files(), ids=lambda p: str(p.relative_to(_PACKAGE)))
def test_pure_module_has_no_runtime_imports(path: Path) -> None:
    offending = sorted(
        name
        for name in _module_imports(path)
        if any(name == prefix or name.startswith(f"{prefix}.") for prefix in _FORBIDDEN_PREFIXES)
    )
    assert offending == []
