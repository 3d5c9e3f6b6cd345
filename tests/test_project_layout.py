from __future__ import annotations

from pathlib import Path


def test_required_package_paths_exist() -> None:
    root = Path(__file__).resolve().parents[1]
    required = [
        "src/size_compare/cli.py",
        "src/size_compare/config.py",
        "src/size_compare/reconcile.py",
        "src/size_compare/collect/__init__.py",
        "src/size_compare/diff/__init__.py",
        "src/size_compare/github/__init__.py",
        "src/size_compare/history/__init__.py",
        "src/size_compare/logging/__init__.py",
        "src/size_compare/report/__init__.py",
    ]
    for rel in required:
        assert (root / rel).exists(), rel
