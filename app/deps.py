# -*- coding: utf-8 -*-
"""Runtime dependency checks for the export features."""
from __future__ import annotations

from importlib import import_module
from typing import List, Tuple

# (pip name, import name, what needs it)
EXPORT_PACKAGES: Tuple[Tuple[str, str, str], ...] = (
    ("matplotlib", "matplotlib", "PDF export"),
    ("numpy", "numpy", "raster PDF export"),
    ("openpyxl", "openpyxl", "spreadsheet export"),
)


def missing_runtime_packages() -> List[Tuple[str, str]]:
    """(pip name, feature) for every export package that cannot be imported."""
    missing: List[Tuple[str, str]] = []
    for package_name, import_name, feature in EXPORT_PACKAGES:
        try:
            import_module(import_name)
        except ModuleNotFoundError:
            missing.append((package_name, feature))
    return missing


def ensure_runtime_deps() -> None:
    """Raise RuntimeError naming the missing packages and how to install them."""
    missing = missing_runtime_packages()
    if not missing:
        return
    listed = ", ".join(f"{name} ({feature})" for name, feature in missing)
    names = " ".join(name for name, _ in missing)
    raise RuntimeError(f"Missing Python packages: {listed}. Install them with: pip install {names}")
