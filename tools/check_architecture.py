"""Layer boundary checks.

Static import scan that keeps the pure layers free of I/O, services and
rendering libraries.

Usage:
    python tools/check_architecture.py

Exit code:
    0 = OK
    1 = violations found
"""

from __future__ import annotations

import ast
import sys
from pathlib import Path
from typing import Dict, List, Set, Tuple

ROOT = Path(__file__).resolve().parents[1]

_ENTRY = {"main", "ctrldocs"}
_RENDERING = {"matplotlib", "openpyxl", "numpy"}

LAYER_RULES: Dict[str, Set[str]] = {
    "core": {"app", "infra", "services", "storage"} | _ENTRY | _RENDERING,
    "domain": {"app", "infra", "services", "storage", "core"} | _ENTRY | _RENDERING,
    "infra": {"services", "storage", "core", "domain"} | _ENTRY | _RENDERING,
    "storage": _ENTRY | _RENDERING,
    "services": _ENTRY,
    "app": {"services", "storage"} | _ENTRY | _RENDERING,
}


def file_layer(path: Path, root: Path = ROOT) -> str | None:
    try:
        rel = path.relative_to(root)
    except ValueError:
        return None
    return rel.parts[0] if len(rel.parts) > 1 else None


def imported_packages(path: Path) -> List[Tuple[str, str]]:
    """(top-level package, full module) for every absolute import in a file."""
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    found: List[Tuple[str, str]] = []
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            found.extend((alias.name.split(".")[0], alias.name) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            found.append((node.module.split(".")[0], node.module))
    return found


def collect_violations(root: Path = ROOT) -> List[str]:
    violations: List[str] = []
    for layer, forbidden in LAYER_RULES.items():
        for f in sorted((root / layer).rglob("*.py")):
            if "__pycache__" in f.parts:
                continue
            for pkg, module in imported_packages(f):
                if pkg in forbidden:
                    violations.append(f"{f.relative_to(root)} imports forbidden '{module}' (layer={layer})")
    return violations


def main() -> int:
    violations = collect_violations()
    if violations:
        print("Architecture violations found:\n")
        for v in violations:
            print(" -", v)
        print("\nFix: move the logic down a layer or pass the dependency in from a service.")
        return 1

    print("OK: no architecture boundary violations.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
