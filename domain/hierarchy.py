# -*- coding: utf-8 -*-
"""
domain/hierarchy.py

Campus -> building -> floor grouping of controllers for display and batch
export. Nothing here is persisted.

Empty location values are grouped under "Unknown Campus" / "Unknown Building" /
"Unknown Floor". Groups keep first-seen order and each floor keeps the
controllers in their original order.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence, TypeVar

UNKNOWN_CAMPUS = "Unknown Campus"
UNKNOWN_BUILDING = "Unknown Building"
UNKNOWN_FLOOR = "Unknown Floor"

T = TypeVar("T")

Hierarchy = Dict[str, Dict[str, Dict[str, List[T]]]]

_PLACEHOLDERS = {
    "campus": UNKNOWN_CAMPUS,
    "building": UNKNOWN_BUILDING,
    "floor": UNKNOWN_FLOOR,
}


def group_label(level: str, value: Optional[str]) -> str:
    """Display key for one location level. Only an empty value is unknown."""
    if not value:
        return _PLACEHOLDERS[level]
    return str(value)


def raw_value(level: str, label: str) -> str:
    """Inverse of group_label: the stored field value a group key stands for."""
    return "" if label == _PLACEHOLDERS[level] else label


def group_by_location(controllers: Iterable[T]) -> Hierarchy:
    tree: Hierarchy = {}
    for c in controllers or []:
        campus = group_label("campus", getattr(c, "campus", ""))
        building = group_label("building", getattr(c, "building", ""))
        floor = group_label("floor", getattr(c, "floor", ""))
        tree.setdefault(campus, {}).setdefault(building, {}).setdefault(floor, []).append(c)
    return tree


def flatten(node) -> List[T]:
    """All controllers below a campus, building or floor node, in tree order."""
    if isinstance(node, list):
        return list(node)
    out: List[T] = []
    for child in (node or {}).values():
        out.extend(flatten(child))
    return out


def count(node) -> int:
    return len(flatten(node))


def select(tree: Hierarchy, path: Sequence[str]) -> List[T]:
    """Controllers under ``path`` = (campus[, building[, floor]]); [] if absent."""
    node = tree
    for key in path:
        if not isinstance(node, dict) or key not in node:
            return []
        node = node[key]
    return flatten(node)


def section_name(*parts: str) -> str:
    """Name of a hierarchy section as used for batch export files."""
    return "_".join(str(p) for p in parts if p)
