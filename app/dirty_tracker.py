# -*- coding: utf-8 -*-
"""Unsaved-edit bookkeeping for an editing session (no UI dependency)."""
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, List, Set


class DirtyTracker:
    """Records which edits happened since the last save.

    ``is_dirty`` is derived from the recorded edits; ``clear_dirty()`` is
    called after a successful save. While paused, edits are not recorded
    (used when a sheet is seeded programmatically).
    """

    def __init__(self) -> None:
        self.reasons: List[str] = []
        self.fields: Set[str] = set()
        self._paused = 0

    @property
    def is_dirty(self) -> bool:
        return bool(self.reasons)

    @property
    def paused(self) -> bool:
        return self._paused > 0

    @property
    def last_change_summary(self) -> str:
        if not self.reasons:
            return ""
        parts = [self.reasons[-1]]
        if self.fields:
            parts.append(",".join(sorted(self.fields)))
        return " | ".join(parts)

    def mark_dirty(self, reason: str, keys: Iterable[str] = ()) -> None:
        if self.paused:
            return
        if reason not in self.reasons:
            self.reasons.append(reason)
        self.fields.update(str(k) for k in keys)

    def clear_dirty(self) -> None:
        self.reasons.clear()
        self.fields.clear()

    @contextmanager
    def suspend_tracking(self):
        self._paused += 1
        try:
            yield self
        finally:
            self._paused -= 1
