# -*- coding: utf-8 -*-
"""Simple event bus for record-change notifications (no UI dependency)."""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import time
from typing import Any, Callable, Dict, List, Tuple, Type


@dataclass(frozen=True)
class ControllersChanged:
    reason: str
    ids: Tuple[str, ...] = ()
    timestamp: float = field(default_factory=time.time)


@dataclass(frozen=True)
class TemplatesChanged:
    reason: str
    ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FixturesChanged:
    reason: str
    ids: Tuple[str, ...] = ()


class EventBus:
    """Minimal in-process event bus (best-effort)."""

    def __init__(self) -> None:
        self._subs: Dict[Type[Any], List[Callable[[Any], None]]] = {}

    def subscribe(self, event_type: Type[Any], callback: Callable[[Any], None]) -> None:
        self._subs.setdefault(event_type, []).append(callback)

    def unsubscribe(self, event_type: Type[Any], callback: Callable[[Any], None]) -> None:
        subs = self._subs.get(event_type, [])
        if callback in subs:
            subs.remove(callback)

    def emit(self, event: Any) -> None:
        for cb in list(self._subs.get(type(event), []) or []):
            try:
                cb(event)
            except Exception:
                # Subscribers are display caches; a failing one must not undo a committed write.
                logging.getLogger(__name__).warning("Event handler failed for %s", type(event).__name__, exc_info=True)
