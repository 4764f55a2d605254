# -*- coding: utf-8 -*-
"""Pure power calculations for controller channels.

NOTE: This module must not depend on storage, services or any UI.

- channel power  = V * A * parallel count (unparsable numbers count as 0)
- total power    = sum of channel powers (order-independent)
- warning level  = tier of total / limit against inclusive thresholds
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Iterable, Optional

from domain.parse import to_float, to_positive_int

# Load thresholds as a fraction of the power limit (inclusive lower bounds).
CAUTION_RATIO: float = 0.80
WARNING_RATIO: float = 0.90
CRITICAL_RATIO: float = 1.00


class WarningLevel(IntEnum):
    """Ordered tiers; a larger value is a more severe tier."""

    NONE = 0
    CAUTION = 1
    WARNING = 2
    CRITICAL = 3

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class PowerSummary:
    total_w: float
    limit_w: Optional[float]
    load_pct: Optional[float]
    level: WarningLevel


def channel_power(voltage: Any, current: Any, parallel_count: Any = 1) -> float:
    v = to_float(voltage, default=0.0) or 0.0
    a = to_float(current, default=0.0) or 0.0
    if v <= 0 or a <= 0:
        return 0.0
    n = to_positive_int(parallel_count, default=1)
    return float(v * a * n)


def channel_power_of(channel: Any) -> float:
    """channel_power for any object carrying voltage/current/parallel_count."""
    return channel_power(
        getattr(channel, "voltage", None),
        getattr(channel, "current", None),
        getattr(channel, "parallel_count", 1),
    )


def total_power(channels: Iterable[Any]) -> float:
    # fsum: the total does not depend on channel order
    return float(math.fsum(channel_power_of(c) for c in channels or []))


def _positive_limit(limit: Any) -> Optional[float]:
    lim = to_float(limit, default=None)
    if lim is None or lim <= 0:
        return None
    return lim


def load_percent(total: float, limit: Any) -> Optional[float]:
    lim = _positive_limit(limit)
    if lim is None:
        return None
    return float(total) / lim * 100.0


def warning_level(total: float, limit: Any) -> WarningLevel:
    lim = _positive_limit(limit)
    if lim is None:
        return WarningLevel.NONE
    total = float(total or 0.0)
    if total >= lim * CRITICAL_RATIO:
        return WarningLevel.CRITICAL
    if total >= lim * WARNING_RATIO:
        return WarningLevel.WARNING
    if total >= lim * CAUTION_RATIO:
        return WarningLevel.CAUTION
    return WarningLevel.NONE


def summarize(controller: Any) -> PowerSummary:
    total = total_power(getattr(controller, "channels", []) or [])
    limit = _positive_limit(getattr(controller, "power_limit", None))
    return PowerSummary(
        total_w=total,
        limit_w=limit,
        load_pct=load_percent(total, limit),
        level=warning_level(total, limit),
    )
