# -*- coding: utf-8 -*-
"""Controller record validations (pure)."""

from __future__ import annotations

from typing import List

from core.keys import RecordKeys as K
from core.models.controller import ControllerData
from core.types import Issue, Severity
from domain.parse import is_blank, to_float


_REQUIRED = [
    (K.CAMPUS, "campus", "Campus"),
    (K.BUILDING, "building", "Building"),
    (K.CONTROLLER_NUMBER, "controller_number", "Controller number"),
]


def validate_controller(record: ControllerData) -> List[Issue]:
    issues: List[Issue] = []

    for key, attr, label in _REQUIRED:
        if is_blank(getattr(record, attr, ""), allow_dash=False):
            issues.append(Issue(code="CTRL_MISSING_FIELD", message=f"{label} is required.", context=key))

    if not record.channels:
        issues.append(Issue(code="CTRL_NO_CHANNELS", message="A controller must have at least one channel.", context=K.CHANNELS))

    seen = set()
    for ch in record.channels:
        if ch.channel_number in seen:
            issues.append(Issue(
                code="CTRL_DUPLICATE_CHANNEL",
                message=f"Channel number {ch.channel_number} is used more than once.",
                context=K.CHANNELS,
            ))
        seen.add(ch.channel_number)
        for attr, key in (("voltage", K.VOLTAGE), ("current", K.CURRENT)):
            raw = getattr(ch, attr)
            if not is_blank(raw) and to_float(raw, default=None) is None:
                # Still saved; the value simply counts as 0 W.
                issues.append(Issue(
                    code="CTRL_UNPARSABLE_NUMBER",
                    message=f"Channel {ch.channel_number}: {attr} {raw!r} is not a number and counts as 0.",
                    severity=Severity.WARNING,
                    context=key,
                ))

    if record.power_limit is not None and record.power_limit <= 0:
        issues.append(Issue(
            code="CTRL_LIMIT_IGNORED",
            message="Power limit must be positive; it is ignored for warnings.",
            severity=Severity.WARNING,
            context=K.POWER_LIMIT,
        ))

    return issues
