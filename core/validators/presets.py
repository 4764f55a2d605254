# -*- coding: utf-8 -*-
"""Template and fixture preset validations (pure)."""

from __future__ import annotations

from typing import List

from core.keys import RecordKeys as K
from core.models.controller import ControllerTemplate, FixtureConfig
from core.types import Issue
from domain.parse import is_blank, to_float


def validate_template(template: ControllerTemplate) -> List[Issue]:
    issues: List[Issue] = []
    if is_blank(template.name, allow_dash=False):
        issues.append(Issue(code="TPL_MISSING_NAME", message="Template name is required.", context=K.NAME))
    return issues


def validate_fixture(fixture: FixtureConfig) -> List[Issue]:
    issues: List[Issue] = []
    for attr, label in ((K.NAME, "Name"), (K.VOLTAGE, "Voltage"), (K.CURRENT, "Current")):
        if is_blank(getattr(fixture, attr), allow_dash=False):
            issues.append(Issue(code="FIX_MISSING_FIELD", message=f"{label} is required.", context=attr))
    for attr, label in ((K.VOLTAGE, "Voltage"), (K.CURRENT, "Current")):
        raw = getattr(fixture, attr)
        if not is_blank(raw, allow_dash=False) and to_float(raw, default=None) is None:
            issues.append(Issue(code="FIX_NOT_A_NUMBER", message=f"{label} must be a number.", context=attr))
    return issues
