# -*- coding: utf-8 -*-
"""Shared domain types (pure, test-friendly)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Issue:
    """A single validation finding.

    ``context`` names the offending field (``campus``, ``channels``, ...).
    """

    code: str
    message: str
    severity: Severity = Severity.ERROR
    context: Optional[str] = None


def has_errors(issues: Iterable[Issue]) -> bool:
    return any(it.severity == Severity.ERROR for it in issues or [])


def format_issues(issues: Iterable[Issue]) -> str:
    return "; ".join(it.message for it in issues or [])
