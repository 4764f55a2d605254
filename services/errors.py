# -*- coding: utf-8 -*-
"""services/errors.py

Exception types reported to callers (CLI or any future front end).

Three kinds only:
- validation failures (nothing written)
- record store failures (the previous persisted state is untouched)
- export failures (no output file left behind)
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from core.types import Issue, Severity, format_issues


class ControllerDocsError(Exception):
    """Base class for all reported errors."""


class ValidationError(ControllerDocsError):
    def __init__(self, issues: Sequence[Issue], message: Optional[str] = None):
        self.issues: List[Issue] = list(issues or [])
        errors = [it for it in self.issues if it.severity == Severity.ERROR]
        super().__init__(message or format_issues(errors or self.issues) or "Validation failed")


class LastChannelError(ValidationError):
    """Removing the only remaining channel of a controller."""

    def __init__(self, message: str = "A controller must keep at least one channel."):
        super().__init__([Issue(code="CTRL_LAST_CHANNEL", message=message, context="channels")], message)


class EmptyChannelListError(ValidationError):
    """Saving a controller without channels."""

    def __init__(self, message: str = "A controller must have at least one channel."):
        super().__init__([Issue(code="CTRL_NO_CHANNELS", message=message, context="channels")], message)


class RecordNotFoundError(ControllerDocsError):
    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class StoreError(ControllerDocsError):
    """The blob store could not complete a read or write."""


class StoreUnavailableError(StoreError):
    pass


class QuotaExceededError(StoreError):
    pass


class StoreCorruptedError(StoreError):
    """A collection blob exists but is not a JSON array."""


class ExportError(ControllerDocsError):
    pass
