# -*- coding: utf-8 -*-
"""Build-time configuration.

This module is intentionally tiny and *import-safe*. Per-user, runtime
settings live in ``infra/settings.py``.
"""

from __future__ import annotations

# Exports
SHEET_TITLE: str = "Controller Documentation Sheet"
DISCLAIMER_NOTE: str = (
    "Note: Total power output is used to determine controller limits and expected heat "
    "generation. Ensure the total does not exceed the controller's maximum rated capacity."
)
DEFAULT_PDF_ROWS_PER_PAGE: int = 25

# Remote blob store
DEFAULT_REMOTE_TIMEOUT_S: float = 6.0
REMOTE_USER_AGENT: str = "ControllerDocs/RecordStore"
