# -*- coding: utf-8 -*-
"""Timing spans for whole-collection serialization and exports.

Off unless ``CTRLDOCS_PERF`` is set to 1/true/yes/on. Slow spans are logged on
``ctrldocs.perf``; ``init_perf_logging()`` gives that logger its own file.
"""

from __future__ import annotations

import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

PERF_ENV = "CTRLDOCS_PERF"

log = logging.getLogger("ctrldocs.perf")


def is_enabled() -> bool:
    return os.environ.get(PERF_ENV, "").strip().lower() in ("1", "true", "yes", "on")


@contextmanager
def span(label: str, *, threshold_ms: float = 50.0) -> Iterator[None]:
    """Log ``PERF <label> <ms>`` when the block takes at least ``threshold_ms``."""
    if not is_enabled():
        yield
        return
    started = time.perf_counter()
    try:
        yield
    finally:
        elapsed_ms = (time.perf_counter() - started) * 1000.0
        if elapsed_ms >= threshold_ms:
            log.info("PERF %s %.1fms", label, elapsed_ms)
