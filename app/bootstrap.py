# -*- coding: utf-8 -*-
"""
Application bootstrap (runs before any command):
- Init logging
- Install crash hooks
- Load per-user settings
"""
from __future__ import annotations

import logging
from typing import Any, Dict

from infra.crash_handler import install_global_exception_handlers
from infra.logging_setup import init_logging, init_perf_logging
from infra.perf import is_enabled as perf_enabled
from infra.settings import load_settings


def bootstrap(*, verbose: bool = False) -> Dict[str, Any]:
    init_logging(
        level=logging.DEBUG if verbose else logging.INFO,
        console_level=logging.DEBUG if verbose else logging.WARNING,
    )
    if perf_enabled():
        init_perf_logging()
    install_global_exception_handlers()
    return load_settings()
