# -*- coding: utf-8 -*-
"""Process-wide hooks that log uncaught exceptions to the user log file.

Covers the main thread and worker threads (the PDF export pool). Ctrl+C is
passed to the default hook untouched.
"""

from __future__ import annotations

import logging
import sys
import threading
from types import TracebackType
from typing import Optional, Type

log = logging.getLogger(__name__)


def log_uncaught(
    exc_type: Type[BaseException],
    exc: BaseException,
    tb: Optional[TracebackType],
    *,
    thread_name: Optional[str] = None,
) -> None:
    if issubclass(exc_type, KeyboardInterrupt):
        sys.__excepthook__(exc_type, exc, tb)
        return
    where = f" in thread {thread_name}" if thread_name else ""
    log.critical("Unhandled exception%s", where, exc_info=(exc_type, exc, tb))


def _thread_hook(args: threading.ExceptHookArgs) -> None:
    if args.exc_value is None:
        return
    name = args.thread.name if args.thread is not None else None
    log_uncaught(args.exc_type, args.exc_value, args.exc_traceback, thread_name=name)


def install_global_exception_handlers() -> None:
    """Route uncaught exceptions of every thread into logging."""
    sys.excepthook = log_uncaught
    threading.excepthook = _thread_hook
