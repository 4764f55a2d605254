# -*- coding: utf-8 -*-
"""
Logging setup confirms errors/tracebacks are captured in user space.
"""
from __future__ import annotations

import logging
from pathlib import Path

from infra.paths import logs_dir

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _has_file_handler(logger: logging.Logger, log_path: Path) -> bool:
    return any(
        isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", "") == str(log_path)
        for h in logger.handlers
    )


def init_logging(
    filename: str = "app.log",
    level: int = logging.INFO,
    console_level: int = logging.WARNING,
) -> Path:
    log_path = logs_dir() / filename
    # Don't add multiple handlers if init called twice
    root = logging.getLogger()
    if not _has_file_handler(root, log_path):
        console = logging.StreamHandler()
        console.setLevel(console_level)
        logging.basicConfig(
            level=level,
            format=LOG_FORMAT,
            handlers=[logging.FileHandler(log_path, encoding="utf-8"), console],
        )
    return log_path


def init_perf_logging(filename: str = "perf.log") -> Path:
    """Attach a dedicated file handler for performance timings.

    Timings are emitted by infra.perf.span when CTRLDOCS_PERF=1.
    """
    log_path = logs_dir() / filename
    logger = logging.getLogger("ctrldocs.perf")
    logger.setLevel(logging.INFO)
    if not _has_file_handler(logger, log_path):
        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(logging.INFO)
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(fh)
    return log_path
