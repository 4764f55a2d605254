# -*- coding: utf-8 -*-
"""
Centralized path resolver for per-user writable data (no admin required):
- settings.json
- logs/
- data/      (file-backed record store)
- exports/   (default export target)
"""
from __future__ import annotations

import os
from pathlib import Path

APP_NAME = "ControllerDocs"


def user_data_dir() -> Path:
    """
    Per-user writable directory.

    CTRLDOCS_HOME wins when set (tests, portable installs). Otherwise prefer
    LOCALAPPDATA (non-roaming), then APPDATA, then the home folder.
    """
    override = os.getenv("CTRLDOCS_HOME")
    if override:
        p = Path(override).expanduser()
    else:
        base = os.getenv("LOCALAPPDATA") or os.getenv("APPDATA") or str(Path.home())
        p = Path(base) / APP_NAME
    p.mkdir(parents=True, exist_ok=True)
    return p


def ensure_dir(p: Path) -> Path:
    p.mkdir(parents=True, exist_ok=True)
    return p


def logs_dir() -> Path:
    return ensure_dir(user_data_dir() / "logs")


def data_dir() -> Path:
    return ensure_dir(user_data_dir() / "data")


def exports_dir() -> Path:
    return ensure_dir(user_data_dir() / "exports")


def settings_file() -> Path:
    return user_data_dir() / "settings.json"
