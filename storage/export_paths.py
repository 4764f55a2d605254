# -*- coding: utf-8 -*-
"""storage/export_paths.py

Export file names.

- single record: Controller_<number|Doc>_<building>_<YYYY-MM-DD>.<ext>
- batch:         Controllers_<section>_<YYYY-MM-DD>.<ext>
"""

from __future__ import annotations

import re
from datetime import date
from pathlib import Path
from typing import Optional

from core.models.controller import ControllerData

_UNSAFE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


def safe_part(text: str) -> str:
    """Replace path-hostile characters; keeps spaces and unicode."""
    return _UNSAFE.sub("_", str(text or "")).strip().strip(".")


def _ext(ext: str) -> str:
    ext = (ext or "").strip().lstrip(".").lower()
    if not ext:
        raise ValueError("Export extension is required")
    return ext


def controller_file_name(controller: ControllerData, ext: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    number = safe_part(controller.controller_number) or "Doc"
    building = safe_part(controller.building)
    return f"Controller_{number}_{building}_{today.isoformat()}.{_ext(ext)}"


def batch_file_name(section: str, ext: str, today: Optional[date] = None) -> str:
    today = today or date.today()
    stem = safe_part(section) or "All"
    return f"Controllers_{stem}_{today.isoformat()}.{_ext(ext)}"


def resolve_target(folder: Path | str, file_name: str) -> Path:
    """Target path; the folder is created by the exporter when writing."""
    return Path(folder) / file_name
