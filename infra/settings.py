# -*- coding: utf-8 -*-
"""
User settings stored in a per-user writable folder (no admin).

Keys:
- storage_backend: "file" | "memory" | "remote"
- data_dir: folder for the file-backed store (empty -> <user>/data)
- remote_url / remote_timeout_s: remote blob store endpoint
- quota_bytes: optional size cap per collection blob (0 -> unlimited)
- export_dir: default export target (empty -> <user>/exports)
- pdf_mode: "vector" | "raster"
- pdf_rows_per_page: channel rows per PDF page
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from app.config import DEFAULT_PDF_ROWS_PER_PAGE, DEFAULT_REMOTE_TIMEOUT_S
from infra.paths import data_dir, exports_dir, settings_file

log = logging.getLogger(__name__)

STORAGE_BACKENDS = ("file", "memory", "remote")
PDF_MODES = ("vector", "raster")


def _defaults() -> Dict[str, Any]:
    return {
        "storage_backend": "file",
        "data_dir": "",
        "remote_url": "",
        "remote_timeout_s": DEFAULT_REMOTE_TIMEOUT_S,
        "quota_bytes": 0,
        "export_dir": "",
        "pdf_mode": "vector",
        "pdf_rows_per_page": DEFAULT_PDF_ROWS_PER_PAGE,
    }


def _sanitize(s: Dict[str, Any]) -> Dict[str, Any]:
    defaults = _defaults()
    if s.get("storage_backend") not in STORAGE_BACKENDS:
        log.warning("Unknown storage_backend %r; using %r", s.get("storage_backend"), defaults["storage_backend"])
        s["storage_backend"] = defaults["storage_backend"]
    if s.get("pdf_mode") not in PDF_MODES:
        s["pdf_mode"] = defaults["pdf_mode"]
    for key in ("remote_timeout_s", "quota_bytes", "pdf_rows_per_page"):
        try:
            s[key] = type(defaults[key])(s.get(key))
        except (TypeError, ValueError):
            s[key] = defaults[key]
    if s["pdf_rows_per_page"] <= 0:
        s["pdf_rows_per_page"] = defaults["pdf_rows_per_page"]
    return s


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or settings_file()
    defaults = _defaults()
    if not path.exists():
        save_settings(defaults.copy(), path)
        return defaults.copy()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # Recover from corruption gracefully
        log.warning("Settings file %s unreadable; resetting to defaults", path, exc_info=True)
        save_settings(defaults.copy(), path)
        return defaults.copy()

    merged = defaults.copy()
    if isinstance(data, dict):
        merged.update({k: v for k, v in data.items() if v is not None})
    return _sanitize(merged)


def save_settings(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def resolve_data_dir(s: Dict[str, Any]) -> Path:
    raw = str(s.get("data_dir") or "").strip()
    if raw:
        p = Path(raw).expanduser()
        p.mkdir(parents=True, exist_ok=True)
        return p
    return data_dir()


def resolve_export_dir(s: Dict[str, Any]) -> Path:
    raw = str(s.get("export_dir") or "").strip()
    if raw:
        p = Path(raw).expanduser()
        p.mkdir(parents=True, exist_ok=True)
        return p
    return exports_dir()
