# -*- coding: utf-8 -*-
"""ExportService: routes export requests to the spreadsheet/PDF writers.

Resolves the export folder and PDF options from user settings once; callers
only choose the records and the format.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from datetime import date
from pathlib import Path
from typing import Any, Dict, Optional, Sequence

from core.models.controller import ControllerData
from infra.settings import resolve_export_dir
from services.errors import ExportError
from services.export import pdf_export, xlsx_export

log = logging.getLogger(__name__)

FORMATS = ("xlsx", "pdf")


class ExportService:
    def __init__(self, settings: Dict[str, Any], folder: Optional[Path] = None) -> None:
        self.folder = Path(folder) if folder is not None else resolve_export_dir(settings)
        self.pdf_mode = settings.get("pdf_mode", "vector")
        self.rows_per_page = int(settings.get("pdf_rows_per_page") or 0) or pdf_export.DEFAULT_PDF_ROWS_PER_PAGE

    @staticmethod
    def _check(fmt: str) -> str:
        fmt = (fmt or "").lower()
        if fmt not in FORMATS:
            raise ExportError(f"Unknown export format: {fmt!r} (expected one of {', '.join(FORMATS)})")
        return fmt

    def export_controller(self, controller: ControllerData, fmt: str, *, today: Optional[date] = None) -> Path:
        fmt = self._check(fmt)
        if fmt == "xlsx":
            return xlsx_export.export_controller_xlsx(controller, self.folder, today=today)
        return pdf_export.export_controller_pdf(
            controller, self.folder, mode=self.pdf_mode, rows_per_page=self.rows_per_page, today=today
        )

    def export_batch(
        self,
        controllers: Sequence[ControllerData],
        section: str,
        fmt: str,
        *,
        today: Optional[date] = None,
    ) -> Path:
        fmt = self._check(fmt)
        if not controllers:
            raise ExportError(f"No controllers in section {section or 'All'!r}")
        if fmt == "xlsx":
            return xlsx_export.export_batch_xlsx(controllers, section, self.folder, today=today)
        return pdf_export.export_batch_pdf(
            controllers, section, self.folder, mode=self.pdf_mode, rows_per_page=self.rows_per_page, today=today
        )

    def export_pdf_async(
        self,
        controllers: Sequence[ControllerData],
        section: Optional[str] = None,
        *,
        today: Optional[date] = None,
    ) -> "Future[Path]":
        log.info("Queued PDF export of %d controller(s)", len(controllers))
        return pdf_export.export_pdf_async(
            controllers, self.folder, section=section, mode=self.pdf_mode,
            rows_per_page=self.rows_per_page, today=today,
        )
