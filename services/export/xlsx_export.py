# -*- coding: utf-8 -*-
"""Spreadsheet export (openpyxl).

Fixed layout per sheet:
    title
    header block (campus, building, floor, zone, controller number, power limit)
    channel table (channel, fixture type, voltage, current, parallel, power)
    total-power footer

One controller per workbook, or one sheet per controller for a batch.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Sequence, Set

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from app.config import SHEET_TITLE
from core.calculations.power import summarize
from core.models.controller import ControllerData
from infra.perf import span
from services.errors import ExportError
from services.export.projection import (
    TABLE_HEADER,
    atomic_output,
    channel_rows,
    fmt_watts,
    header_block,
    load_line,
)
from storage.export_paths import batch_file_name, controller_file_name, resolve_target

log = logging.getLogger(__name__)

_BOLD = Font(bold=True)
_TITLE = Font(bold=True, size=14)
_HEAD_FILL = PatternFill("solid", fgColor="DDE3EA")
_THIN = Side(style="thin", color="999999")
_BOX = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_COL_WIDTHS = (10, 28, 13, 13, 10, 14)

_SHEET_TITLE_BAD = re.compile(r"[\[\]:*?/\\]")


def fill_sheet(ws: Worksheet, controller: ControllerData) -> None:
    ws.append([SHEET_TITLE])
    ws.cell(row=ws.max_row, column=1).font = _TITLE
    ws.append([])

    for label, value in header_block(controller):
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=1).font = _BOLD
    ws.append([])

    ws.append(list(TABLE_HEADER))
    head_row = ws.max_row
    for col in range(1, len(TABLE_HEADER) + 1):
        cell = ws.cell(row=head_row, column=col)
        cell.font = _BOLD
        cell.fill = _HEAD_FILL
        cell.border = _BOX
        cell.alignment = Alignment(horizontal="center")

    for r in channel_rows(controller):
        ws.append([r.channel_number, r.fixture_type, r.voltage, r.current, r.parallel_count, round(r.power_w, 2)])
        row = ws.max_row
        for col in range(1, len(TABLE_HEADER) + 1):
            ws.cell(row=row, column=col).border = _BOX
        ws.cell(row=row, column=6).number_format = "0.00"

    summary = summarize(controller)
    ws.append([])
    ws.append(["", "", "", "", "Total Power:", fmt_watts(summary.total_w)])
    ws.cell(row=ws.max_row, column=5).font = _BOLD
    ws.cell(row=ws.max_row, column=6).font = _BOLD
    extra = load_line(summary)
    if extra:
        ws.append(["", "", "", "", "", extra])

    for idx, width in enumerate(_COL_WIDTHS, start=1):
        ws.column_dimensions[get_column_letter(idx)].width = width


def sheet_title(controller: ControllerData, used: Set[str]) -> str:
    """Excel sheet names: max 31 chars, no []:*?/\\, unique per workbook."""
    base = _SHEET_TITLE_BAD.sub("_", f"{controller.controller_number or 'Doc'} {controller.zone}".strip())[:31]
    base = base or "Controller"
    title = base
    n = 2
    while title.lower() in used:
        suffix = f" ({n})"
        title = base[: 31 - len(suffix)] + suffix
        n += 1
    used.add(title.lower())
    return title


def build_workbook(controllers: Sequence[ControllerData]) -> Workbook:
    if not controllers:
        raise ExportError("Nothing to export")
    wb = Workbook()
    used: Set[str] = set()
    first = True
    for c in controllers:
        ws = wb.active if first else wb.create_sheet()
        first = False
        ws.title = sheet_title(c, used) if len(controllers) > 1 else "Controller"
        fill_sheet(ws, c)
    return wb


def write_workbook(controllers: Iterable[ControllerData], target: Path) -> Path:
    controllers = list(controllers)
    with span(f"xlsx {target.name}"):
        with atomic_output(target) as tmp:
            build_workbook(controllers).save(str(tmp))
    log.info("Exported %d controller(s) to %s", len(controllers), target)
    return target


def export_controller_xlsx(controller: ControllerData, folder: Path | str, *, today: Optional[date] = None) -> Path:
    target = resolve_target(folder, controller_file_name(controller, "xlsx", today))
    return write_workbook([controller], target)


def export_batch_xlsx(
    controllers: Sequence[ControllerData],
    section: str,
    folder: Path | str,
    *,
    today: Optional[date] = None,
) -> Path:
    target = resolve_target(folder, batch_file_name(section, "xlsx", today))
    return write_workbook(controllers, target)
