# -*- coding: utf-8 -*-
"""PDF export (matplotlib, no pyplot).

Pages are A4 portrait figures laid out in inches from the top-left corner with
plain text and rectangles:

    title + controller information block
    channel table (paginates past ``rows_per_page`` rows or when the page is full)
    total power, load against the limit, capacity disclaimer

``mode="raster"`` renders every page to an image first and embeds that image,
giving an image-based document; ``mode="vector"`` keeps text selectable.
"""

from __future__ import annotations

import copy
import logging
import textwrap
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import date
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from app.config import DEFAULT_PDF_ROWS_PER_PAGE, DISCLAIMER_NOTE, SHEET_TITLE
from core.calculations.power import PowerSummary, WarningLevel, summarize
from core.models.controller import ControllerData
from infra.perf import span
from infra.settings import PDF_MODES
from services.errors import ExportError
from services.export.projection import (
    TABLE_HEADER,
    ChannelRow,
    atomic_output,
    channel_rows,
    fmt_watts,
    header_block,
    load_line,
)
from storage.export_paths import batch_file_name, controller_file_name, resolve_target

log = logging.getLogger(__name__)


PAGE_W, PAGE_H = 8.27, 11.69  # A4 portrait, inches
MARGIN = 0.6
ROW_H = 0.28
FOOTER_H = 1.7
RASTER_DPI = 150

# (width in inches, alignment) per table column; widths add up to PAGE_W - 2 * MARGIN
_COLUMNS = ((0.8, "center"), (2.47, "left"), (1.0, "right"), (1.0, "right"), (0.8, "center"), (1.0, "right"))

_LEVEL_COLORS = {
    WarningLevel.NONE: "#222222",
    WarningLevel.CAUTION: "#b58900",
    WarningLevel.WARNING: "#cb4b16",
    WarningLevel.CRITICAL: "#dc322f",
}


class PageCanvas:
    """One A4 page; coordinates are inches from the top-left corner."""

    def __init__(self) -> None:
        self.fig = Figure(figsize=(PAGE_W, PAGE_H))
        self.y = MARGIN

    def text(self, x: float, y: float, s: str, *, size: float = 9, weight: str = "normal",
             ha: str = "left", va: str = "top", color: str = "#222222") -> None:
        self.fig.text(x / PAGE_W, 1.0 - y / PAGE_H, s, fontsize=size, fontweight=weight,
                      ha=ha, va=va, color=color, parse_math=False)

    def rect(self, x: float, y: float, w: float, h: float, *, face: str = "none",
             edge: str = "#999999", lw: float = 0.6) -> None:
        self.fig.add_artist(Rectangle(
            (x / PAGE_W, 1.0 - (y + h) / PAGE_H), w / PAGE_W, h / PAGE_H,
            transform=self.fig.transFigure, facecolor=face, edgecolor=edge, linewidth=lw,
        ))

    def remaining(self) -> float:
        return PAGE_H - MARGIN - self.y


class _DocumentWriter:
    def __init__(self, pdf: PdfPages, mode: str) -> None:
        self.pdf = pdf
        self.mode = mode
        self.page_no = 0

    def new_page(self) -> PageCanvas:
        self.page_no += 1
        return PageCanvas()

    def finish(self, page: PageCanvas, footer: str) -> None:
        page.text(PAGE_W - MARGIN, PAGE_H - 0.35, f"{footer}  |  Page {self.page_no}",
                  size=7, ha="right", va="bottom", color="#666666")
        if self.mode == "raster":
            self.pdf.savefig(_rasterize(page.fig), dpi=RASTER_DPI)
        else:
            self.pdf.savefig(page.fig)


def _rasterize(fig: Figure) -> Figure:
    canvas = FigureCanvasAgg(fig)
    fig.set_dpi(RASTER_DPI)
    canvas.draw()
    img = np.asarray(canvas.buffer_rgba())
    out = Figure(figsize=(PAGE_W, PAGE_H))
    ax = out.add_axes((0.0, 0.0, 1.0, 1.0))
    ax.imshow(img, interpolation="none", aspect="auto")
    ax.set_axis_off()
    return out


def _fmt_cell(value) -> str:
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


def _clip(text: str, width: int) -> str:
    return text if len(text) <= width else text[: width - 3] + "..."


def _draw_heading(page: PageCanvas, c: ControllerData) -> None:
    page.text(MARGIN, page.y, SHEET_TITLE, size=16, weight="bold")
    page.y += 0.34
    page.text(MARGIN, page.y, "Record controller specifications and channel configurations",
              size=9, color="#666666")
    page.y += 0.3
    page.rect(MARGIN, page.y, PAGE_W - 2 * MARGIN, 0.01, face="#333333", edge="#333333")
    page.y += 0.2

    page.text(MARGIN, page.y, "Controller Information", size=11, weight="bold")
    page.y += 0.3
    cell_w = (PAGE_W - 2 * MARGIN) / 3.0
    cell_h = 0.5
    for i, (label, value) in enumerate(header_block(c)):
        x = MARGIN + (i % 3) * cell_w
        y = page.y + (i // 3) * (cell_h + 0.05)
        page.rect(x + 0.02, y, cell_w - 0.04, cell_h)
        page.text(x + 0.1, y + 0.06, label, size=7, color="#666666")
        page.text(x + 0.1, y + 0.24, _clip(value or "-", 34), size=10)
    page.y += 2 * (cell_h + 0.05) + 0.25

    page.text(MARGIN, page.y, "Channel Configuration", size=11, weight="bold")
    page.y += 0.3


def _draw_table_header(page: PageCanvas) -> None:
    x = MARGIN
    for (width, _align), title in zip(_COLUMNS, TABLE_HEADER):
        page.rect(x, page.y, width, ROW_H, face="#dde3ea")
        page.text(x + width / 2, page.y + ROW_H / 2, title, size=8, weight="bold", ha="center", va="center")
        x += width
    page.y += ROW_H


def _draw_row(page: PageCanvas, r: ChannelRow, shaded: bool) -> None:
    values = (
        str(r.channel_number),
        _clip(r.fixture_type, 36),
        _fmt_cell(r.voltage),
        _fmt_cell(r.current),
        str(r.parallel_count),
        f"{r.power_w:.2f}" if r.power_w > 0 else "-",
    )
    x = MARGIN
    for (width, align), value in zip(_COLUMNS, values):
        page.rect(x, page.y, width, ROW_H, face="#f5f7f9" if shaded else "none")
        if align == "left":
            tx = x + 0.08
        elif align == "right":
            tx = x + width - 0.08
        else:
            tx = x + width / 2
        page.text(tx, page.y + ROW_H / 2, value, size=8, ha=align, va="center")
        x += width
    page.y += ROW_H


def _draw_totals(page: PageCanvas, s: PowerSummary) -> None:
    page.y += 0.15
    power_col_x = PAGE_W - MARGIN - _COLUMNS[-1][0]
    page.text(power_col_x - 0.1, page.y, "Total Power Output:", size=10, weight="bold", ha="right")
    page.text(PAGE_W - MARGIN - 0.08, page.y, fmt_watts(s.total_w), size=10, weight="bold", ha="right")
    page.y += 0.28
    extra = load_line(s)
    if extra:
        page.text(PAGE_W - MARGIN - 0.08, page.y, extra, size=9, ha="right", color=_LEVEL_COLORS[s.level])
        page.y += 0.28

    page.y += 0.1
    lines = textwrap.wrap(DISCLAIMER_NOTE, 105)
    box_h = 0.2 + 0.18 * len(lines)
    page.rect(MARGIN, page.y, PAGE_W - 2 * MARGIN, box_h, face="#f3f4f6", edge="#cccccc")
    for i, line in enumerate(lines):
        page.text(MARGIN + 0.12, page.y + 0.1 + i * 0.18, line, size=8, color="#444444")
    page.y += box_h


def draw_controller(doc: _DocumentWriter, c: ControllerData, rows_per_page: int) -> None:
    label = f"Controller {c.controller_number or 'Doc'}"
    page = doc.new_page()
    _draw_heading(page, c)
    _draw_table_header(page)
    on_page = 0
    for r in channel_rows(c):
        if on_page >= rows_per_page or page.remaining() < ROW_H:
            doc.finish(page, label)
            page = doc.new_page()
            page.text(MARGIN, page.y, f"{label} (continued)", size=11, weight="bold")
            page.y += 0.4
            _draw_table_header(page)
            on_page = 0
        _draw_row(page, r, shaded=bool(on_page % 2))
        on_page += 1

    if page.remaining() < FOOTER_H:
        doc.finish(page, label)
        page = doc.new_page()
    _draw_totals(page, summarize(c))
    doc.finish(page, label)


def draw_batch_cover(doc: _DocumentWriter, title: str, controllers: Sequence[ControllerData]) -> None:
    """Index page(s) listing every controller of a batch with its power."""
    summaries = [summarize(c) for c in controllers]
    page = doc.new_page()
    page.text(MARGIN, page.y, title, size=16, weight="bold")
    page.y += 0.36
    page.text(MARGIN, page.y, f"{len(controllers)} controller(s), "
              f"total {fmt_watts(sum(s.total_w for s in summaries))}", size=10, color="#666666")
    page.y += 0.45
    for c, s in zip(controllers, summaries):
        if page.remaining() < ROW_H:
            doc.finish(page, title)
            page = doc.new_page()
        where = " / ".join(p for p in (c.building, c.floor, c.zone) if p)
        page.text(MARGIN, page.y, f"Controller {c.controller_number or 'Doc'}", size=9, weight="bold")
        page.text(MARGIN + 1.6, page.y, _clip(where, 60), size=9)
        page.text(PAGE_W - MARGIN, page.y, fmt_watts(s.total_w), size=9, ha="right",
                  color=_LEVEL_COLORS[s.level])
        page.y += ROW_H
    doc.finish(page, title)


def write_pdf(
    controllers: Sequence[ControllerData],
    target: Path,
    *,
    title: str = SHEET_TITLE,
    mode: str = "vector",
    rows_per_page: int = DEFAULT_PDF_ROWS_PER_PAGE,
    cover: bool = False,
) -> Path:
    controllers = list(controllers)
    if not controllers:
        raise ExportError("Nothing to export")
    if mode not in PDF_MODES:
        raise ExportError(f"Unknown PDF mode: {mode!r}")
    rows_per_page = max(1, int(rows_per_page))

    with span(f"pdf {target.name}"):
        with atomic_output(target) as tmp:
            with PdfPages(str(tmp)) as pdf:
                doc = _DocumentWriter(pdf, mode)
                if cover:
                    draw_batch_cover(doc, title, controllers)
                for c in controllers:
                    draw_controller(doc, c, rows_per_page)
                info = pdf.infodict()
                info["Title"] = title
                info["Creator"] = "Controller Docs"
    log.info("Exported %d controller(s) to %s (%s, %d page(s))", len(controllers), target, mode, doc.page_no)
    return target


def export_controller_pdf(
    controller: ControllerData,
    folder: Path | str,
    *,
    mode: str = "vector",
    rows_per_page: int = DEFAULT_PDF_ROWS_PER_PAGE,
    today: Optional[date] = None,
) -> Path:
    target = resolve_target(folder, controller_file_name(controller, "pdf", today))
    return write_pdf([controller], target, title=f"Controller {controller.controller_number or 'Doc'}",
                     mode=mode, rows_per_page=rows_per_page)


def export_batch_pdf(
    controllers: Sequence[ControllerData],
    section: str,
    folder: Path | str,
    *,
    mode: str = "vector",
    rows_per_page: int = DEFAULT_PDF_ROWS_PER_PAGE,
    today: Optional[date] = None,
) -> Path:
    target = resolve_target(folder, batch_file_name(section, "pdf", today))
    return write_pdf(controllers, target, title=f"Controllers - {section or 'All'}",
                     mode=mode, rows_per_page=rows_per_page, cover=True)


_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()


def _worker() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="pdf-export")
        return _executor


def export_pdf_async(
    controllers: Sequence[ControllerData],
    folder: Path | str,
    *,
    section: Optional[str] = None,
    mode: str = "vector",
    rows_per_page: int = DEFAULT_PDF_ROWS_PER_PAGE,
    today: Optional[date] = None,
) -> "Future[Path]":
    """Run the PDF export on a worker thread.

    The records are copied now; edits made after the call are not exported.
    A single controller without ``section`` gets the single-record file name.
    """
    snapshot = copy.deepcopy(list(controllers))
    if section is None and len(snapshot) == 1:
        return _worker().submit(export_controller_pdf, snapshot[0], folder,
                                mode=mode, rows_per_page=rows_per_page, today=today)
    return _worker().submit(export_batch_pdf, snapshot, section or "", folder,
                            mode=mode, rows_per_page=rows_per_page, today=today)
