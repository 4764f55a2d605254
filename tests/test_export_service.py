# -*- coding: utf-8 -*-
from datetime import date

import pytest

from conftest import make_controller
from services.errors import ExportError
from services.export_service import ExportService

DAY = date(2024, 3, 9)


def test_routes_formats_to_settings_folder(user_home, controller):
    svc = ExportService({"export_dir": "", "pdf_mode": "vector", "pdf_rows_per_page": 25})
    assert svc.folder == user_home / "exports"

    xlsx = svc.export_controller(controller, "XLSX", today=DAY)
    pdf = svc.export_controller(controller, "pdf", today=DAY)
    assert xlsx.parent == pdf.parent == user_home / "exports"
    assert (xlsx.suffix, pdf.suffix) == (".xlsx", ".pdf")


def test_batch_and_errors(tmp_path):
    svc = ExportService({"pdf_mode": "raster", "pdf_rows_per_page": 5}, folder=tmp_path)
    assert svc.rows_per_page == 5
    path = svc.export_batch([make_controller("1"), make_controller("2")], "Main", "pdf", today=DAY)
    assert path.name == "Controllers_Main_2024-03-09.pdf"

    with pytest.raises(ExportError):
        svc.export_batch([], "Main", "xlsx", today=DAY)
    with pytest.raises(ExportError):
        svc.export_controller(make_controller("1"), "docx", today=DAY)


def test_async_pdf_through_service(tmp_path, controller):
    svc = ExportService({}, folder=tmp_path)
    path = svc.export_pdf_async([controller], today=DAY).result(timeout=60)
    assert path.name == "Controller_C-01_B1_2024-03-09.pdf"
