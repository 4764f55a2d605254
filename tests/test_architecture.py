# -*- coding: utf-8 -*-
from tools.check_architecture import ROOT, collect_violations, file_layer, imported_packages


def test_no_layer_violations():
    assert collect_violations() == []


def test_scanner_sees_absolute_imports_only(tmp_path):
    f = tmp_path / "core" / "bad.py"
    f.parent.mkdir()
    f.write_text("import matplotlib.pyplot\nfrom services.errors import ExportError\nfrom . import sibling\n", encoding="utf-8")
    assert imported_packages(f) == [("matplotlib", "matplotlib.pyplot"), ("services", "services.errors")]
    assert len(collect_violations(tmp_path)) == 2
    assert file_layer(f, tmp_path) == "core"
    assert file_layer(ROOT / "main.py") is None
