# -*- coding: utf-8 -*-
import pytest

import main as cli
from storage.blob_store import MemoryBlobStore
from storage.repository import RecordStore


@pytest.fixture
def run(monkeypatch, capsys):
    monkeypatch.setattr("app.bootstrap.install_global_exception_handlers", lambda: None)
    store = RecordStore(MemoryBlobStore())

    def _run(*argv):
        code = cli.main(list(argv), store=store)
        out, err = capsys.readouterr()
        return code, out, err

    _run.store = store
    return _run


def _add(run, number="C-01", campus="North", building="A", floor="1", *extra):
    code, out, _ = run(
        "add", "--campus", campus, "--building", building, "--floor", floor, "--number", number,
        "--limit", "130", "--channel", "Strip:24:0.625:4", "--channel", "Strip:24:0.625:4", *extra,
    )
    assert code == 0, out
    return out.split()[2]


def test_add_list_show(run):
    cid = _add(run)
    rec = run.store.get_controller(cid)
    assert [c.channel_number for c in rec.channels] == [1, 2]

    code, out, _ = run("list")
    assert code == 0
    assert "North (1)" in out and "120.00 W  [warning]" in out
    assert "1 controller(s), 2 channel(s), 120.00 W total, 1 with warnings" in out

    code, out, _ = run("show", cid)
    assert "Load: 92.3% of 130 W (warning)" in out


def test_add_validation_error_exits_non_zero(run):
    code, out, err = run("add", "--campus", "North", "--channel", "Strip:24:1")
    assert code == 1
    assert "error: " in err and "Building is required." in err
    assert run.store.get_controllers() == []


def test_bad_channel_argument_is_a_usage_error(run):
    with pytest.raises(SystemExit) as ei:
        run("add", "--channel", "just-a-name")
    assert ei.value.code == 2


def test_delete_and_missing(run):
    cid = _add(run)
    assert run("delete", cid)[0] == 0
    assert run("delete", cid)[0] == 1
    code, _, err = run("show", cid)
    assert code == 1 and "Controller not found" in err


def test_delete_section_requires_confirmation(run):
    _add(run, "1", "North", "A", "1")
    _add(run, "2", "North", "B", "1")
    _add(run, "3", "South", "A", "1")

    code, out, _ = run("delete-section", "--campus", "North")
    assert code == 1 and "pass --yes" in out
    assert len(run.store.get_controllers()) == 3

    code, out, _ = run("delete-section", "--campus", "North", "--building", "A", "--yes")
    assert code == 0 and "Deleted 1 controller(s) in North_A" in out
    with pytest.raises(SystemExit):
        run("delete-section", "--campus", "North", "--floor", "1")


def test_export_commands(run, tmp_path):
    cid = _add(run)
    _add(run, "C-02")

    code, out, _ = run("export", cid, "--format", "xlsx", "--out", str(tmp_path))
    assert code == 0 and out.strip().endswith(".xlsx")

    code, out, _ = run("export-batch", "--campus", "North", "--format", "pdf", "--out", str(tmp_path))
    assert code == 0 and "Controllers_North_" in out

    code, _, err = run("export-batch", "--campus", "Nowhere", "--out", str(tmp_path))
    assert code == 1 and "No controllers" in err


def test_templates_and_fixtures(run):
    cid = _add(run)
    code, out, _ = run("templates", "create", cid, "--name", "Lobby", "--no-location")
    assert code == 0 and "2 channel(s)" in out

    code, out, _ = run("add", "--template", "Lobby", "--campus", "East", "--building", "E", "--number", "9")
    assert code == 0
    assert len(run.store.get_controllers()) == 2

    tpl_id = run.store.get_templates()[0].id
    assert run("templates", "list")[1].startswith(tpl_id)
    assert run("templates", "delete", tpl_id)[0] == 0

    code, out, _ = run("fixtures", "add", "Downlight", "12", "0.5")
    assert code == 0 and "6.00 W" in out
    fx_id = run.store.get_fixtures()[0].id
    assert "Downlight" in run("fixtures", "list")[1]
    assert run("fixtures", "delete", fx_id)[0] == 0
    assert run("fixtures", "list")[1].strip() == "No fixture presets."
