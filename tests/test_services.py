# -*- coding: utf-8 -*-
from dataclasses import replace

import pytest

from app.events import ControllersChanged, EventBus, FixturesChanged, TemplatesChanged
from conftest import make_controller
from core.calculations.power import WarningLevel
from core.validators.controller import validate_controller
from services.controller_service import ControllerService
from services.dashboard_service import DashboardService
from services.errors import EmptyChannelListError, RecordNotFoundError, ValidationError
from services.presets_service import FixtureService, TemplateService


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def events(bus):
    seen = []
    for kind in (ControllersChanged, TemplatesChanged, FixturesChanged):
        bus.subscribe(kind, seen.append)
    return seen


@pytest.fixture
def controllers(store, bus):
    return ControllerService(store, bus)


def test_validation_blocks_save_without_write(controllers, store, events):
    sheet = controllers.open_sheet()
    sheet.set_location(campus="North", building="   ")
    with pytest.raises(ValidationError) as ei:
        controllers.save(sheet)
    codes = {(i.code, i.context) for i in ei.value.issues}
    assert ("CTRL_MISSING_FIELD", "building") in codes
    assert ("CTRL_MISSING_FIELD", "controllerNumber") in codes
    assert store.get_controllers() == []
    assert events == []
    assert sheet.is_new


def test_save_sheet_then_edit_keeps_identity(controllers, events):
    sheet = controllers.open_sheet()
    sheet.set_location(campus="North", building="A", controller_number="7")
    first = controllers.save(sheet)
    assert not sheet.is_dirty and sheet.record_id == first.id

    sheet.set_location(zone="Hall")
    second = controllers.save(sheet)
    assert second.id == first.id and second.created_at == first.created_at
    assert second.updated_at >= first.updated_at
    assert [c.zone for c in controllers.list()] == ["Hall"]
    assert [e.reason for e in events] == ["saved", "saved"]


def test_warnings_do_not_block_save(controllers, controller):
    bad = replace(controller, power_limit=-1.0)
    bad.channels[0].voltage = "twelve"
    codes = [i.code for i in validate_controller(bad)]
    assert "CTRL_UNPARSABLE_NUMBER" in codes and "CTRL_LIMIT_IGNORED" in codes
    assert controllers.save(bad).id == controller.id


def test_zero_channels_rejected(controllers, controller):
    with pytest.raises(EmptyChannelListError):
        controllers.save(replace(controller, channels=[]))


def test_duplicate_channel_numbers_rejected(controllers, controller):
    controller.channels[1].channel_number = 1
    with pytest.raises(ValidationError):
        controllers.save(controller)


def test_get_missing_raises(controllers):
    with pytest.raises(RecordNotFoundError):
        controllers.get("nope")
    assert controllers.delete("nope") is False


def test_dashboard_stats_sections_and_invalidation(store, controllers):
    controllers.save(make_controller("1", campus="North", building="A", floor="1"))
    controllers.save(make_controller("2", campus="North", building="A", floor="2", limit=None))
    # blank locations only arrive through imported or older data
    store.save_controller(make_controller("3", campus="", building="B", floor="", limit=100.0))
    dash = DashboardService(controllers)

    st = dash.stats()
    assert st.total_controllers == 3
    assert st.with_warnings == 2
    assert st.total_channels == 6
    assert st.total_power_w == pytest.approx(360.0)
    assert sorted(s.level for s in dash.summaries().values()) == [WarningLevel.NONE, WarningLevel.WARNING, WarningLevel.CRITICAL]

    flagged = dash.flagged(WarningLevel.CRITICAL)
    assert [c.controller_number for c, _ in flagged] == ["3"]

    name, selected = dash.section("North", "A")
    assert name == "North_A" and [c.controller_number for c in selected] == ["1", "2"]
    with pytest.raises(ValueError):
        dash.section("North", None, "1")

    controllers.save(make_controller("4", campus="North", building="C"))
    assert dash.stats().total_controllers == 4


def test_deleting_placeholder_section_removes_blank_records(store, controllers):
    store.save_controller(make_controller("1", campus="", building="B"))
    controllers.save(make_controller("2", campus="North", building="B"))
    dash = DashboardService(controllers)

    assert dash.delete_section("Unknown Campus") == 1
    assert [c.controller_number for c in controllers.list()] == ["2"]
    assert dash.delete_section("North", "B", "L1") == 1
    assert dash.snapshot() == []


def test_whitespace_location_is_its_own_group(store, controllers):
    store.save_controller(make_controller("1", campus=""))
    store.save_controller(make_controller("2", campus="   "))
    dash = DashboardService(controllers)

    assert list(dash.tree()) == ["Unknown Campus", "   "]
    _, listed = dash.section("Unknown Campus")
    assert [c.controller_number for c in listed] == ["1"]
    assert dash.delete_section("Unknown Campus") == len(listed)
    assert [c.controller_number for c in controllers.list()] == ["2"]


def test_template_service(store, bus, events, controller):
    templates = TemplateService(store, bus)
    controllers = ControllerService(store, bus)
    controllers.save(controller)

    with pytest.raises(ValidationError):
        templates.create_from_sheet(controllers.open_sheet(controller.id), "  ")
    tpl = templates.create_from_sheet(controllers.open_sheet(controller.id), "Lobby", "two strips")
    assert templates.find_by_name("Lobby").id == tpl.id
    assert templates.get(tpl.id).campus == "Main"
    assert templates.delete(tpl.id) is True
    assert templates.list() == []
    assert [type(e).__name__ for e in events] == ["ControllersChanged", "TemplatesChanged", "TemplatesChanged"]


def test_fixture_service(store, bus):
    fixtures = FixtureService(store, bus)
    fx = fixtures.add(" Downlight ", "12", "0,5")
    assert fx.name == "Downlight"
    assert fixtures.power(fx) == pytest.approx(6.0)

    with pytest.raises(ValidationError) as ei:
        fixtures.add("Bad", "abc", "")
    assert {i.code for i in ei.value.issues} == {"FIX_MISSING_FIELD", "FIX_NOT_A_NUMBER"}

    updated = fixtures.update(fx.id, current="1")
    assert updated.name == "Downlight" and updated.current == "1"
    assert [f.current for f in fixtures.list()] == ["1"]
    assert fixtures.delete(fx.id) is True
    with pytest.raises(RecordNotFoundError):
        fixtures.get(fx.id)
