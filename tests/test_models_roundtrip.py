# -*- coding: utf-8 -*-
from core.keys import RecordKeys as K
from core.models.controller import ChannelShape, ControllerData, ControllerTemplate, FixtureConfig


def test_controller_dict_uses_camel_case_keys(controller):
    d = controller.to_dict()
    assert d[K.CONTROLLER_NUMBER] == "C-01"
    assert d["powerLimit"] == 130.0
    assert d["channels"][0]["parallelCount"] == 4
    assert ControllerData.from_dict(d) == controller


def test_controller_without_limit_omits_key(controller):
    controller.power_limit = None
    d = controller.to_dict()
    assert "powerLimit" not in d
    assert ControllerData.from_dict(d).power_limit is None


def test_from_dict_is_tolerant_of_foreign_json():
    c = ControllerData.from_dict({
        "id": "x1",
        "campus": "North",
        "channels": [
            {"channelNumber": 2, "voltage": 24.0, "current": 1.5},
            {"voltage": "12"},
            "garbage",
        ],
    })
    assert c.building == "" and c.power_limit is None
    assert [ch.channel_number for ch in c.channels] == [2, 2]
    assert c.channels[0].voltage == "24"
    assert c.channels[0].current == "1.5"
    assert c.channels[1].parallel_count == 1
    assert all(ch.id for ch in c.channels)


def test_touched_never_moves_backwards(controller):
    later = controller.touched("2999-01-01T00:00:00.000Z")
    assert later.updated_at == "2999-01-01T00:00:00.000Z"
    assert later.touched("2000-01-01T00:00:00.000Z").updated_at == later.updated_at
    assert controller.updated_at != later.updated_at


def test_template_and_fixture_roundtrip():
    tpl = ControllerTemplate(
        id="t1", name="Lobby", description="two strips", building="B1", power_limit=200.0,
        channels=[ChannelShape(1, "LED", "24", "1", 2)], created_at="2024-01-01T00:00:00.000Z",
    )
    d = tpl.to_dict()
    assert "campus" not in d and d["building"] == "B1"
    assert ControllerTemplate.from_dict(d) == tpl

    fx = FixtureConfig(id="f1", name="Downlight", voltage="12", current="0.5", created_at="x")
    assert FixtureConfig.from_dict(fx.to_dict()) == fx
