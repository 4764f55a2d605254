# -*- coding: utf-8 -*-
from conftest import make_controller
from domain import hierarchy


def _sample():
    return [
        make_controller("1", campus="North", building="A", floor="1"),
        make_controller("2", campus="", building="", floor=""),
        make_controller("3", campus="North", building="A", floor="2"),
        make_controller("4", campus="North", building="B", floor="1"),
        make_controller("5", campus="North", building="A", floor="1"),
    ]


def test_group_by_location_keeps_first_seen_order():
    tree = hierarchy.group_by_location(_sample())
    assert list(tree) == ["North", "Unknown Campus"]
    assert list(tree["North"]) == ["A", "B"]
    assert list(tree["North"]["A"]) == ["1", "2"]
    assert [c.controller_number for c in tree["North"]["A"]["1"]] == ["1", "5"]
    assert list(tree["Unknown Campus"]["Unknown Building"]) == ["Unknown Floor"]


def test_counts_and_select():
    tree = hierarchy.group_by_location(_sample())
    assert hierarchy.count(tree) == 5
    assert hierarchy.count(tree["North"]) == 4
    assert [c.controller_number for c in hierarchy.select(tree, ["North", "A"])] == ["1", "5", "3"]
    assert hierarchy.select(tree, ["North", "Z"]) == []
    assert len(hierarchy.select(tree, ["Unknown Campus"])) == 1


def test_labels_roundtrip_and_section_name():
    assert hierarchy.group_label("floor", "") == "Unknown Floor"
    assert hierarchy.group_label("floor", None) == "Unknown Floor"
    assert hierarchy.group_label("floor", "  ") == "  "
    assert hierarchy.raw_value("floor", "Unknown Floor") == ""
    assert hierarchy.raw_value("campus", "North") == "North"
    assert hierarchy.section_name("North", "A", None) == "North_A"
    assert hierarchy.group_by_location([]) == {}
