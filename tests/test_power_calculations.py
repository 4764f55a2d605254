# -*- coding: utf-8 -*-
import itertools

import pytest

from core.calculations.power import (
    WarningLevel,
    channel_power,
    load_percent,
    summarize,
    total_power,
    warning_level,
)
from core.models.controller import Channel


def _ch(n, v, a, p=1):
    return Channel(id=f"c{n}", channel_number=n, voltage=v, current=a, parallel_count=p)


def test_channel_power_basic():
    assert channel_power("24", "0.625", 4) == pytest.approx(60.0)
    assert channel_power(12, 5) == pytest.approx(60.0)
    assert channel_power("1,5", "2") == pytest.approx(3.0)


@pytest.mark.parametrize(
    "voltage,current",
    [("", "2"), ("24", ""), ("abc", "2"), ("24", "x"), ("0", "2"), ("24", "-1"), ("-24", "2"), ("nan", "1"), (None, None)],
)
def test_channel_power_zero_when_unusable(voltage, current):
    assert channel_power(voltage, current, 3) == 0.0


@pytest.mark.parametrize("parallel", [None, "", "abc", 0, -2, "0"])
def test_channel_power_parallel_defaults_to_one(parallel):
    assert channel_power("10", "2", parallel) == pytest.approx(20.0)


def test_total_power_example_and_order_invariance():
    chans = [_ch(1, "24", "0.625", 4), _ch(2, "24", "0.625", 4), _ch(3, "0.1", "0.3"), _ch(4, "12.7", "1.3", 2)]
    expected = total_power(chans)
    for perm in itertools.permutations(chans):
        assert total_power(perm) == expected
    assert total_power(chans[:2]) == pytest.approx(120.0)
    assert total_power([]) == 0.0


def test_two_sixty_watt_channels_warn_at_92_percent(controller):
    s = summarize(controller)
    assert s.total_w == pytest.approx(120.0)
    assert s.limit_w == 130.0
    assert s.load_pct == pytest.approx(92.307, abs=1e-3)
    assert s.level == WarningLevel.WARNING


@pytest.mark.parametrize(
    "total,level",
    [(0, WarningLevel.NONE), (79.99, WarningLevel.NONE), (80, WarningLevel.CAUTION), (89.9, WarningLevel.CAUTION),
     (90, WarningLevel.WARNING), (99.99, WarningLevel.WARNING), (100, WarningLevel.CRITICAL), (250, WarningLevel.CRITICAL)],
)
def test_warning_thresholds_are_inclusive(total, level):
    assert warning_level(total, 100) == level


@pytest.mark.parametrize("limit", [None, 0, -5, "", "abc"])
def test_no_positive_limit_means_no_warning(limit):
    assert warning_level(1e9, limit) == WarningLevel.NONE
    assert load_percent(50, limit) is None


def test_warning_level_monotonic_in_total_and_limit():
    totals = [i * 7.5 for i in range(40)]
    levels = [warning_level(t, 150) for t in totals]
    assert levels == sorted(levels)

    limits = [400 - i * 10 for i in range(39)]
    levels = [warning_level(120, lim) for lim in limits]
    assert levels == sorted(levels)


def test_summary_without_limit(controller):
    controller.power_limit = None
    s = summarize(controller)
    assert s.limit_w is None and s.load_pct is None
    assert s.level == WarningLevel.NONE
    assert WarningLevel.CRITICAL.label == "critical"
