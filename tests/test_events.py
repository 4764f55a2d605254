# -*- coding: utf-8 -*-
import logging

from app.events import ControllersChanged, EventBus, TemplatesChanged


def test_subscribers_receive_only_their_event_type():
    bus = EventBus()
    got = []
    bus.subscribe(ControllersChanged, got.append)
    bus.emit(TemplatesChanged(reason="saved"))
    bus.emit(ControllersChanged(reason="deleted", ids=("a",)))
    assert [(e.reason, e.ids) for e in got] == [("deleted", ("a",))]

    bus.unsubscribe(ControllersChanged, got.append)
    bus.emit(ControllersChanged(reason="saved"))
    assert len(got) == 1


def test_failing_handler_is_logged_and_others_still_run(caplog):
    bus = EventBus()
    got = []

    def broken(event):
        raise RuntimeError("stale cache")

    bus.subscribe(ControllersChanged, broken)
    bus.subscribe(ControllersChanged, got.append)
    with caplog.at_level(logging.WARNING):
        bus.emit(ControllersChanged(reason="saved"))
    assert len(got) == 1
    assert "Event handler failed" in caplog.text
