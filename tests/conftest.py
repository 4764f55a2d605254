# -*- coding: utf-8 -*-

"""Pytest configuration.

This project is a simple app folder layout (not necessarily installed).
For local testing we add the repository root to sys.path so that imports like
`from core...` work reliably.
"""

from __future__ import annotations

import os
import sys

import pytest


ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from core.models.controller import Channel, ControllerData  # noqa: E402
from storage.blob_store import MemoryBlobStore  # noqa: E402
from storage.repository import RecordStore  # noqa: E402


@pytest.fixture(autouse=True)
def user_home(tmp_path, monkeypatch):
    """Per-user folder (settings, logs, data, exports) inside tmp_path."""
    home = tmp_path / "home"
    monkeypatch.setenv("CTRLDOCS_HOME", str(home))
    return home


@pytest.fixture
def blobs() -> MemoryBlobStore:
    return MemoryBlobStore()


@pytest.fixture
def store(blobs) -> RecordStore:
    return RecordStore(blobs)


def make_controller(
    number: str = "C-01",
    *,
    campus: str = "Main",
    building: str = "B1",
    floor: str = "L1",
    zone: str = "Lobby",
    limit=130.0,
    channels=(("LED strip", "24", "0.625", 4), ("LED strip", "24", "0.625", 4)),
) -> ControllerData:
    return ControllerData.new(
        campus=campus,
        building=building,
        floor=floor,
        zone=zone,
        controller_number=number,
        power_limit=limit,
        channels=[
            Channel(id=f"ch{i}", channel_number=i, fixture_type=f, voltage=v, current=a, parallel_count=n)
            for i, (f, v, a, n) in enumerate(channels, start=1)
        ],
    )


@pytest.fixture
def controller() -> ControllerData:
    """Two 60 W channels against a 130 W limit (92.3 %, warning)."""
    return make_controller()
