# -*- coding: utf-8 -*-
"""DashboardService: read model over the controller collection.

Rereads the whole collection (cached until a ControllersChanged event),
groups it by location and computes power warnings. Sections are addressed by
their display labels, so "Unknown Campus" etc. select records with a blank
field.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from app.events import ControllersChanged
from core.calculations.power import PowerSummary, WarningLevel, summarize
from core.models.controller import ControllerData
from domain import hierarchy
from services.controller_service import ControllerService

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    total_controllers: int
    with_warnings: int
    total_channels: int
    total_power_w: float


class DashboardService:
    def __init__(self, controllers: ControllerService) -> None:
        self.controllers = controllers
        self._snapshot: Optional[List[ControllerData]] = None
        controllers.bus.subscribe(ControllersChanged, self._on_changed)

    def _on_changed(self, event: ControllersChanged) -> None:
        log.debug("Dashboard invalidated (%s)", event.reason)
        self._snapshot = None

    def refresh(self) -> List[ControllerData]:
        self._snapshot = self.controllers.list()
        return list(self._snapshot)

    def snapshot(self) -> List[ControllerData]:
        if self._snapshot is None:
            return self.refresh()
        return list(self._snapshot)

    # -------- power --------
    def summaries(self) -> Dict[str, PowerSummary]:
        return {c.id: summarize(c) for c in self.snapshot()}

    def flagged(self, min_level: WarningLevel = WarningLevel.CAUTION) -> List[Tuple[ControllerData, PowerSummary]]:
        out = []
        for c in self.snapshot():
            s = summarize(c)
            if s.level >= min_level:
                out.append((c, s))
        return out

    def stats(self) -> DashboardStats:
        snap = self.snapshot()
        sums = [summarize(c) for c in snap]
        return DashboardStats(
            total_controllers=len(snap),
            with_warnings=sum(1 for s in sums if s.level > WarningLevel.NONE),
            total_channels=sum(len(c.channels) for c in snap),
            total_power_w=sum(s.total_w for s in sums),
        )

    # -------- hierarchy --------
    def tree(self) -> hierarchy.Hierarchy:
        return hierarchy.group_by_location(self.snapshot())

    @staticmethod
    def _path(campus: str, building: Optional[str], floor: Optional[str]) -> List[str]:
        if floor is not None and building is None:
            raise ValueError("A floor section needs its building")
        return [p for p in (campus, building, floor) if p is not None]

    def section(
        self,
        campus: str,
        building: Optional[str] = None,
        floor: Optional[str] = None,
    ) -> Tuple[str, List[ControllerData]]:
        """(section name, controllers) for a campus, building or floor group."""
        path = self._path(campus, building, floor)
        return hierarchy.section_name(*path), hierarchy.select(self.tree(), path)

    def delete_section(
        self,
        campus: str,
        building: Optional[str] = None,
        floor: Optional[str] = None,
    ) -> int:
        """Cascade delete of a group, addressed by display labels."""
        self._path(campus, building, floor)
        raw_campus = hierarchy.raw_value("campus", campus)
        if building is None:
            return self.controllers.delete_campus(raw_campus)
        raw_building = hierarchy.raw_value("building", building)
        if floor is None:
            return self.controllers.delete_building(raw_campus, raw_building)
        return self.controllers.delete_floor(raw_campus, raw_building, hierarchy.raw_value("floor", floor))
