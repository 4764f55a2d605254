# -*- coding: utf-8 -*-
"""ControllerSheet: in-memory editing session for one controller.

This module is UI-agnostic. A front end binds its inputs to the setters below
and calls ``ControllerService.save(sheet)`` on an explicit save; nothing is
persisted before that.

Rules kept by the sheet:
- there is always at least one channel (removing the last one raises);
- new channels get ``max(channel numbers) + 1``;
- applying a template replaces the channels and overwrites only the location
  fields the template populates.
"""

from __future__ import annotations

import copy
import logging
from typing import Any, List, Optional

from app.dirty_tracker import DirtyTracker
from core.calculations.power import PowerSummary, WarningLevel, summarize, total_power
from core.models.controller import (
    Channel,
    ControllerData,
    ControllerTemplate,
    new_id,
    utc_now_iso,
)
from core.types import Issue
from core.validators.controller import validate_controller
from domain.parse import clean_text, to_optional_limit, to_positive_int
from services.errors import LastChannelError, RecordNotFoundError

log = logging.getLogger(__name__)

LOCATION_FIELDS = ("campus", "building", "floor", "zone", "controller_number")
CHANNEL_FIELDS = ("fixture_type", "voltage", "current", "parallel_count")


class ControllerSheet:
    def __init__(self, record: Optional[ControllerData] = None) -> None:
        self.tracker = DirtyTracker()
        self.record_id: Optional[str] = None
        self.created_at = ""
        self.campus = self.building = self.floor = self.zone = self.controller_number = ""
        self.power_limit: Optional[float] = None
        self._channels: List[Channel] = [Channel.blank(1)]
        if record is None:
            return

        with self.tracker.suspend_tracking():
            self.record_id = record.id
            self.created_at = record.created_at
            self.set_location(**{key: getattr(record, key) for key in LOCATION_FIELDS})
            self.power_limit = record.power_limit
            if record.channels:
                self._channels = copy.deepcopy(record.channels)

    # -------- state --------
    @property
    def is_new(self) -> bool:
        return self.record_id is None

    @property
    def is_dirty(self) -> bool:
        return self.tracker.is_dirty

    @property
    def channels(self) -> List[Channel]:
        """Copies; edit through update_channel()."""
        return copy.deepcopy(self._channels)

    def get_channel(self, channel_id: str) -> Channel:
        for ch in self._channels:
            if ch.id == channel_id:
                return ch
        raise RecordNotFoundError("Channel", channel_id)

    # -------- location / limit --------
    def set_location(self, **fields: Any) -> None:
        unknown = set(fields) - set(LOCATION_FIELDS)
        if unknown:
            raise ValueError(f"Unknown location field(s): {', '.join(sorted(unknown))}")
        for key, value in fields.items():
            setattr(self, key, "" if value is None else str(value))
        self.tracker.mark_dirty("location", keys=fields.keys())

    def set_power_limit(self, value: Any) -> None:
        self.power_limit = to_optional_limit(value)
        self.tracker.mark_dirty("power_limit")

    # -------- channels --------
    def next_channel_number(self) -> int:
        return max((c.channel_number for c in self._channels), default=0) + 1

    def add_channel(self, **fields: Any) -> Channel:
        ch = Channel.blank(self.next_channel_number())
        self._channels.append(ch)
        if fields:
            self._apply_channel_fields(ch, fields)
        self.tracker.mark_dirty("add_channel")
        return copy.deepcopy(ch)

    def remove_channel(self, channel_id: str) -> None:
        ch = self.get_channel(channel_id)
        if len(self._channels) <= 1:
            raise LastChannelError()
        self._channels.remove(ch)
        self.tracker.mark_dirty("remove_channel")

    def set_channels(self, rows: List[dict]) -> None:
        """Replace all channels, numbered from 1 in the given order."""
        if not rows:
            raise LastChannelError()
        channels = []
        for n, fields in enumerate(rows, start=1):
            ch = Channel.blank(n)
            self._apply_channel_fields(ch, fields)
            channels.append(ch)
        self._channels = channels
        self.tracker.mark_dirty("set_channels")

    def update_channel(self, channel_id: str, **fields: Any) -> Channel:
        ch = self.get_channel(channel_id)
        self._apply_channel_fields(ch, fields)
        self.tracker.mark_dirty("update_channel", keys=fields.keys())
        return copy.deepcopy(ch)

    @staticmethod
    def _apply_channel_fields(ch: Channel, fields: dict) -> None:
        unknown = set(fields) - set(CHANNEL_FIELDS)
        if unknown:
            raise ValueError(f"Unknown channel field(s): {', '.join(sorted(unknown))}")
        for key, value in fields.items():
            if key == "parallel_count":
                ch.parallel_count = to_positive_int(value, default=1)
            else:
                setattr(ch, key, "" if value is None else str(value))

    # -------- templates --------
    def apply_template(self, template: ControllerTemplate) -> None:
        """Seed the sheet from a template.

        Channels are replaced (fresh ids) unless the template has none. Location
        fields and the power limit are overwritten only where the template has
        a non-empty value.
        """
        for key in LOCATION_FIELDS:
            value = getattr(template, key, None)
            if value is not None and clean_text(value):
                setattr(self, key, value)
        if template.power_limit is not None and template.power_limit > 0:
            self.power_limit = template.power_limit

        if template.channels:
            numbers = [s.channel_number for s in template.channels]
            renumber = len(set(numbers)) != len(numbers)
            self._channels = [
                Channel.from_shape(shape, channel_number=(i + 1) if renumber else None)
                for i, shape in enumerate(template.channels)
            ]
        self.tracker.mark_dirty("apply_template")
        log.debug("Applied template %s (%s) to sheet", template.id, template.name)

    def to_template(self, name: str, description: str = "", *, include_location: bool = True) -> ControllerTemplate:
        tpl = ControllerTemplate(
            id=new_id(),
            name=clean_text(name),
            description=clean_text(description),
            channels=[c.to_shape() for c in self._channels],
            created_at=utc_now_iso(),
        )
        if include_location:
            for key in LOCATION_FIELDS:
                value = getattr(self, key)
                if clean_text(value):
                    setattr(tpl, key, value)
            tpl.power_limit = self.power_limit
        return tpl

    # -------- derived --------
    @property
    def total_power(self) -> float:
        return total_power(self._channels)

    @property
    def power_summary(self) -> PowerSummary:
        return summarize(self.assemble())

    @property
    def warning_level(self) -> WarningLevel:
        return self.power_summary.level

    def issues(self) -> List[Issue]:
        return validate_controller(self.assemble())

    # -------- save support --------
    def assemble(self) -> ControllerData:
        """Build the record to save (id and createdAt kept when editing)."""
        now = utc_now_iso()
        return ControllerData(
            id=self.record_id or new_id(),
            campus=self.campus,
            building=self.building,
            floor=self.floor,
            zone=self.zone,
            controller_number=self.controller_number,
            channels=copy.deepcopy(self._channels),
            power_limit=self.power_limit,
            created_at=self.created_at or now,
            updated_at=now,
        )

    def mark_saved(self, stored: ControllerData) -> None:
        self.record_id = stored.id
        self.created_at = stored.created_at
        self.tracker.clear_dirty()
