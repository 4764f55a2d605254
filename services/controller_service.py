# -*- coding: utf-8 -*-
"""Service layer for controller records.

UI-agnostic. Validates before writing, logs every mutation and notifies the
event bus after a successful write.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from app.events import ControllersChanged, EventBus
from core.models.controller import ControllerData
from core.types import has_errors
from core.validators.controller import validate_controller
from services.controller_sheet import ControllerSheet
from services.errors import EmptyChannelListError, RecordNotFoundError, ValidationError
from storage.repository import RecordStore

log = logging.getLogger(__name__)


class ControllerService:
    def __init__(self, store: RecordStore, bus: Optional[EventBus] = None) -> None:
        self.store = store
        self.bus = bus or EventBus()

    def _emit(self, reason: str, ids=()) -> None:
        self.bus.emit(ControllersChanged(reason=reason, ids=tuple(ids)))

    def save(self, source: Union[ControllerSheet, ControllerData]) -> ControllerData:
        """Validate and upsert. Blocking issues raise ValidationError; nothing is written."""
        record = source.assemble() if isinstance(source, ControllerSheet) else source
        if not record.channels:
            raise EmptyChannelListError()
        issues = validate_controller(record)
        if has_errors(issues):
            log.warning("Save blocked for controller %s: %s", record.id, [i.code for i in issues])
            raise ValidationError(issues)
        for it in issues:
            log.info("Controller %s: %s", record.id, it.message)

        stored = self.store.save_controller(record)
        if isinstance(source, ControllerSheet):
            source.mark_saved(stored)
        self._emit("saved", [stored.id])
        return stored

    def list(self) -> List[ControllerData]:
        return self.store.get_controllers()

    def get(self, record_id: str) -> ControllerData:
        rec = self.store.get_controller(record_id)
        if rec is None:
            raise RecordNotFoundError("Controller", record_id)
        return rec

    def open_sheet(self, record_id: Optional[str] = None) -> ControllerSheet:
        """A new blank sheet, or one seeded from a stored controller."""
        if record_id is None:
            return ControllerSheet()
        return ControllerSheet(self.get(record_id))

    def delete(self, record_id: str) -> bool:
        removed = self.store.delete_controller(record_id)
        if removed:
            self._emit("deleted", [record_id])
        return removed

    def delete_campus(self, campus: str) -> int:
        n = self.store.delete_by_campus(campus)
        if n:
            self._emit("deleted_campus")
        return n

    def delete_building(self, campus: str, building: str) -> int:
        n = self.store.delete_by_building(campus, building)
        if n:
            self._emit("deleted_building")
        return n

    def delete_floor(self, campus: str, building: str, floor: str) -> int:
        n = self.store.delete_by_floor(campus, building, floor)
        if n:
            self._emit("deleted_floor")
        return n
