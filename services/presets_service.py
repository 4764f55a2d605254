# -*- coding: utf-8 -*-
"""Service layer for controller templates and fixture presets.

Both collections are plain libraries: nothing here touches controllers, and
fixture presets are not wired into channel editing.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional

from app.events import EventBus, FixturesChanged, TemplatesChanged
from core.calculations.power import channel_power
from core.models.controller import ControllerTemplate, FixtureConfig, new_id, utc_now_iso
from core.types import has_errors
from core.validators.presets import validate_fixture, validate_template
from domain.parse import clean_text
from services.controller_sheet import ControllerSheet
from services.errors import RecordNotFoundError, ValidationError
from storage.repository import RecordStore

log = logging.getLogger(__name__)


class TemplateService:
    def __init__(self, store: RecordStore, bus: Optional[EventBus] = None) -> None:
        self.store = store
        self.bus = bus or EventBus()

    def save(self, template: ControllerTemplate) -> ControllerTemplate:
        issues = validate_template(template)
        if has_errors(issues):
            raise ValidationError(issues)
        stored = self.store.save_template(template)
        self.bus.emit(TemplatesChanged(reason="saved", ids=(stored.id,)))
        return stored

    def create_from_sheet(
        self,
        sheet: ControllerSheet,
        name: str,
        description: str = "",
        *,
        include_location: bool = True,
    ) -> ControllerTemplate:
        return self.save(sheet.to_template(name, description, include_location=include_location))

    def list(self) -> List[ControllerTemplate]:
        return self.store.get_templates()

    def get(self, template_id: str) -> ControllerTemplate:
        tpl = self.store.get_template(template_id)
        if tpl is None:
            raise RecordNotFoundError("Template", template_id)
        return tpl

    def find_by_name(self, name: str) -> Optional[ControllerTemplate]:
        needle = clean_text(name)
        for tpl in self.list():
            if tpl.name == needle:
                return tpl
        return None

    def delete(self, template_id: str) -> bool:
        removed = self.store.delete_template(template_id)
        if removed:
            self.bus.emit(TemplatesChanged(reason="deleted", ids=(template_id,)))
        return removed


class FixtureService:
    def __init__(self, store: RecordStore, bus: Optional[EventBus] = None) -> None:
        self.store = store
        self.bus = bus or EventBus()

    def add(self, name: str, voltage: str, current: str) -> FixtureConfig:
        fixture = FixtureConfig(
            id=new_id(),
            name=clean_text(name),
            voltage=clean_text(voltage),
            current=clean_text(current),
            created_at=utc_now_iso(),
        )
        return self._save(fixture)

    def update(self, fixture_id: str, *, name: Optional[str] = None, voltage: Optional[str] = None,
               current: Optional[str] = None) -> FixtureConfig:
        existing = self.get(fixture_id)
        changed = replace(
            existing,
            name=existing.name if name is None else clean_text(name),
            voltage=existing.voltage if voltage is None else clean_text(voltage),
            current=existing.current if current is None else clean_text(current),
        )
        return self._save(changed)

    def _save(self, fixture: FixtureConfig) -> FixtureConfig:
        issues = validate_fixture(fixture)
        if has_errors(issues):
            raise ValidationError(issues)
        stored = self.store.save_fixture(fixture)
        self.bus.emit(FixturesChanged(reason="saved", ids=(stored.id,)))
        return stored

    def list(self) -> List[FixtureConfig]:
        return self.store.get_fixtures()

    def get(self, fixture_id: str) -> FixtureConfig:
        fx = self.store.get_fixture(fixture_id)
        if fx is None:
            raise RecordNotFoundError("Fixture", fixture_id)
        return fx

    def delete(self, fixture_id: str) -> bool:
        removed = self.store.delete_fixture(fixture_id)
        if removed:
            self.bus.emit(FixturesChanged(reason="deleted", ids=(fixture_id,)))
        return removed

    @staticmethod
    def power(fixture: FixtureConfig) -> float:
        """Display power of one fixture (V x A)."""
        return channel_power(fixture.voltage, fixture.current, 1)
