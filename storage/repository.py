# -*- coding: utf-8 -*-
"""storage/repository.py

RecordStore: persistence facade over a BlobStore.

Three independent collections (controllers, templates, fixture presets), each a
JSON array read, modified and written back as a whole on every mutation.

- No partial updates and no transactions across collections.
- No concurrency control: the last writer of a collection wins.
- No foreign keys: deleting a template or fixture never touches controllers.
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Generic, List, Optional, TypeVar

from app.config import DEFAULT_REMOTE_TIMEOUT_S
from core.keys import CollectionKeys
from core.models.controller import ControllerData, ControllerTemplate, FixtureConfig, utc_now_iso
from infra.perf import span
from infra.settings import resolve_data_dir
from services.errors import EmptyChannelListError, StoreCorruptedError
from storage.blob_store import BlobStore, FileBlobStore, MemoryBlobStore, RemoteBlobStore

log = logging.getLogger(__name__)

T = TypeVar("T", ControllerData, ControllerTemplate, FixtureConfig)


class _Collection(Generic[T]):
    """One keyed JSON array inside the blob store."""

    def __init__(self, blobs: BlobStore, key: str, from_dict: Callable[[Dict[str, Any]], T]) -> None:
        self._blobs = blobs
        self.key = key
        self._from_dict = from_dict

    def load(self) -> List[T]:
        text = self._blobs.get(self.key)
        if text is None or not text.strip():
            return []
        with span(f"load {self.key}"):
            try:
                data = json.loads(text)
            except ValueError as e:
                raise StoreCorruptedError(f"Collection '{self.key}' is not valid JSON: {e}") from e
            if not isinstance(data, list):
                raise StoreCorruptedError(f"Collection '{self.key}' is not a JSON array")
            return [self._from_dict(item) for item in data if isinstance(item, dict)]

    def write(self, items: List[T]) -> None:
        with span(f"write {self.key}"):
            payload = json.dumps([it.to_dict() for it in items], ensure_ascii=False, indent=2)
            self._blobs.set(self.key, payload)
        log.debug("Collection %s: %d record(s), %d chars", self.key, len(items), len(payload))

    def find(self, record_id: str) -> Optional[T]:
        for it in self.load():
            if it.id == record_id:
                return it
        return None

    def upsert(self, item: T, on_replace: Optional[Callable[[T], T]] = None) -> T:
        items = self.load()
        for idx, existing in enumerate(items):
            if existing.id == item.id:
                stored = on_replace(item) if on_replace else item
                items[idx] = stored
                break
        else:
            stored = item
            items.append(stored)
        self.write(items)
        return stored

    def delete_where(self, predicate: Callable[[T], bool]) -> int:
        items = self.load()
        kept = [it for it in items if not predicate(it)]
        removed = len(items) - len(kept)
        if removed:
            self.write(kept)
        return removed


class RecordStore:
    """Repository for controllers, templates and fixture presets."""

    def __init__(self, blobs: BlobStore) -> None:
        self.blobs = blobs
        self._controllers: _Collection[ControllerData] = _Collection(
            blobs, CollectionKeys.CONTROLLERS, ControllerData.from_dict
        )
        self._templates: _Collection[ControllerTemplate] = _Collection(
            blobs, CollectionKeys.TEMPLATES, ControllerTemplate.from_dict
        )
        self._fixtures: _Collection[FixtureConfig] = _Collection(
            blobs, CollectionKeys.FIXTURES, FixtureConfig.from_dict
        )

    # -------- controllers --------
    def save_controller(self, record: ControllerData) -> ControllerData:
        """Upsert by id. Replacing refreshes ``updated_at``; new records are appended."""
        if not record.channels:
            raise EmptyChannelListError()
        if not record.created_at:
            now = utc_now_iso()
            record = replace(record, created_at=now, updated_at=record.updated_at or now)
        stored = self._controllers.upsert(record, on_replace=lambda r: r.touched())
        log.info(
            "Saved controller id=%s number=%s (%s/%s/%s) channels=%d",
            stored.id, stored.controller_number, stored.campus, stored.building, stored.floor,
            len(stored.channels),
        )
        return stored

    def get_controllers(self) -> List[ControllerData]:
        return self._controllers.load()

    def get_controller(self, record_id: str) -> Optional[ControllerData]:
        return self._controllers.find(record_id)

    def delete_controller(self, record_id: str) -> bool:
        removed = self._controllers.delete_where(lambda c: c.id == record_id)
        log.info("Delete controller id=%s removed=%d", record_id, removed)
        return bool(removed)

    def delete_by_campus(self, campus: str) -> int:
        removed = self._controllers.delete_where(lambda c: c.campus == campus)
        log.info("Delete campus=%r removed=%d", campus, removed)
        return removed

    def delete_by_building(self, campus: str, building: str) -> int:
        removed = self._controllers.delete_where(
            lambda c: c.campus == campus and c.building == building
        )
        log.info("Delete building=%r/%r removed=%d", campus, building, removed)
        return removed

    def delete_by_floor(self, campus: str, building: str, floor: str) -> int:
        removed = self._controllers.delete_where(
            lambda c: c.campus == campus and c.building == building and c.floor == floor
        )
        log.info("Delete floor=%r/%r/%r removed=%d", campus, building, floor, removed)
        return removed

    # -------- templates --------
    def save_template(self, template: ControllerTemplate) -> ControllerTemplate:
        if not template.created_at:
            template.created_at = utc_now_iso()
        stored = self._templates.upsert(template)
        log.info("Saved template id=%s name=%r", stored.id, stored.name)
        return stored

    def get_templates(self) -> List[ControllerTemplate]:
        return self._templates.load()

    def get_template(self, template_id: str) -> Optional[ControllerTemplate]:
        return self._templates.find(template_id)

    def delete_template(self, template_id: str) -> bool:
        return bool(self._templates.delete_where(lambda t: t.id == template_id))

    # -------- fixture presets --------
    def save_fixture(self, fixture: FixtureConfig) -> FixtureConfig:
        if not fixture.created_at:
            fixture.created_at = utc_now_iso()
        stored = self._fixtures.upsert(fixture)
        log.info("Saved fixture id=%s name=%r", stored.id, stored.name)
        return stored

    def get_fixtures(self) -> List[FixtureConfig]:
        return self._fixtures.load()

    def get_fixture(self, fixture_id: str) -> Optional[FixtureConfig]:
        return self._fixtures.find(fixture_id)

    def delete_fixture(self, fixture_id: str) -> bool:
        return bool(self._fixtures.delete_where(lambda f: f.id == fixture_id))


def create_blob_store(settings: Dict[str, Any]) -> BlobStore:
    """Pick the blob store variant named by ``settings['storage_backend']``."""
    backend = str(settings.get("storage_backend") or "file")
    quota = int(settings.get("quota_bytes") or 0)
    if backend == "memory":
        return MemoryBlobStore(quota_bytes=quota)
    if backend == "remote":
        return RemoteBlobStore(
            str(settings.get("remote_url") or ""),
            timeout_s=float(settings.get("remote_timeout_s") or DEFAULT_REMOTE_TIMEOUT_S),
        )
    return FileBlobStore(resolve_data_dir(settings), quota_bytes=quota)


def open_record_store(settings: Dict[str, Any]) -> RecordStore:
    blobs = create_blob_store(settings)
    log.info("Record store backend: %s", blobs.describe())
    return RecordStore(blobs)
