# -*- coding: utf-8 -*-
"""Record models: controllers, channels, templates and fixture presets.

Records persist as plain dicts with camelCase keys (see core.keys.RecordKeys).
``from_dict`` is tolerant: missing keys get defaults, numbers stored as
numbers are kept as text where the sheet keeps text.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from core.keys import RecordKeys as K
from domain.parse import to_float, to_positive_int


def new_id() -> str:
    return uuid.uuid4().hex


def utc_now_iso() -> str:
    """ISO-8601 UTC timestamp; fixed width so strings sort chronologically."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _text(raw: Dict[str, Any], key: str) -> str:
    val = raw.get(key)
    return "" if val is None else str(val)


def _opt_text(raw: Dict[str, Any], key: str) -> Optional[str]:
    val = raw.get(key)
    return None if val is None else str(val)


def _numeric_text(val: Any) -> str:
    """Voltage/current are kept as typed; numbers from foreign JSON become text."""
    if val is None:
        return ""
    if isinstance(val, float) and val.is_integer():
        return str(int(val))
    return str(val)


@dataclass
class ChannelShape:
    """A channel without identity, as stored in templates."""

    channel_number: int
    fixture_type: str = ""
    voltage: str = ""
    current: str = ""
    parallel_count: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            K.CHANNEL_NUMBER: self.channel_number,
            K.FIXTURE_TYPE: self.fixture_type,
            K.VOLTAGE: self.voltage,
            K.CURRENT: self.current,
            K.PARALLEL_COUNT: self.parallel_count,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], *, fallback_number: int = 1) -> "ChannelShape":
        raw = raw if isinstance(raw, dict) else {}
        return cls(
            channel_number=to_positive_int(raw.get(K.CHANNEL_NUMBER), default=fallback_number),
            fixture_type=_numeric_text(raw.get(K.FIXTURE_TYPE)),
            voltage=_numeric_text(raw.get(K.VOLTAGE)),
            current=_numeric_text(raw.get(K.CURRENT)),
            parallel_count=to_positive_int(raw.get(K.PARALLEL_COUNT), default=1),
        )


@dataclass
class Channel:
    id: str
    channel_number: int
    fixture_type: str = ""
    voltage: str = ""
    current: str = ""
    parallel_count: int = 1

    @classmethod
    def blank(cls, channel_number: int) -> "Channel":
        return cls(id=new_id(), channel_number=channel_number)

    @classmethod
    def from_shape(cls, shape: ChannelShape, channel_number: Optional[int] = None) -> "Channel":
        return cls(
            id=new_id(),
            channel_number=shape.channel_number if channel_number is None else channel_number,
            fixture_type=shape.fixture_type,
            voltage=shape.voltage,
            current=shape.current,
            parallel_count=shape.parallel_count,
        )

    def to_shape(self) -> ChannelShape:
        return ChannelShape(
            channel_number=self.channel_number,
            fixture_type=self.fixture_type,
            voltage=self.voltage,
            current=self.current,
            parallel_count=self.parallel_count,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {K.ID: self.id}
        d.update(self.to_shape().to_dict())
        return d

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], *, fallback_number: int = 1) -> "Channel":
        raw = raw if isinstance(raw, dict) else {}
        shape = ChannelShape.from_dict(raw, fallback_number=fallback_number)
        ch = cls.from_shape(shape)
        ch.id = _text(raw, K.ID) or ch.id
        return ch


@dataclass
class ControllerData:
    id: str
    campus: str = ""
    building: str = ""
    floor: str = ""
    zone: str = ""
    controller_number: str = ""
    channels: List[Channel] = field(default_factory=list)
    power_limit: Optional[float] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def new(cls, **kwargs: Any) -> "ControllerData":
        now = utc_now_iso()
        kwargs.setdefault("id", new_id())
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        return cls(**kwargs)

    def touched(self, when: Optional[str] = None) -> "ControllerData":
        """Copy with ``updated_at`` refreshed (never moves backwards)."""
        stamp = when or utc_now_iso()
        if self.updated_at and stamp < self.updated_at:
            stamp = self.updated_at
        return replace(self, updated_at=stamp)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            K.ID: self.id,
            K.CAMPUS: self.campus,
            K.BUILDING: self.building,
            K.FLOOR: self.floor,
            K.ZONE: self.zone,
            K.CONTROLLER_NUMBER: self.controller_number,
            K.CHANNELS: [c.to_dict() for c in self.channels],
            K.CREATED_AT: self.created_at,
            K.UPDATED_AT: self.updated_at,
        }
        if self.power_limit is not None:
            d[K.POWER_LIMIT] = self.power_limit
        return d

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ControllerData":
        raw = raw if isinstance(raw, dict) else {}
        chans_raw = raw.get(K.CHANNELS)
        if not isinstance(chans_raw, list):
            chans_raw = []
        channels = [
            Channel.from_dict(c, fallback_number=i + 1)
            for i, c in enumerate(chans_raw)
            if isinstance(c, dict)
        ]
        return cls(
            id=_text(raw, K.ID) or new_id(),
            campus=_text(raw, K.CAMPUS),
            building=_text(raw, K.BUILDING),
            floor=_text(raw, K.FLOOR),
            zone=_text(raw, K.ZONE),
            controller_number=_text(raw, K.CONTROLLER_NUMBER),
            channels=channels,
            power_limit=to_float(raw.get(K.POWER_LIMIT), default=None),
            created_at=_text(raw, K.CREATED_AT),
            updated_at=_text(raw, K.UPDATED_AT),
        )


@dataclass
class ControllerTemplate:
    """Reusable seed for new controllers. Location fields are optional."""

    id: str
    name: str
    description: str = ""
    campus: Optional[str] = None
    building: Optional[str] = None
    floor: Optional[str] = None
    zone: Optional[str] = None
    controller_number: Optional[str] = None
    power_limit: Optional[float] = None
    channels: List[ChannelShape] = field(default_factory=list)
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            K.ID: self.id,
            K.NAME: self.name,
            K.DESCRIPTION: self.description,
        }
        optional = {
            K.CAMPUS: self.campus,
            K.BUILDING: self.building,
            K.FLOOR: self.floor,
            K.ZONE: self.zone,
            K.CONTROLLER_NUMBER: self.controller_number,
            K.POWER_LIMIT: self.power_limit,
        }
        d.update({k: v for k, v in optional.items() if v is not None})
        d[K.CHANNELS] = [c.to_dict() for c in self.channels]
        d[K.CREATED_AT] = self.created_at
        return d

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "ControllerTemplate":
        raw = raw if isinstance(raw, dict) else {}
        chans_raw = raw.get(K.CHANNELS)
        if not isinstance(chans_raw, list):
            chans_raw = []
        return cls(
            id=_text(raw, K.ID) or new_id(),
            name=_text(raw, K.NAME),
            description=_text(raw, K.DESCRIPTION),
            campus=_opt_text(raw, K.CAMPUS),
            building=_opt_text(raw, K.BUILDING),
            floor=_opt_text(raw, K.FLOOR),
            zone=_opt_text(raw, K.ZONE),
            controller_number=_opt_text(raw, K.CONTROLLER_NUMBER),
            power_limit=to_float(raw.get(K.POWER_LIMIT), default=None),
            channels=[
                ChannelShape.from_dict(c, fallback_number=i + 1)
                for i, c in enumerate(chans_raw)
                if isinstance(c, dict)
            ],
            created_at=_text(raw, K.CREATED_AT),
        )


@dataclass
class FixtureConfig:
    """A named voltage/current pair kept as a preset."""

    id: str
    name: str
    voltage: str
    current: str
    created_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            K.ID: self.id,
            K.NAME: self.name,
            K.VOLTAGE: self.voltage,
            K.CURRENT: self.current,
            K.CREATED_AT: self.created_at,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FixtureConfig":
        raw = raw if isinstance(raw, dict) else {}
        return cls(
            id=_text(raw, K.ID) or new_id(),
            name=_text(raw, K.NAME),
            voltage=_numeric_text(raw.get(K.VOLTAGE)),
            current=_numeric_text(raw.get(K.CURRENT)),
            created_at=_text(raw, K.CREATED_AT),
        )
