# -*- coding: utf-8 -*-
"""Read-only projection of a controller into export rows + safe file output.

Shared by the spreadsheet and PDF exporters. Nothing here writes to the
record store.
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Optional, Tuple, Union

from core.calculations.power import PowerSummary, channel_power_of
from core.models.controller import ControllerData
from domain.parse import to_float
from services.errors import ExportError

log = logging.getLogger(__name__)

TABLE_HEADER = ("Channel", "Fixture Type", "Voltage (V)", "Current (A)", "Parallel", "Power (W)")

Number = Union[float, str]


@dataclass(frozen=True)
class ChannelRow:
    channel_number: int
    fixture_type: str
    voltage: Number
    current: Number
    parallel_count: int
    power_w: float


def fmt_watts(value: float) -> str:
    return f"{value:.2f} W"


def fmt_limit(limit: Optional[float]) -> str:
    return "" if limit is None else f"{limit:g} W"


def _number_or_text(raw: str) -> Number:
    f = to_float(raw, default=None)
    return raw if f is None else f


def header_block(c: ControllerData) -> List[Tuple[str, str]]:
    return [
        ("Campus", c.campus),
        ("Building", c.building),
        ("Floor", c.floor),
        ("Zone", c.zone),
        ("Controller Number", c.controller_number),
        ("Power Limit", fmt_limit(c.power_limit if (c.power_limit or 0) > 0 else None)),
    ]


def channel_rows(c: ControllerData) -> List[ChannelRow]:
    return [
        ChannelRow(
            channel_number=ch.channel_number,
            fixture_type=ch.fixture_type,
            voltage=_number_or_text(ch.voltage),
            current=_number_or_text(ch.current),
            parallel_count=ch.parallel_count,
            power_w=channel_power_of(ch),
        )
        for ch in c.channels
    ]


def load_line(s: PowerSummary) -> str:
    """'Load: 92.3% of 130 W (warning)' or '' without a limit."""
    if s.load_pct is None or s.limit_w is None:
        return ""
    return f"Load: {s.load_pct:.1f}% of {s.limit_w:g} W ({s.level.label})"


@contextmanager
def atomic_output(target: Path) -> Iterator[Path]:
    """Yield a temp path next to ``target``; move it into place only on success.

    Any failure removes the temp file and surfaces as ExportError.
    """
    target = Path(target)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{target.stem}.", suffix=target.suffix, dir=str(target.parent))
        os.close(fd)
    except OSError as e:
        raise ExportError(f"Cannot write to {target.parent}: {e}") from e

    tmp = Path(tmp_name)
    try:
        yield tmp
        os.replace(tmp, target)
    except ExportError:
        raise
    except Exception as e:
        log.error("Export to %s failed: %s", target, e)
        raise ExportError(f"Export to {target.name} failed: {e}") from e
    finally:
        if tmp.exists():
            tmp.unlink()
