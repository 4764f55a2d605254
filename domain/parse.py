# -*- coding: utf-8 -*-
"""
domain/parse.py

Single place for parsing/normalizing the free-text numeric fields of a
controller sheet (voltage, current, parallel count, power limit).

- Tolerant of decimal commas: "1,5" or "1.234,56".
- Reads a leading number and ignores trailing units: "24V" -> 24.0.
- Never raises; callers pick the default.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional


_DASH_TOKENS = {"—", "–", "-", "--", "---"}
_LEADING_NUMBER = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def is_blank(val: Any, allow_dash: bool = True) -> bool:
    """True when the value must be treated as 'empty'."""
    if val is None:
        return True

    # bool is a subclass of int; it is NOT blank here.
    if isinstance(val, (int, float)):
        return False

    s = str(val).strip()
    if s == "":
        return True

    if allow_dash and (s in _DASH_TOKENS or all(ch in "—–-" for ch in s)):
        return True

    return False


def clean_text(val: Any) -> str:
    return str(val if val is not None else "").strip()


def to_float(val: Any, default: Optional[float] = None, allow_dash: bool = True) -> Optional[float]:
    """
    Tolerant float conversion.
    - Accepts decimal comma.
    - Handles thousands like "1.234,56" or "1,234.56".
    - Non-finite results (nan/inf) and blanks -> default.
    """
    if is_blank(val, allow_dash=allow_dash):
        return default

    if isinstance(val, bool):
        return default

    if isinstance(val, (int, float)):
        out = float(val)
        return out if math.isfinite(out) else default

    s = str(val).strip().replace(" ", "")

    if "," in s and "." in s:
        # The decimal separator is usually the last one to appear.
        if s.rfind(",") > s.rfind("."):
            s = s.replace(".", "").replace(",", ".")
        else:
            s = s.replace(",", "")
    else:
        s = s.replace(",", ".")

    m = _LEADING_NUMBER.match(s)
    if not m:
        return default
    out = float(m.group(0))
    return out if math.isfinite(out) else default


def to_positive_int(val: Any, default: int = 1) -> int:
    """Parse a count; anything missing, non-numeric or < 1 gives ``default``."""
    f = to_float(val, default=None)
    if f is None:
        return default
    n = int(f)
    return n if n >= 1 else default


def to_optional_limit(val: Any) -> Optional[float]:
    """Power limit in watts; blank, invalid or non-positive -> None."""
    f = to_float(val, default=None)
    if f is None or f <= 0:
        return None
    return f
