# -*- coding: utf-8 -*-
"""core/duration.py

Duration shorthand <-> integer seconds.

Grammar
- bare number: "90", "1.5" (seconds, rounded)
- unit tokens: "<number><unit>" repeated, units w/d/h/m/s (w = 7d)
- case-insensitive, all whitespace ignored ("2d 3h" == "2d3h")

Notes
- Parse failures return NaN instead of raising; callers see half-typed input
  all the time and gate on `is_duration()`.
- Repeated units are summed ("1h1h" == 2h).
"""

from __future__ import annotations

import math
import re
from typing import Any, List, Tuple, Union

__all__ = [
    "UNITS",
    "WEEK",
    "format_duration",
    "is_duration",
    "parse_duration",
]

WEEK = 7 * 24 * 3600

# largest first; format_duration relies on this order
UNITS: Tuple[Tuple[str, int], ...] = (
    ("w", WEEK),
    ("d", 24 * 3600),
    ("h", 3600),
    ("m", 60),
    ("s", 1),
)
_UNIT_SECONDS = dict(UNITS)

_WS_RE = re.compile(r"\s+")
_BARE_RE = re.compile(r"^\d+(?:\.\d+)?$")
_TOKEN_RE = re.compile(r"(\d+(?:\.\d+)?)([wdhms])")

Number = Union[int, float]


def parse_duration(text: Any) -> Number:
    """Return total seconds (int) or NaN when `text` is not a valid duration."""
    if text is None:
        return math.nan
    s = _WS_RE.sub("", str(text).strip().lower())
    if not s:
        return math.nan

    if _BARE_RE.match(s):
        return _round(float(s))

    total = 0.0
    consumed = 0
    for m in _TOKEN_RE.finditer(s):
        # tokens must be contiguous, any gap is an unparsed leftover
        if m.start() != consumed:
            return math.nan
        total += float(m.group(1)) * _UNIT_SECONDS[m.group(2)]
        consumed = m.end()

    if consumed != len(s):
        return math.nan
    return _round(total)


def format_duration(seconds: Any) -> str:
    """Format seconds as compact shorthand, e.g. 90061 -> "1d1h1m1s"."""
    try:
        remaining = int(seconds or 0)
    except (TypeError, ValueError):
        remaining = 0
    if remaining < 0:
        remaining = 0

    parts: List[str] = []
    for suffix, count in UNITS:
        v = remaining // count
        if v > 0:
            parts.append(f"{v}{suffix}")
            remaining -= v * count
    return "".join(parts) if parts else "0s"


def is_duration(value: Any) -> bool:
    """True for a usable parse result (a finite, non-negative number)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value) and value >= 0


def _round(value: float) -> Number:
    # half-up; overflowing input (e.g. 400 digits) is not a duration
    if not math.isfinite(value):
        return math.nan
    return int(math.floor(value + 0.5))
