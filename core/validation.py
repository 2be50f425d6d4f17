# -*- coding: utf-8 -*-
"""Caller-side validation gates.

The store trusts its inputs. Anything that mutates it on behalf of a user
(HTTP API, CLI) checks the value here first and reports problems itself.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Optional
from urllib.parse import urlparse

from core.duration import is_duration, parse_duration

__all__ = [
    "is_likely_ready_url",
    "is_valid_http_url",
    "item_name_error",
    "parse_quantity",
    "unique_clone_name",
    "valid_duration_text",
]

_CLONE_RE = re.compile(r"^(.*?)(?: (\d+))?$")


def item_name_error(name: Any, name_taken: Callable[[str], bool]) -> Optional[str]:
    """Return a message when `name` is not a valid new item name, else None."""
    nm = str(name or "").strip()
    if not nm:
        return "Item name must not be empty"
    if "," in nm:
        return "Item name must not contain a comma"
    if name_taken(nm):
        return f"Item name already exists: {nm}"
    return None


def is_valid_http_url(s: Any) -> bool:
    try:
        u = urlparse(str(s or ""))
    except ValueError:
        return False
    return u.scheme in ("http", "https") and bool(u.netloc)


def is_likely_ready_url(s: Any) -> bool:
    """http(s) URL whose hostname has an inner dot ("example.com", not ".com.")."""
    if not is_valid_http_url(s):
        return False
    host = urlparse(str(s)).hostname or ""
    return "." in host and not host.startswith(".") and not host.endswith(".")


def parse_quantity(value: Any) -> Optional[int]:
    try:
        qty = int(str(value).strip())
    except (TypeError, ValueError):
        return None
    return qty if qty >= 1 else None


def valid_duration_text(text: Any) -> bool:
    return is_duration(parse_duration(text))


def unique_clone_name(original: str, name_taken: Callable[[str], bool]) -> str:
    """"Foo" -> "Foo 2", "Foo 2" -> "Foo 3", skipping names already used."""
    m = _CLONE_RE.match(original or "")
    base = m.group(1) if m else (original or "")
    num = m.group(2) if m else None
    version = int(num) + 1 if num else 2
    candidate = f"{base} {version}"
    while name_taken(candidate):
        version += 1
        candidate = f"{base} {version}"
    return candidate
