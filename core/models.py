# -*- coding: utf-8 -*-
"""Item / Slot / Recipe records.

Persisted keys are camelCase (`iconKey`, `lastMaximized`, `itemId`) so saved
snapshots stay compatible with exports made by the browser catalog.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

__all__ = [
    "ITEM_FIELDS",
    "Item",
    "RECIPE_FIELDS",
    "Recipe",
    "SIDES",
    "SLOT_FIELDS",
    "Slot",
]

ITEM_FIELDS = ("name", "icon", "iconKey", "desc", "lastMaximized")
RECIPE_FIELDS = ("duration", "reversible")
SLOT_FIELDS = ("itemId", "qty")
SIDES = ("inputs", "outputs")


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _as_opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class Item:
    id: str
    name: str
    icon: Optional[str] = None
    icon_key: Optional[str] = None
    desc: str = ""
    last_maximized: int = 0

    # field name as seen by callers/persistence -> attribute
    _ATTRS = {
        "name": "name",
        "icon": "icon",
        "iconKey": "icon_key",
        "desc": "desc",
        "lastMaximized": "last_maximized",
    }

    def set(self, field_name: str, value: Any) -> None:
        attr = self._ATTRS.get(field_name)
        if attr is None:
            raise ValueError(f"Unknown item field: {field_name!r}")
        if attr == "last_maximized":
            value = _as_int(value)
        elif attr in ("name", "desc"):
            value = "" if value is None else str(value)
        else:
            value = _as_opt_str(value)
        setattr(self, attr, value)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"id": self.id, "name": self.name}
        if self.icon is not None:
            out["icon"] = self.icon
        if self.icon_key is not None:
            out["iconKey"] = self.icon_key
        out["desc"] = self.desc
        out["lastMaximized"] = self.last_maximized
        return out

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], item_id: Optional[str] = None) -> "Item":
        return cls(
            id=str(raw.get("id") or item_id or ""),
            name=str(raw.get("name") or ""),
            icon=_as_opt_str(raw.get("icon")),
            icon_key=_as_opt_str(raw.get("iconKey")),
            desc=str(raw.get("desc") or ""),
            last_maximized=_as_int(raw.get("lastMaximized")),
        )


@dataclass
class Slot:
    item_id: str = ""
    qty: int = 1

    def to_dict(self) -> Dict[str, Any]:
        return {"itemId": self.item_id, "qty": self.qty}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "Slot":
        # older exports stored the reference under "id" (and null for empty)
        ref = raw.get("itemId", raw.get("id"))
        return cls(item_id=str(ref or ""), qty=max(1, _as_int(raw.get("qty"), 1)))


@dataclass
class Recipe:
    id: str
    inputs: List[Slot] = field(default_factory=lambda: [Slot()])
    outputs: List[Slot] = field(default_factory=lambda: [Slot()])
    duration: int = 0
    reversible: bool = False

    def side(self, side: str) -> List[Slot]:
        if side == "inputs":
            return self.inputs
        if side == "outputs":
            return self.outputs
        raise ValueError(f"Unknown recipe side: {side!r}")

    def slots(self) -> List[Slot]:
        return self.inputs + self.outputs

    def references(self, item_id: str) -> bool:
        return bool(item_id) and any(s.item_id == item_id for s in self.slots())

    def is_complete(self) -> bool:
        return all(s.item_id for s in self.slots())

    def copy(self, new_id: str) -> "Recipe":
        dup = copy.deepcopy(self)
        dup.id = new_id
        return dup

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "inputs": [s.to_dict() for s in self.inputs],
            "outputs": [s.to_dict() for s in self.outputs],
            "duration": self.duration,
            "reversible": self.reversible,
        }

    @classmethod
    def from_dict(cls, raw: Dict[str, Any], recipe_id: Optional[str] = None) -> "Recipe":
        def _slots(val: Any) -> List[Slot]:
            out = [Slot.from_dict(s) for s in (val or []) if isinstance(s, dict)]
            return out or [Slot()]

        return cls(
            id=str(raw.get("id") or recipe_id or ""),
            inputs=_slots(raw.get("inputs")),
            outputs=_slots(raw.get("outputs")),
            duration=max(0, _as_int(raw.get("duration"))),
            reversible=bool(raw.get("reversible")),
        )
