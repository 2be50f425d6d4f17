#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Craft snapshot v1 (persistence + import/export format).

    { "version": 1, "items": {id: Item}, "recipes": {id: Recipe} }
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from core.models import Item, Recipe

logger = logging.getLogger(__name__)

__all__ = [
    "SNAPSHOT_VERSION",
    "SUPPORTED_VERSIONS",
    "CraftSnapshotV1",
    "SnapshotError",
    "UnsupportedVersionError",
    "parse_snapshot",
]

SNAPSHOT_VERSION = 1
SUPPORTED_VERSIONS = (1,)


class SnapshotError(RuntimeError):
    pass


class UnsupportedVersionError(SnapshotError):
    pass


@dataclass
class CraftSnapshotV1:
    items: Dict[str, Item] = field(default_factory=dict)
    recipes: Dict[str, Recipe] = field(default_factory=dict)
    version: int = SNAPSHOT_VERSION

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": int(self.version),
            "items": {iid: it.to_dict() for iid, it in self.items.items()},
            "recipes": {rid: rc.to_dict() for rid, rc in self.recipes.items()},
        }


def parse_snapshot(doc: Any) -> CraftSnapshotV1:
    """Validate + normalize a raw snapshot document.

    Raises SnapshotError (UnsupportedVersionError for a bad version). Slot
    references to unknown items are cleared so a restored store never holds
    dangling references.
    """
    if not isinstance(doc, dict):
        raise SnapshotError("Snapshot root must be a JSON object")
    for key in ("items", "recipes"):
        if key not in doc:
            raise SnapshotError(f"Snapshot missing key: {key}")
        if not isinstance(doc.get(key), dict):
            raise SnapshotError(f"Snapshot {key} must be an object")

    version = doc.get("version", SNAPSHOT_VERSION)
    if isinstance(version, bool) or version not in SUPPORTED_VERSIONS:
        raise UnsupportedVersionError(f"Unsupported snapshot version: {version!r}")

    items: Dict[str, Item] = {}
    for iid, raw in doc["items"].items():
        if not isinstance(raw, dict):
            raise SnapshotError(f"Item {iid!r} must be an object")
        item = Item.from_dict(raw, item_id=str(iid))
        item.id = str(iid)
        items[item.id] = item

    recipes: Dict[str, Recipe] = {}
    dropped = 0
    for rid, raw in doc["recipes"].items():
        if not isinstance(raw, dict):
            raise SnapshotError(f"Recipe {rid!r} must be an object")
        recipe = Recipe.from_dict(raw, recipe_id=str(rid))
        recipe.id = str(rid)
        for slot in recipe.slots():
            if slot.item_id and slot.item_id not in items:
                slot.item_id = ""
                dropped += 1
        recipes[recipe.id] = recipe

    if dropped:
        logger.warning("snapshot: cleared %d slot reference(s) to unknown items", dropped)

    return CraftSnapshotV1(items=items, recipes=recipes, version=int(version))
