# -*- coding: utf-8 -*-
"""core/store.py

CraftStore: the canonical item + recipe collections.

Responsibilities
- own items/recipes (in memory) and mirror them to a snapshot backend
- keep slot references valid: deleting an item never leaves a dangling id
- publish one typed event per observable change through an EventBus

Contract
- every public mutation is synchronous: mutate -> persist -> notify
- the store trusts its inputs; name/URL/quantity validation is the caller's
  job (see core.validation)
- handlers must not expect to observe a nested mutation's event before the
  outer event has been fully delivered (the bus queues re-entrant emits)
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from core.events import (
    DataReset,
    EventBus,
    ItemAdded,
    ItemChanged,
    ItemDeleted,
    RecipeAdded,
    RecipeDeleted,
    RecipeFieldChanged,
    RecipeSlotChanged,
    RecipeSlotsStructureChanged,
)
from core.models import ITEM_FIELDS, RECIPE_FIELDS, SLOT_FIELDS, Item, Recipe, Slot
from core.persistence import MemoryBackend, SnapshotBackend
from core.schemas.snapshot import SNAPSHOT_VERSION, CraftSnapshotV1, SnapshotError, parse_snapshot
from core.validation import unique_clone_name

logger = logging.getLogger(__name__)

__all__ = [
    "DELETE_POLICIES",
    "DELETE_RECIPES",
    "REMOVE_REFERENCES",
    "CraftStore",
    "ImportResult",
    "generate_id",
]

REMOVE_REFERENCES = "remove_references"
DELETE_RECIPES = "delete_recipes"
DELETE_POLICIES = (REMOVE_REFERENCES, DELETE_RECIPES)


def generate_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ImportResult:
    ok: bool
    error: Optional[SnapshotError] = None
    items: int = 0
    recipes: int = 0

    @property
    def message(self) -> str:
        if self.ok:
            return f"Imported {self.items} item(s) and {self.recipes} recipe(s)"
        return str(self.error) if self.error else "Import failed"


class CraftStore:
    """In-memory item/recipe store with injected persistence + notification."""

    def __init__(self, backend: Optional[SnapshotBackend] = None, notifier: Optional[EventBus] = None):
        self._backend = backend if backend is not None else MemoryBackend()
        self._bus = notifier if notifier is not None else EventBus()
        self._items: Dict[str, Item] = {}
        self._recipes: Dict[str, Recipe] = {}

    @property
    def events(self) -> EventBus:
        return self._bus

    @property
    def backend(self) -> SnapshotBackend:
        return self._backend

    # ----------------- load / persist -----------------

    def load(self) -> bool:
        """Restore from the backend. Returns True if a snapshot was loaded.

        A corrupt or unsupported persisted snapshot is logged and ignored;
        the store stays empty instead of failing start-up.
        """
        try:
            doc = self._backend.load()
        except (OSError, ValueError) as exc:
            logger.error("could not read persisted snapshot (%s): %s", self._backend.describe(), exc)
            return False
        if doc is None:
            return False
        try:
            snap = parse_snapshot(doc)
        except SnapshotError as exc:
            logger.error("ignoring persisted snapshot (%s): %s", self._backend.describe(), exc)
            return False

        self._items = snap.items
        self._recipes = snap.recipes
        logger.info(
            "loaded %d item(s), %d recipe(s) from %s",
            len(self._items),
            len(self._recipes),
            self._backend.describe(),
        )
        self._bus.emit(DataReset())
        return True

    def _snapshot(self) -> CraftSnapshotV1:
        return CraftSnapshotV1(items=self._items, recipes=self._recipes, version=SNAPSHOT_VERSION)

    def _persist(self) -> None:
        try:
            self._backend.save(self._snapshot().to_dict())
        except Exception:
            logger.exception("failed to persist snapshot to %s", self._backend.describe())
            raise

    # ----------------- read access -----------------

    def get_item(self, item_id: str) -> Optional[Item]:
        return self._items.get(item_id)

    def get_recipe(self, recipe_id: str) -> Optional[Recipe]:
        return self._recipes.get(recipe_id)

    def items(self) -> List[Item]:
        """Snapshot list of items (insertion order)."""
        return list(self._items.values())

    def recipes(self) -> List[Recipe]:
        """Snapshot list of recipes (insertion order)."""
        return list(self._recipes.values())

    @property
    def item_count(self) -> int:
        return len(self._items)

    @property
    def recipe_count(self) -> int:
        return len(self._recipes)

    def find_item_by_name(self, name: str) -> Optional[Item]:
        key = (name or "").strip().casefold()
        if not key:
            return None
        for item in self._items.values():
            if item.name.casefold() == key:
                return item
        return None

    def item_name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        found = self.find_item_by_name(name)
        return found is not None and found.id != exclude_id

    def recipes_using(self, item_id: str) -> List[str]:
        return [rid for rid, rc in self._recipes.items() if rc.references(item_id)]

    def is_recipe_complete(self, recipe_id: str) -> bool:
        return self._require_recipe(recipe_id).is_complete()

    def _require_item(self, item_id: str) -> Item:
        item = self._items.get(item_id)
        if item is None:
            raise KeyError(f"Unknown item: {item_id}")
        return item

    def _require_recipe(self, recipe_id: str) -> Recipe:
        recipe = self._recipes.get(recipe_id)
        if recipe is None:
            raise KeyError(f"Unknown recipe: {recipe_id}")
        return recipe

    # ----------------- items -----------------

    def add_item(self, name: str, icon: Optional[str] = None, desc: str = "") -> str:
        iid = generate_id()
        self._items[iid] = Item(id=iid, name=name, icon=icon or None, desc=desc or "", last_maximized=0)
        self._persist()
        self._bus.emit(ItemAdded(iid))
        return iid

    def update_item(self, item_id: str, field: str, value: Any) -> None:
        if field not in ITEM_FIELDS:
            raise ValueError(f"Unknown item field: {field!r}")
        item = self._require_item(item_id)
        item.set(field, value)
        self._persist()
        self._bus.emit(ItemChanged(item_id, field, value))

    def delete_item(self, item_id: str, policy: str = REMOVE_REFERENCES) -> List[str]:
        """Delete an item and clean every recipe that references it.

        policy
          remove_references: referencing slots keep their qty, itemId is cleared
          delete_recipes:    every referencing recipe is deleted

        Returns the ids of the affected recipes.
        """
        if policy not in DELETE_POLICIES:
            raise ValueError(f"Unknown delete policy: {policy!r}")
        self._require_item(item_id)

        affected = self.recipes_using(item_id)
        del self._items[item_id]
        if policy == DELETE_RECIPES:
            for rid in affected:
                del self._recipes[rid]
        else:
            for rid in affected:
                for slot in self._recipes[rid].slots():
                    if slot.item_id == item_id:
                        slot.item_id = ""
        self._persist()

        self._bus.emit(ItemDeleted(item_id))
        for rid in affected:
            if policy == DELETE_RECIPES:
                self._bus.emit(RecipeDeleted(rid))
            else:
                self._bus.emit(RecipeSlotsStructureChanged(rid, None))
        return affected

    def clone_item(self, item_id: str) -> str:
        src = self._require_item(item_id)
        name = unique_clone_name(src.name, self.item_name_taken)
        iid = generate_id()
        self._items[iid] = Item(
            id=iid,
            name=name,
            icon=src.icon,
            icon_key=src.icon_key,
            desc=src.desc,
            last_maximized=0,
        )
        self._persist()
        self._bus.emit(ItemAdded(iid))
        return iid

    # ----------------- recipes -----------------

    def add_recipe(self) -> str:
        rid = generate_id()
        self._recipes[rid] = Recipe(id=rid, inputs=[Slot()], outputs=[Slot()], duration=0, reversible=False)
        self._persist()
        self._bus.emit(RecipeAdded(rid))
        return rid

    def update_recipe(self, recipe_id: str, field: str, value: Any) -> None:
        if field not in RECIPE_FIELDS:
            raise ValueError(f"Unknown recipe field: {field!r}")
        recipe = self._require_recipe(recipe_id)
        if field == "duration":
            value = max(0, int(value))
            recipe.duration = value
        else:
            value = bool(value)
            recipe.reversible = value
        self._persist()
        self._bus.emit(RecipeFieldChanged(recipe_id, field, value))

    def delete_recipe(self, recipe_id: str) -> None:
        self._require_recipe(recipe_id)
        del self._recipes[recipe_id]
        self._persist()
        self._bus.emit(RecipeDeleted(recipe_id))

    def clone_recipe(self, recipe_id: str) -> str:
        src = self._require_recipe(recipe_id)
        rid = generate_id()
        self._recipes[rid] = src.copy(rid)
        self._persist()
        self._bus.emit(RecipeAdded(rid))
        return rid

    def add_recipe_slot(self, recipe_id: str, side: str) -> int:
        """Append an empty slot; returns its index."""
        slots = self._require_recipe(recipe_id).side(side)
        slots.append(Slot())
        self._persist()
        self._bus.emit(RecipeSlotsStructureChanged(recipe_id, side))
        return len(slots) - 1

    def remove_recipe_slot(self, recipe_id: str, side: str, idx: int) -> None:
        slots = self._require_recipe(recipe_id).side(side)
        if not 0 <= idx < len(slots):
            raise IndexError(f"Slot index out of range: {side}[{idx}]")
        del slots[idx]
        if not slots:
            # a side is never empty
            slots.append(Slot())
        self._persist()
        self._bus.emit(RecipeSlotsStructureChanged(recipe_id, side))

    def update_recipe_slot(self, recipe_id: str, side: str, idx: int, field: str, value: Any) -> None:
        if field not in SLOT_FIELDS:
            raise ValueError(f"Unknown slot field: {field!r}")
        slots = self._require_recipe(recipe_id).side(side)
        if not 0 <= idx < len(slots):
            raise IndexError(f"Slot index out of range: {side}[{idx}]")
        slot = slots[idx]
        if field == "itemId":
            value = str(value or "")
            slot.item_id = value
        else:
            value = int(value)
            slot.qty = value
        self._persist()
        self._bus.emit(RecipeSlotChanged(recipe_id, side, idx, field, value))

    # ----------------- snapshot / import / reset -----------------

    def export_data(self) -> Dict[str, Any]:
        """Deep copy of the current state, safe to mutate or serialise."""
        return copy.deepcopy(self._snapshot().to_dict())

    def import_data(self, snapshot: Any) -> ImportResult:
        """Replace everything with `snapshot`.

        Failures (missing keys, unsupported version, bad shapes) come back as
        ImportResult(ok=False); the current data is left untouched.
        """
        try:
            snap = parse_snapshot(copy.deepcopy(snapshot))
        except SnapshotError as exc:
            logger.warning("import rejected: %s", exc)
            return ImportResult(ok=False, error=exc)

        self._items = snap.items
        self._recipes = snap.recipes
        self._persist()
        self._bus.emit(DataReset())
        return ImportResult(ok=True, items=len(snap.items), recipes=len(snap.recipes))

    def import_json(self, text: str) -> ImportResult:
        try:
            doc = json.loads(text)
        except ValueError as exc:
            logger.warning("import rejected: invalid JSON (%s)", exc)
            return ImportResult(ok=False, error=SnapshotError(f"Invalid JSON: {exc}"))
        return self.import_data(doc)

    def reset_data(self) -> None:
        self._items = {}
        self._recipes = {}
        self._backend.clear()
        self._bus.emit(DataReset())
