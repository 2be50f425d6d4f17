# -*- coding: utf-8 -*-
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from core.events import EventBus  # noqa: E402
from core.persistence import MemoryBackend  # noqa: E402
from core.store import CraftStore  # noqa: E402


class Recorder:
    """on_any handler that keeps every event it sees."""

    def __init__(self):
        self.events = []

    def __call__(self, event):
        self.events.append(event)

    @property
    def names(self):
        return [e.name for e in self.events]

    def clear(self):
        self.events.clear()


@pytest.fixture
def store():
    return CraftStore(backend=MemoryBackend(), notifier=EventBus())


@pytest.fixture
def recorder(store):
    rec = Recorder()
    store.events.on_any(rec)
    return rec


@pytest.fixture
def wood_plank(store):
    """Wood x2 -> Plank x4 (30s), plus an unrelated Stone item."""
    wood = store.add_item("Wood")
    plank = store.add_item("Plank")
    stone = store.add_item("Stone")
    rid = store.add_recipe()
    store.update_recipe_slot(rid, "inputs", 0, "itemId", wood)
    store.update_recipe_slot(rid, "inputs", 0, "qty", 2)
    store.update_recipe_slot(rid, "outputs", 0, "itemId", plank)
    store.update_recipe_slot(rid, "outputs", 0, "qty", 4)
    store.update_recipe(rid, "duration", 30)
    return {"wood": wood, "plank": plank, "stone": stone, "recipe": rid}
