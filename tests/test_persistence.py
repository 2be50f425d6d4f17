# -*- coding: utf-8 -*-
import json

import pytest

from core.events import EventBus
from core.persistence import JsonFileBackend, MemoryBackend, SqliteBackend, open_backend
from core.store import CraftStore


def _populate(store):
    wood = store.add_item("Wood", icon="https://example.com/wood.png")
    plank = store.add_item("Plank")
    rid = store.add_recipe()
    store.update_recipe_slot(rid, "inputs", 0, "itemId", wood)
    store.update_recipe_slot(rid, "outputs", 0, "itemId", plank)
    store.update_recipe_slot(rid, "outputs", 0, "qty", 4)
    store.update_recipe(rid, "duration", 90)
    store.update_recipe(rid, "reversible", True)
    return rid


@pytest.mark.parametrize("suffix", [".json", ".sqlite"])
def test_store_round_trip(tmp_path, suffix):
    path = tmp_path / f"craft{suffix}"
    first = CraftStore(backend=open_backend("json", path), notifier=EventBus())
    rid = _populate(first)
    assert path.exists()

    second = CraftStore(backend=open_backend("json", path))
    assert second.load()
    assert second.export_data() == first.export_data()
    assert second.get_recipe(rid).reversible is True


def test_open_backend_kinds(tmp_path):
    assert isinstance(open_backend("memory"), MemoryBackend)
    assert isinstance(open_backend("json", tmp_path / "a.json"), JsonFileBackend)
    assert isinstance(open_backend("sqlite", tmp_path / "a.json"), SqliteBackend)
    assert isinstance(open_backend("json", tmp_path / "a.db"), SqliteBackend)
    with pytest.raises(ValueError):
        open_backend("json")
    with pytest.raises(ValueError):
        open_backend("redis", tmp_path / "a")


def test_json_backend_writes_plain_snapshot(tmp_path):
    path = tmp_path / "nested" / "craft.json"
    store = CraftStore(backend=JsonFileBackend(path))
    store.add_item("Wood")
    doc = json.loads(path.read_text(encoding="utf-8"))
    assert doc["version"] == 1
    assert [it["name"] for it in doc["items"].values()] == ["Wood"]
    assert not path.with_suffix(".json.tmp").exists()


def test_json_backend_missing_file(tmp_path):
    assert JsonFileBackend(tmp_path / "none.json").load() is None


def test_json_backend_reset_removes_file(tmp_path):
    path = tmp_path / "craft.json"
    store = CraftStore(backend=JsonFileBackend(path))
    _populate(store)
    store.reset_data()
    assert not path.exists()
    assert not CraftStore(backend=JsonFileBackend(path)).load()


def test_corrupt_json_file_is_ignored(tmp_path):
    path = tmp_path / "craft.json"
    path.write_text("{broken", encoding="utf-8")
    store = CraftStore(backend=JsonFileBackend(path))
    assert not store.load()
    assert store.item_count == 0


def test_sqlite_meta(tmp_path):
    backend = SqliteBackend(tmp_path / "craft.sqlite")
    store = CraftStore(backend=backend)
    _populate(store)
    meta = backend.read_meta()
    assert meta["schema"] == 1
    assert meta["tool"] == "craftpro"
    assert meta["counts"] == {"items": 2, "recipes": 1}
    assert "project_version" in meta


def test_sqlite_reset(tmp_path):
    backend = SqliteBackend(tmp_path / "craft.sqlite")
    store = CraftStore(backend=backend)
    _populate(store)
    store.reset_data()
    assert backend.load() is None
    assert backend.read_meta() == {}


def test_sqlite_empty_file_loads_nothing(tmp_path):
    path = tmp_path / "empty.sqlite"
    backend = SqliteBackend(path)
    assert backend.load() is None
    backend.clear()
    assert backend.read_meta() == {}


def test_memory_backend_is_isolated():
    doc = {"version": 1, "items": {}, "recipes": {}}
    backend = MemoryBackend(doc)
    doc["items"]["x"] = {"name": "late"}
    assert backend.load()["items"] == {}
