# -*- coding: utf-8 -*-
"""core/persistence.py

Snapshot backends for `CraftStore`.

Every backend stores the full snapshot document; `save()` overwrites it.
There is no partial write and no journal: a crash between a mutation and its
save loses that one mutation.

Backends
- MemoryBackend: keeps a JSON copy in memory (tests, throwaway sessions)
- JsonFileBackend: <path>.tmp then atomic replace of <path>
- SqliteBackend: meta/items/recipes tables, rewritten in one transaction
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple

from core.schemas.snapshot import SNAPSHOT_VERSION
from core.version import versions

logger = logging.getLogger(__name__)

__all__ = [
    "JsonFileBackend",
    "MemoryBackend",
    "SnapshotBackend",
    "SqliteBackend",
    "open_backend",
]

_SQLITE_SUFFIXES = (".sqlite", ".sqlite3", ".db")


def _is_sqlite_path(path: Path) -> bool:
    return path.suffix.lower() in _SQLITE_SUFFIXES


def _json_dumps(value: Any) -> str:
    return json.dumps(value, ensure_ascii=False)


def _snapshot_meta(doc: Dict[str, Any], tool: str) -> Dict[str, Any]:
    """Summary row stored in the sqlite `meta` table (read back by `read_meta`)."""
    meta: Dict[str, Any] = {
        "schema": int(doc.get("version") or SNAPSHOT_VERSION),
        "tool": tool,
        "saved": datetime.now().astimezone().isoformat(timespec="seconds"),
        "counts": {
            "items": len(doc.get("items") or {}),
            "recipes": len(doc.get("recipes") or {}),
        },
    }
    meta.update(versions())
    return meta


class SnapshotBackend:
    """Interface: load() -> doc or None, save(doc), clear()."""

    def load(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def save(self, doc: Dict[str, Any]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def describe(self) -> str:
        return type(self).__name__


class MemoryBackend(SnapshotBackend):
    def __init__(self, doc: Optional[Dict[str, Any]] = None):
        self._raw: Optional[str] = _json_dumps(doc) if doc is not None else None
        self.saves = 0

    def load(self) -> Optional[Dict[str, Any]]:
        if self._raw is None:
            return None
        return json.loads(self._raw)

    def save(self, doc: Dict[str, Any]) -> None:
        self._raw = _json_dumps(doc)
        self.saves += 1

    def clear(self) -> None:
        self._raw = None

    def describe(self) -> str:
        return "memory"


class JsonFileBackend(SnapshotBackend):
    def __init__(self, path: Path):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[Dict[str, Any]]:
        if not self._path.exists():
            return None
        return json.loads(self._path.read_text(encoding="utf-8"))

    def save(self, doc: Dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(doc, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def clear(self) -> None:
        if self._path.exists():
            self._path.unlink()

    def describe(self) -> str:
        return f"json:{self._path}"


class SqliteBackend(SnapshotBackend):
    def __init__(self, path: Path, *, tool: str = "craftpro"):
        self._path = Path(path)
        self._tool = tool

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(str(self._path))
        conn.row_factory = sqlite3.Row
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS meta (key TEXT PRIMARY KEY, value TEXT NOT NULL);
            CREATE TABLE IF NOT EXISTS items (id TEXT PRIMARY KEY, name TEXT NOT NULL, data TEXT NOT NULL);
            CREATE TABLE IF NOT EXISTS recipes (id TEXT PRIMARY KEY, data TEXT NOT NULL);
            CREATE INDEX IF NOT EXISTS idx_items_name ON items(name);
            """
        )
        return conn

    def load(self) -> Optional[Dict[str, Any]]:
        if not self._path.exists():
            return None
        conn = self._connect()
        try:
            cur = conn.cursor()
            meta_rows = {row["key"]: row["value"] for row in cur.execute("SELECT key, value FROM meta")}
            if "schema_version" not in meta_rows:
                return None
            item_rows = cur.execute("SELECT id, data FROM items").fetchall()
            recipe_rows = cur.execute("SELECT id, data FROM recipes").fetchall()
        finally:
            conn.close()

        return {
            "version": json.loads(meta_rows["schema_version"]),
            "items": {str(row["id"]): json.loads(row["data"]) for row in item_rows},
            "recipes": {str(row["id"]): json.loads(row["data"]) for row in recipe_rows},
        }

    def save(self, doc: Dict[str, Any]) -> None:
        items = doc.get("items") or {}
        recipes = doc.get("recipes") or {}
        meta = _snapshot_meta(doc, self._tool)

        conn = self._connect()
        try:
            with conn:
                cur = conn.cursor()
                cur.execute("DELETE FROM meta")
                cur.execute("DELETE FROM items")
                cur.execute("DELETE FROM recipes")
                cur.executemany(
                    "INSERT INTO meta (key, value) VALUES (?, ?)",
                    [
                        ("schema_version", _json_dumps(doc.get("version", SNAPSHOT_VERSION))),
                        ("meta", _json_dumps(meta)),
                    ],
                )
                cur.executemany("INSERT INTO items (id, name, data) VALUES (?, ?, ?)", _iter_item_rows(items))
                cur.executemany("INSERT INTO recipes (id, data) VALUES (?, ?)", _iter_map_rows(recipes))
        finally:
            conn.close()

    def clear(self) -> None:
        if not self._path.exists():
            return
        conn = self._connect()
        try:
            with conn:
                conn.execute("DELETE FROM meta")
                conn.execute("DELETE FROM items")
                conn.execute("DELETE FROM recipes")
        finally:
            conn.close()

    def read_meta(self) -> Dict[str, Any]:
        if not self._path.exists():
            return {}
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM meta WHERE key = 'meta'").fetchone()
        finally:
            conn.close()
        return json.loads(row["value"]) if row else {}

    def describe(self) -> str:
        return f"sqlite:{self._path}"


def _iter_map_rows(obj: Dict[str, Any]) -> Iterable[Tuple[str, str]]:
    for key, val in obj.items():
        yield str(key), _json_dumps(val)


def _iter_item_rows(items: Dict[str, Any]) -> Iterable[Tuple[str, str, str]]:
    for iid, item in items.items():
        name = str((item or {}).get("name") or "")
        yield str(iid), name, _json_dumps(item)


def open_backend(kind: str, path: Optional[Path] = None) -> SnapshotBackend:
    """Build a backend by name ("memory" | "json" | "sqlite").

    A path with a SQLite suffix selects SQLite even when kind is "json".
    """
    kind = (kind or "memory").strip().lower()
    if kind == "memory":
        return MemoryBackend()
    if path is None:
        raise ValueError(f"Backend {kind!r} requires a path")
    path = Path(path)
    if kind == "sqlite" or _is_sqlite_path(path):
        return SqliteBackend(path)
    if kind == "json":
        return JsonFileBackend(path)
    raise ValueError(f"Unknown store backend: {kind!r}")
