#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Shared helpers for CLI tools."""

from __future__ import annotations

import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from core.config import STORE_BACKENDS, craft_config
from core.events import EventBus
from core.persistence import open_backend
from core.store import CraftStore

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONF_DIR = PROJECT_ROOT / "conf"

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]

console = Console()


def human_mtime(ts: Optional[float]) -> str:
    if not ts:
        return "-"
    return datetime.fromtimestamp(ts).strftime("%Y-%m-%d %H:%M")


def add_store_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--store", choices=list(STORE_BACKENDS), default=None, help="Snapshot backend (default: conf/settings.ini)")
    parser.add_argument("--store-path", default=None, help="Snapshot file (.json or .sqlite)")
    parser.add_argument("--log-level", default=None, choices=LOG_LEVELS)


def setup_logging(level: Optional[str] = None) -> None:
    lvl = (level or craft_config.store_config().log_level or "warning").upper()
    logging.basicConfig(
        level=getattr(logging, lvl, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def open_store(args: argparse.Namespace) -> CraftStore:
    """Build + restore the store selected by --store/--store-path (or config)."""
    cfg = craft_config.store_config(backend=args.store, path=args.store_path)
    store = CraftStore(backend=open_backend(cfg.backend, cfg.path), notifier=EventBus())
    store.load()
    return store


def fail(msg: str, code: int = 1) -> int:
    console.print(f"[red]{msg}[/red]")
    return code


def resolve_item(store: CraftStore, ref: str):
    """Find an item by id, then by (case-insensitive) name."""
    return store.get_item(ref) or store.find_item_by_name(ref)


def resolve_recipe(store: CraftStore, ref: str):
    """Find a recipe by id or unique id prefix."""
    rc = store.get_recipe(ref)
    if rc is not None:
        return rc
    hits = [r for r in store.recipes() if ref and r.id.startswith(ref)]
    return hits[0] if len(hits) == 1 else None
