#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, List, Optional, Tuple

from rich import box
from rich.align import Align
from rich.columns import Columns
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from apps.cli.cli_common import (
    CONF_DIR,
    PROJECT_ROOT,
    add_store_args,
    console,
    human_mtime,
    open_store,
    setup_logging,
)
from apps.cli.registry import get_tools
from core.config import craft_config
from core.duration import format_duration
from core.version import versions

PALETTE = {
    "accent": "cyan",
    "muted": "grey70",
    "good": "green",
    "warn": "yellow",
    "info": "blue",
}


def _panel(title: str, body: Any, *, border: str = "cyan") -> Panel:
    return Panel(
        body,
        title=title,
        title_align="left",
        border_style=border,
        box=box.MINIMAL,
        padding=(1, 1),
    )


def _kv_table(rows: List[Tuple[str, Any]]) -> Table:
    table = Table.grid(padding=(0, 1))
    table.add_column(justify="right", style="bold", no_wrap=True)
    table.add_column(ratio=1)
    for key, value in rows:
        table.add_row(str(key), value if value is not None else "-")
    return table


def _panel_header(ver: str, snap_ver: str) -> Panel:
    title = Text("Crafting-Pro Dashboard", style="bold white")
    meta = Text(f"version {ver} | snapshot v{snap_ver}", style="dim")
    content = Group(Align.center(title), Align.center(meta))
    return Panel(content, border_style=PALETTE["accent"], box=box.MINIMAL_DOUBLE_HEAD, padding=(1, 1))


def _panel_store(store, path: Optional[Path]) -> Panel:
    mtime = path.stat().st_mtime if path is not None and path.exists() else None
    rows = [
        ("Backend", store.backend.describe()),
        ("Updated", human_mtime(mtime)),
        ("Items", str(store.item_count)),
        ("Recipes", str(store.recipe_count)),
        ("Root", str(PROJECT_ROOT)),
        ("Config", str(CONF_DIR / "settings.ini")),
    ]
    return _panel("Store", _kv_table(rows), border=PALETTE["accent"])


def _panel_health(store) -> Panel:
    recipes = store.recipes()
    incomplete = [r for r in recipes if not r.is_complete()]
    reversible = sum(1 for r in recipes if r.reversible)
    unused = [it for it in store.items() if not store.recipes_using(it.id)]
    total = sum(r.duration for r in recipes)

    if incomplete:
        gate = Text("INCOMPLETE", style=f"bold {PALETTE['warn']}")
    else:
        gate = Text("OK", style=f"bold {PALETTE['good']}")
    rows = [
        ("Recipes", gate),
        ("Incomplete", str(len(incomplete))),
        ("Reversible", str(reversible)),
        ("Unused items", str(len(unused))),
        ("Total time", format_duration(total) if recipes else "-"),
    ]
    return _panel("Health", _kv_table(rows), border=PALETTE["good"] if not incomplete else PALETTE["warn"])


def _render_tools() -> None:
    table = Table(title="Commands", box=box.MINIMAL, show_header=True, header_style="bold cyan")
    table.add_column("Type", style="bold", no_wrap=True)
    table.add_column("Command", style="bold", no_wrap=True)
    table.add_column("Details", ratio=1)

    last_type = None
    for tool in get_tools():
        name = tool.get("alias") or tool.get("file") or "-"
        kind = tool.get("type") or "Other"
        details = Text(tool.get("desc", "-"))
        usage = tool.get("usage") or ""
        if usage:
            details.append("\n")
            details.append(usage, style="dim")
        table.add_row(kind if kind != last_type else "", f"craftpro {name}", details)
        last_type = kind

    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="craftpro dash", description="Store overview + tool list")
    add_store_args(parser)
    parser.add_argument("unknown", nargs="?", default=None, help=argparse.SUPPRESS)
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.unknown:
        console.print(f"[yellow]Unknown command: {args.unknown}[/yellow]")

    cfg = craft_config.store_config(backend=args.store, path=args.store_path)
    store = open_store(args)
    v = versions()

    console.print(_panel_header(v["project_version"], v["snapshot_version"]))
    console.print(
        Columns(
            [_panel_store(store, cfg.path), _panel_health(store)],
            equal=True,
            expand=True,
        )
    )
    console.print("")
    _render_tools()
    console.print("\n[dim]Tips: craftpro items add Wood | craftpro recipes search --inputs Wood | craftpro web[/dim]")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
