#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""apps/cli/commands/data.py

Snapshot export / import / reset, plus a duration helper.

Examples
- craftpro data export backup.json
- craftpro data import backup.json -y
- craftpro data duration "1h90m"
"""

from __future__ import annotations

import argparse
import json
import math
import sys
from pathlib import Path
from typing import List, Optional

from rich.prompt import Confirm

from apps.cli.cli_common import add_store_args, console, fail, open_store, setup_logging
from core.duration import format_duration, parse_duration


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="craftpro data", description="Snapshot export/import/reset")
    add_store_args(parser)
    sub = parser.add_subparsers(dest="cmd")

    p_exp = sub.add_parser("export", help="Write the current snapshot as JSON")
    p_exp.add_argument("path", nargs="?", default="-", help="Output file ('-' for stdout)")
    p_exp.add_argument("--indent", type=int, default=2)

    p_imp = sub.add_parser("import", help="Replace all data with a JSON snapshot")
    p_imp.add_argument("path")
    p_imp.add_argument("-y", "--yes", action="store_true")

    p_reset = sub.add_parser("reset", help="Delete all items and recipes")
    p_reset.add_argument("-y", "--yes", action="store_true")

    p_dur = sub.add_parser("duration", help="Parse a duration string (e.g. 1d2h30m)")
    p_dur.add_argument("text")
    return parser


def _cmd_export(store, args) -> int:
    text = json.dumps(store.export_data(), ensure_ascii=False, indent=args.indent or None)
    if args.path == "-":
        sys.stdout.write(text + "\n")
        return 0
    out = Path(args.path).expanduser()
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text + "\n", encoding="utf-8")
    console.print(f"[green]Exported[/green] {store.item_count} item(s), {store.recipe_count} recipe(s) -> {out}")
    return 0


def _cmd_import(store, args) -> int:
    src = Path(args.path).expanduser()
    if not src.is_file():
        return fail(f"File not found: {src}")
    if (store.item_count or store.recipe_count) and not args.yes:
        if not Confirm.ask("Replace all current items and recipes?", console=console):
            console.print("[yellow]Cancelled[/yellow]")
            return 1
    result = store.import_json(src.read_text(encoding="utf-8"))
    if not result.ok:
        return fail(f"Import failed: {result.message}")
    console.print(f"[green]{result.message}[/green]")
    return 0


def _cmd_reset(store, args) -> int:
    if not args.yes and not Confirm.ask("Delete ALL items and recipes?", console=console):
        console.print("[yellow]Cancelled[/yellow]")
        return 1
    store.reset_data()
    console.print(f"[green]Reset[/green] {store.backend.describe()}")
    return 0


def _cmd_duration(args) -> int:
    seconds = parse_duration(args.text)
    if math.isnan(seconds):
        return fail(f"Invalid duration: {args.text}")
    console.print(f"{args.text} = [cyan]{int(seconds)}s[/cyan] ({format_duration(seconds)})")
    return 0


_COMMANDS = {
    "export": _cmd_export,
    "import": _cmd_import,
    "reset": _cmd_reset,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    if not args.cmd:
        parser.print_help()
        return 0
    setup_logging(args.log_level)
    if args.cmd == "duration":
        return _cmd_duration(args)
    store = open_store(args)
    return _COMMANDS[args.cmd](store, args)


if __name__ == "__main__":
    raise SystemExit(main())
