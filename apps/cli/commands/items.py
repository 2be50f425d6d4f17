#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""apps/cli/commands/items.py

Item maintenance from the terminal.

Notes
- Thin UI layer: validation via core.validation, mutations via CraftStore.
- Items can be referenced by id or by name (case-insensitive).
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from rich.prompt import Confirm
from rich.table import Table

from apps.cli.cli_common import add_store_args, console, fail, open_store, resolve_item, setup_logging
from core.icons import icon_mode
from core.ranking import ITEM_SORT_MODES, rank_items
from core.similarity import match_rank
from core.store import DELETE_POLICIES, REMOVE_REFERENCES
from core.validation import is_likely_ready_url, item_name_error


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="craftpro items", description="Item maintenance")
    add_store_args(parser)
    sub = parser.add_subparsers(dest="cmd")

    p_list = sub.add_parser("list", help="List/search items")
    p_list.add_argument("-q", "--query", default="")
    p_list.add_argument("--sort", choices=list(ITEM_SORT_MODES), default="name")
    p_list.add_argument("--limit", type=int, default=50)

    p_add = sub.add_parser("add", help="Add an item")
    p_add.add_argument("name")
    p_add.add_argument("--icon", default="", help="Icon URL (http/https)")
    p_add.add_argument("--desc", default="")

    p_ren = sub.add_parser("rename", help="Rename an item")
    p_ren.add_argument("item")
    p_ren.add_argument("name")

    p_clone = sub.add_parser("clone", help="Clone an item (\"Foo\" -> \"Foo 2\")")
    p_clone.add_argument("item")

    p_rm = sub.add_parser("rm", help="Delete an item")
    p_rm.add_argument("item")
    p_rm.add_argument("--policy", choices=list(DELETE_POLICIES), default=REMOVE_REFERENCES)
    p_rm.add_argument("-y", "--yes", action="store_true", help="Do not ask when recipes use the item")
    return parser


def _cmd_list(store, args) -> int:
    ranked = rank_items(store.items(), args.query, args.sort)
    table = Table(title=f"Items ({len(ranked)})", border_style="blue")
    table.add_column("Name", style="cyan")
    table.add_column("Icon", style="dim")
    table.add_column("Used by", justify="right")
    table.add_column("Desc", style="white")
    if args.query and args.sort == "name":
        table.add_column("Rank", justify="right", style="magenta")
    for it in ranked[: max(1, args.limit)]:
        row = [it.name, icon_mode(it), str(len(store.recipes_using(it.id))), it.desc]
        if args.query and args.sort == "name":
            row.append(f"{match_rank(it.name, args.query):.3f}")
        table.add_row(*row)
    console.print(table)
    return 0


def _cmd_add(store, args) -> int:
    err = item_name_error(args.name, store.item_name_taken)
    if err:
        return fail(err)
    icon = args.icon.strip() or None
    if icon and not is_likely_ready_url(icon):
        return fail(f"Invalid icon URL: {icon}")
    iid = store.add_item(args.name.strip(), icon=icon, desc=args.desc)
    console.print(f"[green]Added[/green] {args.name.strip()} [dim]{iid}[/dim]")
    return 0


def _cmd_rename(store, args) -> int:
    item = resolve_item(store, args.item)
    if item is None:
        return fail(f"Item not found: {args.item}")
    err = item_name_error(args.name, lambda nm: store.item_name_taken(nm, exclude_id=item.id))
    if err:
        return fail(err)
    old = item.name
    store.update_item(item.id, "name", args.name.strip())
    console.print(f"[green]Renamed[/green] {old} -> {args.name.strip()}")
    return 0


def _cmd_clone(store, args) -> int:
    item = resolve_item(store, args.item)
    if item is None:
        return fail(f"Item not found: {args.item}")
    iid = store.clone_item(item.id)
    console.print(f"[green]Cloned[/green] {item.name} -> {store.get_item(iid).name}")
    return 0


def _cmd_rm(store, args) -> int:
    item = resolve_item(store, args.item)
    if item is None:
        return fail(f"Item not found: {args.item}")
    used = store.recipes_using(item.id)
    if used and not args.yes:
        verb = "remove it from" if args.policy == REMOVE_REFERENCES else "delete"
        if not Confirm.ask(f"“{item.name}” is used in {len(used)} recipe(s). {verb} them?", console=console):
            console.print("[yellow]Cancelled[/yellow]")
            return 1
    affected = store.delete_item(item.id, policy=args.policy)
    console.print(f"[green]Deleted[/green] {item.name} ({len(affected)} recipe(s) affected, {args.policy})")
    return 0


_COMMANDS = {
    "list": _cmd_list,
    "add": _cmd_add,
    "rename": _cmd_rename,
    "clone": _cmd_clone,
    "rm": _cmd_rm,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    raw = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(raw)
    if not args.cmd:
        args = parser.parse_args(raw + ["list"])
    setup_logging(args.log_level)
    store = open_store(args)
    return _COMMANDS[args.cmd](store, args)


if __name__ == "__main__":
    raise SystemExit(main())
