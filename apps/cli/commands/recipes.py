#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""apps/cli/commands/recipes.py

Recipe search + editing from the terminal.

Examples
- craftpro recipes search --inputs "Wood" --outputs "Plank" --duration 30s
- craftpro recipes add --in Wood=2 --out Plank --duration 1m30s
- craftpro recipes slot <recipe> inputs 0 --item Stone --qty 3
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Tuple

from rich.panel import Panel
from rich.table import Table

from apps.cli.cli_common import (
    add_store_args,
    console,
    fail,
    open_store,
    resolve_item,
    resolve_recipe,
    setup_logging,
)
from core.duration import format_duration, parse_duration
from core.models import SIDES, Recipe
from core.ranking import RecipeQuery, rank_recipes, unknown_names
from core.validation import parse_quantity, valid_duration_text


def _parse_slot_arg(raw: str) -> Tuple[str, Optional[int]]:
    """"Wood=2" / "Wood:2" / "Wood" -> (name, qty)."""
    for sep in ("=", ":"):
        if sep in raw:
            name, _, qty = raw.rpartition(sep)
            return name.strip(), parse_quantity(qty)
    return raw.strip(), 1


def _side_text(store, recipe: Recipe, side: str) -> str:
    parts: List[str] = []
    for slot in recipe.side(side):
        item = store.get_item(slot.item_id) if slot.item_id else None
        parts.append(f"{item.name if item else '?'} x{slot.qty}")
    return ", ".join(parts)


def _arrow(recipe: Recipe) -> str:
    return "<->" if recipe.reversible else "->"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="craftpro recipes", description="Recipe search + editing")
    add_store_args(parser)
    sub = parser.add_subparsers(dest="cmd")

    p_search = sub.add_parser("search", help="Rank recipes by inputs/outputs/duration")
    p_search.add_argument("--inputs", default="", help="Comma-separated input names")
    p_search.add_argument("--outputs", default="", help="Comma-separated output names")
    p_search.add_argument("--duration", default="", help="Duration, e.g. 1h30m")
    p_search.add_argument("--limit", type=int, default=25)

    p_show = sub.add_parser("show", help="Show one recipe")
    p_show.add_argument("recipe")

    p_add = sub.add_parser("add", help="Add a recipe")
    p_add.add_argument("--in", dest="inputs", action="append", default=[], help="NAME[=QTY] (repeatable)")
    p_add.add_argument("--out", dest="outputs", action="append", default=[], help="NAME[=QTY] (repeatable)")
    p_add.add_argument("--duration", default="0s")
    p_add.add_argument("--reversible", action="store_true")

    p_set = sub.add_parser("set", help="Set duration / reversible")
    p_set.add_argument("recipe")
    p_set.add_argument("--duration", default=None)
    p_set.add_argument("--reversible", choices=["yes", "no"], default=None)

    p_slot = sub.add_parser("slot", help="Edit (or append) a slot")
    p_slot.add_argument("recipe")
    p_slot.add_argument("side", choices=list(SIDES))
    p_slot.add_argument("index", type=int, nargs="?", default=None, help="Omit to append a new slot")
    p_slot.add_argument("--item", default=None, help="Item name or id ('' to clear)")
    p_slot.add_argument("--qty", default=None)

    p_unslot = sub.add_parser("unslot", help="Remove a slot")
    p_unslot.add_argument("recipe")
    p_unslot.add_argument("side", choices=list(SIDES))
    p_unslot.add_argument("index", type=int)

    p_rm = sub.add_parser("rm", help="Delete a recipe")
    p_rm.add_argument("recipe")

    p_clone = sub.add_parser("clone", help="Clone a recipe")
    p_clone.add_argument("recipe")
    return parser


def _cmd_search(store, args) -> int:
    query = RecipeQuery.parse(args.inputs, args.outputs, args.duration)
    if args.duration.strip() and query.duration is None:
        console.print(f"[yellow]Ignoring invalid duration: {args.duration}[/yellow]")
    missing = unknown_names(store, list(query.inputs) + list(query.outputs))
    if missing:
        console.print(f"[yellow]No exact item for: {', '.join(missing)}[/yellow]")

    scored = rank_recipes(store, query)
    table = Table(title=f"Recipes ({len(scored)})", border_style="blue")
    table.add_column("Id", style="dim")
    table.add_column("Inputs", style="cyan")
    table.add_column("", justify="center")
    table.add_column("Outputs", style="green")
    table.add_column("Duration", justify="right")
    table.add_column("Relevance", justify="right", style="magenta")
    for s in scored[: max(1, args.limit)]:
        rc = store.get_recipe(s.recipe_id)
        table.add_row(
            rc.id[:8],
            _side_text(store, rc, "inputs"),
            _arrow(rc),
            _side_text(store, rc, "outputs"),
            format_duration(rc.duration),
            f"{s.relevance:.4f}",
        )
    console.print(table)
    return 0


def _cmd_show(store, args) -> int:
    rc = resolve_recipe(store, args.recipe)
    if rc is None:
        return fail(f"Recipe not found: {args.recipe}")
    body = (
        f"[cyan]{_side_text(store, rc, 'inputs')}[/cyan]  {_arrow(rc)}  "
        f"[green]{_side_text(store, rc, 'outputs')}[/green]\n"
        f"duration: {format_duration(rc.duration)} ({rc.duration}s)\n"
        f"complete: {'yes' if rc.is_complete() else 'no'}"
    )
    console.print(Panel(body, title=rc.id, border_style="blue"))
    return 0


def _fill_side(store, rid: str, side: str, slot_args: List[str]) -> None:
    # slot_args are pre-validated by the caller
    for idx, raw in enumerate(slot_args):
        name, qty = _parse_slot_arg(raw)
        item = resolve_item(store, name)
        if idx > 0:
            store.add_recipe_slot(rid, side)
        store.update_recipe_slot(rid, side, idx, "itemId", item.id)
        store.update_recipe_slot(rid, side, idx, "qty", qty)


def _cmd_add(store, args) -> int:
    if not valid_duration_text(args.duration):
        return fail(f"Invalid duration: {args.duration}")
    for raw in args.inputs + args.outputs:
        name, qty = _parse_slot_arg(raw)
        if resolve_item(store, name) is None:
            return fail(f"Item not found: {name}")
        if qty is None:
            return fail(f"Quantity must be an integer >= 1: {raw}")

    rid = store.add_recipe()
    _fill_side(store, rid, "inputs", args.inputs)
    _fill_side(store, rid, "outputs", args.outputs)
    store.update_recipe(rid, "duration", int(parse_duration(args.duration)))
    if args.reversible:
        store.update_recipe(rid, "reversible", True)
    console.print(f"[green]Added recipe[/green] [dim]{rid}[/dim]")
    return 0


def _cmd_set(store, args) -> int:
    rc = resolve_recipe(store, args.recipe)
    if rc is None:
        return fail(f"Recipe not found: {args.recipe}")
    if args.duration is not None:
        if not valid_duration_text(args.duration):
            return fail(f"Invalid duration: {args.duration}")
        store.update_recipe(rc.id, "duration", int(parse_duration(args.duration)))
    if args.reversible is not None:
        store.update_recipe(rc.id, "reversible", args.reversible == "yes")
    return _cmd_show(store, argparse.Namespace(recipe=rc.id))


def _cmd_slot(store, args) -> int:
    rc = resolve_recipe(store, args.recipe)
    if rc is None:
        return fail(f"Recipe not found: {args.recipe}")

    item_id: Optional[str] = None
    if args.item is not None:
        if args.item == "":
            item_id = ""
        else:
            item = resolve_item(store, args.item)
            if item is None:
                return fail(f"Item not found: {args.item}")
            item_id = item.id
    qty: Optional[int] = None
    if args.qty is not None:
        qty = parse_quantity(args.qty)
        if qty is None:
            return fail(f"Quantity must be an integer >= 1: {args.qty}")

    idx = args.index
    if idx is None:
        idx = store.add_recipe_slot(rc.id, args.side)
    elif not 0 <= idx < len(rc.side(args.side)):
        return fail(f"Slot index out of range: {args.side}[{idx}]")

    if item_id is not None:
        store.update_recipe_slot(rc.id, args.side, idx, "itemId", item_id)
    if qty is not None:
        store.update_recipe_slot(rc.id, args.side, idx, "qty", qty)
    return _cmd_show(store, argparse.Namespace(recipe=rc.id))


def _cmd_unslot(store, args) -> int:
    rc = resolve_recipe(store, args.recipe)
    if rc is None:
        return fail(f"Recipe not found: {args.recipe}")
    if not 0 <= args.index < len(rc.side(args.side)):
        return fail(f"Slot index out of range: {args.side}[{args.index}]")
    store.remove_recipe_slot(rc.id, args.side, args.index)
    return _cmd_show(store, argparse.Namespace(recipe=rc.id))


def _cmd_rm(store, args) -> int:
    rc = resolve_recipe(store, args.recipe)
    if rc is None:
        return fail(f"Recipe not found: {args.recipe}")
    store.delete_recipe(rc.id)
    console.print(f"[green]Deleted recipe[/green] [dim]{rc.id}[/dim]")
    return 0


def _cmd_clone(store, args) -> int:
    rc = resolve_recipe(store, args.recipe)
    if rc is None:
        return fail(f"Recipe not found: {args.recipe}")
    rid = store.clone_recipe(rc.id)
    console.print(f"[green]Cloned recipe[/green] [dim]{rc.id} -> {rid}[/dim]")
    return 0


_COMMANDS = {
    "search": _cmd_search,
    "show": _cmd_show,
    "add": _cmd_add,
    "set": _cmd_set,
    "slot": _cmd_slot,
    "unslot": _cmd_unslot,
    "rm": _cmd_rm,
    "clone": _cmd_clone,
}


def main(argv: Optional[List[str]] = None) -> int:
    parser = _build_parser()
    raw = list(sys.argv[1:] if argv is None else argv)
    args = parser.parse_args(raw)
    if not args.cmd:
        args = parser.parse_args(raw + ["search"])
    setup_logging(args.log_level)
    store = open_store(args)
    return _COMMANDS[args.cmd](store, args)


if __name__ == "__main__":
    raise SystemExit(main())
