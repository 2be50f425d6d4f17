# -*- coding: utf-8 -*-
"""core/ranking.py

Relevance ordering for items and recipes.

Items: one free-text query, one sort mode.
  name    match_rank(item.name, query) ascending (stable)
  az/za   case-folded name order
  recent  lastMaximized descending (stable)

Recipes: three queries (input names, output names, duration).
  input/output score  mean over query names of the best similarity
                      1 / (1 + match_rank) against the recipe side's names
  duration score      linear decay to 0 over one week; 1 without a query
  relevance           input^0.4 * output^0.4 * duration^0.2

Names are resolved through the store on every call. Nothing is cached, so
rankings are always computed against the current state.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from core.duration import WEEK, is_duration, parse_duration
from core.models import Item, Recipe
from core.similarity import match_rank, similarity

__all__ = [
    "DURATION_WINDOW",
    "ITEM_SORT_MODES",
    "WEIGHTS",
    "RecipeQuery",
    "RecipeScore",
    "duration_score",
    "name_set_score",
    "parse_name_list",
    "rank_items",
    "rank_recipes",
    "relevance",
    "score_recipe",
    "unknown_names",
]

ITEM_SORT_MODES = ("name", "az", "za", "recent")

# input, output, duration
WEIGHTS = (0.4, 0.4, 0.2)
DURATION_WINDOW = WEEK


# ----------------- items -----------------


def rank_items(items: Iterable[Item], query: str = "", mode: str = "name") -> List[Item]:
    if mode not in ITEM_SORT_MODES:
        raise ValueError(f"Unknown sort mode: {mode!r}")
    rows = list(items)
    if mode == "az":
        return sorted(rows, key=lambda it: it.name.casefold())
    if mode == "za":
        return sorted(rows, key=lambda it: it.name.casefold(), reverse=True)
    if mode == "recent":
        return sorted(rows, key=lambda it: -int(it.last_maximized or 0))
    q = (query or "").strip()
    if not q:
        return rows
    return sorted(rows, key=lambda it: match_rank(it.name, q))


# ----------------- recipes -----------------


def parse_name_list(text: Optional[str]) -> List[str]:
    """"Wood, Plank ,," -> ["Wood", "Plank"]."""
    return [s.strip() for s in str(text or "").split(",") if s.strip()]


def name_set_score(recipe_names: Sequence[str], query_names: Sequence[str]) -> float:
    if not query_names:
        return 1.0
    total = 0.0
    for q in query_names:
        best = 0.0
        for nm in recipe_names:
            best = max(best, similarity(nm, q))
        total += best
    return total / len(query_names)


def duration_score(recipe_duration: Any, query_duration: Any = None) -> float:
    if not is_duration(query_duration):
        return 1.0
    diff = abs(float(recipe_duration or 0) - float(query_duration))
    return max(0.0, 1.0 - diff / DURATION_WINDOW)


def relevance(input_score: float, output_score: float, dur_score: float) -> float:
    w_in, w_out, w_dur = WEIGHTS
    return math.pow(input_score, w_in) * math.pow(output_score, w_out) * math.pow(dur_score, w_dur)


@dataclass(frozen=True)
class RecipeQuery:
    inputs: Sequence[str] = ()
    outputs: Sequence[str] = ()
    duration: Optional[int] = None

    @classmethod
    def parse(cls, inputs: str = "", outputs: str = "", duration: str = "") -> "RecipeQuery":
        """Build a query from raw search-bar text; a bad duration means no constraint."""
        secs = parse_duration(duration) if str(duration or "").strip() else math.nan
        return cls(
            inputs=tuple(parse_name_list(inputs)),
            outputs=tuple(parse_name_list(outputs)),
            duration=int(secs) if is_duration(secs) else None,
        )

    @property
    def empty(self) -> bool:
        return not self.inputs and not self.outputs and self.duration is None


@dataclass(frozen=True)
class RecipeScore:
    recipe_id: str
    input_score: float
    output_score: float
    duration_score: float
    relevance: float


def _side_names(store: Any, recipe: Recipe, side: str) -> List[str]:
    out: List[str] = []
    for slot in recipe.side(side):
        item = store.get_item(slot.item_id) if slot.item_id else None
        if item is not None and item.name:
            out.append(item.name)
    return out


def score_recipe(store: Any, recipe: Recipe, query: RecipeQuery) -> RecipeScore:
    s_in = name_set_score(_side_names(store, recipe, "inputs"), query.inputs)
    s_out = name_set_score(_side_names(store, recipe, "outputs"), query.outputs)
    s_dur = duration_score(recipe.duration, query.duration)
    return RecipeScore(
        recipe_id=recipe.id,
        input_score=s_in,
        output_score=s_out,
        duration_score=s_dur,
        relevance=relevance(s_in, s_out, s_dur),
    )


def rank_recipes(store: Any, query: RecipeQuery) -> List[RecipeScore]:
    """Score every recipe in `store`, best first (ties keep store order)."""
    scored = [score_recipe(store, rc, query) for rc in store.recipes()]
    scored.sort(key=lambda s: -s.relevance)
    return scored


def unknown_names(store: Any, names: Iterable[str]) -> List[str]:
    """Query names that do not match any item name exactly (case-insensitive)."""
    return [nm for nm in names if store.find_item_by_name(nm) is None]
