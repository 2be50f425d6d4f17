# -*- coding: utf-8 -*-
"""Approximate string matching (Jaro / Jaro-Winkler) and tiered match rank.

The Winkler prefix boost is applied without the usual 0.7 threshold, so every
shared prefix (up to 4 chars) counts.
"""

from __future__ import annotations

from typing import List

__all__ = ["jaro", "jaro_winkler", "match_rank", "similarity"]

MAX_PREFIX = 4


def jaro(a: str, b: str) -> float:
    """Classic Jaro similarity.

    Each char of `a` takes the first unmatched equal char of `b` inside the
    window max(len) // 2 - 1; transpositions are the matched chars that differ
    when both sides are walked in order, halved.
    """
    if a == b:
        return 1.0
    la, lb = len(a), len(b)
    if not la or not lb:
        return 0.0

    window = max(la, lb) // 2 - 1
    a_hit: List[bool] = [False] * la
    b_hit: List[bool] = [False] * lb
    matches = 0
    for i, ch in enumerate(a):
        for j in range(max(0, i - window), min(i + window + 1, lb)):
            if not b_hit[j] and b[j] == ch:
                a_hit[i] = b_hit[j] = True
                matches += 1
                break
    if not matches:
        return 0.0

    swapped = 0
    k = 0
    for i in range(la):
        if not a_hit[i]:
            continue
        while not b_hit[k]:
            k += 1
        if a[i] != b[k]:
            swapped += 1
        k += 1
    t = swapped / 2
    return (matches / la + matches / lb + (matches - t) / matches) / 3


def jaro_winkler(a: str, b: str, prefix_scale: float = 0.1) -> float:
    """Jaro similarity boosted by the common prefix (capped at 4 chars)."""
    j = jaro(a, b)
    prefix = 0
    for x, y in zip(a[:MAX_PREFIX], b[:MAX_PREFIX]):
        if x != y:
            break
        prefix += 1
    return j + prefix * prefix_scale * (1.0 - j)


def match_rank(name: str, query: str) -> float:
    """Rank `name` against `query`, lower is better.

    Tiers (case-folded):
      0   exact
      1   name starts with query
      2   name contains query
      3+  fuzzy: 3 + (1 - jaro_winkler), so every fuzzy hit sorts after tiers 0-2
    """
    q = (query or "").casefold()
    if not q:
        return 0.0
    n = (name or "").casefold()
    if n == q:
        return 0.0
    if n.startswith(q):
        return 1.0
    if q in n:
        return 2.0
    return 3.0 + (1.0 - jaro_winkler(n, q))


def similarity(name: str, query: str) -> float:
    """Map a match rank onto (0, 1]; 1 for an exact (or empty) query."""
    return 1.0 / (1.0 + match_rank(name, query))
