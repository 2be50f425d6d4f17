# -*- coding: utf-8 -*-
"""Icon resolution for items.

The core never talks to a blob store directly. Callers inject an async
`(key) -> url | None` resolver (and optionally an async URL probe); this
module only decides which source wins.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Optional

from core.models import Item

logger = logging.getLogger(__name__)

PLACEHOLDER = "placeholder.webp"

BlobResolver = Callable[[str], Awaitable[Optional[str]]]
UrlProbe = Callable[[str], Awaitable[bool]]


def icon_mode(item: Item) -> str:
    """"file" when a blob key is set, "url" when a URL is set, else "placeholder"."""
    if item.icon_key:
        return "file"
    if item.icon:
        return "url"
    return "placeholder"


async def resolve_icon_src(
    item: Item,
    resolve_blob: Optional[BlobResolver] = None,
    probe: Optional[UrlProbe] = None,
) -> str:
    """Pick the display source: URL, then blob key, then the placeholder.

    A source that fails (probe False, resolver None/error) falls through to the
    next one.
    """
    if item.icon:
        if probe is None or await _probe(probe, item.icon):
            return item.icon

    if item.icon_key and resolve_blob is not None:
        try:
            url = await resolve_blob(item.icon_key)
        except Exception as exc:
            logger.warning("icon blob %s could not be resolved: %s", item.icon_key, exc)
            url = None
        if url and (probe is None or await _probe(probe, url)):
            return url

    return PLACEHOLDER


async def _probe(probe: UrlProbe, url: str) -> bool:
    try:
        return bool(await probe(url))
    except Exception as exc:
        logger.debug("icon probe failed for %s: %s", url, exc)
        return False
