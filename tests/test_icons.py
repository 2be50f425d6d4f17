# -*- coding: utf-8 -*-
import asyncio

from core.icons import PLACEHOLDER, icon_mode, resolve_icon_src
from core.models import Item


def _run(coro):
    return asyncio.run(coro)


async def _blob(key):
    return f"https://blobs.example.com/{key}"


async def _blob_missing(key):
    return None


async def _blob_error(key):
    raise ConnectionError("offline")


def test_icon_mode():
    assert icon_mode(Item(id="a", name="A", icon_key="k")) == "file"
    assert icon_mode(Item(id="a", name="A", icon="https://example.com/a.png")) == "url"
    assert icon_mode(Item(id="a", name="A")) == "placeholder"


def test_url_wins():
    item = Item(id="a", name="A", icon="https://example.com/a.png", icon_key="k")
    assert _run(resolve_icon_src(item, _blob)) == "https://example.com/a.png"


def test_blob_key_resolves():
    item = Item(id="a", name="A", icon_key="k1")
    assert _run(resolve_icon_src(item, _blob)) == "https://blobs.example.com/k1"


def test_failed_probe_falls_through_to_blob():
    async def probe(url):
        return "blobs" in url

    item = Item(id="a", name="A", icon="https://dead.example.com/a.png", icon_key="k1")
    assert _run(resolve_icon_src(item, _blob, probe)) == "https://blobs.example.com/k1"


def test_placeholder_fallbacks():
    assert _run(resolve_icon_src(Item(id="a", name="A"))) == PLACEHOLDER
    assert _run(resolve_icon_src(Item(id="a", name="A", icon_key="k"))) == PLACEHOLDER
    assert _run(resolve_icon_src(Item(id="a", name="A", icon_key="k"), _blob_missing)) == PLACEHOLDER
    assert _run(resolve_icon_src(Item(id="a", name="A", icon_key="k"), _blob_error)) == PLACEHOLDER


def test_probe_errors_count_as_failure():
    async def probe(url):
        raise TimeoutError("slow")

    item = Item(id="a", name="A", icon="https://example.com/a.png")
    assert _run(resolve_icon_src(item, probe=probe)) == PLACEHOLDER
