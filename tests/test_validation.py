# -*- coding: utf-8 -*-
import pytest

from core.validation import (
    is_likely_ready_url,
    is_valid_http_url,
    item_name_error,
    parse_quantity,
    unique_clone_name,
    valid_duration_text,
)


def _taken(*names):
    lowered = {n.casefold() for n in names}
    return lambda nm: nm.casefold() in lowered


def test_item_name_error():
    taken = _taken("Wood")
    assert item_name_error("Plank", taken) is None
    assert item_name_error("", taken) == "Item name must not be empty"
    assert item_name_error("   ", taken) == "Item name must not be empty"
    assert item_name_error("Wood, Oak", taken) == "Item name must not contain a comma"
    assert item_name_error(" WOOD ", taken) == "Item name already exists: WOOD"


@pytest.mark.parametrize(
    "url, ok",
    [
        ("https://example.com/a.png", True),
        ("http://localhost:8000/x", True),
        ("ftp://example.com/a.png", False),
        ("example.com/a.png", False),
        ("https://", False),
        ("", False),
        (None, False),
    ],
)
def test_is_valid_http_url(url, ok):
    assert is_valid_http_url(url) is ok


def test_is_likely_ready_url():
    assert is_likely_ready_url("https://cdn.example.com/a.png")
    assert not is_likely_ready_url("http://localhost:8000/x")
    assert not is_likely_ready_url("https://example./a.png")


@pytest.mark.parametrize("value, qty", [("3", 3), (" 12 ", 12), (1, 1), ("0", None), ("-2", None), ("1.5", None), ("x", None), (None, None)])
def test_parse_quantity(value, qty):
    assert parse_quantity(value) == qty


def test_valid_duration_text():
    assert valid_duration_text("1h30m")
    assert valid_duration_text("0")
    assert not valid_duration_text("")
    assert not valid_duration_text("soon")


def test_unique_clone_name():
    assert unique_clone_name("Foo", _taken("Foo")) == "Foo 2"
    assert unique_clone_name("Foo 2", _taken("Foo", "Foo 2")) == "Foo 3"
    assert unique_clone_name("Foo", _taken("Foo", "Foo 2", "Foo 3")) == "Foo 4"
    assert unique_clone_name("Iron Ingot", _taken()) == "Iron Ingot 2"
