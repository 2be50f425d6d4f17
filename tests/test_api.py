# -*- coding: utf-8 -*-
import pytest
from fastapi.testclient import TestClient

from apps.webcraft.app import create_app
from core.store import CraftStore

API = "/api/v1"


@pytest.fixture
def craft():
    return CraftStore()


@pytest.fixture
def client(craft):
    return TestClient(create_app(store=craft, gzip_minimum_size=0))


def _add_item(client, name, **extra):
    resp = client.post(f"{API}/items", json={"name": name, **extra})
    assert resp.status_code == 201, resp.text
    return resp.json()["item"]["id"]


def _wood_plank(client):
    wood = _add_item(client, "Wood")
    plank = _add_item(client, "Plank")
    rid = client.post(f"{API}/recipes").json()["recipe"]["id"]
    client.patch(f"{API}/recipes/{rid}/slots/inputs/0", json={"field": "name", "value": "wood"})
    client.patch(f"{API}/recipes/{rid}/slots/inputs/0", json={"field": "qty", "value": 2})
    client.patch(f"{API}/recipes/{rid}/slots/outputs/0", json={"field": "itemId", "value": plank})
    client.patch(f"{API}/recipes/{rid}", json={"field": "duration", "value": "30s"})
    return wood, plank, rid


def test_healthz_and_meta(client):
    assert client.get("/healthz").json() == {"ok": True}
    meta = client.get(f"{API}/meta").json()
    assert meta["items"] == 0
    assert meta["backend"] == "memory"
    assert "remove_references" in meta["delete_policies"]
    assert meta["snapshot_version"] == "1"


def test_revision_moves_on_mutation(client):
    r0 = client.get(f"{API}/meta").json()["revision"]
    _add_item(client, "Wood")
    assert client.get(f"{API}/meta").json()["revision"] == r0 + 1


def test_duration_endpoint(client):
    assert client.get(f"{API}/duration", params={"text": "90m"}).json() == {
        "text": "90m",
        "valid": True,
        "seconds": 5400,
        "formatted": "1h30m",
    }
    bad = client.get(f"{API}/duration", params={"text": "soon"}).json()
    assert bad["valid"] is False and bad["seconds"] is None


def test_item_validation(client):
    _add_item(client, "Wood")
    assert client.post(f"{API}/items", json={"name": "wood"}).status_code == 409
    assert client.post(f"{API}/items", json={"name": ""}).status_code == 400
    assert client.post(f"{API}/items", json={"name": "a,b"}).status_code == 400
    assert client.post(f"{API}/items", json={"name": "Oak", "icon": "not a url"}).status_code == 400
    assert client.post(f"{API}/items", json={"name": "Oak", "icon": "http://localhost/oak.png"}).status_code == 400


def test_item_search_and_sort(client):
    for name in ("Apple", "Pineapple", "Apricot", "Grape"):
        _add_item(client, name)
    body = client.get(f"{API}/items", params={"q": "ap"}).json()
    assert [it["name"] for it in body["items"]] == ["Apple", "Apricot", "Pineapple", "Grape"]
    body = client.get(f"{API}/items", params={"sort": "za"}).json()
    assert [it["name"] for it in body["items"]][0] == "Pineapple"
    assert client.get(f"{API}/items", params={"sort": "nope"}).status_code == 400


def test_item_patch_icon_modes(client):
    iid = _add_item(client, "Wood", icon="https://example.com/wood.png")
    item = client.patch(f"{API}/items/{iid}", json={"field": "iconKey", "value": "blob-1"}).json()["item"]
    assert item["iconMode"] == "file"
    assert "icon" not in item
    item = client.patch(f"{API}/items/{iid}", json={"field": "icon", "value": "https://example.com/w2.png"}).json()["item"]
    assert item["iconMode"] == "url"
    assert "iconKey" not in item


def test_item_rename_conflict(client):
    wood = _add_item(client, "Wood")
    _add_item(client, "Plank")
    assert client.patch(f"{API}/items/{wood}", json={"field": "name", "value": "PLANK"}).status_code == 409
    assert client.patch(f"{API}/items/{wood}", json={"field": "name", "value": "WOOD"}).status_code == 200
    assert client.patch(f"{API}/items/{wood}", json={"field": "colour", "value": 1}).status_code == 400
    assert client.patch(f"{API}/items/missing", json={"field": "desc", "value": "x"}).status_code == 404


def test_maximize_orders_recent(client):
    a = _add_item(client, "A")
    _add_item(client, "B")
    client.post(f"{API}/items/{a}/maximize")
    body = client.get(f"{API}/items", params={"sort": "recent"}).json()
    assert body["items"][0]["id"] == a
    assert body["items"][0]["lastMaximized"] > 0


def test_recipe_search_scenario(client):
    _wood_plank(client)
    body = client.get(f"{API}/recipes", params={"inputs": "Wood", "outputs": "Plank", "duration": "30s"}).json()
    assert body["results"][0]["score"]["relevance"] == pytest.approx(1.0)
    assert body["results"][0]["inputs"][0]["name"] == "Wood"
    assert body["unknown"] == {"inputs": [], "outputs": []}

    body = client.get(f"{API}/recipes", params={"inputs": "Wood", "outputs": "Plank", "duration": "1m"}).json()
    assert body["results"][0]["score"]["duration"] == pytest.approx(1 - 30 / 604800)


def test_recipe_search_reports_unknown_and_bad_duration(client):
    _wood_plank(client)
    body = client.get(f"{API}/recipes", params={"inputs": "Wod", "duration": "later"}).json()
    assert body["unknown"]["inputs"] == ["Wod"]
    assert body["query"]["duration"] is None
    assert body["query"]["duration_valid"] is False


def test_recipe_search_with_overflowing_duration(client):
    _wood_plank(client)
    resp = client.get(f"{API}/recipes", params={"duration": "9" * 400})
    assert resp.status_code == 200
    assert resp.json()["query"]["duration_valid"] is False
    assert client.get(f"{API}/duration", params={"text": "9" * 400 + "h"}).json()["valid"] is False


def test_recipe_patch_validation(client):
    _, _, rid = _wood_plank(client)
    assert client.patch(f"{API}/recipes/{rid}", json={"field": "duration", "value": "abc"}).status_code == 400
    assert client.patch(f"{API}/recipes/{rid}", json={"field": "reversible", "value": "yes"}).status_code == 400
    recipe = client.patch(f"{API}/recipes/{rid}", json={"field": "reversible", "value": True}).json()["recipe"]
    assert recipe["reversible"] is True
    assert recipe["durationText"] == "30s"
    assert client.get(f"{API}/recipes/missing").status_code == 404


def test_slot_endpoints(client):
    _, _, rid = _wood_plank(client)
    added = client.post(f"{API}/recipes/{rid}/slots/inputs")
    assert added.status_code == 201
    assert added.json()["index"] == 1
    assert client.patch(f"{API}/recipes/{rid}/slots/inputs/1", json={"field": "qty", "value": 0}).status_code == 400
    assert client.patch(f"{API}/recipes/{rid}/slots/inputs/1", json={"field": "name", "value": "Ghost"}).status_code == 400
    assert client.patch(f"{API}/recipes/{rid}/slots/inputs/9", json={"field": "qty", "value": 1}).status_code == 404
    assert client.post(f"{API}/recipes/{rid}/slots/sideways").status_code == 400

    recipe = client.delete(f"{API}/recipes/{rid}/slots/outputs/0").json()["recipe"]
    assert recipe["outputs"] == [{"itemId": "", "qty": 1, "name": ""}]
    assert recipe["complete"] is False


def test_delete_item_policies(client):
    wood, _, rid = _wood_plank(client)
    body = client.delete(f"{API}/items/{wood}").json()
    assert body == {"deleted": wood, "policy": "remove_references", "recipes": [rid]}
    recipe = client.get(f"{API}/recipes/{rid}").json()["recipe"]
    assert recipe["inputs"][0]["itemId"] == ""

    plank = client.get(f"{API}/items", params={"q": "Plank"}).json()["items"][0]["id"]
    body = client.delete(f"{API}/items/{plank}", params={"policy": "delete_recipes"}).json()
    assert body["recipes"] == [rid]
    assert client.get(f"{API}/recipes/{rid}").status_code == 404
    assert client.delete(f"{API}/items/{plank}").status_code == 404
    assert client.delete(f"{API}/items/x", params={"policy": "cascade"}).status_code == 400


def test_clone_endpoints(client):
    _, _, rid = _wood_plank(client)
    wood = client.get(f"{API}/items", params={"q": "Wood"}).json()["items"][0]["id"]
    clone = client.post(f"{API}/items/{wood}/clone").json()["item"]
    assert clone["name"] == "Wood 2"
    dup = client.post(f"{API}/recipes/{rid}/clone").json()["recipe"]
    assert dup["id"] != rid
    assert dup["duration"] == 30


def test_export_import_reset(client, craft):
    _wood_plank(client)
    resp = client.get(f"{API}/export")
    assert "attachment" in resp.headers["content-disposition"]
    dump = resp.json()
    assert dump["version"] == 1

    assert client.post(f"{API}/reset").json() == {"ok": True}
    assert craft.item_count == 0

    bad = client.post(f"{API}/import", json={"version": 1, "items": {}})
    assert bad.status_code == 400
    assert craft.item_count == 0

    ok = client.post(f"{API}/import", json=dump).json()
    assert ok == {"ok": True, "items": 2, "recipes": 1}
    assert craft.export_data() == dump


def test_app_builds_store_from_backend(tmp_path):
    path = tmp_path / "craft.json"
    first = TestClient(create_app(path, backend="json"))
    _add_item(first, "Wood")
    second = TestClient(create_app(path, backend="json"))
    assert second.get(f"{API}/meta").json()["items"] == 1
