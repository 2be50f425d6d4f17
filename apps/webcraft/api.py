# -*- coding: utf-8 -*-
from __future__ import annotations

import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from core.duration import format_duration, is_duration, parse_duration
from core.icons import icon_mode
from core.models import SIDES, Item, Recipe
from core.ranking import ITEM_SORT_MODES, RecipeQuery, rank_items, rank_recipes, unknown_names
from core.store import DELETE_POLICIES, REMOVE_REFERENCES, CraftStore
from core.validation import is_likely_ready_url, item_name_error, parse_quantity
from core.version import versions


def get_store(request: Request) -> CraftStore:
    """Resolve the craft store from app state."""
    return request.app.state.store  # type: ignore[attr-defined]


def _lock(request: Request):
    # FastAPI runs sync endpoints on a thread pool; the store itself is single-threaded
    return request.app.state.store_lock  # type: ignore[attr-defined]


def _json(data: Dict[str, Any], *, status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=data, status_code=status_code)


router = APIRouter(prefix="/api/v1")


# ----------------- request bodies -----------------


class ItemCreate(BaseModel):
    name: str
    icon: Optional[str] = None
    desc: str = ""


class FieldUpdate(BaseModel):
    field: str
    value: Any = None


# ----------------- helpers -----------------


def _item_brief(store: CraftStore, item: Item) -> Dict[str, Any]:
    out = item.to_dict()
    out["iconMode"] = icon_mode(item)
    out["usedBy"] = len(store.recipes_using(item.id))
    return out


def _recipe_brief(store: CraftStore, recipe: Recipe) -> Dict[str, Any]:
    out = recipe.to_dict()
    out["durationText"] = format_duration(recipe.duration)
    out["complete"] = recipe.is_complete()
    for side in SIDES:
        for row in out[side]:
            item = store.get_item(row["itemId"]) if row["itemId"] else None
            row["name"] = item.name if item else ""
    return out


def _not_found(exc: Exception) -> HTTPException:
    return HTTPException(status_code=404, detail=str(exc).strip("'\""))


def _check_side(side: str) -> None:
    if side not in SIDES:
        raise HTTPException(status_code=400, detail=f"Unknown side: {side} (expected inputs|outputs)")


def _name_or_raise(store: CraftStore, name: Any, exclude_id: Optional[str] = None) -> str:
    err = item_name_error(name, lambda nm: store.item_name_taken(nm, exclude_id=exclude_id))
    if err:
        status = 409 if "already exists" in err else 400
        raise HTTPException(status_code=status, detail=err)
    return str(name).strip()


def _icon_or_raise(icon: Any) -> Optional[str]:
    val = str(icon or "").strip()
    if not val:
        return None
    if not is_likely_ready_url(val):
        raise HTTPException(status_code=400, detail=f"Invalid icon URL: {val}")
    return val


# ----------------- meta -----------------


@router.get("/meta")
def meta(request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        m: Dict[str, Any] = dict(versions())
        m.update(
            {
                "backend": store.backend.describe(),
                "items": store.item_count,
                "recipes": store.recipe_count,
                "revision": int(getattr(request.app.state, "revision", 0)),
                "sort_modes": list(ITEM_SORT_MODES),
                "delete_policies": list(DELETE_POLICIES),
            }
        )
    return _json(m)


@router.get("/duration")
def duration(text: str = Query("")):
    secs = parse_duration(text)
    ok = is_duration(secs)
    return {
        "text": text,
        "valid": ok,
        "seconds": int(secs) if ok else None,
        "formatted": format_duration(secs) if ok else None,
    }


# ----------------- items -----------------


@router.get("/items")
def items_list(
    request: Request,
    q: str = Query(""),
    sort: str = Query("name"),
    limit: int = Query(500, ge=1, le=5000),
    store: CraftStore = Depends(get_store),
):
    if sort not in ITEM_SORT_MODES:
        raise HTTPException(status_code=400, detail=f"Unknown sort mode: {sort}")
    with _lock(request):
        ranked = rank_items(store.items(), q, sort)
        rows = [_item_brief(store, it) for it in ranked[:limit]]
    return {"q": q, "sort": sort, "total": len(ranked), "items": rows}


@router.post("/items", status_code=201)
def items_create(req: ItemCreate, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        name = _name_or_raise(store, req.name)
        icon = _icon_or_raise(req.icon)
        iid = store.add_item(name, icon=icon, desc=req.desc or "")
        return {"item": _item_brief(store, store.get_item(iid))}


@router.get("/items/{item_id}")
def items_get(item_id: str, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        item = store.get_item(item_id)
        if item is None:
            raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
        return {"item": _item_brief(store, item), "recipes": store.recipes_using(item_id)}


@router.patch("/items/{item_id}")
def items_update(item_id: str, req: FieldUpdate, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        if store.get_item(item_id) is None:
            raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")

        field, value = req.field, req.value
        if field == "name":
            value = _name_or_raise(store, value, exclude_id=item_id)
            store.update_item(item_id, "name", value)
        elif field == "icon":
            # URL mode replaces file mode
            value = _icon_or_raise(value)
            store.update_item(item_id, "iconKey", None)
            store.update_item(item_id, "icon", value)
        elif field == "iconKey":
            # file mode replaces URL mode
            store.update_item(item_id, "icon", None)
            store.update_item(item_id, "iconKey", str(value) if value else None)
        elif field == "desc":
            store.update_item(item_id, "desc", str(value or ""))
        elif field == "lastMaximized":
            try:
                store.update_item(item_id, "lastMaximized", int(value))
            except (TypeError, ValueError):
                raise HTTPException(status_code=400, detail=f"lastMaximized must be an integer: {value!r}")
        else:
            raise HTTPException(status_code=400, detail=f"Unknown item field: {field}")
        return {"item": _item_brief(store, store.get_item(item_id))}


@router.post("/items/{item_id}/maximize")
def items_maximize(item_id: str, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        if store.get_item(item_id) is None:
            raise HTTPException(status_code=404, detail=f"Item not found: {item_id}")
        store.update_item(item_id, "lastMaximized", int(time.time() * 1000))
        return {"item": _item_brief(store, store.get_item(item_id))}


@router.delete("/items/{item_id}")
def items_delete(
    item_id: str,
    request: Request,
    policy: str = Query(REMOVE_REFERENCES),
    store: CraftStore = Depends(get_store),
):
    if policy not in DELETE_POLICIES:
        raise HTTPException(status_code=400, detail=f"Unknown delete policy: {policy}")
    with _lock(request):
        try:
            affected = store.delete_item(item_id, policy=policy)
        except KeyError as exc:
            raise _not_found(exc)
    return {"deleted": item_id, "policy": policy, "recipes": affected}


@router.post("/items/{item_id}/clone", status_code=201)
def items_clone(item_id: str, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        try:
            iid = store.clone_item(item_id)
        except KeyError as exc:
            raise _not_found(exc)
        return {"item": _item_brief(store, store.get_item(iid))}


# ----------------- recipes -----------------


@router.get("/recipes")
def recipes_search(
    request: Request,
    inputs: str = Query(""),
    outputs: str = Query(""),
    duration: str = Query(""),
    store: CraftStore = Depends(get_store),
):
    query = RecipeQuery.parse(inputs, outputs, duration)
    with _lock(request):
        scored = rank_recipes(store, query)
        results: List[Dict[str, Any]] = []
        for s in scored:
            row = _recipe_brief(store, store.get_recipe(s.recipe_id))
            row["score"] = {
                "inputs": s.input_score,
                "outputs": s.output_score,
                "duration": s.duration_score,
                "relevance": s.relevance,
            }
            results.append(row)
        unknown = {
            "inputs": unknown_names(store, query.inputs),
            "outputs": unknown_names(store, query.outputs),
        }
    return {
        "query": {
            "inputs": list(query.inputs),
            "outputs": list(query.outputs),
            "duration": query.duration,
            "duration_valid": (not duration.strip()) or query.duration is not None,
        },
        "unknown": unknown,
        "results": results,
    }


@router.post("/recipes", status_code=201)
def recipes_create(request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        rid = store.add_recipe()
        return {"recipe": _recipe_brief(store, store.get_recipe(rid))}


@router.get("/recipes/{recipe_id}")
def recipes_get(recipe_id: str, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        recipe = store.get_recipe(recipe_id)
        if recipe is None:
            raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
        return {"recipe": _recipe_brief(store, recipe)}


@router.patch("/recipes/{recipe_id}")
def recipes_update(recipe_id: str, req: FieldUpdate, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        if store.get_recipe(recipe_id) is None:
            raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
        if req.field == "duration":
            secs = parse_duration(req.value)
            if not is_duration(secs):
                raise HTTPException(status_code=400, detail=f"Invalid duration: {req.value!r}")
            store.update_recipe(recipe_id, "duration", int(secs))
        elif req.field == "reversible":
            if not isinstance(req.value, bool):
                raise HTTPException(status_code=400, detail="reversible must be true or false")
            store.update_recipe(recipe_id, "reversible", req.value)
        else:
            raise HTTPException(status_code=400, detail=f"Unknown recipe field: {req.field}")
        return {"recipe": _recipe_brief(store, store.get_recipe(recipe_id))}


@router.delete("/recipes/{recipe_id}")
def recipes_delete(recipe_id: str, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        try:
            store.delete_recipe(recipe_id)
        except KeyError as exc:
            raise _not_found(exc)
    return {"deleted": recipe_id}


@router.post("/recipes/{recipe_id}/clone", status_code=201)
def recipes_clone(recipe_id: str, request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        try:
            rid = store.clone_recipe(recipe_id)
        except KeyError as exc:
            raise _not_found(exc)
        return {"recipe": _recipe_brief(store, store.get_recipe(rid))}


@router.post("/recipes/{recipe_id}/slots/{side}", status_code=201)
def slots_add(recipe_id: str, side: str, request: Request, store: CraftStore = Depends(get_store)):
    _check_side(side)
    with _lock(request):
        try:
            idx = store.add_recipe_slot(recipe_id, side)
        except KeyError as exc:
            raise _not_found(exc)
        return {"index": idx, "recipe": _recipe_brief(store, store.get_recipe(recipe_id))}


@router.delete("/recipes/{recipe_id}/slots/{side}/{idx}")
def slots_remove(recipe_id: str, side: str, idx: int, request: Request, store: CraftStore = Depends(get_store)):
    _check_side(side)
    with _lock(request):
        try:
            store.remove_recipe_slot(recipe_id, side, idx)
        except (KeyError, IndexError) as exc:
            raise _not_found(exc)
        return {"recipe": _recipe_brief(store, store.get_recipe(recipe_id))}


@router.patch("/recipes/{recipe_id}/slots/{side}/{idx}")
def slots_update(
    recipe_id: str,
    side: str,
    idx: int,
    req: FieldUpdate,
    request: Request,
    store: CraftStore = Depends(get_store),
):
    """Patch one slot.

    field
      itemId  an existing item id, or "" to clear
      name    an exact item name (case-insensitive), resolved to its id
      qty     integer >= 1
    """
    _check_side(side)
    with _lock(request):
        recipe = store.get_recipe(recipe_id)
        if recipe is None:
            raise HTTPException(status_code=404, detail=f"Recipe not found: {recipe_id}")
        if not 0 <= idx < len(recipe.side(side)):
            raise HTTPException(status_code=404, detail=f"Slot index out of range: {side}[{idx}]")

        if req.field == "itemId":
            ref = str(req.value or "")
            if ref and store.get_item(ref) is None:
                raise HTTPException(status_code=400, detail=f"Item not found: {ref}")
            store.update_recipe_slot(recipe_id, side, idx, "itemId", ref)
        elif req.field == "name":
            item = store.find_item_by_name(str(req.value or ""))
            if item is None:
                raise HTTPException(status_code=400, detail=f"No item named: {req.value}")
            store.update_recipe_slot(recipe_id, side, idx, "itemId", item.id)
        elif req.field == "qty":
            qty = parse_quantity(req.value)
            if qty is None:
                raise HTTPException(status_code=400, detail=f"Quantity must be an integer >= 1: {req.value!r}")
            store.update_recipe_slot(recipe_id, side, idx, "qty", qty)
        else:
            raise HTTPException(status_code=400, detail=f"Unknown slot field: {req.field}")
        return {"recipe": _recipe_brief(store, store.get_recipe(recipe_id))}


# ----------------- snapshot -----------------


@router.get("/export")
def export_data(request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        dump = store.export_data()
    headers = {"Content-Disposition": f'attachment; filename="CraftingProData_v{dump["version"]}.json"'}
    return JSONResponse(content=dump, headers=headers)


@router.post("/import")
def import_data(request: Request, snapshot: Any = Body(...), store: CraftStore = Depends(get_store)):
    with _lock(request):
        result = store.import_data(snapshot)
    if not result.ok:
        raise HTTPException(status_code=400, detail=f"Import failed: {result.message}")
    return {"ok": True, "items": result.items, "recipes": result.recipes}


@router.post("/reset")
def reset_data(request: Request, store: CraftStore = Depends(get_store)):
    with _lock(request):
        store.reset_data()
    return {"ok": True}
