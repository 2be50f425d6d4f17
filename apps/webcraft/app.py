# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Optional, Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from core.events import EventBus
from core.persistence import SnapshotBackend, open_backend
from core.store import CraftStore
from core.version import project_version

from .api import router as api_router
from .settings import WebCraftSettings

logger = logging.getLogger(__name__)


def create_app(
    store_path: Optional[Path] = None,
    *,
    backend: str = "json",
    store: Optional[CraftStore] = None,
    root_path: str = "",
    cors_allow_origins: Optional[Sequence[str]] = None,
    gzip_minimum_size: int = 800,
) -> FastAPI:
    """FastAPI app factory.

    Pass `store` to serve an existing CraftStore (tests, embedding); otherwise
    one is built from `backend` + `store_path` and restored from it.
    """

    rp = WebCraftSettings.normalize_root_path(root_path)

    app = FastAPI(
        title="Crafting-Pro WebCraft API",
        version=project_version(),
        root_path=rp,
        docs_url="/docs",
        redoc_url=None,
    )

    # state
    if store is None:
        snap_backend: SnapshotBackend = open_backend(backend, Path(store_path) if store_path else None)
        store = CraftStore(backend=snap_backend, notifier=EventBus())
        store.load()
    app.state.store = store
    app.state.store_lock = threading.RLock()
    app.state.revision = 0

    def _bump_revision(event) -> None:
        app.state.revision += 1

    # clients poll /meta and re-rank when the revision moves
    store.events.on_any(_bump_revision)
    logger.info("webcraft serving %s", store.backend.describe())

    # middleware
    if gzip_minimum_size and gzip_minimum_size > 0:
        app.add_middleware(GZipMiddleware, minimum_size=int(gzip_minimum_size))

    if cors_allow_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_allow_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # routes
    app.include_router(api_router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app
