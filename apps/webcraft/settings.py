# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from core.config import craft_config


@dataclass(frozen=True)
class WebCraftSettings:
    """Runtime settings for the WebCraft server.

    Notes
    - store_path can point to a .json snapshot or a .sqlite/.db file
      (the suffix selects the SQLite backend).
    - root_path is for reverse-proxy mount (e.g. '/webcraft')
    """

    store_path: Optional[Path]
    backend: str = "json"
    host: str = "127.0.0.1"
    port: int = 8000
    root_path: str = ""
    cors_allow_origins: Optional[List[str]] = None
    gzip_minimum_size: int = 800

    @staticmethod
    def normalize_root_path(root_path: str) -> str:
        rp = (root_path or "").strip()
        if not rp:
            return ""
        if not rp.startswith("/"):
            rp = "/" + rp
        rp = rp.rstrip("/")
        return rp

    @classmethod
    def from_config(cls) -> "WebCraftSettings":
        store = craft_config.store_config()
        try:
            port = int(craft_config.get("SERVER", "PORT") or 8000)
        except ValueError:
            port = 8000
        return cls(
            store_path=store.path,
            backend=store.backend,
            host=(craft_config.get("SERVER", "HOST") or "127.0.0.1").strip(),
            port=port,
            root_path=cls.normalize_root_path(craft_config.get("SERVER", "ROOT_PATH") or ""),
        )
