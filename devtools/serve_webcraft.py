#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Run WebCraft server (FastAPI + Uvicorn).

Usage:
  python3 devtools/serve_webcraft.py --host 0.0.0.0 --port 20000 --no-open
  python3 devtools/serve_webcraft.py --store sqlite --store-path data/crafting_data.sqlite
"""

from __future__ import annotations

import argparse
import socket
import sys
import webbrowser
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import uvicorn  # type: ignore

from apps.webcraft.app import create_app  # type: ignore
from apps.webcraft.settings import WebCraftSettings  # type: ignore
from core.config import STORE_BACKENDS, craft_config  # type: ignore


def _detect_lan_ip() -> str:
    """Best-effort LAN IP discovery (no external network required)."""
    try:
        s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        # doesn't need to be reachable; used to pick outbound interface
        s.connect(("8.8.8.8", 80))
        ip = s.getsockname()[0]
        s.close()
        return ip
    except OSError:
        return "127.0.0.1"


def main() -> None:
    defaults = WebCraftSettings.from_config()

    parser = argparse.ArgumentParser(description="Crafting-Pro WebCraft (FastAPI) server.")
    parser.add_argument("--store", choices=list(STORE_BACKENDS), default=None, help=f"Snapshot backend (default: {defaults.backend})")
    parser.add_argument("--store-path", default=None, help="Snapshot file (.json or .sqlite)")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--root-path", default=defaults.root_path, help="Reverse proxy mount path, e.g. /webcraft")
    parser.add_argument("--no-open", action="store_true", help="Do not open browser")
    parser.add_argument("--log-level", default="info", choices=["critical", "error", "warning", "info", "debug", "trace"])
    parser.add_argument("--cors-allow-origin", action="append", default=[], help="CORS allow origin (repeatable)")
    args = parser.parse_args()

    cfg = craft_config.store_config(backend=args.store, path=args.store_path)

    app = create_app(
        cfg.path,
        backend=cfg.backend,
        root_path=args.root_path,
        cors_allow_origins=(args.cors_allow_origin or None),
        gzip_minimum_size=defaults.gzip_minimum_size,
    )

    host = str(args.host)
    port = int(args.port)
    store_desc = app.state.store.backend.describe()

    # Print useful addresses
    rp = WebCraftSettings.normalize_root_path(args.root_path)
    local_url = f"http://127.0.0.1:{port}{rp}/docs"
    if host == "0.0.0.0":
        lan_ip = _detect_lan_ip()
        lan_url = f"http://{lan_ip}:{port}{rp}/docs"
        print(f"Crafting-Pro WebCraft: {lan_url}")
        print(f"Open (local): {local_url}")
        print(f"Store: {store_desc}")
        open_url = lan_url
    else:
        url = f"http://{host}:{port}{rp}/docs"
        print(f"Crafting-Pro WebCraft: {url}")
        print(f"Store: {store_desc}")
        open_url = url

    if not args.no_open:
        try:
            webbrowser.open(open_url)
        except webbrowser.Error:
            pass

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_level=args.log_level,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
