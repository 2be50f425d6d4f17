#!/usr/bin/env python3
"""Crafting-Pro tool registry."""

TOOLS = [
    # --- CLI tools (apps/cli/commands) ---
    {
        "file": "dash.py",
        "alias": "dash",
        "desc": "Store overview + tool list",
        "usage": "craftpro dash",
        "type": "CLI",
        "folder": "apps/cli/commands"
    },
    {
        "file": "items.py",
        "alias": "items",
        "desc": "List/search/add/rename/clone/delete items",
        "usage": "craftpro items [list|add|rename|clone|rm] ...",
        "type": "CLI",
        "folder": "apps/cli/commands"
    },
    {
        "file": "recipes.py",
        "alias": "recipes",
        "desc": "Search recipes by inputs/outputs/duration, edit slots",
        "usage": "craftpro recipes [search|show|add|set|slot|unslot|rm|clone] ...",
        "type": "CLI",
        "folder": "apps/cli/commands"
    },
    {
        "file": "data.py",
        "alias": "data",
        "desc": "Snapshot export/import/reset, duration helper",
        "usage": "craftpro data [export|import|reset|duration] ...",
        "type": "CLI",
        "folder": "apps/cli/commands"
    },

    # --- dev tools (devtools/) ---
    {
        "file": "serve_webcraft.py",
        "alias": "web",
        "desc": "Run WebCraft (FastAPI + Uvicorn)",
        "usage": "craftpro web [--host 0.0.0.0 --port 8000]",
        "type": "Dev",
        "folder": "devtools"
    },
]


def get_tools():
    return TOOLS
