#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""craftpro entry point.

`craftpro <tool> [args...]` runs the registered tool script with `runpy`.
Shared store options may precede the tool name. No tool opens the
dashboard; an unknown tool name is handed to the dashboard, which reports it.
"""

from __future__ import annotations

import runpy
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

PROJECT_ROOT = Path(__file__).resolve().parents[2]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

DEFAULT_TOOL = "dash"
# options from cli_common.add_store_args, each takes one value
SHARED_OPTIONS = ("--store", "--store-path", "--log-level")


def find_tool(name: str) -> Optional[Dict[str, str]]:
    """Match a registry entry by alias, file name or file stem."""
    from apps.cli.registry import get_tools

    key = name.strip().lower()
    if not key:
        return None
    for tool in get_tools():
        file = str(tool.get("file") or "")
        if key in (str(tool.get("alias") or "").lower(), file.lower(), Path(file).stem.lower()):
            return tool
    return None


def _script(tool: Dict[str, str]) -> Path:
    return PROJECT_ROOT / (tool.get("folder") or "apps/cli/commands") / tool["file"]


def _print_version() -> None:
    from core.version import versions

    v = versions()
    print(f"craftpro {v['project_version']} (snapshot v{v['snapshot_version']})")


def split_argv(args: List[str]) -> Tuple[Optional[Dict[str, str]], List[str]]:
    """Pick the tool out of argv; return it with the argv the tool should see.

    Shared store options (`--store memory`, `--log-level=debug`) may come
    before the tool name; they all take one value and are moved behind it.
    """
    leading: List[str] = []
    i = 0
    while i < len(args) and args[i].startswith("-"):
        opt = args[i]
        step = 2 if "=" not in opt and opt in SHARED_OPTIONS else 1
        leading.extend(args[i : i + step])
        i += step

    tool = find_tool(args[i]) if i < len(args) else None
    if tool is None:
        return None, list(args)
    return tool, leading + args[i + 1 :]


def main(argv: Optional[List[str]] = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    if args and args[0] in ("-V", "--version"):
        _print_version()
        return

    tool, args = split_argv(args)
    if tool is None:
        tool = find_tool(DEFAULT_TOOL)
        if tool is None:
            raise SystemExit(f"craftpro: '{DEFAULT_TOOL}' missing from the tool registry")

    script = _script(tool)
    sys.argv = [str(script)] + args
    runpy.run_path(str(script), run_name="__main__")


if __name__ == "__main__":
    main()
