# -*- coding: utf-8 -*-
"""Project / snapshot version info (conf/version.json)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

VERSION_FILE = Path(__file__).resolve().parents[1] / "conf" / "version.json"


@dataclass(frozen=True)
class VersionInfo:
    project: str = "unknown"
    snapshot: Optional[str] = None

    def as_dict(self) -> Dict[str, str]:
        from core.schemas.snapshot import SNAPSHOT_VERSION

        return {
            "project_version": self.project,
            "snapshot_version": self.snapshot or str(SNAPSHOT_VERSION),
        }


def read_version_file(path: Path) -> VersionInfo:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return VersionInfo()
    except (OSError, ValueError) as exc:
        logger.warning("unreadable version file %s: %s", path, exc)
        return VersionInfo()
    if not isinstance(data, dict):
        return VersionInfo()

    def _s(key: str) -> Optional[str]:
        val = data.get(key)
        if val is None:
            return None
        return str(val).strip() or None

    return VersionInfo(project=_s("project_version") or "unknown", snapshot=_s("snapshot_version"))


@lru_cache(maxsize=1)
def version_info() -> VersionInfo:
    return read_version_file(VERSION_FILE)


def project_version() -> str:
    return version_info().project


def versions() -> Dict[str, str]:
    return version_info().as_dict()
