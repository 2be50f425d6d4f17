# -*- coding: utf-8 -*-
"""Persisted document schemas."""

from core.schemas.snapshot import (
    SNAPSHOT_VERSION,
    SUPPORTED_VERSIONS,
    CraftSnapshotV1,
    SnapshotError,
    UnsupportedVersionError,
    parse_snapshot,
)

__all__ = [
    "SNAPSHOT_VERSION",
    "SUPPORTED_VERSIONS",
    "CraftSnapshotV1",
    "SnapshotError",
    "UnsupportedVersionError",
    "parse_snapshot",
]
