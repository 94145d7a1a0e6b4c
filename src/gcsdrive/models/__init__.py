"""Public model exports for gcsdrive."""

from __future__ import annotations

from .bucket_info import BucketInfo, ProjectInfo
from .object_info import ObjectInfo, ObjectPage
from .results import (
    DriveInfo,
    ErrorRecord,
    Item,
    ItemEntry,
    ProgressRecord,
    ProgressStatus,
)

__all__ = [
    "ObjectInfo",
    "ObjectPage",
    "BucketInfo",
    "ProjectInfo",
    "DriveInfo",
    "Item",
    "ItemEntry",
    "ProgressRecord",
    "ProgressStatus",
    "ErrorRecord",
]
