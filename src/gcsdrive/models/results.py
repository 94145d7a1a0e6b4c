"""Result models returned by provider verbs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from .bucket_info import BucketInfo
from .object_info import ObjectInfo


ProgressStatus = Literal["processing", "completed"]


@dataclass(slots=True, frozen=True)
class DriveInfo:
    """The drive itself (root of every virtual path)."""

    name: str = "gs"
    root: str = ""


Item = Union[DriveInfo, BucketInfo, ObjectInfo, str]


@dataclass(slots=True)
class ItemEntry:
    """
    One item written by a provider verb.

    `item` is a DriveInfo, BucketInfo or ObjectInfo, or a plain child name
    for get_child_names.
    """

    item: Item
    path: str
    is_container: bool


@dataclass(slots=True)
class ProgressRecord:
    """Coarse progress of a long-running provider operation."""

    activity: str
    status_description: str
    percent_complete: int
    status: ProgressStatus = "processing"


@dataclass(slots=True)
class ErrorRecord:
    """A non-fatal error reported while the rest of an operation continued."""

    target: str
    error: BaseException
    extra: dict[str, str] = field(default_factory=dict)
