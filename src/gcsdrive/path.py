"""Virtual path parsing for the gs: drive.

A virtual path has the form ``bucketName/object/key/path``. It is derived
from its string form on every call and never stored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Union

from gcsdrive.errors import InvalidArgumentError

SEPARATOR = "/"

_SEPARATORS = re.compile(r"[/\\]")


class PathType(str, Enum):
    DRIVE = "Drive"
    BUCKET = "Bucket"
    OBJECT = "Object"


@dataclass(frozen=True, slots=True)
class DrivePath:
    """The drive root."""

    @property
    def type(self) -> PathType:
        return PathType.DRIVE

    @property
    def bucket(self) -> None:
        return None

    @property
    def object_path(self) -> None:
        return None

    def __str__(self) -> str:
        return ""


@dataclass(frozen=True, slots=True)
class BucketPath:
    """The root of a bucket."""

    bucket: str

    @property
    def type(self) -> PathType:
        return PathType.BUCKET

    @property
    def object_path(self) -> None:
        return None

    def __str__(self) -> str:
        return self.bucket


@dataclass(frozen=True, slots=True)
class ObjectPath:
    """An object or logical folder inside a bucket."""

    bucket: str
    object_path: str

    @property
    def type(self) -> PathType:
        return PathType.OBJECT

    def __str__(self) -> str:
        return f"{self.bucket}{SEPARATOR}{self.object_path}"


VirtualPath = Union[DrivePath, BucketPath, ObjectPath]


def parse(path: str | None) -> VirtualPath:
    """
    Parse a virtual path.

    Everything before the first separator ("/" or "\\") is the bucket name,
    everything after it is the object key with backslashes turned into
    forward slashes. Never fails: an empty path is the drive root and a path
    without a separator (or with nothing after it) is a bucket root.
    """
    if not path:
        return DrivePath()

    match = _SEPARATORS.search(path)
    if match is None:
        return BucketPath(path)

    bucket = path[: match.start()]
    object_path = path[match.end():].replace("\\", SEPARATOR)
    if not bucket:
        return DrivePath()
    if not object_path:
        return BucketPath(bucket)
    return ObjectPath(bucket, object_path)


def from_object(bucket: str, name: str) -> VirtualPath:
    """Build the virtual path of an object record."""
    if not name:
        return BucketPath(bucket)
    return ObjectPath(bucket, name)


def join(bucket: str, object_path: str | None = None) -> str:
    """Join a bucket and object key with a single separator."""
    if not object_path:
        return bucket
    return f"{bucket}{SEPARATOR}{object_path}"


def make_path(parent: str, child: str) -> str:
    """Join two path fragments, collapsing the separator between them."""
    if not parent:
        return child
    if not child:
        return parent
    return parent.rstrip("/\\") + SEPARATOR + child.lstrip("/\\")


def child_name(path: str) -> str:
    """Last component of a path, ignoring a trailing separator."""
    trimmed = path.rstrip("/\\")
    return _SEPARATORS.split(trimmed)[-1] if trimmed else ""


def relative_path_to_child(path: VirtualPath, child_object_path: str) -> str:
    """
    Return the part of `child_object_path` below `path`.

    Raises:
        InvalidArgumentError: if the child is not under `path`.
    """
    base = path.object_path or ""
    if not child_object_path.startswith(base):
        raise InvalidArgumentError(
            f"{child_object_path} does not start with {base}",
            details={"path": str(path), "child": child_object_path},
        )
    return child_object_path[len(base):]
