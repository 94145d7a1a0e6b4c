"""Typed options for provider verbs, selected by path type."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from gcsdrive.path import PathType, VirtualPath

STORAGE_CLASSES: tuple[str, ...] = (
    "COLDLINE",
    "DURABLE_REDUCED_AVAILABILITY",
    "MULTI_REGIONAL",
    "NEARLINE",
    "REGIONAL",
    "STANDARD",
)

LOCATIONS: tuple[str, ...] = ("ASIA", "EU", "US")

BUCKET_PREDEFINED_ACLS: tuple[str, ...] = (
    "authenticatedRead",
    "private",
    "projectPrivate",
    "publicRead",
    "publicReadWrite",
)

OBJECT_PREDEFINED_ACLS: tuple[str, ...] = (
    "authenticatedRead",
    "bucketOwnerFullControl",
    "bucketOwnerRead",
    "private",
    "projectPrivate",
    "publicRead",
)


def _check_choice(value: Optional[str], choices: tuple[str, ...], what: str) -> None:
    if value is not None and value not in choices:
        raise ValueError(f"{what} must be one of {choices}, got {value!r}")


@dataclass(slots=True, frozen=True)
class NewBucketOptions:
    """
    Options for creating a bucket.

    `project` defaults to the drive's default project. `storage_class` is
    case-insensitive and stored upper-cased.
    """

    project: Optional[str] = None
    storage_class: Optional[str] = None
    location: Optional[str] = None
    default_bucket_acl: Optional[str] = None
    default_object_acl: Optional[str] = None

    def __post_init__(self) -> None:
        if self.storage_class is not None:
            object.__setattr__(self, "storage_class", self.storage_class.upper())
        _check_choice(self.storage_class, STORAGE_CLASSES, "storage_class")
        _check_choice(self.location, LOCATIONS, "location")
        _check_choice(self.default_bucket_acl, BUCKET_PREDEFINED_ACLS, "default_bucket_acl")
        _check_choice(self.default_object_acl, OBJECT_PREDEFINED_ACLS, "default_object_acl")


@dataclass(slots=True, frozen=True)
class NewObjectOptions:
    """
    Options for creating an object.

    With `file` set, the local file is uploaded and the content type is
    inferred from its extension. Otherwise the item value is uploaded as
    UTF-8 text.
    """

    file: Optional[str] = None
    content_type: Optional[str] = None
    predefined_acl: Optional[str] = None

    def __post_init__(self) -> None:
        _check_choice(self.predefined_acl, OBJECT_PREDEFINED_ACLS, "predefined_acl")


@dataclass(slots=True, frozen=True)
class CopyOptions:
    destination_acl: Optional[str] = None
    source_generation: Optional[int] = None

    def __post_init__(self) -> None:
        _check_choice(self.destination_acl, OBJECT_PREDEFINED_ACLS, "destination_acl")
        if self.source_generation is not None and self.source_generation < 0:
            raise ValueError("source_generation must be >= 0")


@dataclass(slots=True, frozen=True)
class ContentWriterOptions:
    content_type: Optional[str] = None


NewItemOptions = Union[NewBucketOptions, NewObjectOptions]


def options_for_new_item(path: VirtualPath) -> Optional[type]:
    """Return the option class `new_item` accepts for this kind of path."""
    if path.type is PathType.BUCKET:
        return NewBucketOptions
    if path.type is PathType.OBJECT:
        return NewObjectOptions
    return None
