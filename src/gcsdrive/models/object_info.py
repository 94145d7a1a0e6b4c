"""Data model for Cloud Storage objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class ObjectInfo:
    """
    Represents a Cloud Storage object known to the drive.

    Notes:
        - `name` is the full object key within `bucket`.
        - A name ending in "/" is a folder placeholder object.
        - Logical folders without a placeholder are represented by a
          synthetic record whose content_type is "Folder" and whose
          generation is None.
    """

    name: str
    bucket: str

    content_type: Optional[str] = None
    generation: Optional[int] = None
    metageneration: Optional[int] = None
    size: Optional[int] = None
    md5_hash: Optional[str] = None
    crc32c: Optional[str] = None
    storage_class: Optional[str] = None
    media_link: Optional[str] = None
    time_created: Optional[datetime] = None
    updated: Optional[datetime] = None
    metadata: dict[str, str] = field(default_factory=dict)


@dataclass(slots=True)
class ObjectPage:
    """One page of an objects.list response."""

    items: list[ObjectInfo] = field(default_factory=list)
    prefixes: list[str] = field(default_factory=list)
    next_page_token: Optional[str] = None
