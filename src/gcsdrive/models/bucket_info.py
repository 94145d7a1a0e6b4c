"""Data model for buckets and the projects that own them."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(slots=True)
class BucketInfo:
    """A Cloud Storage bucket (top-level container of the drive)."""

    name: str

    bucket_id: Optional[str] = None
    project_number: Optional[str] = None
    location: Optional[str] = None
    storage_class: Optional[str] = None
    time_created: Optional[datetime] = None
    updated: Optional[datetime] = None


@dataclass(slots=True, frozen=True)
class ProjectInfo:
    """A Cloud Resource Manager project."""

    project_id: str
    name: Optional[str] = None
    lifecycle_state: Optional[str] = None

    @property
    def is_active(self) -> bool:
        # Cloud Storage treats inactive projects as nonexistent.
        return self.lifecycle_state == "ACTIVE"
