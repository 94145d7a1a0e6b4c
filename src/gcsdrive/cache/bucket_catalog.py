"""Drive-level catalog of the buckets visible across projects."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gcsdrive.models import BucketInfo


@dataclass(slots=True)
class BucketCatalog:
    """
    Buckets grouped by owning project, with a name index.

    Buckets learned outside of a project listing (e.g. a direct get) are
    filed under their project number, or "" when that is unknown too.
    """

    by_project: dict[str, list[BucketInfo]] = field(default_factory=dict)
    by_name: dict[str, BucketInfo] = field(default_factory=dict)

    def add(self, bucket: BucketInfo, project: Optional[str] = None) -> None:
        self.remove(bucket.name)
        key = project or bucket.project_number or ""
        self.by_project.setdefault(key, []).append(bucket)
        self.by_name[bucket.name] = bucket

    def remove(self, name: str) -> None:
        if self.by_name.pop(name, None) is None:
            return
        for project, buckets in list(self.by_project.items()):
            kept = [b for b in buckets if b.name != name]
            if kept:
                self.by_project[project] = kept
            else:
                del self.by_project[project]

    def get(self, name: str) -> Optional[BucketInfo]:
        return self.by_name.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.by_name

    def __len__(self) -> int:
        return len(self.by_name)

    def buckets(self) -> list[BucketInfo]:
        return list(self.by_name.values())
