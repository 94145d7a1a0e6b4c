"""Snapshot of the first listing page of a bucket."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from gcsdrive.models import ObjectInfo, ObjectPage

SEPARATOR = "/"


@dataclass(slots=True)
class BucketSnapshot:
    """
    In-memory view of a bucket's objects and logical folders.

    Indexes:
        - objects_by_name: object key -> record; a None value is a cached
          "does not exist" marker learned from a live lookup.
        - prefix_has_children: folder prefix (no trailing "/") -> whether the
          folder has anything below it.

    When `is_truncated` is False the snapshot is a complete view of the
    bucket as of `last_refreshed`.
    """

    objects_by_name: dict[str, Optional[ObjectInfo]] = field(default_factory=dict)
    prefix_has_children: dict[str, bool] = field(default_factory=dict)
    is_truncated: bool = False
    last_refreshed: Optional[float] = field(default=None, compare=False)

    @classmethod
    def from_page(cls, page: ObjectPage, *, refreshed_at: Optional[float] = None) -> BucketSnapshot:
        snap = cls(
            is_truncated=page.next_page_token is not None,
            last_refreshed=refreshed_at,
        )
        for info in page.items:
            snap.record_listed_object(info)
        return snap

    # ----------------------------
    # Query helpers
    # ----------------------------
    def knows_object(self, name: str) -> bool:
        """True if `name` has a cached entry, positive or negative."""
        return name in self.objects_by_name

    def get_object(self, name: str) -> Optional[ObjectInfo]:
        return self.objects_by_name.get(name)

    def has_prefix(self, prefix: str) -> bool:
        return prefix in self.prefix_has_children

    def prefix_children_flag(self, prefix: str) -> bool:
        return self.prefix_has_children.get(prefix, False)

    def real_object_count(self) -> int:
        return sum(1 for info in self.objects_by_name.values() if info is not None)

    # ----------------------------
    # Mutation helpers
    # ----------------------------
    def put_object(self, info: ObjectInfo) -> None:
        self.objects_by_name[info.name] = info

    def mark_missing(self, name: str) -> None:
        self.objects_by_name[name] = None

    def record_listed_object(self, info: ObjectInfo) -> None:
        """
        Record an object from the bucket listing and its ancestor folders.

        For "a/b/c.txt" this records "a/b" and "a", both with children. For a
        placeholder "a/b/" the innermost prefix "a/b" is recorded without
        children (unless something else already gave it some). The walk stops
        at the first prefix that is already known, OR-ing in the flag.
        """
        name = info.name
        self.objects_by_name[name] = info

        prefix = name.rstrip(SEPARATOR)
        last_separator = name.rfind(SEPARATOR)
        # "testing/blah.txt" gives "testing" a child; for "testing/" the
        # separator is the last character and nothing is known yet.
        has_children = 0 < last_separator < len(prefix) - 1
        while last_separator > 0:
            prefix = prefix[:last_separator]
            if prefix in self.prefix_has_children:
                self.prefix_has_children[prefix] = has_children or self.prefix_has_children[prefix]
                break
            self.prefix_has_children[prefix] = has_children
            has_children = True
            last_separator = prefix.rfind(SEPARATOR)
