"""Per-bucket object model used to answer path queries without a round trip."""

from __future__ import annotations

import logging
import time
from typing import Optional, Protocol

from gcsdrive.errors import NotFoundError
from gcsdrive.models import ObjectInfo, ObjectPage
from gcsdrive.util.mime import FOLDER_CONTENT_TYPE

from .cache_item import Clock
from .snapshot import SEPARATOR, BucketSnapshot

logger = logging.getLogger(__name__)


class ObjectSource(Protocol):
    """The subset of GcsController a BucketModel needs."""

    def list_objects_page(
        self,
        bucket: str,
        *,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        page_token: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> ObjectPage: ...

    def find_object(self, bucket: str, name: str) -> Optional[ObjectInfo]: ...


class BucketModel:
    """
    Local description of the objects in one bucket.

    Real objects are treated as files and name prefixes as folders. A real
    object named "myFolder/" is both the prefix "myFolder" and the object
    "myFolder/".

    Only the first listing page is loaded. When the bucket has more objects
    than that (`is_truncated`), queries about keys the snapshot does not know
    fall back to live calls, and what they learn is cached.

    Every public query first reloads the snapshot if it is older than the
    cache lifetime.
    """

    def __init__(
        self,
        bucket: str,
        source: ObjectSource,
        *,
        lifetime_sec: float = 60.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self.bucket = bucket
        self._source = source
        self._lifetime_sec = lifetime_sec
        self._clock = clock
        self._snapshot = BucketSnapshot()
        self._loaded = False

    @property
    def snapshot(self) -> BucketSnapshot:
        """The current snapshot (without refreshing it)."""
        return self._snapshot

    @property
    def is_truncated(self) -> bool:
        return self._snapshot.is_truncated

    @property
    def is_stale(self) -> bool:
        if not self._loaded or self._snapshot.last_refreshed is None:
            return True
        return self._clock() - self._snapshot.last_refreshed > self._lifetime_sec

    def invalidate(self) -> None:
        """Force a reload on the next query."""
        self._loaded = False

    def update_model(self) -> None:
        """
        Reload the snapshot from the first listing page of the bucket.

        If the bucket has more than a single page of objects, only the first
        page is kept and the model is marked truncated.
        """
        page = self._source.list_objects_page(self.bucket)
        self._snapshot = BucketSnapshot.from_page(page, refreshed_at=self._clock())
        self._loaded = True
        logger.debug(
            "Loaded model of bucket %s: %d objects, %d prefixes, truncated=%s",
            self.bucket,
            len(self._snapshot.objects_by_name),
            len(self._snapshot.prefix_has_children),
            self._snapshot.is_truncated,
        )

    # ----------------------------
    # Queries
    # ----------------------------
    def object_exists(self, object_name: str) -> bool:
        """
        Check if an object or folder exists.

        May make a single-object call if the model is truncated and knows
        nothing about the name.
        """
        snap = self._fresh_snapshot()
        if snap.knows_object(object_name):
            return snap.get_object(object_name) is not None
        if snap.has_prefix(object_name.rstrip(SEPARATOR)):
            return True
        if not snap.is_truncated:
            return False
        return self._lookup(object_name) is not None

    def is_container(self, object_name: str) -> bool:
        """
        True if the name is a placeholder object ending in "/" or a prefix of
        other objects.
        """
        snap = self._fresh_snapshot()
        folder = object_name.rstrip(SEPARATOR)
        if snap.has_prefix(folder):
            return True
        if not snap.is_truncated:
            return False

        logger.debug("Live container check for gs://%s/%s", self.bucket, folder)
        page = self._source.list_objects_page(self.bucket, prefix=folder + SEPARATOR, max_results=1)
        return bool(page.items or page.prefixes)

    def has_children(self, object_name: Optional[str]) -> bool:
        """
        True if the folder has anything below it. An empty name asks about
        the bucket itself; for a truncated model that answer comes from the
        first page only, which is enough to know the bucket is not empty.
        """
        snap = self._fresh_snapshot()
        if not object_name:
            return snap.real_object_count() > 0

        folder = object_name.rstrip(SEPARATOR)
        if snap.is_truncated and not snap.has_prefix(folder):
            logger.debug("Live children check for gs://%s/%s", self.bucket, folder)
            placeholder = folder + SEPARATOR
            page = self._source.list_objects_page(self.bucket, prefix=placeholder, max_results=2)
            return any(item.name != placeholder for item in page.items)

        return snap.prefix_children_flag(folder)

    def get_object(self, object_name: str) -> ObjectInfo:
        """
        Return the record of an object.

        For a folder this is its placeholder object when one exists, else a
        synthetic record with content type "Folder".

        Raises:
            NotFoundError: if the object does not exist.
        """
        snap = self._fresh_snapshot()
        if snap.knows_object(object_name):
            info = snap.get_object(object_name)
            if info is None:
                raise NotFoundError(
                    f"Object not found: gs://{self.bucket}/{object_name}",
                    details={"status_code": 404, "bucket": self.bucket, "object": object_name},
                )
            return info

        folder = object_name.rstrip(SEPARATOR)
        if folder and snap.has_prefix(folder):
            placeholder = snap.get_object(folder + SEPARATOR)
            if placeholder is not None:
                return placeholder
            return ObjectInfo(
                name=folder,
                bucket=self.bucket,
                content_type=FOLDER_CONTENT_TYPE,
            )

        info = self._lookup(object_name)
        if info is None:
            raise NotFoundError(
                f"Object not found: gs://{self.bucket}/{object_name}",
                details={"status_code": 404, "bucket": self.bucket, "object": object_name},
            )
        return info

    def add_object(self, info: ObjectInfo) -> None:
        """Add or replace an object record observed by some other listing."""
        self._fresh_snapshot().put_object(info)

    def is_real(self, object_name: str) -> bool:
        """
        True only if an actual object has this name. A folder may "exist"
        without being real when it is only a prefix of other objects.
        """
        snap = self._fresh_snapshot()
        if snap.knows_object(object_name):
            return snap.get_object(object_name) is not None
        if not snap.is_truncated:
            return False
        return self._lookup(object_name) is not None

    # ----------------------------
    # Internals
    # ----------------------------
    def _fresh_snapshot(self) -> BucketSnapshot:
        if self.is_stale:
            self.update_model()
        return self._snapshot

    def _lookup(self, object_name: str) -> Optional[ObjectInfo]:
        """Fetch one object and cache the outcome, including "not found"."""
        logger.debug("Live lookup of gs://%s/%s", self.bucket, object_name)
        info = self._source.find_object(self.bucket, object_name)
        if info is None:
            self._snapshot.mark_missing(object_name)
        else:
            self._snapshot.put_object(info)
        return info
