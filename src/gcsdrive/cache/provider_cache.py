"""Caches owned by one provider instance."""

from __future__ import annotations

import logging
import time
from typing import Optional

from .bucket_catalog import BucketCatalog
from .bucket_model import BucketModel, ObjectSource
from .cache_item import CacheItem, Clock

logger = logging.getLogger(__name__)


class ProviderCache:
    """
    Bucket models keyed by bucket name, plus the drive-level bucket catalog.

    Not thread-safe: a provider and its cache serve one command at a time.
    """

    def __init__(
        self,
        source: ObjectSource,
        *,
        lifetime_sec: float = 60.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self._source = source
        self._lifetime_sec = lifetime_sec
        self._clock = clock
        self._bucket_models: dict[str, BucketModel] = {}
        self.buckets: CacheItem[BucketCatalog] = CacheItem(
            lifetime_sec=lifetime_sec,
            clock=clock,
        )

    def bucket_model(self, bucket: str) -> BucketModel:
        """Return the model of a bucket, creating it lazily."""
        model = self._bucket_models.get(bucket)
        if model is None:
            model = BucketModel(
                bucket,
                self._source,
                lifetime_sec=self._lifetime_sec,
                clock=self._clock,
            )
            self._bucket_models[bucket] = model
        return model

    def invalidate_bucket_models(self) -> None:
        """Drop every bucket model; called after any mutation in the drive."""
        if self._bucket_models:
            logger.debug("Invalidating %d bucket models", len(self._bucket_models))
        self._bucket_models.clear()

    def known_catalog(self) -> Optional[BucketCatalog]:
        """
        The last bucket catalog, without refreshing it.

        Returns None if the catalog was never populated; callers then go to
        the service for the single bucket they need instead of paying for a
        cross-project listing.
        """
        return self.buckets.last_value_without_update()

    def clear(self) -> None:
        self.buckets.reset()
        self._bucket_models.clear()
