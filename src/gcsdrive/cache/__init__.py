"""Cache exports for gcsdrive."""

from __future__ import annotations

from .bucket_catalog import BucketCatalog
from .bucket_model import BucketModel, ObjectSource
from .cache_item import CacheItem, Clock
from .provider_cache import ProviderCache
from .snapshot import BucketSnapshot

__all__ = [
    "BucketCatalog",
    "BucketModel",
    "BucketSnapshot",
    "CacheItem",
    "Clock",
    "ObjectSource",
    "ProviderCache",
]
