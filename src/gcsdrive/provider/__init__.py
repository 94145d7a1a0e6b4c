"""Provider exports for gcsdrive."""

from __future__ import annotations

from .confirm import ConfirmationPolicy, ConfirmCallback, ConfirmChoice
from .content import GcsContentReader, GcsContentWriter
from .options import (
    ContentWriterOptions,
    CopyOptions,
    NewBucketOptions,
    NewItemOptions,
    NewObjectOptions,
    options_for_new_item,
)
from .storage_provider import DIRECTORY_ITEM_TYPE, GoogleCloudStorageProvider, ProgressCallback

__all__ = [
    "GoogleCloudStorageProvider",
    "DIRECTORY_ITEM_TYPE",
    "ProgressCallback",
    "ConfirmationPolicy",
    "ConfirmCallback",
    "ConfirmChoice",
    "GcsContentReader",
    "GcsContentWriter",
    "NewBucketOptions",
    "NewObjectOptions",
    "NewItemOptions",
    "CopyOptions",
    "ContentWriterOptions",
    "options_for_new_item",
]
