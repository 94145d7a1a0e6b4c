"""gcsdrive public API."""

from __future__ import annotations

import logging

from gcsdrive.auth import AuthClient, AuthInfo
from gcsdrive.config import DriveSettings
from gcsdrive.controller import GcsController
from gcsdrive.errors import (
    ApiError,
    AuthError,
    ConflictError,
    GcsDriveError,
    HttpErrorInfo,
    InvalidArgumentError,
    InvalidOperationError,
    NetworkError,
    NotFoundError,
    PermissionError,
    QuotaExceededError,
    RateLimitError,
    map_http_error,
)
from gcsdrive.models import (
    BucketInfo,
    DriveInfo,
    ErrorRecord,
    ItemEntry,
    ObjectInfo,
    ProgressRecord,
    ProjectInfo,
)
from gcsdrive.path import BucketPath, DrivePath, ObjectPath, PathType, VirtualPath, parse
from gcsdrive.provider import (
    ConfirmationPolicy,
    ConfirmChoice,
    ContentWriterOptions,
    CopyOptions,
    GoogleCloudStorageProvider,
    NewBucketOptions,
    NewObjectOptions,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # High-level
    "GoogleCloudStorageProvider",
    "GcsController",
    "DriveSettings",
    # Auth
    "AuthInfo",
    "AuthClient",
    # Paths
    "PathType",
    "DrivePath",
    "BucketPath",
    "ObjectPath",
    "VirtualPath",
    "parse",
    # Options / confirmation
    "NewBucketOptions",
    "NewObjectOptions",
    "CopyOptions",
    "ContentWriterOptions",
    "ConfirmationPolicy",
    "ConfirmChoice",
    # Models
    "DriveInfo",
    "BucketInfo",
    "ProjectInfo",
    "ObjectInfo",
    "ItemEntry",
    "ProgressRecord",
    "ErrorRecord",
    # Errors
    "GcsDriveError",
    "InvalidOperationError",
    "AuthError",
    "PermissionError",
    "InvalidArgumentError",
    "NotFoundError",
    "ConflictError",
    "RateLimitError",
    "QuotaExceededError",
    "NetworkError",
    "ApiError",
    "HttpErrorInfo",
    "map_http_error",
]
