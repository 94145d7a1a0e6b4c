"""Runtime settings for the gs: drive."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_SCOPES: tuple[str, ...] = ("https://www.googleapis.com/auth/cloud-platform",)

_PROJECT_ENV_VARS: tuple[str, ...] = (
    "GCSDRIVE_PROJECT",
    "CLOUDSDK_CORE_PROJECT",
    "GOOGLE_CLOUD_PROJECT",
)


@dataclass(slots=True, frozen=True)
class DriveSettings:
    """
    Settings shared by the provider, its caches and its controller.

    Attributes:
        drive_name: Name of the default drive.
        cache_lifetime_sec: Age after which bucket models and the bucket
            catalog are refreshed on next access.
        default_project: Project used for new buckets when none is given.
        scopes: OAuth scopes requested for the API services.
        max_retries: Retries for rate-limited/5xx metadata calls.
        initial_retry_delay_sec: First backoff delay (doubled per retry).
        delete_batch_size: Sub-requests per batch when emptying a bucket.
    """

    drive_name: str = "gs"
    cache_lifetime_sec: float = 60.0
    default_project: Optional[str] = None
    scopes: tuple[str, ...] = DEFAULT_SCOPES
    max_retries: int = 3
    initial_retry_delay_sec: float = 1.0
    delete_batch_size: int = 100

    def __post_init__(self) -> None:
        if not isinstance(self.drive_name, str) or not self.drive_name.strip():
            raise ValueError("DriveSettings.drive_name must be a non-empty string")
        if self.cache_lifetime_sec < 0:
            raise ValueError("DriveSettings.cache_lifetime_sec must be >= 0")
        if self.max_retries < 0:
            raise ValueError("DriveSettings.max_retries must be >= 0")
        # The JSON API rejects batches of more than 100 calls.
        if not 1 <= self.delete_batch_size <= 100:
            raise ValueError("DriveSettings.delete_batch_size must be within 1..100")
        if not self.scopes:
            raise ValueError("DriveSettings.scopes must not be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "DriveSettings":
        """
        Build settings from environment variables.

        Recognized variables:
            GCSDRIVE_DRIVE_NAME, GCSDRIVE_CACHE_LIFETIME_SEC, GCSDRIVE_SCOPES
            (comma-separated), GCSDRIVE_MAX_RETRIES, GCSDRIVE_DELETE_BATCH_SIZE,
            and for the default project GCSDRIVE_PROJECT, CLOUDSDK_CORE_PROJECT
            or GOOGLE_CLOUD_PROJECT (first non-empty wins).
        """
        env = os.environ if environ is None else environ
        kwargs: dict[str, object] = {}

        drive_name = env.get("GCSDRIVE_DRIVE_NAME", "").strip()
        if drive_name:
            kwargs["drive_name"] = drive_name

        lifetime = env.get("GCSDRIVE_CACHE_LIFETIME_SEC", "").strip()
        if lifetime:
            kwargs["cache_lifetime_sec"] = float(lifetime)

        scopes_raw = env.get("GCSDRIVE_SCOPES", "").strip()
        if scopes_raw:
            kwargs["scopes"] = tuple(s.strip() for s in scopes_raw.split(",") if s.strip())

        retries = env.get("GCSDRIVE_MAX_RETRIES", "").strip()
        if retries:
            kwargs["max_retries"] = int(retries)

        batch_size = env.get("GCSDRIVE_DELETE_BATCH_SIZE", "").strip()
        if batch_size:
            kwargs["delete_batch_size"] = int(batch_size)

        for name in _PROJECT_ENV_VARS:
            project = env.get(name, "").strip()
            if project:
                kwargs["default_project"] = project
                break

        return cls(**kwargs)  # type: ignore[arg-type]
