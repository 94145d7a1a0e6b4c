"""Field definitions for Cloud Storage / Resource Manager API responses."""

from __future__ import annotations

OBJECT_FIELDS: str = (
    "name,"
    "bucket,"
    "contentType,"
    "generation,"
    "metageneration,"
    "size,"
    "md5Hash,"
    "crc32c,"
    "storageClass,"
    "mediaLink,"
    "timeCreated,"
    "updated,"
    "metadata"
)

OBJECT_LIST_FIELDS: str = f"nextPageToken,prefixes,items({OBJECT_FIELDS})"

BUCKET_FIELDS: str = (
    "id,"
    "name,"
    "projectNumber,"
    "location,"
    "storageClass,"
    "timeCreated,"
    "updated"
)

BUCKET_LIST_FIELDS: str = f"nextPageToken,items({BUCKET_FIELDS})"

PROJECT_LIST_FIELDS: str = "nextPageToken,projects(projectId,name,lifecycleState)"
