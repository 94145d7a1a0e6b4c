"""Cloud Storage / Resource Manager API controller (internal use only)."""

from __future__ import annotations

import io
import json
import logging
import time
from dataclasses import dataclass
from typing import Any, BinaryIO, Callable, Iterator, Optional, Sequence, TypeVar, Union

from gcsdrive.auth import AuthClient, AuthInfo
from gcsdrive.config import DriveSettings
from gcsdrive.errors import (
    ApiError,
    GcsDriveError,
    HttpErrorInfo,
    NetworkError,
    NotFoundError,
    RateLimitError,
    map_http_error,
)
from gcsdrive.models import BucketInfo, ObjectInfo, ObjectPage, ProjectInfo
from gcsdrive.util.time import parse_optional_rfc3339

from .fields import (
    BUCKET_FIELDS,
    BUCKET_LIST_FIELDS,
    OBJECT_FIELDS,
    OBJECT_LIST_FIELDS,
    PROJECT_LIST_FIELDS,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

DeleteCallback = Callable[[str, Optional[GcsDriveError]], None]


@dataclass(frozen=True)
class _RetryPolicy:
    max_retries: int = 3
    initial_delay_sec: float = 1.0


class GcsController:
    """
    Cloud Storage API controller (internal only).

    Notes:
        - The discovery `service` objects are NOT exposed.
        - Metadata calls are retried on 429/5xx/network errors; uploads and
          downloads are not retried and fail immediately.
    """

    def __init__(
        self,
        auth_info: AuthInfo,
        *,
        settings: Optional[DriveSettings] = None,
    ) -> None:
        self._settings = settings or DriveSettings()
        self._retry_policy = _RetryPolicy(
            max_retries=self._settings.max_retries,
            initial_delay_sec=self._settings.initial_retry_delay_sec,
        )

        client = AuthClient(auth_info)
        scopes = list(self._settings.scopes)
        self._storage = client.build_service("storage", "v1", scopes, ensure_valid=True)
        self._resource = client.build_service(
            "cloudresourcemanager", "v1", scopes, ensure_valid=True
        )
        self._detected_project = client.detected_project

    @classmethod
    def from_service(
        cls,
        storage_service: Any,
        resource_service: Any = None,
        *,
        settings: Optional[DriveSettings] = None,
    ) -> "GcsController":
        """Create controller from pre-built services (useful for tests)."""
        obj = cls.__new__(cls)
        obj._settings = settings or DriveSettings()
        obj._retry_policy = _RetryPolicy(
            max_retries=obj._settings.max_retries,
            initial_delay_sec=obj._settings.initial_retry_delay_sec,
        )
        obj._storage = storage_service
        obj._resource = resource_service
        obj._detected_project = None
        return obj

    @property
    def default_project(self) -> Optional[str]:
        """Configured default project, else the one found by ADC."""
        return self._settings.default_project or self._detected_project

    # ----------------------------
    # Projects
    # ----------------------------
    def list_projects(self, *, active_only: bool = True) -> list[ProjectInfo]:
        if self._resource is None:
            raise ApiError("Cloud Resource Manager service is not configured")

        projects: list[ProjectInfo] = []
        page_token: Optional[str] = None
        while True:
            req = self._resource.projects().list(
                pageToken=page_token,
                fields=PROJECT_LIST_FIELDS,
            )
            data = self._execute(req.execute)
            for p in data.get("projects", []) or []:
                info = _project_dict_to_info(p)
                if active_only and not info.is_active:
                    continue
                projects.append(info)

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return projects

    # ----------------------------
    # Buckets
    # ----------------------------
    def get_bucket(self, bucket: str) -> BucketInfo:
        req = self._storage.buckets().get(bucket=bucket, fields=BUCKET_FIELDS)
        data = self._execute(req.execute)
        return _bucket_dict_to_info(data)

    def find_bucket(self, bucket: str) -> Optional[BucketInfo]:
        """Return the bucket, or None if it does not exist."""
        try:
            return self.get_bucket(bucket)
        except NotFoundError:
            return None

    def list_buckets(self, project: str) -> list[BucketInfo]:
        buckets: list[BucketInfo] = []
        page_token: Optional[str] = None
        while True:
            req = self._storage.buckets().list(
                project=project,
                pageToken=page_token,
                fields=BUCKET_LIST_FIELDS,
            )
            data = self._execute(req.execute)
            for b in data.get("items", []) or []:
                buckets.append(_bucket_dict_to_info(b))

            page_token = data.get("nextPageToken")
            if not page_token:
                break

        return buckets

    def insert_bucket(
        self,
        project: str,
        bucket: str,
        *,
        location: Optional[str] = None,
        storage_class: Optional[str] = None,
        predefined_acl: Optional[str] = None,
        predefined_default_object_acl: Optional[str] = None,
    ) -> BucketInfo:
        body: dict[str, Any] = {"name": bucket}
        if location is not None:
            body["location"] = location
        if storage_class is not None:
            body["storageClass"] = storage_class

        req = self._storage.buckets().insert(
            project=project,
            body=body,
            predefinedAcl=predefined_acl,
            predefinedDefaultObjectAcl=predefined_default_object_acl,
            fields=BUCKET_FIELDS,
        )
        data = self._execute(req.execute)
        return _bucket_dict_to_info(data)

    def delete_bucket(self, bucket: str) -> None:
        req = self._storage.buckets().delete(bucket=bucket)
        self._execute(req.execute)

    # ----------------------------
    # Objects
    # ----------------------------
    def get_object(self, bucket: str, name: str) -> ObjectInfo:
        req = self._storage.objects().get(
            bucket=bucket,
            object=name,
            projection="full",
            fields=OBJECT_FIELDS,
        )
        data = self._execute(req.execute)
        return _object_dict_to_info(data, bucket=bucket)

    def find_object(self, bucket: str, name: str) -> Optional[ObjectInfo]:
        """
        Return the object, or None if it does not exist.

        Any failure other than "not found" propagates.
        """
        try:
            return self.get_object(bucket, name)
        except NotFoundError:
            return None

    def list_objects_page(
        self,
        bucket: str,
        *,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        page_token: Optional[str] = None,
        max_results: Optional[int] = None,
    ) -> ObjectPage:
        req = self._storage.objects().list(
            bucket=bucket,
            prefix=prefix or None,
            delimiter=delimiter,
            pageToken=page_token,
            maxResults=max_results,
            projection="full",
            fields=OBJECT_LIST_FIELDS,
        )
        data = self._execute(req.execute)
        items = [_object_dict_to_info(o, bucket=bucket) for o in data.get("items", []) or []]
        prefixes = [p for p in data.get("prefixes", []) or [] if isinstance(p, str)]
        next_token = data.get("nextPageToken")
        return ObjectPage(
            items=items,
            prefixes=prefixes,
            next_page_token=next_token if isinstance(next_token, str) and next_token else None,
        )

    def iter_object_pages(
        self,
        bucket: str,
        *,
        prefix: Optional[str] = None,
        delimiter: Optional[str] = None,
        all_pages: bool = True,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> Iterator[ObjectPage]:
        """
        Yield listing pages until exhausted.

        `should_stop` is checked between pages; when it returns True the
        iteration ends early.
        """
        page_token: Optional[str] = None
        while True:
            page = self.list_objects_page(
                bucket,
                prefix=prefix,
                delimiter=delimiter,
                page_token=page_token,
            )
            yield page

            page_token = page.next_page_token
            if not all_pages or not page_token:
                break
            if should_stop is not None and should_stop():
                logger.debug("Listing of %s stopped before page token %s", bucket, page_token)
                break

    def upload_object(
        self,
        bucket: str,
        name: str,
        data: Union[bytes, BinaryIO],
        *,
        content_type: str,
        predefined_acl: Optional[str] = None,
    ) -> ObjectInfo:
        try:
            from googleapiclient.http import MediaIoBaseUpload
        except Exception as exc:  # pragma: no cover
            raise ApiError("google-api-python-client is not available", cause=exc) from exc

        stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
        media = MediaIoBaseUpload(stream, mimetype=content_type, resumable=False)
        return self._insert_object(bucket, name, media, content_type, predefined_acl)

    def upload_file(
        self,
        bucket: str,
        name: str,
        local_path: str,
        *,
        content_type: str,
        predefined_acl: Optional[str] = None,
    ) -> ObjectInfo:
        try:
            from googleapiclient.http import MediaFileUpload
        except Exception as exc:  # pragma: no cover
            raise ApiError("google-api-python-client is not available", cause=exc) from exc

        media = MediaFileUpload(local_path, mimetype=content_type, resumable=True)
        return self._insert_object(bucket, name, media, content_type, predefined_acl)

    def download_object(self, bucket: str, name: str) -> bytes:
        try:
            from googleapiclient.http import MediaIoBaseDownload
        except Exception as exc:  # pragma: no cover
            raise ApiError("google-api-python-client is not available", cause=exc) from exc

        req = self._storage.objects().get_media(bucket=bucket, object=name)
        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, req)
        done = False
        while not done:
            _, done = self._execute(downloader.next_chunk, retry=False)
        return buffer.getvalue()

    def copy_object(
        self,
        source_bucket: str,
        source_name: str,
        destination_bucket: str,
        destination_name: str,
        *,
        source_generation: Optional[int] = None,
        destination_predefined_acl: Optional[str] = None,
    ) -> ObjectInfo:
        req = self._storage.objects().copy(
            sourceBucket=source_bucket,
            sourceObject=source_name,
            destinationBucket=destination_bucket,
            destinationObject=destination_name,
            body={},
            sourceGeneration=source_generation,
            destinationPredefinedAcl=destination_predefined_acl,
            projection="full",
            fields=OBJECT_FIELDS,
        )
        data = self._execute(req.execute)
        return _object_dict_to_info(data, bucket=destination_bucket)

    def delete_object(self, bucket: str, name: str) -> None:
        req = self._storage.objects().delete(bucket=bucket, object=name)
        self._execute(req.execute)

    def delete_objects(
        self,
        bucket: str,
        names: Sequence[str],
        *,
        on_complete: Optional[DeleteCallback] = None,
    ) -> dict[str, GcsDriveError]:
        """
        Delete many objects with batched requests.

        Each delete is an independent sub-request: one failing does not
        cancel the others. `on_complete(name, error)` is invoked as each
        sub-request finishes, in completion order.
        A batch that fails as a whole marks its unfinished deletes as failed
        with that error and the remaining batches still run.

        Returns:
            Mapping of object name to the error it failed with.
        """
        failures: dict[str, GcsDriveError] = {}
        if not names:
            return failures

        completed: set[str] = set()

        def _finish(name: str, error: Optional[GcsDriveError]) -> None:
            completed.add(name)
            if error is not None:
                failures[name] = error
                logger.warning("Failed to delete gs://%s/%s: %s", bucket, name, error)
            if on_complete is not None:
                on_complete(name, error)

        def _callback(request_id: str, response: Any, exception: Optional[Exception]) -> None:
            _finish(request_id, None if exception is None else self._map_exception(exception))

        batch_size = self._settings.delete_batch_size
        for start in range(0, len(names), batch_size):
            batch = self._storage.new_batch_http_request(callback=_callback)
            batch_names = names[start:start + batch_size]
            for name in batch_names:
                batch.add(
                    self._storage.objects().delete(bucket=bucket, object=name),
                    request_id=name,
                )
            # Callbacks must fire once per delete, so batches run exactly once.
            try:
                self._execute(batch.execute, retry=False)
            except GcsDriveError as exc:
                logger.warning("Delete batch for gs://%s failed: %s", bucket, exc)
                for name in batch_names:
                    if name not in completed:
                        _finish(name, exc)

        return failures

    # ----------------------------
    # Internals
    # ----------------------------
    def _insert_object(
        self,
        bucket: str,
        name: str,
        media: Any,
        content_type: str,
        predefined_acl: Optional[str],
    ) -> ObjectInfo:
        body = {"name": name, "bucket": bucket, "contentType": content_type}
        req = self._storage.objects().insert(
            bucket=bucket,
            body=body,
            media_body=media,
            predefinedAcl=predefined_acl,
            projection="full",
            fields=OBJECT_FIELDS,
        )
        data = self._execute(req.execute, retry=False)
        return _object_dict_to_info(data, bucket=bucket)

    def _execute(self, func: Callable[[], T], *, retry: bool = True) -> T:
        delay = self._retry_policy.initial_delay_sec
        max_retries = self._retry_policy.max_retries if retry else 0
        for attempt in range(max_retries + 1):
            try:
                return func()
            except Exception as exc:
                mapped = self._map_exception(exc)
                if self._should_retry(mapped) and attempt < max_retries:
                    logger.debug("Retrying after %s (attempt %d)", mapped, attempt + 1)
                    time.sleep(delay)
                    delay *= 2
                    continue
                raise mapped from exc

        raise ApiError("Unexpected retry loop termination")

    def _should_retry(self, exc: Exception) -> bool:
        if isinstance(exc, RateLimitError):
            return True
        if isinstance(exc, NetworkError):
            return True
        if isinstance(exc, ApiError):
            status_code = getattr(exc, "details", {}).get("status_code")
            return isinstance(status_code, int) and 500 <= status_code <= 599
        return False

    def _map_exception(self, exc: Exception) -> GcsDriveError:
        if isinstance(exc, GcsDriveError):
            return exc

        try:
            from googleapiclient.errors import HttpError
        except Exception:  # pragma: no cover
            HttpError = None  # type: ignore[assignment]

        if HttpError is not None and isinstance(exc, HttpError):
            info = _http_error_to_info(exc)
            return map_http_error(info, cause=exc)

        if isinstance(exc, (OSError, TimeoutError)):
            return NetworkError("Network error", cause=exc)

        return ApiError("Cloud Storage API error", cause=exc)


def _to_int(value: Any) -> Optional[int]:
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.isdigit():
        return int(value)
    return None


def _to_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _object_dict_to_info(data: dict[str, Any], *, bucket: str) -> ObjectInfo:
    metadata = data.get("metadata")
    return ObjectInfo(
        name=_to_str(data.get("name")) or "",
        bucket=_to_str(data.get("bucket")) or bucket,
        content_type=_to_str(data.get("contentType")),
        generation=_to_int(data.get("generation")),
        metageneration=_to_int(data.get("metageneration")),
        size=_to_int(data.get("size")),
        md5_hash=_to_str(data.get("md5Hash")),
        crc32c=_to_str(data.get("crc32c")),
        storage_class=_to_str(data.get("storageClass")),
        media_link=_to_str(data.get("mediaLink")),
        time_created=parse_optional_rfc3339(data.get("timeCreated")),
        updated=parse_optional_rfc3339(data.get("updated")),
        metadata=dict(metadata) if isinstance(metadata, dict) else {},
    )


def _bucket_dict_to_info(data: dict[str, Any]) -> BucketInfo:
    return BucketInfo(
        name=_to_str(data.get("name")) or "",
        bucket_id=_to_str(data.get("id")),
        project_number=_to_str(data.get("projectNumber")),
        location=_to_str(data.get("location")),
        storage_class=_to_str(data.get("storageClass")),
        time_created=parse_optional_rfc3339(data.get("timeCreated")),
        updated=parse_optional_rfc3339(data.get("updated")),
    )


def _project_dict_to_info(data: dict[str, Any]) -> ProjectInfo:
    return ProjectInfo(
        project_id=_to_str(data.get("projectId")) or "",
        name=_to_str(data.get("name")),
        lifecycle_state=_to_str(data.get("lifecycleState")),
    )


def _http_error_to_info(exc: Any) -> HttpErrorInfo:
    status_code = getattr(getattr(exc, "resp", None), "status", None)
    reason = getattr(getattr(exc, "resp", None), "reason", None)

    message = None
    details: dict[str, Any] = {}

    content = getattr(exc, "content", None)
    if isinstance(content, (bytes, bytearray)):
        try:
            payload = json.loads(content.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            payload = None
        err = payload.get("error", {}) if isinstance(payload, dict) else {}
        if isinstance(err, dict):
            message = err.get("message") or None
            errors = err.get("errors") or []
            if errors and isinstance(errors, list) and isinstance(errors[0], dict):
                details["domain"] = errors[0].get("domain")
                details["reason_detail"] = errors[0].get("reason")
                if isinstance(errors[0].get("reason"), str):
                    reason = errors[0]["reason"]

    if not isinstance(status_code, int):
        status_code = _to_int(status_code) or 0

    return HttpErrorInfo(
        status_code=status_code,
        reason=reason if isinstance(reason, str) else None,
        message=message if isinstance(message, str) else None,
        details=details or None,
    )
