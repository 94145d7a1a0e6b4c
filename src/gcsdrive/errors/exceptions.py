"""Exception hierarchy and HTTP error mapping for gcsdrive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


class GcsDriveError(Exception):
    """
    Base exception for gcsdrive.

    Attributes:
        details: Structured context such as the HTTP status, the JSON API
            error reason, or the bucket/object involved.
        cause: The library exception this error was translated from, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.details = details or {}
        self.cause = cause

    @property
    def status_code(self) -> Optional[int]:
        """HTTP status of the failed API call, if the error came from one."""
        value = self.details.get("status_code")
        return value if isinstance(value, int) else None


class InvalidOperationError(GcsDriveError):
    """The verb does not apply to this kind of path (e.g. removing the drive root)."""


class AuthError(GcsDriveError):
    """Credentials could not be loaded, refreshed or obtained (or HTTP 401)."""


class PermissionError(GcsDriveError):
    """The caller may not access the project, bucket or object (HTTP 403)."""


class InvalidArgumentError(GcsDriveError):
    """Bad bucket/object name, option or request (HTTP 400)."""


class NotFoundError(GcsDriveError):
    """The bucket or object does not exist (HTTP 404)."""


class ConflictError(GcsDriveError):
    """
    The resource is in a conflicting state: a bucket that is not empty or
    whose name is taken (HTTP 409), or a failed generation precondition
    (HTTP 412).
    """


class RateLimitError(GcsDriveError):
    """Too many requests (HTTP 429, or 403 with a rate-limit reason)."""


class QuotaExceededError(GcsDriveError):
    """Project quota or billing limit reached (HTTP 403 with a quota reason)."""


class NetworkError(GcsDriveError):
    """The request never got an HTTP response (connection reset, timeout)."""


class ApiError(GcsDriveError):
    """Any other failure reported by the service (5xx and unmapped statuses)."""


@dataclass(frozen=True)
class HttpErrorInfo:
    """Status and JSON API error fields extracted from an HttpError."""

    status_code: int
    reason: str | None = None
    message: str | None = None
    details: dict[str, Any] | None = None


_STATUS_ERRORS: dict[int, type[GcsDriveError]] = {
    400: InvalidArgumentError,
    401: AuthError,
    403: PermissionError,
    404: NotFoundError,
    409: ConflictError,
    412: ConflictError,
    429: RateLimitError,
}

_RATE_LIMIT_REASONS: frozenset[str] = frozenset(
    {"ratelimitexceeded", "userratelimitexceeded"}
)

_QUOTA_REASONS: frozenset[str] = frozenset(
    {"quotaexceeded", "dailylimitexceeded", "usagelimits", "accountdisabled"}
)


def _forbidden_error(reason: str | None) -> type[GcsDriveError]:
    key = (reason or "").lower()
    if key in _RATE_LIMIT_REASONS:
        return RateLimitError
    if key in _QUOTA_REASONS or "quota" in key:
        return QuotaExceededError
    return PermissionError


def map_http_error(
    info: HttpErrorInfo,
    *,
    cause: Optional[BaseException] = None,
) -> GcsDriveError:
    """
    Translate a Cloud Storage / Resource Manager HTTP error.

    400 InvalidArgument, 401 Auth, 403 Permission (or RateLimit / QuotaExceeded
    depending on the error reason), 404 NotFound, 409 and 412 Conflict,
    429 RateLimit, anything else ApiError. The status and reason are kept in
    `details`.
    """
    details: dict[str, Any] = {"status_code": info.status_code, "reason": info.reason}
    if info.details:
        details.update(info.details)

    if info.status_code == 403:
        error_cls = _forbidden_error(info.reason)
    else:
        error_cls = _STATUS_ERRORS.get(info.status_code, ApiError)

    message = info.message or f"HTTP error {info.status_code}"
    return error_cls(message, details=details, cause=cause)
