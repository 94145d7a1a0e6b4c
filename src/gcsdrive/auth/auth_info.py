"""Authentication information for gcsdrive."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

SUPPORTED_KINDS: tuple[str, ...] = ("oauth", "adc")


@dataclass(slots=True, frozen=True)
class AuthInfo:
    """
    Authentication information.

    Supported kinds:
        kind = "oauth"
            data must include:
                - client_secrets_file
                - token_file
        kind = "adc"
            Application Default Credentials (gcloud auth application-default
            login, GOOGLE_APPLICATION_CREDENTIALS, metadata server).
            data may include:
                - quota_project
    """

    kind: str
    data: dict[str, Any]

    def __post_init__(self) -> None:
        if self.kind not in SUPPORTED_KINDS:
            raise ValueError(f"AuthInfo.kind must be one of {SUPPORTED_KINDS}")

        if not isinstance(self.data, dict):
            raise TypeError("AuthInfo.data must be a dict")

        if self.kind == "oauth":
            for key in ("client_secrets_file", "token_file"):
                value = self.data.get(key)
                if not isinstance(value, str) or not value.strip():
                    raise ValueError(f"AuthInfo.data['{key}'] must be a non-empty string")

    @classmethod
    def application_default(cls, quota_project: Optional[str] = None) -> "AuthInfo":
        data: dict[str, Any] = {}
        if quota_project:
            data["quota_project"] = quota_project
        return cls(kind="adc", data=data)

    @property
    def client_secrets_file(self) -> str:
        """Path to OAuth client secrets JSON."""
        return str(self.data["client_secrets_file"])

    @property
    def token_file(self) -> str:
        """Path to OAuth token JSON (authorized user)."""
        return str(self.data["token_file"])

    @property
    def quota_project(self) -> Optional[str]:
        value = self.data.get("quota_project")
        return str(value) if value else None
