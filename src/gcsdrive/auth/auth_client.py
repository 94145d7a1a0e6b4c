"""Credential and API service construction for gcsdrive."""

from __future__ import annotations

import os
from typing import Any, Optional, Sequence

from gcsdrive.errors import AuthError, InvalidArgumentError

from .auth_info import AuthInfo


class AuthClient:
    """Create and manage credentials and Google API service objects."""

    def __init__(self, auth_info: AuthInfo) -> None:
        self._auth_info = auth_info
        self._detected_project: Optional[str] = None

    @property
    def detected_project(self) -> Optional[str]:
        """Project reported by Application Default Credentials, if any."""
        return self._detected_project

    def get_credentials(self, scopes: Sequence[str], ensure_valid: bool = True):
        """
        Return credentials for the given scopes.

        Args:
            scopes: OAuth scopes.
            ensure_valid: If True, refresh OAuth credentials when possible.

        Raises:
            AuthError: on load/refresh/flow failures.
            InvalidArgumentError: if scopes is invalid.
        """
        if not scopes or not all(isinstance(s, str) and s.strip() for s in scopes):
            raise InvalidArgumentError("scopes must be a non-empty sequence of strings")

        if self._auth_info.kind == "adc":
            return self._get_default_credentials(scopes)
        return self._get_oauth_credentials(scopes, ensure_valid=ensure_valid)

    def build_service(
        self,
        api: str,
        version: str,
        scopes: Sequence[str],
        ensure_valid: bool = True,
    ) -> Any:
        """
        Build a discovery-based API service resource (e.g. "storage", "v1").

        Returns:
            googleapiclient.discovery.Resource
        """
        try:
            from googleapiclient.discovery import build
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "google-api-python-client is not available",
                details={"hint": "Install google-api-python-client"},
                cause=exc,
            ) from exc

        creds = self.get_credentials(scopes=scopes, ensure_valid=ensure_valid)
        try:
            return build(api, version, credentials=creds, cache_discovery=False)
        except Exception as exc:
            raise AuthError(
                f"Failed to build {api} {version} service",
                details={"api": api, "version": version},
                cause=exc,
            ) from exc

    # ----------------------------
    # Internals
    # ----------------------------
    def _get_default_credentials(self, scopes: Sequence[str]):
        try:
            import google.auth
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth"},
                cause=exc,
            ) from exc

        try:
            creds, project = google.auth.default(
                scopes=list(scopes),
                quota_project_id=self._auth_info.quota_project,
            )
        except Exception as exc:
            raise AuthError(
                "Application Default Credentials are not available",
                details={"hint": "Run `gcloud auth application-default login`"},
                cause=exc,
            ) from exc

        self._detected_project = project
        return creds

    def _get_oauth_credentials(self, scopes: Sequence[str], *, ensure_valid: bool):
        try:
            from google.auth.transport.requests import Request
            from google.oauth2.credentials import Credentials
            from google_auth_oauthlib.flow import InstalledAppFlow
        except Exception as exc:  # pragma: no cover
            raise AuthError(
                "Google auth libraries are not available",
                details={"hint": "Install google-auth and google-auth-oauthlib"},
                cause=exc,
            ) from exc

        token_file = self._auth_info.token_file
        creds = None

        if os.path.exists(token_file):
            try:
                creds = Credentials.from_authorized_user_file(
                    token_file,
                    scopes=list(scopes),
                )
            except Exception as exc:
                raise AuthError(
                    "Failed to load token_file",
                    details={"token_file": token_file},
                    cause=exc,
                ) from exc

            if not ensure_valid:
                return creds

            if not creds.valid and creds.refresh_token:
                try:
                    creds.refresh(Request())
                    self._save_credentials(creds)
                except Exception as exc:
                    raise AuthError(
                        "Failed to refresh OAuth credentials",
                        details={"token_file": token_file},
                        cause=exc,
                    ) from exc

            if creds.valid:
                return creds

        # No token, or token could not be refreshed: run the installed-app flow.
        client_secrets = self._auth_info.client_secrets_file
        try:
            flow = InstalledAppFlow.from_client_secrets_file(
                client_secrets,
                scopes=list(scopes),
            )
            creds = flow.run_local_server(port=0)
            self._save_credentials(creds)
            return creds
        except Exception as exc:
            raise AuthError(
                "OAuth authorization flow failed",
                details={
                    "client_secrets_file": client_secrets,
                    "token_file": token_file,
                },
                cause=exc,
            ) from exc

    def _save_credentials(self, creds) -> None:
        token_file = self._auth_info.token_file
        token_dir = os.path.dirname(token_file)
        if token_dir:
            os.makedirs(token_dir, exist_ok=True)

        try:
            with open(token_file, "w", encoding="utf-8") as f:
                f.write(creds.to_json())
        except Exception as exc:
            raise AuthError(
                "Failed to save OAuth token file",
                details={"token_file": token_file},
                cause=exc,
            ) from exc
