"""
Velux ACTIVE API client.

Only the calls the IDP needs: a token request against the vendor's OAuth
endpoint and the home topology lookup. All per-request state (staged
credentials, issued tokens, the HTTP connection pool) lives on a
``VeluxSession`` created by ``VeluxClient.warm_up`` so concurrent requests
never share credentials.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from idp.core.config import VeluxSettings
from idp.utils.http import RetryConfig, request_with_retry

logger = logging.getLogger(__name__)


class VeluxApiError(Exception):
    """Raised when the Velux API cannot be reached or answers unexpectedly."""


class VeluxAuthenticationError(Exception):
    """Raised when an operation needs a Velux token the session does not hold."""


@dataclass
class VeluxCredentials:
    username: str
    password: str


@dataclass
class VeluxTokenData:
    access_token: str
    refresh_token: Optional[str]
    expires_in: int


class VeluxSession:
    """Per-request state for talking to the Velux backend."""

    def __init__(self, http: httpx.AsyncClient) -> None:
        self.http = http
        self.credentials: Optional[VeluxCredentials] = None
        self.token_data: Optional[VeluxTokenData] = None

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> "VeluxSession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class VeluxClient:
    """Authenticate Velux users and discover their home and bridge."""

    TOKEN_PATH = "/oauth2/token"
    HOMES_DATA_PATH = "/api/homesdata"
    # Velux answers rejected logins with one of these.
    _REJECTED_STATUSES = {400, 401, 403}

    def __init__(
        self,
        settings: VeluxSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._transport = transport
        self._retry = RetryConfig(
            attempts=settings.retry_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )

    async def warm_up(self) -> VeluxSession:
        """Open a session; the caller owns it and must close it."""
        http = httpx.AsyncClient(
            base_url=self._settings.base_url,
            timeout=self._settings.timeout_seconds,
            transport=self._transport,
            headers={"Accept": "application/json"},
        )
        return VeluxSession(http)

    async def make_token_request(
        self, session: VeluxSession, grant_type: str = "password"
    ) -> Optional[VeluxTokenData]:
        """
        Request a token from Velux and store it on the session.

        Returns ``None`` when Velux rejects the credentials.
        """
        payload: Dict[str, str] = {
            "grant_type": grant_type,
            "client_id": self._settings.client_id,
            "client_secret": self._settings.client_secret,
        }
        if grant_type == "password":
            if session.credentials is None:
                raise VeluxAuthenticationError("No credentials staged on the session.")
            payload.update(
                username=session.credentials.username,
                password=session.credentials.password,
                user_prefix=self._settings.user_prefix,
            )
        elif grant_type == "refresh_token":
            if session.token_data is None or not session.token_data.refresh_token:
                raise VeluxAuthenticationError("No refresh token held by the session.")
            payload["refresh_token"] = session.token_data.refresh_token
        else:
            raise ValueError(f"Unsupported Velux grant type: {grant_type}")

        try:
            response = await session.http.post(self.TOKEN_PATH, data=payload)
        except httpx.HTTPError as exc:
            raise VeluxApiError(f"Velux token request failed: {exc}") from exc

        if response.status_code in self._REJECTED_STATUSES:
            logger.warning(
                "Velux rejected %s grant (status %s)", grant_type, response.status_code
            )
            session.token_data = None
            return None
        if response.status_code != httpx.codes.OK:
            raise VeluxApiError(
                f"Velux token endpoint returned {response.status_code}"
            )

        token_payload = response.json()
        access_token = token_payload.get("access_token")
        if not access_token:
            raise VeluxApiError("Velux token response did not contain an access token.")

        session.token_data = VeluxTokenData(
            access_token=access_token,
            refresh_token=token_payload.get("refresh_token"),
            expires_in=int(token_payload.get("expires_in") or 0),
        )
        return session.token_data

    async def get_home_info_with_retry(self, session: VeluxSession) -> Dict[str, Any]:
        """Fetch the raw homes document, retrying transient failures."""
        if session.token_data is None:
            raise VeluxAuthenticationError("Home info requires a Velux access token.")

        try:
            response = await request_with_retry(
                session.http.post,
                self.HOMES_DATA_PATH,
                headers={"Authorization": f"Bearer {session.token_data.access_token}"},
                retry_config=self._retry,
            )
        except httpx.HTTPError as exc:
            raise VeluxApiError(f"Velux homes data request failed: {exc}") from exc
        return response.json()


__all__ = [
    "VeluxApiError",
    "VeluxAuthenticationError",
    "VeluxClient",
    "VeluxCredentials",
    "VeluxSession",
    "VeluxTokenData",
]
