"""
Authorization-code and token issuance for the Alexa account-linking flow.
"""

from __future__ import annotations

import base64
import binascii
import logging
import time
import uuid
from http import HTTPStatus
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlsplit

from idp.core.config import OAuthSettings
from idp.models import AccessToken, AuthorizationCode, RecordCollection
from idp.schemas import IdpResponse, json_response, redirect_response

logger = logging.getLogger(__name__)

SUPPORTED_GRANT_TYPE = "authorization_code"
_TOKEN_FIELDS = ("code", "client_id", "redirect_uri", "grant_type")


def _bad_request(message: str) -> IdpResponse:
    logger.warning("Rejected request: %s", message)
    return json_response(HTTPStatus.BAD_REQUEST, {"error": message})


class AuthorizationService:
    """Mints authorization codes and exchanges them for access tokens."""

    def __init__(
        self,
        store: Any,
        oauth_settings: OAuthSettings,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._settings = oauth_settings
        self._clock = clock

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def issue_code(
        self,
        *,
        client_id: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        velux_user_id: Optional[str] = None,
    ) -> AuthorizationCode:
        """Create and persist a fresh authorization code."""
        expires_at = self._now_ms() + self._settings.auth_code_ttl_seconds * 1000
        record = AuthorizationCode(
            code=str(uuid.uuid4()),
            client_id=client_id,
            redirect_uri=redirect_uri,
            velux_user_id=velux_user_id,
            expires_at=expires_at,
            ttl=expires_at // 1000,
        )
        self._store.put(RecordCollection.AUTHORIZATION_CODES, record.to_item())
        return record

    async def authorize(self, params: Optional[Mapping[str, str]]) -> IdpResponse:
        """Handle ``GET /authorize``: redirect back to the client with a code."""
        params = params or {}
        client_id = params.get("client_id")
        redirect_uri = params.get("redirect_uri")
        if not client_id or not redirect_uri:
            return _bad_request("Missing required parameters")

        record = self.issue_code(client_id=client_id, redirect_uri=redirect_uri)
        logger.info("Issued authorization code for client %s", client_id)

        query = urlencode({"code": record.code, "state": params.get("state") or ""})
        separator = "&" if urlsplit(redirect_uri).query else "?"
        return redirect_response(f"{redirect_uri}{separator}{query}")

    async def exchange_token(self, body: Optional[str]) -> IdpResponse:
        """Handle ``POST /token``: trade a code for a bearer token.

        The body arrives base64-encoded from API Gateway and holds
        ``application/x-www-form-urlencoded`` fields.
        """
        if not body:
            return _bad_request("Missing request body")

        try:
            decoded = base64.b64decode(body, validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return _bad_request("Malformed request body")

        fields: Dict[str, str] = {}
        for name, value in parse_qsl(decoded):
            fields.setdefault(name, value)
        logger.debug("Token request fields: %s", sorted(fields))

        if not all(fields.get(name) for name in _TOKEN_FIELDS):
            return _bad_request("Missing required parameters")
        if fields["grant_type"] != SUPPORTED_GRANT_TYPE:
            return _bad_request("Invalid grant type")

        item = self._store.get(RecordCollection.AUTHORIZATION_CODES, fields["code"])
        now_ms = self._now_ms()
        if not item:
            return _bad_request("Invalid or expired authorization code")
        auth_code = AuthorizationCode.from_item(item)
        if auth_code.is_expired(now_ms) or not self._binding_matches(auth_code, fields):
            return _bad_request("Invalid or expired authorization code")

        # Only the exchange whose pop returns the item may issue a token.
        if self._settings.single_use_codes and not self._store.pop(
            RecordCollection.AUTHORIZATION_CODES, auth_code.code
        ):
            logger.warning("Authorization code was consumed by a concurrent exchange")
            return _bad_request("Invalid or expired authorization code")

        expires_at = now_ms + self._settings.access_token_ttl_seconds * 1000
        access_token = AccessToken(
            token=str(uuid.uuid4()),
            client_id=fields["client_id"],
            velux_user_id=auth_code.velux_user_id,
            created_at=now_ms,
            expires_at=expires_at,
            ttl=expires_at // 1000,
        )
        self._store.put(RecordCollection.ACCESS_TOKENS, access_token.to_item())
        logger.info("Issued access token for client %s", fields["client_id"])

        return json_response(
            HTTPStatus.OK,
            {
                "access_token": access_token.token,
                "token_type": "bearer",
                "expires_in": self._settings.access_token_ttl_seconds,
            },
        )

    def _binding_matches(
        self, auth_code: AuthorizationCode, fields: Mapping[str, str]
    ) -> bool:
        if not self._settings.enforce_client_binding:
            return True
        if auth_code.client_id and auth_code.client_id != fields["client_id"]:
            logger.warning("Authorization code presented by a different client")
            return False
        if auth_code.redirect_uri and auth_code.redirect_uri != fields["redirect_uri"]:
            logger.warning("Authorization code presented with a different redirect_uri")
            return False
        return True


__all__ = ["AuthorizationService", "SUPPORTED_GRANT_TYPE"]
