"""
Registration of Velux accounts for the skill.

Validates the user's Velux credentials upstream, records the account with
its home and bridge, and hands back an authorization code the caller can
exchange at the token endpoint.
"""

from __future__ import annotations

import base64
import json
import logging
import time
from dataclasses import dataclass
from http import HTTPStatus
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from idp.clients.velux import VeluxCredentials
from idp.models import RecordCollection, UserRecord
from idp.schemas import IdpResponse, RegisterUserRequest, json_response
from idp.services.authorization import AuthorizationService
from idp.services.credential_cipher import CredentialCipher

logger = logging.getLogger(__name__)

BRIDGE_MODULE_TYPE = "NXG"


class HomeTopologyNotFoundError(Exception):
    """Raised when the Velux account has no home or no bridge module."""


@dataclass(frozen=True)
class HomeTopology:
    home_id: str
    bridge_id: str


def extract_home_topology(home_data: Dict[str, Any]) -> HomeTopology:
    """Pick the first home and its first NXG gateway module."""
    body = home_data.get("body") if isinstance(home_data, dict) else None
    homes = (body or {}).get("homes") or []
    if not homes:
        raise HomeTopologyNotFoundError("Velux account has no homes.")

    home = homes[0]
    home_id = home.get("id")
    if not home_id:
        raise HomeTopologyNotFoundError("First Velux home has no id.")

    bridge_id = next(
        (
            module.get("id")
            for module in home.get("modules") or []
            if module.get("type") == BRIDGE_MODULE_TYPE and module.get("id")
        ),
        None,
    )
    if bridge_id is None:
        raise HomeTopologyNotFoundError(f"Home {home_id} has no {BRIDGE_MODULE_TYPE} bridge.")
    return HomeTopology(home_id=home_id, bridge_id=bridge_id)


class UserRegistrationService:
    """Handles ``POST /register_user``."""

    def __init__(
        self,
        store: Any,
        velux_client: Any,
        authorization: AuthorizationService,
        cipher: CredentialCipher,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._velux = velux_client
        self._authorization = authorization
        self._cipher = cipher
        self._clock = clock

    async def register_user(
        self, body: Optional[str], *, is_base64_encoded: bool = False
    ) -> IdpResponse:
        if not body:
            logger.warning("Rejected registration: missing request body")
            return json_response(HTTPStatus.BAD_REQUEST, {"error": "Missing request body"})

        if is_base64_encoded:
            body = base64.b64decode(body).decode("utf-8")
        payload = json.loads(body)

        try:
            request = RegisterUserRequest.model_validate(payload)
        except ValidationError as exc:
            logger.warning(
                "Rejected registration: invalid credentials fields %s",
                sorted({".".join(map(str, error["loc"])) for error in exc.errors()}),
            )
            return json_response(
                HTTPStatus.BAD_REQUEST, {"error": "Missing required parameters"}
            )
        user_id, password = request.velux_user_id, request.velux_password

        session = await self._velux.warm_up()
        async with session:
            session.credentials = VeluxCredentials(username=user_id, password=password)
            token_data = await self._velux.make_token_request(session, "password")
            if not token_data:
                logger.warning("Velux rejected credentials for user %s", user_id)
                return json_response(
                    HTTPStatus.UNAUTHORIZED,
                    {"error": "Error validating credentials against Velux backend!"},
                )
            home_data = await self._velux.get_home_info_with_retry(session)

        try:
            topology = extract_home_topology(home_data)
        except HomeTopologyNotFoundError as exc:
            logger.warning("Registration of %s failed: %s", user_id, exc)
            return json_response(
                HTTPStatus.UNPROCESSABLE_ENTITY,
                {"error": "No Velux home with a bridge found"},
            )

        user = UserRecord(
            userid=user_id,
            home_id=topology.home_id,
            bridge=topology.bridge_id,
            created_at=int(self._clock() * 1000),
            **self._cipher.seal(
                {
                    "password": password,
                    "access_token": token_data.access_token,
                    "refresh_token": token_data.refresh_token,
                }
            ),
        )
        self._store.put(RecordCollection.USERS, user.to_item())

        auth_code = self._authorization.issue_code(velux_user_id=user_id)
        logger.info("Registered Velux user %s (home %s)", user_id, topology.home_id)

        return json_response(
            HTTPStatus.OK,
            {"message": {"code": auth_code.code}, "homeInfo": home_data},
        )


__all__ = [
    "BRIDGE_MODULE_TYPE",
    "HomeTopology",
    "HomeTopologyNotFoundError",
    "UserRegistrationService",
    "extract_home_topology",
]
