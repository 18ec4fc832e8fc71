"""
Request dispatch for the IDP.

Matches the exact ``(method, path)`` of a request against the three supported
operations and turns unexpected failures into a generic 500.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Awaitable, Callable, Dict, Tuple

from idp.schemas import IdpRequest, IdpResponse, json_response
from idp.services import AuthorizationService, UserRegistrationService

logger = logging.getLogger(__name__)

Handler = Callable[[IdpRequest], Awaitable[IdpResponse]]


class IdpRouter:
    """Dispatch requests to the authorization and registration services."""

    def __init__(
        self,
        authorization: AuthorizationService,
        registration: UserRegistrationService,
    ) -> None:
        self._routes: Dict[Tuple[str, str], Handler] = {
            ("GET", "/authorize"): lambda request: authorization.authorize(request.query),
            ("POST", "/token"): lambda request: authorization.exchange_token(request.body),
            ("POST", "/register_user"): lambda request: registration.register_user(
                request.body, is_base64_encoded=request.is_base64_encoded
            ),
        }

    async def dispatch(self, request: IdpRequest) -> IdpResponse:
        handler = self._routes.get((request.method, request.path))
        if handler is None:
            logger.warning("Unsupported operation: %s %s", request.method, request.path)
            return json_response(HTTPStatus.NOT_FOUND, {"error": "Unsupported operation"})

        try:
            return await handler(request)
        except Exception:
            logger.exception("Error handling %s %s", request.method, request.path)
            return json_response(
                HTTPStatus.INTERNAL_SERVER_ERROR, {"error": "Internal server error"}
            )


__all__ = ["IdpRouter"]
