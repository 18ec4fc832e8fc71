"""
AWS Lambda handler invoked by API Gateway.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

from idp.api.router import IdpRouter
from idp.core.config import get_settings
from idp.core.logging import configure_logging
from idp.dependencies import get_idp_router
from idp.schemas import IdpRequest

logger = logging.getLogger(__name__)

_router: Optional[IdpRouter] = None


def _bootstrap() -> IdpRouter:
    """Initialize shared singletons once per warm Lambda container."""
    global _router
    if _router is None:
        settings = get_settings()
        configure_logging(settings.log_level)
        _router = get_idp_router()
    return _router


def parse_event(event: Dict[str, Any]) -> IdpRequest:
    """Build an ``IdpRequest`` from a payload format 2.0 or 1.0 proxy event."""
    request_context = event.get("requestContext") or {}
    http_context = request_context.get("http") or {}

    method = http_context.get("method") or event.get("httpMethod") or ""
    path = event.get("rawPath") or event.get("path") or ""
    return IdpRequest(
        method=method.upper(),
        path=path,
        query=event.get("queryStringParameters") or {},
        body=event.get("body"),
        is_base64_encoded=bool(event.get("isBase64Encoded")),
    )


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    AWS Lambda handler for the IDP HTTP API.

    Requests are handled one at a time, each to completion, on a fresh
    event loop.
    """
    router = _bootstrap()
    request = parse_event(event)
    logger.info("Handling %s %s", request.method, request.path)

    response = asyncio.run(router.dispatch(request))
    return response.to_proxy_result()


__all__ = ["lambda_handler", "parse_event"]
