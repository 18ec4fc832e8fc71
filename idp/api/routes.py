"""
FastAPI routes exposing the IDP over plain HTTP.

Every request is forwarded to the same ``IdpRouter`` the Lambda handler uses.
"""

from __future__ import annotations

import base64
from http import HTTPStatus
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response

from idp.core.config import AppSettings
from idp.dependencies import get_app_settings, get_idp_router
from idp.schemas import IdpRequest

router = APIRouter()


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck(
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok", "environment": settings.environment}


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def dispatch(
    path: str,
    request: Request,
    idp_router: Annotated[Any, Depends(get_idp_router)],
) -> Response:
    """Translate the request the way API Gateway presents it to the Lambda."""
    raw_body = await request.body()
    idp_request = IdpRequest(
        method=request.method,
        path=f"/{path}",
        query=dict(request.query_params),
        # API Gateway base64-encodes form bodies; mirror that for every body.
        body=base64.b64encode(raw_body).decode("ascii") if raw_body else None,
        is_base64_encoded=True,
    )
    result = await idp_router.dispatch(idp_request)
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
    )


__all__ = ["router"]
