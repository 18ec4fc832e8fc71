"""
Transport-neutral request and response shapes.

Both the Lambda handler and the FastAPI adapter translate into these so the
router and services never see API Gateway events or Starlette objects.
"""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class IdpRequest(BaseModel):
    """Inbound HTTP request as seen by the router."""

    method: str
    path: str
    query: Dict[str, str] = Field(default_factory=dict)
    body: Optional[str] = None
    is_base64_encoded: bool = False


class IdpResponse(BaseModel):
    """Outbound HTTP response in API Gateway proxy shape."""

    status_code: int
    body: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)

    def json_body(self) -> Any:
        return json.loads(self.body) if self.body else None

    def to_proxy_result(self) -> Dict[str, Any]:
        return {
            "statusCode": self.status_code,
            "headers": dict(self.headers),
            "body": self.body,
        }


def json_response(status_code: int, payload: Dict[str, Any]) -> IdpResponse:
    return IdpResponse(
        status_code=int(status_code),
        body=json.dumps(payload),
        headers={"Content-Type": "application/json"},
    )


def redirect_response(location: str) -> IdpResponse:
    return IdpResponse(
        status_code=int(HTTPStatus.FOUND),
        headers={"Location": location},
    )


__all__ = ["IdpRequest", "IdpResponse", "json_response", "redirect_response"]
