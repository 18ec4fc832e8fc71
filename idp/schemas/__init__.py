"""Public schema exports."""

from .http import IdpRequest, IdpResponse, json_response, redirect_response
from .registration import RegisterUserRequest

__all__ = [
    "IdpRequest",
    "IdpResponse",
    "RegisterUserRequest",
    "json_response",
    "redirect_response",
]
