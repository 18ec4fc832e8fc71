"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_authorization_service,
    get_credential_cipher,
    get_idp_router,
    get_record_store,
    get_registration_service,
    get_velux_client,
)
from .config import get_app_settings

__all__ = [
    "get_app_settings",
    "get_authorization_service",
    "get_credential_cipher",
    "get_idp_router",
    "get_record_store",
    "get_registration_service",
    "get_velux_client",
]
