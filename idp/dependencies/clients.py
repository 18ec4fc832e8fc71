"""
Factory functions providing the shared store, clients and services.

Used as FastAPI dependencies and by the Lambda handler's bootstrap, so both
runtimes build the object graph the same way.
"""

from functools import lru_cache
from typing import Union

from idp.api.router import IdpRouter
from idp.clients import DynamoDBRecordStore, SQLiteRecordStore, VeluxClient
from idp.core.config import get_settings
from idp.services import AuthorizationService, CredentialCipher, UserRegistrationService


@lru_cache()
def _settings():
    """Internal helper to cache settings for client factories."""
    return get_settings()


@lru_cache()
def get_record_store() -> Union[DynamoDBRecordStore, SQLiteRecordStore]:
    """Provide the record store selected by configuration."""
    settings = _settings()
    if settings.store.backend == "sqlite":
        return SQLiteRecordStore(settings.store.sqlite_path)
    return DynamoDBRecordStore(settings.aws)


@lru_cache()
def get_velux_client() -> VeluxClient:
    """Create a singleton Velux API client."""
    return VeluxClient(_settings().velux)


@lru_cache()
def get_credential_cipher() -> CredentialCipher:
    """Provide symmetric encryption helper for stored Velux secrets."""
    return CredentialCipher(secret=_settings().security.credential_encryption_secret)


@lru_cache()
def get_authorization_service() -> AuthorizationService:
    return AuthorizationService(get_record_store(), _settings().oauth)


@lru_cache()
def get_registration_service() -> UserRegistrationService:
    return UserRegistrationService(
        store=get_record_store(),
        velux_client=get_velux_client(),
        authorization=get_authorization_service(),
        cipher=get_credential_cipher(),
    )


@lru_cache()
def get_idp_router() -> IdpRouter:
    """Provide the request router wired to the configured services."""
    return IdpRouter(get_authorization_service(), get_registration_service())


__all__ = [
    "get_authorization_service",
    "get_credential_cipher",
    "get_idp_router",
    "get_record_store",
    "get_registration_service",
    "get_velux_client",
]
