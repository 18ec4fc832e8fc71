"""Service layer exports."""

from .authorization import AuthorizationService
from .credential_cipher import CredentialCipher
from .registration import (
    HomeTopology,
    HomeTopologyNotFoundError,
    UserRegistrationService,
    extract_home_topology,
)

__all__ = [
    "AuthorizationService",
    "CredentialCipher",
    "HomeTopology",
    "HomeTopologyNotFoundError",
    "UserRegistrationService",
    "extract_home_topology",
]
