"""Domain models for persisted IDP records."""

from .records import AccessToken, AuthorizationCode, RecordCollection, UserRecord

__all__ = ["AccessToken", "AuthorizationCode", "RecordCollection", "UserRecord"]
