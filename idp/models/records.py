"""
Domain models for the records the IDP persists.

Attribute names on the stored items are camelCase (``clientId``, ``expiresAt``)
to stay compatible with the tables shared with the skill backend. All
timestamps are epoch milliseconds; ``ttl`` is epoch seconds for DynamoDB TTL.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordCollection(str, Enum):
    """Logical collections in the record store."""

    AUTHORIZATION_CODES = "authorization_codes"
    ACCESS_TOKENS = "access_tokens"
    USERS = "users"

    @property
    def key_attribute(self) -> str:
        return _KEY_ATTRIBUTES[self]


_KEY_ATTRIBUTES = {
    RecordCollection.AUTHORIZATION_CODES: "code",
    RecordCollection.ACCESS_TOKENS: "token",
    RecordCollection.USERS: "userid",
}


class _StoredRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_item(self) -> Dict[str, Any]:
        """Serialize to a store item, dropping unset optional attributes."""
        return self.model_dump(by_alias=True, exclude_none=True)


class AuthorizationCode(_StoredRecord):
    """Short-lived code handed to the OAuth client or the registration caller."""

    code: str
    client_id: Optional[str] = Field(None, alias="clientId")
    redirect_uri: Optional[str] = Field(None, alias="redirectUri")
    velux_user_id: Optional[str] = Field(None, alias="veluxUserId")
    expires_at: int = Field(..., alias="expiresAt")
    ttl: Optional[int] = None

    @classmethod
    def from_item(cls, item: Dict[str, Any]) -> "AuthorizationCode":
        # DynamoDB hands numbers back as Decimal.
        return cls(
            code=item["code"],
            client_id=item.get("clientId"),
            redirect_uri=item.get("redirectUri"),
            velux_user_id=item.get("veluxUserId"),
            expires_at=int(item["expiresAt"]),
            ttl=int(item["ttl"]) if item.get("ttl") is not None else None,
        )

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at < now_ms


class AccessToken(_StoredRecord):
    """Bearer token issued by the token endpoint."""

    token: str
    client_id: str = Field(..., alias="clientId")
    velux_user_id: Optional[str] = Field(None, alias="veluxUserId")
    created_at: int = Field(..., alias="createdAt")
    expires_at: int = Field(..., alias="expiresAt")
    ttl: Optional[int] = None


class UserRecord(_StoredRecord):
    """Velux account linked through the registration flow.

    Secrets are only ever held in encrypted form.
    """

    userid: str
    password_encrypted: str
    home_id: str
    bridge: str
    access_token_encrypted: str
    refresh_token_encrypted: Optional[str] = None
    created_at: int = Field(..., alias="createdAt")


__all__ = ["AccessToken", "AuthorizationCode", "RecordCollection", "UserRecord"]
