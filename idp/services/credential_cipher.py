"""Symmetric encryption for Velux secrets kept in the user table."""

from __future__ import annotations

import base64
import hashlib
from typing import Any, Dict

from cryptography.fernet import Fernet, InvalidToken


class CredentialCipher:
    """Encrypt and decrypt Velux passwords and tokens with a derived Fernet key."""

    def __init__(self, *, secret: str) -> None:
        if not secret:
            raise ValueError("Credential encryption secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))

    def encrypt(self, plaintext: str) -> str:
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        try:
            plaintext = self._fernet.decrypt(ciphertext.encode("utf-8"))
        except InvalidToken as exc:
            raise ValueError("Failed to decrypt credential; invalid ciphertext.") from exc
        return plaintext.decode("utf-8")

    def seal(self, values: Dict[str, Any]) -> Dict[str, str]:
        """Encrypt each non-empty value and suffix its key with ``_encrypted``."""
        return {
            f"{name}_encrypted": self.encrypt(value)
            for name, value in values.items()
            if value
        }


__all__ = ["CredentialCipher"]
