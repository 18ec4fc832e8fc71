try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for direct execution
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from idp.services.credential_cipher import CredentialCipher


def test_credential_cipher_roundtrip() -> None:
    cipher = CredentialCipher(secret="super-secret-key")
    plaintext = "velux-password"

    encrypted = cipher.encrypt(plaintext)
    assert encrypted != plaintext

    assert cipher.decrypt(encrypted) == plaintext


def test_credential_cipher_rejects_bad_ciphertext() -> None:
    cipher = CredentialCipher(secret="another-secret")

    with pytest.raises(ValueError):
        cipher.decrypt("not-valid")


def test_credential_cipher_rejects_foreign_key() -> None:
    encrypted = CredentialCipher(secret="one").encrypt("value")

    with pytest.raises(ValueError):
        CredentialCipher(secret="two").decrypt(encrypted)


def test_credential_cipher_requires_secret() -> None:
    with pytest.raises(ValueError):
        CredentialCipher(secret="")


def test_seal_renames_and_skips_empty_values() -> None:
    cipher = CredentialCipher(secret="seal-secret")

    sealed = cipher.seal({"password": "pw", "refresh_token": None, "access_token": "at"})

    assert set(sealed) == {"password_encrypted", "access_token_encrypted"}
    assert cipher.decrypt(sealed["password_encrypted"]) == "pw"
