"""
Portal credential encryption.

Passwords inside a client's portal credentials are encrypted with AES-256-GCM
before they reach the store. Every message gets its own random nonce, and the
token format is ``<nonce hex>:<ciphertext hex>`` where the ciphertext carries
the GCM authentication tag.
"""
from __future__ import annotations

import base64
import binascii
import os
from typing import Any, Dict, Mapping, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from practice.errors import CredentialDecryptionError


NONCE_SIZE = 12
KEY_SIZE = 32


def generate_key() -> str:
    """Generate a new urlsafe-base64 encoded 256-bit key."""
    return base64.urlsafe_b64encode(os.urandom(KEY_SIZE)).decode()


def load_key(value: Union[str, bytes]) -> bytes:
    """Decode a key produced by :func:`generate_key`."""
    if isinstance(value, str):
        value = value.encode()
    try:
        key = base64.urlsafe_b64decode(value)
    except (binascii.Error, ValueError) as exc:
        raise ValueError("ENCRYPTION_KEY is not valid urlsafe base64") from exc
    if len(key) != KEY_SIZE:
        raise ValueError(f"ENCRYPTION_KEY must decode to {KEY_SIZE} bytes, got {len(key)}")
    return key


class CredentialCipher:
    """Encrypts and decrypts single strings."""

    def __init__(self, key: Union[str, bytes]):
        if isinstance(key, bytes) and len(key) == KEY_SIZE:
            raw = key
        else:
            raw = load_key(key)
        self._aead = AESGCM(raw)

    def encrypt(self, plaintext: str) -> str:
        nonce = os.urandom(NONCE_SIZE)
        ciphertext = self._aead.encrypt(nonce, plaintext.encode("utf-8"), None)
        return f"{nonce.hex()}:{ciphertext.hex()}"

    def decrypt(self, token: str) -> str:
        try:
            nonce_hex, ciphertext_hex = token.split(":", 1)
            nonce = bytes.fromhex(nonce_hex)
            ciphertext = bytes.fromhex(ciphertext_hex)
            if len(nonce) != NONCE_SIZE:
                raise ValueError("bad nonce length")
            return self._aead.decrypt(nonce, ciphertext, None).decode("utf-8")
        except (AttributeError, ValueError, InvalidTag, UnicodeDecodeError) as exc:
            raise CredentialDecryptionError() from exc

    # ---------- Portal credential maps ----------

    def encrypt_credentials(self, credentials: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        return _transform_passwords(credentials, self.encrypt)

    def decrypt_credentials(self, credentials: Optional[Mapping[str, Any]]) -> Optional[Dict[str, Any]]:
        return _transform_passwords(credentials, self.decrypt)


def _is_credential_entry(entry: Any) -> bool:
    return isinstance(entry, Mapping) and "username" in entry and "password" in entry


def _transform_passwords(credentials, transform):
    # None and {} pass through so "no credentials" stays distinguishable
    if not credentials:
        return credentials
    result: Dict[str, Any] = {}
    for portal, entry in credentials.items():
        if _is_credential_entry(entry):
            updated = dict(entry)
            updated["password"] = transform(entry["password"])
            result[portal] = updated
        else:
            result[portal] = entry
    return result
