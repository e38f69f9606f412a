"""Security helpers for password hashing and session cookie signing."""
from __future__ import annotations

import hashlib
import hmac
import logging
import secrets

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

logger = logging.getLogger(__name__)

_SALT_BYTES = 16
_KEY_LENGTH = 64
_SCRYPT_N = 16384
_SCRYPT_R = 8
_SCRYPT_P = 1
_SEPARATOR = "."


class PasswordHasher:
    """Hash and verify user passwords with salted scrypt.

    Stored values have the form ``hex(derived_key) + "." + hex(salt)``.
    """

    @staticmethod
    def _derive(password: str, salt: bytes) -> bytes:
        return hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt,
            n=_SCRYPT_N,
            r=_SCRYPT_R,
            p=_SCRYPT_P,
            dklen=_KEY_LENGTH,
        )

    @staticmethod
    def hash(password: str) -> str:
        salt = secrets.token_bytes(_SALT_BYTES)
        derived = PasswordHasher._derive(password, salt)
        return f"{derived.hex()}{_SEPARATOR}{salt.hex()}"

    @staticmethod
    def verify(password: str, hashed: str) -> bool:
        try:
            key_hex, salt_hex = hashed.split(_SEPARATOR)
            expected = bytes.fromhex(key_hex)
            salt = bytes.fromhex(salt_hex)
        except (AttributeError, ValueError):
            logger.warning("Stored password hash is malformed")
            return False
        if len(expected) != _KEY_LENGTH or not salt:
            return False

        try:
            supplied = PasswordHasher._derive(password, salt)
        except (ValueError, MemoryError):
            logger.exception("Password derivation failed")
            return False
        return hmac.compare_digest(expected, supplied)


# Checked against when the username is unknown, so both failures take the same time.
_DUMMY_HASH: str | None = None


def dummy_password_hash() -> str:
    global _DUMMY_HASH
    if _DUMMY_HASH is None:
        _DUMMY_HASH = PasswordHasher.hash(secrets.token_urlsafe(16))
    return _DUMMY_HASH


class SessionSigner:
    """Sign and unsign session identifiers carried in the session cookie."""

    def __init__(self, secret_key: str, salt: str = "mediahub-session") -> None:
        self._serializer = URLSafeTimedSerializer(secret_key, salt=salt)

    def dumps(self, session_id: str) -> str:
        return self._serializer.dumps(session_id)

    def loads(self, token: str, max_age: int | None = None) -> str:
        try:
            value = self._serializer.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired) as exc:
            raise ValueError("Invalid or expired session token") from exc
        if not isinstance(value, str) or not value:
            raise ValueError("Invalid session token payload")
        return value
