"""
Password hashing for login credentials.

Hashes are PBKDF2-HMAC-SHA256 with a random per-user salt, stored as a
single string so the database only needs one column:

    pbkdf2_sha256$<iterations>$<salt>$<hash>

with salt and hash urlsafe-base64 encoded.
"""

from __future__ import annotations

import base64
import logging
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from exceptions import AuthError

logger = logging.getLogger(__name__)

ALGORITHM = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 390_000
SALT_BYTES = 16
KEY_LENGTH = 32


def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _b64decode(text: str) -> bytes:
    # validate=True rejects characters outside the urlsafe alphabet
    return base64.b64decode(text.encode("ascii"), altchars=b"-_", validate=True)


def hash_password(password: str, iterations: int = DEFAULT_ITERATIONS) -> str:
    """
    Hash a password for storage.

    Args:
        password: Plaintext password
        iterations: PBKDF2 work factor

    Returns:
        Encoded hash string including algorithm, work factor and salt
    """
    if iterations < 1:
        raise ValueError("iterations must be positive")
    salt = os.urandom(SALT_BYTES)
    derived = _kdf(salt, iterations).derive(password.encode("utf-8"))
    return f"{ALGORITHM}${iterations}${_b64encode(salt)}${_b64encode(derived)}"


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Check a password against a hash produced by hash_password.

    Raises:
        AuthError: If the stored hash is malformed
    """
    try:
        algorithm, iterations_raw, salt_b64, hash_b64 = stored_hash.split("$")
        if algorithm != ALGORITHM:
            raise ValueError(f"unsupported algorithm {algorithm!r}")
        iterations = int(iterations_raw)
        if iterations < 1:
            raise ValueError("iterations must be positive")
        salt = _b64decode(salt_b64)
        expected = _b64decode(hash_b64)
        if not salt or not expected:
            raise ValueError("empty salt or hash")
    except (ValueError, TypeError) as exc:
        logger.error("Stored password hash could not be parsed.")
        raise AuthError("Stored password hash is malformed.", original_error=exc) from exc

    try:
        _kdf(salt, iterations).verify(password.encode("utf-8"), expected)
    except InvalidKey:
        return False
    return True
