"""
Password hashing for accounts created through the admin backend.

Uses scrypt with the parameters the chat frontend verifies against
(N=16384, r=8, p=1, 64-byte key, base64 encoded).
"""

import base64
import hashlib
import secrets

SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1
SCRYPT_KEY_LENGTH = 64


def new_salt() -> str:
    """Generate a random base64 salt."""
    return base64.b64encode(secrets.token_bytes(16)).decode("ascii")


def hash_password(password: str, salt: str) -> str:
    """Hash a password with the given salt."""
    derived = hashlib.scrypt(
        password.encode("utf-8"),
        salt=salt.encode("utf-8"),
        n=SCRYPT_N,
        r=SCRYPT_R,
        p=SCRYPT_P,
        dklen=SCRYPT_KEY_LENGTH,
    )
    return base64.b64encode(derived).decode("ascii")


def verify_password(password: str, salt: str, password_hash: str) -> bool:
    return secrets.compare_digest(hash_password(password, salt), password_hash)
