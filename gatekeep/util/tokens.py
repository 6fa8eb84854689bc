"""Opaque refresh token utilities."""

import secrets
from base64 import urlsafe_b64encode
from hashlib import sha256

# 32 bytes = 256 bits of entropy
REFRESH_TOKEN_BYTES = 32


def generate_refresh_token() -> str:
    """Generate a random opaque refresh token.

    Returns:
        base64url encoded token without padding (43 characters)
    """
    token_bytes = secrets.token_bytes(REFRESH_TOKEN_BYTES)
    return urlsafe_b64encode(token_bytes).rstrip(b"=").decode("ascii")


def hash_refresh_token(token: str) -> str:
    """Hash a refresh token for storage and lookup.

    Only this hash is persisted; the raw token is handed to the client once.

    Args:
        token: Raw refresh token

    Returns:
        Lowercase hex SHA-256 digest
    """
    return sha256(token.encode("utf-8")).hexdigest()
