"""JWT utilities for the access tokens this service issues."""

from datetime import datetime, timedelta, timezone

import jwt
from pydantic import BaseModel

from gatekeep.config import AccessTokenSettings
from gatekeep.util.error import SigningKeyMisconfiguredError

# HS256 keys shorter than the hash output weaken the MAC
MIN_SIGNING_KEY_BYTES = 32


class AccessTokenPayload(BaseModel):
    """Access token JWT payload."""

    sub: str  # Account ID
    unique_name: str = ""  # Username
    email: str = ""
    iat: datetime
    nbf: datetime
    exp: datetime
    iss: str | None = None
    aud: str | None = None


class JWTError(Exception):
    """JWT-related error."""

    pass


def ensure_signing_key(settings: AccessTokenSettings) -> None:
    """Refuse to run with a missing or short signing key.

    Args:
        settings: Access token settings

    Raises:
        SigningKeyMisconfiguredError: If the key is missing or shorter than
            MIN_SIGNING_KEY_BYTES
    """
    if not settings.signing_key or not settings.signing_key.strip():
        raise SigningKeyMisconfiguredError(
            "AUTH__ACCESS_TOKEN__SIGNING_KEY is not set"
        )
    if len(settings.signing_key.encode("utf-8")) < MIN_SIGNING_KEY_BYTES:
        raise SigningKeyMisconfiguredError(
            f"AUTH__ACCESS_TOKEN__SIGNING_KEY must be at least "
            f"{MIN_SIGNING_KEY_BYTES} bytes"
        )


def create_token(
    account_id: str,
    username: str,
    email: str,
    settings: AccessTokenSettings,
    now: datetime | None = None,
) -> str:
    """Create a signed access token.

    Args:
        account_id: Account ID (becomes the subject)
        username: Account username
        email: Account primary email
        settings: Access token settings
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT token
    """
    issued_at = now or datetime.now(timezone.utc)
    expiry = issued_at + timedelta(minutes=settings.lifetime_minutes)

    payload = {
        "sub": account_id,
        "unique_name": username,
        "email": email,
        "iat": issued_at,
        "nbf": issued_at,
        "exp": expiry,
    }
    if settings.issuer:
        payload["iss"] = settings.issuer
    if settings.audience:
        payload["aud"] = settings.audience

    return jwt.encode(payload, settings.signing_key, algorithm=settings.algorithm)


def verify_token(token: str, settings: AccessTokenSettings) -> AccessTokenPayload:
    """Verify and decode an access token.

    Issuer and audience are only checked when configured.

    Args:
        token: JWT token to verify
        settings: Access token settings

    Returns:
        Token payload if valid

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        payload = jwt.decode(
            token,
            settings.signing_key,
            algorithms=[settings.algorithm],
            issuer=settings.issuer or None,
            audience=settings.audience or None,
            leeway=settings.clock_skew_seconds,
            options={
                "require": ["sub", "exp", "iat"],
                "verify_aud": bool(settings.audience),
            },
        )
        return AccessTokenPayload(**payload)
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
    except ValueError:
        # Signature was valid but the claims do not fit the payload model
        raise JWTError("Invalid token claims")
