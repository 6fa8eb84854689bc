"""Domain value objects for Gatekeep.

Value objects are immutable and defined by their values, not identity.
Token validation results are expressed as values too: a validator returns
either the claims it verified or a ``TokenRejection`` describing why it
refused, and callers branch on the result instead of catching exceptions.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from gatekeep.domain.value.common import ValueObject
from gatekeep.domain.value.identifiers import AccountId


class AuthProvider(str, Enum):
    """Supported identity providers."""

    GOOGLE = "google"
    MICROSOFT = "microsoft"
    FACEBOOK = "facebook"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AuthProvider"]:
        # Accept "Google", "MICROSOFT", etc.
        if isinstance(value, str):
            lowered = value.strip().lower()
            for member in cls:
                if member.value == lowered:
                    return member
        return None


class SpokenProficiency(str, Enum):
    """Self-reported proficiency stored on the account profile."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    NATIVE = "native"


class RejectionKind(str, Enum):
    """Why a presented token was refused."""

    INVALID_TOKEN = "invalid_token"
    AUDIENCE_MISMATCH = "audience_mismatch"
    EXPIRED = "expired"
    UNKNOWN = "unknown"
    REPLAYED = "replayed"


class TokenRejection(ValueObject):
    """A token failed validation.

    ``detail`` is for logs only and is never returned to API callers.
    """

    kind: RejectionKind
    detail: str = ""


class IdentityClaims(ValueObject):
    """Identity asserted by a verified third-party ID token."""

    subject: str
    email: str = ""
    email_verified: bool = False
    tenant_id: Optional[str] = None  # Microsoft only
    issuer: str = ""


class AccessTokenClaims(ValueObject):
    """Claims of a verified access token issued by this service."""

    account_id: str  # Raw "sub" claim; may not be a UUID
    username: str = ""
    email: str = ""
    issued_at: datetime
    expires_at: datetime


class ProviderCredentials(ValueObject):
    """Provider API credentials a client asked us to keep."""

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return not self.access_token and not self.refresh_token


class RotatedRefreshToken(ValueObject):
    """Outcome of a successful refresh token rotation."""

    account_id: AccountId
    refresh_token: str  # New raw token, returned to the client once
