"""Domain value objects for Gatekeep."""

from gatekeep.domain.value.identifiers import AccountId, RefreshTokenId
from gatekeep.domain.value.types import (
    AccessTokenClaims,
    AuthProvider,
    IdentityClaims,
    ProviderCredentials,
    RejectionKind,
    RotatedRefreshToken,
    SpokenProficiency,
    TokenRejection,
)

__all__ = [
    # Identifiers
    "AccountId",
    "RefreshTokenId",
    # Types
    "AuthProvider",
    "SpokenProficiency",
    "RejectionKind",
    "TokenRejection",
    "IdentityClaims",
    "AccessTokenClaims",
    "ProviderCredentials",
    "RotatedRefreshToken",
]
