"""Domain services."""

from .access_token_service import AccessTokenService
from .account_service import AccountService
from .base import Service
from .identity_resolver import IdentityResolver
from .provider_token_service import ProviderTokenService, ProviderTokenValidator
from .refresh_token_service import RefreshTokenService

__all__ = [
    "AccessTokenService",
    "AccountService",
    "IdentityResolver",
    "ProviderTokenService",
    "ProviderTokenValidator",
    "RefreshTokenService",
    "Service",
]
