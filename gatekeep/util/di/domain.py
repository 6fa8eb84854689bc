"""Domain layer DI providers."""

from dishka import Scope, provide

from gatekeep.config import AuthSettings
from gatekeep.domain.repository import AccountRepository, RefreshTokenRepository
from gatekeep.domain.service import (
    AccessTokenService,
    AccountService,
    IdentityResolver,
    ProviderTokenService,
    ProviderTokenValidator,
    RefreshTokenService,
)
from gatekeep.domain.value import AuthProvider
from gatekeep.util.crypto import CredentialCipher
from gatekeep.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider - concrete, no mocks needed.

    Domain services are REQUEST-scoped to align with repository/session lifecycle.
    Each HTTP request gets fresh service instances with their own transaction.
    """

    scope = Scope.REQUEST

    @provide
    def get_provider_token_service(
        self,
        validators: dict[AuthProvider, ProviderTokenValidator],
        auth_settings: AuthSettings,
    ) -> ProviderTokenService:
        """Provide ID token validation service over all provider validators."""
        return ProviderTokenService(validators=validators, auth_settings=auth_settings)

    @provide
    def get_access_token_service(self, auth_settings: AuthSettings) -> AccessTokenService:
        """Provide access token service."""
        return AccessTokenService(auth_settings=auth_settings)

    @provide
    def get_refresh_token_service(
        self,
        refresh_token_repository: RefreshTokenRepository,
        auth_settings: AuthSettings,
    ) -> RefreshTokenService:
        """Provide refresh token service."""
        return RefreshTokenService(
            refresh_token_repository=refresh_token_repository,
            auth_settings=auth_settings,
        )

    @provide
    def get_identity_resolver(
        self,
        account_repository: AccountRepository,
        auth_settings: AuthSettings,
        credential_cipher: CredentialCipher,
    ) -> IdentityResolver:
        """Provide identity resolver."""
        return IdentityResolver(
            account_repository=account_repository,
            auth_settings=auth_settings,
            credential_cipher=credential_cipher,
        )

    @provide
    def get_account_service(self, account_repository: AccountRepository) -> AccountService:
        """Provide account domain service."""
        return AccountService(account_repository=account_repository)
