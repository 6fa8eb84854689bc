"""Application layer DI providers."""

from dishka import Scope, provide

from gatekeep.application.usecase.account import UnlinkIdentityUseCase
from gatekeep.application.usecase.auth import (
    GetCurrentAccountUseCase,
    ListProvidersUseCase,
    RefreshSessionUseCase,
    SignInUseCase,
    SignOutUseCase,
)
from gatekeep.config import AuthSettings
from gatekeep.domain.service import (
    AccessTokenService,
    AccountService,
    IdentityResolver,
    ProviderTokenService,
    RefreshTokenService,
)
from gatekeep.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider - concrete, no mocks needed."""

    # Auth use cases
    @provide(scope=Scope.REQUEST)
    def get_sign_in_use_case(
        self,
        provider_token_service: ProviderTokenService,
        identity_resolver: IdentityResolver,
        access_token_service: AccessTokenService,
        refresh_token_service: RefreshTokenService,
        auth_settings: AuthSettings,
    ) -> SignInUseCase:
        """Provide sign-in use case."""
        return SignInUseCase(
            provider_token_service=provider_token_service,
            identity_resolver=identity_resolver,
            access_token_service=access_token_service,
            refresh_token_service=refresh_token_service,
            auth_settings=auth_settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_refresh_session_use_case(
        self,
        refresh_token_service: RefreshTokenService,
        account_service: AccountService,
        access_token_service: AccessTokenService,
    ) -> RefreshSessionUseCase:
        """Provide refresh session use case."""
        return RefreshSessionUseCase(
            refresh_token_service=refresh_token_service,
            account_service=account_service,
            access_token_service=access_token_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_current_account_use_case(
        self,
        access_token_service: AccessTokenService,
        account_service: AccountService,
    ) -> GetCurrentAccountUseCase:
        """Provide get current account use case."""
        return GetCurrentAccountUseCase(
            access_token_service=access_token_service,
            account_service=account_service,
        )

    @provide(scope=Scope.REQUEST)
    def get_sign_out_use_case(
        self, refresh_token_service: RefreshTokenService
    ) -> SignOutUseCase:
        """Provide sign-out use case."""
        return SignOutUseCase(refresh_token_service=refresh_token_service)

    @provide(scope=Scope.REQUEST)
    def get_list_providers_use_case(
        self, auth_settings: AuthSettings
    ) -> ListProvidersUseCase:
        """Provide list providers use case."""
        return ListProvidersUseCase(auth_settings=auth_settings)

    # Account use cases
    @provide(scope=Scope.REQUEST)
    def get_unlink_identity_use_case(
        self,
        access_token_service: AccessTokenService,
        account_service: AccountService,
    ) -> UnlinkIdentityUseCase:
        """Provide unlink identity use case."""
        return UnlinkIdentityUseCase(
            access_token_service=access_token_service,
            account_service=account_service,
        )
