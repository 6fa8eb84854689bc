"""Unlink identity use case."""

from pydantic import BaseModel

from gatekeep.application.usecase.account.profile import AccountProfile, to_profile
from gatekeep.application.usecase.auth.bearer import authenticate
from gatekeep.application.usecase.auth.sign_in import parse_provider
from gatekeep.domain.service import AccessTokenService, AccountService


class UnlinkIdentityRequest(BaseModel):
    """Unlink identity request."""

    token: str  # Access token
    provider: str


class UnlinkIdentityUseCase:
    """Use case for removing a provider's identities from the caller's account."""

    def __init__(
        self,
        access_token_service: AccessTokenService,
        account_service: AccountService,
    ) -> None:
        self.access_token_service = access_token_service
        self.account_service = account_service

    async def execute(self, request: UnlinkIdentityRequest) -> AccountProfile:
        """Unlink every identity of the provider.

        Raises:
            InvalidAccessTokenError: If the token is invalid or expired
            MalformedRequestError: Unknown provider or malformed token subject
            AccountNotFoundError: If the account no longer exists
            NotFoundError: If no identity of that provider is linked
        """
        account_id = authenticate(self.access_token_service, request.token)
        provider = parse_provider(request.provider)
        account = await self.account_service.unlink_identity(account_id, provider)
        return to_profile(account)
