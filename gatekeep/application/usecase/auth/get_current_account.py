"""Get current account use case."""

from pydantic import BaseModel

from gatekeep.application.usecase.account.profile import AccountProfile, to_profile
from gatekeep.application.usecase.auth.bearer import authenticate
from gatekeep.domain.service import AccessTokenService, AccountService


class GetCurrentAccountRequest(BaseModel):
    """Get current account request."""

    token: str  # Access token


class GetCurrentAccountUseCase:
    """Use case for getting the authenticated account."""

    def __init__(
        self,
        access_token_service: AccessTokenService,
        account_service: AccountService,
    ) -> None:
        """Initialize get current account use case.

        Args:
            access_token_service: Access token service
            account_service: Account domain service
        """
        self.access_token_service = access_token_service
        self.account_service = account_service

    async def execute(self, request: GetCurrentAccountRequest) -> AccountProfile:
        """Load the profile of the token's account.

        Raises:
            InvalidAccessTokenError: If the token is invalid or expired
            MalformedRequestError: If the token subject is not an account ID
            AccountNotFoundError: If the account no longer exists
        """
        account_id = authenticate(self.access_token_service, request.token)
        account = await self.account_service.get_by_id(account_id)
        return to_profile(account)
