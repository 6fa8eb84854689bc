"""Refresh session use case."""

import logfire
from pydantic import BaseModel

from gatekeep.domain.error import (
    InvalidOrExpiredRefreshTokenError,
    MalformedRequestError,
)
from gatekeep.domain.service import (
    AccessTokenService,
    AccountService,
    RefreshTokenService,
)
from gatekeep.domain.value import TokenRejection


class RefreshSessionRequest(BaseModel):
    """Refresh session request."""

    refresh_token: str


class RefreshSessionResponse(BaseModel):
    """Refresh session response. The presented refresh token is now spent."""

    account_id: str
    access_token: str
    access_token_expires_in: int
    refresh_token: str


class RefreshSessionUseCase:
    """Use case for exchanging a refresh token for new tokens."""

    def __init__(
        self,
        refresh_token_service: RefreshTokenService,
        account_service: AccountService,
        access_token_service: AccessTokenService,
    ) -> None:
        self.refresh_token_service = refresh_token_service
        self.account_service = account_service
        self.access_token_service = access_token_service

    async def execute(self, request: RefreshSessionRequest) -> RefreshSessionResponse:
        """Rotate the refresh token and issue a new access token.

        Every rejection (unknown, expired, revoked, replayed) is reported the
        same way to the caller.

        Raises:
            MalformedRequestError: If no token was sent
            InvalidOrExpiredRefreshTokenError: If the token cannot be used
            AccountNotFoundError: If the account was deleted
        """
        if not request.refresh_token:
            raise MalformedRequestError("Refresh token is required")

        result = await self.refresh_token_service.validate_and_rotate(
            request.refresh_token
        )
        if isinstance(result, TokenRejection):
            logfire.info("Refresh rejected", kind=result.kind.value)
            raise InvalidOrExpiredRefreshTokenError()

        account = await self.account_service.get_by_id(result.account_id)
        access_token = self.access_token_service.issue(
            account.id, account.username, account.email
        )

        return RefreshSessionResponse(
            account_id=str(account.id),
            access_token=access_token,
            access_token_expires_in=self.access_token_service.lifetime_seconds,
            refresh_token=result.refresh_token,
        )
