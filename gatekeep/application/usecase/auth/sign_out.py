"""Sign-out use case."""

from pydantic import BaseModel

from gatekeep.domain.service import RefreshTokenService


class SignOutRequest(BaseModel):
    """Sign-out request."""

    refresh_token: str = ""


class SignOutResponse(BaseModel):
    """Sign-out response."""

    success: bool = True


class SignOutUseCase:
    """Use case for revoking a refresh token.

    Signing out twice, or with a token that is unknown, is not an error.
    """

    def __init__(self, refresh_token_service: RefreshTokenService) -> None:
        self.refresh_token_service = refresh_token_service

    async def execute(self, request: SignOutRequest) -> SignOutResponse:
        if request.refresh_token:
            await self.refresh_token_service.revoke(request.refresh_token)
        return SignOutResponse()
