"""Authentication routes."""

import logging

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Header

from gatekeep.application.usecase.account import AccountProfile
from gatekeep.application.usecase.auth import (
    GetCurrentAccountRequest,
    GetCurrentAccountUseCase,
    ListProvidersUseCase,
    ProvidersResponse,
    RefreshSessionRequest,
    RefreshSessionResponse,
    RefreshSessionUseCase,
    SignInRequest,
    SignInResponse,
    SignInUseCase,
    SignOutRequest,
    SignOutResponse,
    SignOutUseCase,
)
from gatekeep.domain.error import DomainError
from gatekeep.interface.error import bearer_token, to_http_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"], route_class=DishkaRoute)


@router.post("/signin", response_model=SignInResponse)
async def sign_in(
    request: SignInRequest,
    sign_in_use_case: FromDishka[SignInUseCase],
) -> SignInResponse:
    """Sign in with a third-party identity.

    Google and Microsoft sign-ins send the ID token the client obtained from
    the provider; Facebook sign-ins send the provider subject ID and email.

    Example:
        POST /auth/signin
        {
            "provider": "google",
            "id_token": "eyJhbGciOiJSUzI1NiIs..."
        }

        Response:
        {
            "account_id": "123e4567-e89b-12d3-a456-426614174000",
            "username": "alice",
            "email": "alice@example.com",
            "login_count": 1,
            "access_token": "eyJhbGciOiJIUzI1NiIs...",
            "access_token_expires_in": 3600,
            "refresh_token": "3q2-7w...",
            ...
        }

    Raises:
        HTTPException: 400 if the request is malformed, 401 if the provider
            token is rejected
    """
    try:
        return await sign_in_use_case.execute(request)
    except DomainError as e:
        logger.info(f"Sign-in failed for provider {request.provider}: {type(e).__name__}")
        raise to_http_error(e)


@router.post("/refresh", response_model=RefreshSessionResponse)
async def refresh_session(
    request: RefreshSessionRequest,
    refresh_session_use_case: FromDishka[RefreshSessionUseCase],
) -> RefreshSessionResponse:
    """Exchange a refresh token for a new access token and refresh token.

    The presented refresh token can not be used again.

    Raises:
        HTTPException: 400 if no token was sent, 401 if the token is invalid,
            expired or already used, 404 if the account no longer exists
    """
    try:
        return await refresh_session_use_case.execute(request)
    except DomainError as e:
        logger.info(f"Refresh failed: {type(e).__name__}")
        raise to_http_error(e)


@router.get("/me", response_model=AccountProfile)
async def get_current_account(
    get_current_account_use_case: FromDishka[GetCurrentAccountUseCase],
    authorization: str | None = Header(default=None),
) -> AccountProfile:
    """Get the account of the bearer access token.

    Raises:
        HTTPException: 401 without a valid token, 400 if the token subject is
            malformed, 404 if the account no longer exists
    """
    token = bearer_token(authorization)
    try:
        return await get_current_account_use_case.execute(
            GetCurrentAccountRequest(token=token)
        )
    except DomainError as e:
        raise to_http_error(e)


@router.post("/logout", response_model=SignOutResponse)
async def logout(
    request: SignOutRequest,
    sign_out_use_case: FromDishka[SignOutUseCase],
) -> SignOutResponse:
    """Revoke a refresh token. Always succeeds."""
    return await sign_out_use_case.execute(request)


@router.get("/providers", response_model=ProvidersResponse)
async def list_providers(
    list_providers_use_case: FromDishka[ListProvidersUseCase],
) -> ProvidersResponse:
    """Public client identifiers of the configured providers."""
    return await list_providers_use_case.execute()
