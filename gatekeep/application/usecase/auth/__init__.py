"""Authentication use cases."""

from .get_current_account import GetCurrentAccountRequest, GetCurrentAccountUseCase
from .list_providers import ListProvidersUseCase, ProvidersResponse
from .refresh_session import (
    RefreshSessionRequest,
    RefreshSessionResponse,
    RefreshSessionUseCase,
)
from .sign_in import SignInRequest, SignInResponse, SignInUseCase
from .sign_out import SignOutRequest, SignOutResponse, SignOutUseCase

__all__ = [
    "GetCurrentAccountRequest",
    "GetCurrentAccountUseCase",
    "ListProvidersUseCase",
    "ProvidersResponse",
    "RefreshSessionRequest",
    "RefreshSessionResponse",
    "RefreshSessionUseCase",
    "SignInRequest",
    "SignInResponse",
    "SignInUseCase",
    "SignOutRequest",
    "SignOutResponse",
    "SignOutUseCase",
]
