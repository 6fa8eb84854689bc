"""Translation of domain errors into HTTP errors.

Responses carry a fixed message per error kind; exception text never
reaches the client.
"""

from fastapi import HTTPException, status

from gatekeep.domain.error import (
    AccountNotFoundError,
    AudienceMismatchError,
    AuthenticationError,
    DomainError,
    InvalidAccessTokenError,
    InvalidOrExpiredRefreshTokenError,
    InvalidProviderTokenError,
    MalformedRequestError,
    NotFoundError,
)

# Most specific first
_RESPONSES: list[tuple[type[DomainError], int, str]] = [
    (MalformedRequestError, status.HTTP_400_BAD_REQUEST, "Malformed request"),
    (AudienceMismatchError, status.HTTP_401_UNAUTHORIZED, "Audience mismatch"),
    (InvalidProviderTokenError, status.HTTP_401_UNAUTHORIZED, "Invalid provider token"),
    (
        InvalidOrExpiredRefreshTokenError,
        status.HTTP_401_UNAUTHORIZED,
        "Invalid or expired refresh token",
    ),
    (
        InvalidAccessTokenError,
        status.HTTP_401_UNAUTHORIZED,
        "Invalid or expired access token",
    ),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED, "Not authenticated"),
    (AccountNotFoundError, status.HTTP_404_NOT_FOUND, "Account not found"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "Not found"),
]


def to_http_error(error: DomainError) -> HTTPException:
    """Map a domain error to an HTTPException.

    Errors without a mapping (e.g. an identity conflict that outlived its
    retries) become a 500 with a generic message.
    """
    for error_type, status_code, message in _RESPONSES:
        if isinstance(error, error_type):
            return _with_challenge(HTTPException(status_code=status_code, detail=message))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


def _with_challenge(exc: HTTPException) -> HTTPException:
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        exc.headers = {"WWW-Authenticate": "Bearer"}
    return exc


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header.

    Raises:
        HTTPException: 401 if the header is missing or not a bearer token
    """
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
