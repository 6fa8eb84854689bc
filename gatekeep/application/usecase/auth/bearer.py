"""Access token checks shared by authenticated use cases."""

from uuid import UUID

from gatekeep.domain.error import InvalidAccessTokenError, MalformedRequestError
from gatekeep.domain.service import AccessTokenService
from gatekeep.domain.value import AccountId, TokenRejection


def authenticate(access_token_service: AccessTokenService, token: str) -> AccountId:
    """Verify an access token and return the account it was issued to.

    Raises:
        InvalidAccessTokenError: If the token is missing or fails verification
        MalformedRequestError: If the token subject is not an account ID
    """
    if not token:
        raise InvalidAccessTokenError()

    result = access_token_service.verify(token)
    if isinstance(result, TokenRejection):
        raise InvalidAccessTokenError()

    try:
        return AccountId(UUID(result.account_id))
    except ValueError:
        raise MalformedRequestError("Access token subject is not an account ID")
