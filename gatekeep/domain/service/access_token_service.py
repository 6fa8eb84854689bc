"""Access token domain service."""

from datetime import datetime

import logfire

from gatekeep.config import AuthSettings
from gatekeep.domain.value import (
    AccessTokenClaims,
    AccountId,
    RejectionKind,
    TokenRejection,
)
from gatekeep.util.jwt import JWTError, create_token, ensure_signing_key, verify_token

from .base import Service


class AccessTokenService(Service):
    """Issues and verifies the short-lived JWTs this service hands out."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize access token service.

        Args:
            auth_settings: Authentication settings

        Raises:
            SigningKeyMisconfiguredError: If the signing key is unusable
        """
        ensure_signing_key(auth_settings.access_token)
        self.settings = auth_settings.access_token

    @property
    def lifetime_seconds(self) -> int:
        return self.settings.lifetime_minutes * 60

    def issue(
        self,
        account_id: AccountId,
        username: str,
        email: str,
        now: datetime | None = None,
    ) -> str:
        """Issue an access token for an account.

        Args:
            account_id: Account ID (token subject)
            username: Account username
            email: Account primary email
            now: Issue time (defaults to the current UTC time)

        Returns:
            Signed JWT
        """
        with logfire.span("access_token_service.issue", account_id=str(account_id)):
            token = create_token(str(account_id), username, email, self.settings, now)
            logfire.info("Access token issued", account_id=str(account_id))
            return token

    def verify(self, token: str) -> AccessTokenClaims | TokenRejection:
        """Verify an access token.

        Args:
            token: JWT from the Authorization header

        Returns:
            Token claims, or an invalid_token rejection
        """
        with logfire.span("access_token_service.verify"):
            try:
                payload = verify_token(token, self.settings)
            except JWTError as e:
                logfire.info("Access token rejected", error=str(e))
                return TokenRejection(kind=RejectionKind.INVALID_TOKEN, detail=str(e))

            return AccessTokenClaims(
                account_id=payload.sub,
                username=payload.unique_name,
                email=payload.email,
                issued_at=payload.iat,
                expires_at=payload.exp,
            )
