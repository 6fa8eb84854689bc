"""Refresh token domain service."""

from datetime import datetime, timedelta
from uuid import uuid4

import logfire

from gatekeep.config import AuthSettings
from gatekeep.domain.model.common import utc_now
from gatekeep.domain.model.refresh_token import RefreshTokenRecord
from gatekeep.domain.repository import RefreshTokenRepository
from gatekeep.domain.value import (
    AccountId,
    RefreshTokenId,
    RejectionKind,
    RotatedRefreshToken,
    TokenRejection,
)
from gatekeep.util.tokens import generate_refresh_token, hash_refresh_token

from .base import Service


class RefreshTokenService(Service):
    """Creates, rotates and revokes opaque refresh tokens.

    Tokens are single use. Presenting a token that was already rotated is
    treated as a replay and reported as such; the record chain is kept so
    the incident can be traced.
    """

    def __init__(
        self,
        refresh_token_repository: RefreshTokenRepository,
        auth_settings: AuthSettings,
    ) -> None:
        """Initialize refresh token service.

        Args:
            refresh_token_repository: Refresh token repository
            auth_settings: Authentication settings
        """
        self.refresh_token_repository = refresh_token_repository
        self.lifetime = timedelta(days=auth_settings.refresh_token.lifetime_days)

    async def create(self, account_id: AccountId, now: datetime | None = None) -> str:
        """Create a refresh token for an account.

        Args:
            account_id: Account the token belongs to
            now: Creation time (defaults to the current UTC time)

        Returns:
            Raw refresh token; only its hash is stored
        """
        with logfire.span("refresh_token_service.create", account_id=str(account_id)):
            token = generate_refresh_token()
            record = await self._store(account_id, hash_refresh_token(token), now)
            logfire.info(
                "Refresh token created",
                account_id=str(account_id),
                record_id=str(record.id),
            )
            return token

    async def validate_and_rotate(
        self, token: str, now: datetime | None = None
    ) -> RotatedRefreshToken | TokenRejection:
        """Consume a refresh token and issue its successor.

        Args:
            token: Raw refresh token presented by the client
            now: Current time (defaults to the current UTC time)

        Returns:
            Account ID and new raw token, or a rejection
        """
        with logfire.span("refresh_token_service.rotate"):
            now = now or utc_now()
            record = await self.refresh_token_repository.find_by_hash(
                hash_refresh_token(token)
            )
            if record is None:
                logfire.info("Refresh token unknown")
                return TokenRejection(kind=RejectionKind.UNKNOWN)

            if record.is_revoked:
                self._log_replay(record)
                return TokenRejection(kind=RejectionKind.REPLAYED)

            if record.is_expired(now):
                logfire.info(
                    "Refresh token expired",
                    account_id=str(record.account_id),
                    record_id=str(record.id),
                )
                return TokenRejection(kind=RejectionKind.EXPIRED)

            new_token = generate_refresh_token()
            new_hash = hash_refresh_token(new_token)
            revoked = await self.refresh_token_repository.revoke_if_active(
                record.id, now, new_hash
            )
            if not revoked:
                # A concurrent request rotated it first
                self._log_replay(record)
                return TokenRejection(kind=RejectionKind.REPLAYED)

            successor = await self._store(record.account_id, new_hash, now)
            logfire.info(
                "Refresh token rotated",
                account_id=str(record.account_id),
                record_id=str(record.id),
                successor_id=str(successor.id),
            )
            return RotatedRefreshToken(
                account_id=record.account_id, refresh_token=new_token
            )

    async def revoke(self, token: str, now: datetime | None = None) -> bool:
        """Revoke a refresh token (sign-out).

        Args:
            token: Raw refresh token

        Returns:
            True if an active token was revoked, False if it was unknown or
            already revoked
        """
        with logfire.span("refresh_token_service.revoke"):
            record = await self.refresh_token_repository.find_by_hash(
                hash_refresh_token(token)
            )
            if record is None:
                return False

            revoked = await self.refresh_token_repository.revoke_if_active(
                record.id, now or utc_now()
            )
            if revoked:
                logfire.info(
                    "Refresh token revoked",
                    account_id=str(record.account_id),
                    record_id=str(record.id),
                )
            return revoked

    async def _store(
        self, account_id: AccountId, token_hash: str, now: datetime | None
    ) -> RefreshTokenRecord:
        created_at = now or utc_now()
        record = RefreshTokenRecord(
            id=RefreshTokenId(uuid4()),
            account_id=account_id,
            token_hash=token_hash,
            created_at=created_at,
            expires_at=created_at + self.lifetime,
        )
        return await self.refresh_token_repository.insert(record)

    def _log_replay(self, record: RefreshTokenRecord) -> None:
        logfire.warn(
            "Refresh token replay detected",
            account_id=str(record.account_id),
            record_id=str(record.id),
        )
