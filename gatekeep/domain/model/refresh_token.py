"""Refresh token record.

Only the SHA-256 hash of a refresh token is stored. Rotation produces a
chain: the old record is revoked and points at its successor's hash.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from gatekeep.domain.model.common import DomainModel, utc_now
from gatekeep.domain.value import AccountId, RefreshTokenId


class RefreshTokenRecord(DomainModel):
    """Stored state of one issued refresh token."""

    id: RefreshTokenId
    account_id: AccountId
    token_hash: str  # Hex SHA-256 of the raw token
    created_at: datetime = Field(default_factory=utc_now)
    expires_at: datetime
    revoked_at: Optional[datetime] = None
    replaced_by_token_hash: Optional[str] = None

    @property
    def is_revoked(self) -> bool:
        return self.revoked_at is not None

    def is_expired(self, now: datetime) -> bool:
        return now >= self.expires_at
