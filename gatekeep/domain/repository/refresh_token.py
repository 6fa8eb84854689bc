"""Refresh token repository interface."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from gatekeep.domain.model.refresh_token import RefreshTokenRecord
from gatekeep.domain.value import RefreshTokenId


class RefreshTokenRepository(ABC):
    """Repository for refresh token records."""

    @abstractmethod
    async def insert(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        """Store a new refresh token record."""
        pass

    @abstractmethod
    async def find_by_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        """Find a record by the hash of its raw token."""
        pass

    @abstractmethod
    async def revoke_if_active(
        self,
        record_id: RefreshTokenId,
        revoked_at: datetime,
        replaced_by_token_hash: Optional[str] = None,
    ) -> bool:
        """Revoke a record unless it was already revoked.

        This is a compare-and-swap: of two concurrent callers for the same
        record exactly one gets True.

        Args:
            record_id: Record to revoke
            revoked_at: Revocation time
            replaced_by_token_hash: Hash of the successor token, if rotating

        Returns:
            True if this call revoked the record, False otherwise
        """
        pass
