"""In-memory refresh token repository for testing."""

from datetime import datetime
from typing import Optional

from gatekeep.domain.model import RefreshTokenRecord
from gatekeep.domain.repository import RefreshTokenRepository
from gatekeep.domain.value import RefreshTokenId


class InMemoryRefreshTokenRepository(RefreshTokenRepository):
    """In-memory implementation of RefreshTokenRepository for testing."""

    def __init__(self) -> None:
        self._records: dict[RefreshTokenId, RefreshTokenRecord] = {}
        self._by_hash: dict[str, RefreshTokenId] = {}

    async def insert(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        if record.token_hash in self._by_hash:
            raise ValueError("Duplicate refresh token hash")
        self._records[record.id] = record
        self._by_hash[record.token_hash] = record.id
        return record

    async def find_by_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        record_id = self._by_hash.get(token_hash)
        return self._records.get(record_id) if record_id else None

    async def revoke_if_active(
        self,
        record_id: RefreshTokenId,
        revoked_at: datetime,
        replaced_by_token_hash: Optional[str] = None,
    ) -> bool:
        # No await between check and write, so this is atomic on the event loop
        record = self._records.get(record_id)
        if record is None or record.is_revoked:
            return False
        self._records[record_id] = record.model_copy(
            update={
                "revoked_at": revoked_at,
                "replaced_by_token_hash": replaced_by_token_hash,
            }
        )
        return True
