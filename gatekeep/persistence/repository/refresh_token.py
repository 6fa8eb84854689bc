"""PostgreSQL implementation of RefreshToken repository."""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from gatekeep.domain.model import RefreshTokenRecord
from gatekeep.domain.repository import RefreshTokenRepository
from gatekeep.domain.value import RefreshTokenId
from gatekeep.persistence.mappers import refresh_token_to_dict, row_to_refresh_token
from gatekeep.persistence.tables import refresh_tokens_table


class PostgresRefreshTokenRepository(RefreshTokenRepository):
    """PostgreSQL implementation of RefreshTokenRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def insert(self, record: RefreshTokenRecord) -> RefreshTokenRecord:
        stmt = refresh_tokens_table.insert().values(**refresh_token_to_dict(record))
        await self.session.execute(stmt)
        return record

    async def find_by_hash(self, token_hash: str) -> Optional[RefreshTokenRecord]:
        stmt = select(refresh_tokens_table).where(
            refresh_tokens_table.c.token_hash == token_hash
        )
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_refresh_token(dict(row)) if row else None

    async def revoke_if_active(
        self,
        record_id: RefreshTokenId,
        revoked_at: datetime,
        replaced_by_token_hash: Optional[str] = None,
    ) -> bool:
        """Revoke a record unless it was already revoked.

        A single conditional UPDATE: a concurrent transaction revoking the same
        row waits for ours and then matches nothing.
        """
        stmt = (
            refresh_tokens_table.update()
            .where(refresh_tokens_table.c.id == record_id)
            .where(refresh_tokens_table.c.revoked_at.is_(None))
            .values(
                revoked_at=revoked_at,
                replaced_by_token_hash=replaced_by_token_hash,
            )
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1
