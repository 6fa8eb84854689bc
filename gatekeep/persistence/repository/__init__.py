"""PostgreSQL repository implementations."""

from gatekeep.persistence.repository.account import PostgresAccountRepository
from gatekeep.persistence.repository.refresh_token import (
    PostgresRefreshTokenRepository,
)

__all__ = [
    "PostgresAccountRepository",
    "PostgresRefreshTokenRepository",
]
