"""Repository interfaces for the Gatekeep domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from gatekeep.domain.repository.account import AccountRepository
from gatekeep.domain.repository.refresh_token import RefreshTokenRepository

__all__ = [
    "AccountRepository",
    "RefreshTokenRepository",
]
