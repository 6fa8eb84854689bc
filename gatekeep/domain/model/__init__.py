"""Domain model entities for Gatekeep."""

from gatekeep.domain.model.account import Account, AccountBio, LinkedIdentity
from gatekeep.domain.model.refresh_token import RefreshTokenRecord

__all__ = [
    "Account",
    "AccountBio",
    "LinkedIdentity",
    "RefreshTokenRecord",
]
