"""Account use cases."""

from .profile import AccountProfile, LinkedIdentityInfo
from .unlink_identity import UnlinkIdentityRequest, UnlinkIdentityUseCase

__all__ = [
    "AccountProfile",
    "LinkedIdentityInfo",
    "UnlinkIdentityRequest",
    "UnlinkIdentityUseCase",
]
