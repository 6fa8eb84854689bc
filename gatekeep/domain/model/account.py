"""Account aggregate root.

An account is the local identity that one or more provider identities
(Google, Microsoft, Facebook) resolve to. Accounts are immutable; every
change produces a copy that the repository stores with ``replace``.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from gatekeep.domain.model.common import DomainModel, utc_now
from gatekeep.domain.value import AccountId, AuthProvider, SpokenProficiency


class AccountBio(DomainModel):
    """Free-form profile text. Stored, never interpreted."""

    about_me: str = ""
    interests: str = ""


class LinkedIdentity(DomainModel):
    """A provider identity attached to an account.

    (provider, provider_subject_id) is unique across all accounts.
    The provider email is advisory and never used to identify the identity.
    """

    provider: AuthProvider
    provider_subject_id: str = Field(min_length=1)
    provider_email: str = ""
    linked_at: datetime = Field(default_factory=utc_now)
    last_login_at: Optional[datetime] = None

    # Fernet ciphertexts, only present if the client asked us to keep them
    access_token_encrypted: Optional[str] = None
    refresh_token_encrypted: Optional[str] = None
    access_token_expires_at: Optional[datetime] = None

    def matches(self, provider: AuthProvider, provider_subject_id: str) -> bool:
        return (
            self.provider == provider
            and self.provider_subject_id == provider_subject_id
        )


class Account(DomainModel):
    """Account aggregate root.

    Linked identities are kept in the order they were linked.
    """

    id: AccountId
    username: str
    email: str = ""  # Primary email; may be empty and is not unique
    email_verified: bool = False
    display_name: str = ""
    picture_url: str = ""
    proficiency: SpokenProficiency = SpokenProficiency.BEGINNER
    bio: AccountBio = AccountBio()
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
    last_login_at: Optional[datetime] = None
    login_count: int = Field(default=0, ge=0)
    linked_identities: tuple[LinkedIdentity, ...] = ()

    def identities_for(self, provider: AuthProvider) -> tuple[LinkedIdentity, ...]:
        return tuple(i for i in self.linked_identities if i.provider == provider)
