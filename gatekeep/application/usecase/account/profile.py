"""Account profile returned to the account owner."""

from datetime import datetime

from pydantic import BaseModel

from gatekeep.domain.model import Account
from gatekeep.domain.value import AuthProvider, SpokenProficiency


class LinkedIdentityInfo(BaseModel):
    """Linked identity as shown to its owner. Stored credentials are omitted."""

    provider: AuthProvider
    provider_subject_id: str
    provider_email: str
    linked_at: datetime
    last_login_at: datetime | None
    has_stored_credentials: bool


class AccountProfile(BaseModel):
    """Account profile."""

    account_id: str
    username: str
    email: str
    email_verified: bool
    display_name: str
    picture_url: str
    proficiency: SpokenProficiency
    about_me: str
    interests: str
    created_at: datetime
    last_login_at: datetime | None
    login_count: int
    identities: list[LinkedIdentityInfo]


def to_profile(account: Account) -> AccountProfile:
    return AccountProfile(
        account_id=str(account.id),
        username=account.username,
        email=account.email,
        email_verified=account.email_verified,
        display_name=account.display_name,
        picture_url=account.picture_url,
        proficiency=account.proficiency,
        about_me=account.bio.about_me,
        interests=account.bio.interests,
        created_at=account.created_at,
        last_login_at=account.last_login_at,
        login_count=account.login_count,
        identities=[
            LinkedIdentityInfo(
                provider=identity.provider,
                provider_subject_id=identity.provider_subject_id,
                provider_email=identity.provider_email,
                linked_at=identity.linked_at,
                last_login_at=identity.last_login_at,
                has_stored_credentials=bool(
                    identity.access_token_encrypted or identity.refresh_token_encrypted
                ),
            )
            for identity in account.linked_identities
        ],
    )
