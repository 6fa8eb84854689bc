"""Mappers for converting between database rows and domain models.

Domain models are immutable pydantic models, so rows are mapped by hand
instead of through SQLAlchemy's ORM.
"""

from typing import Any, Dict, Iterable
from uuid import UUID

from gatekeep.domain.model import (
    Account,
    AccountBio,
    LinkedIdentity,
    RefreshTokenRecord,
)
from gatekeep.domain.value import (
    AccountId,
    AuthProvider,
    RefreshTokenId,
    SpokenProficiency,
)


def _uuid(value: Any) -> UUID:
    return UUID(value) if isinstance(value, str) else value


def row_to_linked_identity(row: Dict[str, Any]) -> LinkedIdentity:
    """Convert a linked_identities row to a LinkedIdentity."""
    return LinkedIdentity(
        provider=AuthProvider(row["provider"]),
        provider_subject_id=row["provider_subject_id"],
        provider_email=row.get("provider_email") or "",
        linked_at=row["linked_at"],
        last_login_at=row.get("last_login_at"),
        access_token_encrypted=row.get("access_token_encrypted"),
        refresh_token_encrypted=row.get("refresh_token_encrypted"),
        access_token_expires_at=row.get("access_token_expires_at"),
    )


def row_to_account(
    row: Dict[str, Any], identity_rows: Iterable[Dict[str, Any]] = ()
) -> Account:
    """Convert an accounts row and its identity rows to an Account.

    Args:
        row: accounts row as dict
        identity_rows: linked_identities rows of the account, in link order

    Returns:
        Account domain model
    """
    return Account(
        id=AccountId(_uuid(row["id"])),
        username=row["username"],
        email=row.get("email") or "",
        email_verified=row["email_verified"],
        display_name=row.get("display_name") or "",
        picture_url=row.get("picture_url") or "",
        proficiency=SpokenProficiency(row.get("proficiency") or "beginner"),
        bio=AccountBio(
            about_me=row.get("about_me") or "",
            interests=row.get("interests") or "",
        ),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        last_login_at=row.get("last_login_at"),
        login_count=row["login_count"],
        linked_identities=tuple(row_to_linked_identity(r) for r in identity_rows),
    )


def account_to_dict(account: Account) -> Dict[str, Any]:
    """Convert an Account to an accounts row (identities excluded)."""
    return {
        "id": account.id,
        "username": account.username,
        "email": account.email,
        "email_verified": account.email_verified,
        "display_name": account.display_name,
        "picture_url": account.picture_url,
        "proficiency": account.proficiency.value,
        "about_me": account.bio.about_me,
        "interests": account.bio.interests,
        "created_at": account.created_at,
        "updated_at": account.updated_at,
        "last_login_at": account.last_login_at,
        "login_count": account.login_count,
    }


def linked_identities_to_dicts(account: Account) -> list[Dict[str, Any]]:
    """Convert an account's identities to linked_identities rows."""
    return [
        {
            "provider": identity.provider.value,
            "provider_subject_id": identity.provider_subject_id,
            "account_id": account.id,
            "position": position,
            "provider_email": identity.provider_email,
            "linked_at": identity.linked_at,
            "last_login_at": identity.last_login_at,
            "access_token_encrypted": identity.access_token_encrypted,
            "refresh_token_encrypted": identity.refresh_token_encrypted,
            "access_token_expires_at": identity.access_token_expires_at,
        }
        for position, identity in enumerate(account.linked_identities)
    ]


def row_to_refresh_token(row: Dict[str, Any]) -> RefreshTokenRecord:
    """Convert a refresh_tokens row to a RefreshTokenRecord."""
    return RefreshTokenRecord(
        id=RefreshTokenId(_uuid(row["id"])),
        account_id=AccountId(_uuid(row["account_id"])),
        token_hash=row["token_hash"],
        created_at=row["created_at"],
        expires_at=row["expires_at"],
        revoked_at=row.get("revoked_at"),
        replaced_by_token_hash=row.get("replaced_by_token_hash"),
    )


def refresh_token_to_dict(record: RefreshTokenRecord) -> Dict[str, Any]:
    """Convert a RefreshTokenRecord to a refresh_tokens row."""
    return record.model_dump()
