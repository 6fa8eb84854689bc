"""SQLAlchemy table definitions for Gatekeep.

Tables are used through SQLAlchemy Core; rows are converted to immutable
domain models by the mappers module. They match the schema defined in the
Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Table,
    Text,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

# ============================================================================
# ACCOUNTS TABLE
# ============================================================================
accounts_table = Table(
    "accounts",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("username", String(255), nullable=False),
    Column("email", String(320), nullable=False, server_default=""),
    Column("email_verified", Boolean, nullable=False, server_default="false"),
    Column("display_name", String(255), nullable=False, server_default=""),
    Column("picture_url", Text, nullable=False, server_default=""),
    Column("proficiency", String(20), nullable=False, server_default="beginner"),
    Column("about_me", Text, nullable=False, server_default=""),
    Column("interests", Text, nullable=False, server_default=""),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    Column("login_count", Integer, nullable=False, server_default="0"),
)

# Not unique: several accounts may share a primary email
Index("idx_accounts_email", accounts_table.c.email)

# ============================================================================
# LINKED IDENTITIES TABLE
# ============================================================================
linked_identities_table = Table(
    "linked_identities",
    metadata,
    Column("provider", String(20), nullable=False),  # 'google', 'microsoft', ...
    Column("provider_subject_id", String(255), nullable=False),
    Column(
        "account_id",
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("position", Integer, nullable=False),  # Link order within the account
    Column("provider_email", String(320), nullable=False, server_default=""),
    Column("linked_at", TIMESTAMP(timezone=True), nullable=False),
    Column("last_login_at", TIMESTAMP(timezone=True), nullable=True),
    Column("access_token_encrypted", Text, nullable=True),
    Column("refresh_token_encrypted", Text, nullable=True),
    Column("access_token_expires_at", TIMESTAMP(timezone=True), nullable=True),
    # One account per provider identity, system-wide
    PrimaryKeyConstraint(
        "provider", "provider_subject_id", name="pk_linked_identities"
    ),
)

Index("idx_linked_identities_account_id", linked_identities_table.c.account_id)

# ============================================================================
# REFRESH TOKENS TABLE
# ============================================================================
refresh_tokens_table = Table(
    "refresh_tokens",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "account_id",
        UUID(as_uuid=True),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("token_hash", String(64), nullable=False),  # Hex SHA-256
    Column("created_at", TIMESTAMP(timezone=True), nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("revoked_at", TIMESTAMP(timezone=True), nullable=True),
    Column("replaced_by_token_hash", String(64), nullable=True),
)

Index(
    "idx_refresh_tokens_token_hash", refresh_tokens_table.c.token_hash, unique=True
)
Index("idx_refresh_tokens_account_id", refresh_tokens_table.c.account_id)
