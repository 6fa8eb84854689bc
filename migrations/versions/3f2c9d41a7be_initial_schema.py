"""initial_schema

Create the schema for Gatekeep:
- Accounts (local identity, profile, login statistics)
- Linked identities (provider identities; (provider, subject) is the primary key)
- Refresh tokens (hashed opaque tokens with rotation chain)

Revision ID: 3f2c9d41a7be
Revises:
Create Date: 2026-10-19 09:12:44.281930

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f2c9d41a7be"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "accounts",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(255), nullable=False),
        sa.Column("email", sa.String(320), nullable=False, server_default=""),
        sa.Column(
            "email_verified", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("display_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("picture_url", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "proficiency", sa.String(20), nullable=False, server_default="beginner"
        ),
        sa.Column("about_me", sa.Text(), nullable=False, server_default=""),
        sa.Column("interests", sa.Text(), nullable=False, server_default=""),
        sa.Column(
            "created_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column(
            "updated_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        ),
        sa.Column("last_login_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("login_count", sa.Integer(), nullable=False, server_default="0"),
        sa.CheckConstraint("login_count >= 0", name="check_login_count_non_negative"),
        sa.CheckConstraint(
            "proficiency IN ('beginner', 'intermediate', 'advanced', 'native')",
            name="check_proficiency",
        ),
    )
    op.create_index("idx_accounts_email", "accounts", ["email"])

    op.create_table(
        "linked_identities",
        sa.Column("provider", sa.String(20), nullable=False),
        sa.Column("provider_subject_id", sa.String(255), nullable=False),
        sa.Column(
            "account_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("provider_email", sa.String(320), nullable=False, server_default=""),
        sa.Column("linked_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("last_login_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("access_token_encrypted", sa.Text(), nullable=True),
        sa.Column("refresh_token_encrypted", sa.Text(), nullable=True),
        sa.Column(
            "access_token_expires_at",
            postgresql.TIMESTAMP(timezone=True),
            nullable=True,
        ),
        sa.PrimaryKeyConstraint(
            "provider", "provider_subject_id", name="pk_linked_identities"
        ),
        sa.CheckConstraint(
            "provider IN ('google', 'microsoft', 'facebook')", name="check_provider"
        ),
    )
    op.create_index(
        "idx_linked_identities_account_id", "linked_identities", ["account_id"]
    )

    op.create_table(
        "refresh_tokens",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column(
            "account_id",
            postgresql.UUID(as_uuid=True),
            sa.ForeignKey("accounts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("created_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("expires_at", postgresql.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("revoked_at", postgresql.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("replaced_by_token_hash", sa.String(64), nullable=True),
    )
    op.create_index(
        "idx_refresh_tokens_token_hash", "refresh_tokens", ["token_hash"], unique=True
    )
    op.create_index("idx_refresh_tokens_account_id", "refresh_tokens", ["account_id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("refresh_tokens")
    op.drop_table("linked_identities")
    op.drop_table("accounts")
