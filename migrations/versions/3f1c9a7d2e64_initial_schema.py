"""initial_schema

Create the foundational schema for Kin:
- Users (soft-deletable, email unique among live accounts)
- Families and family memberships (ADMIN/MEMBER roles, capacity cap)
- Invites (encrypted/legacy variant, one open invite per family and email)
- Family invites (email-bound variant, hashed codes, encrypted emails)
- Email verification tokens
- Channels (default channel per family)

Revision ID: 3f1c9a7d2e64
Revises:
Create Date: 2026-10-19 09:12:44.518203

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2e64"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(*names: str) -> list[sa.Column]:
    return [
        sa.Column(
            name,
            sa.TIMESTAMP(timezone=True),
            nullable=False,
            server_default=sa.text("NOW()"),
        )
        for name in names
    ]


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # USERS table
    # ========================================================================
    op.create_table(
        "users",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("public_key", sa.String(44), nullable=True),  # X25519, base64
        sa.Column(
            "email_verified", sa.Boolean(), nullable=False, server_default="false"
        ),
        sa.Column("email_verified_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        sa.Column("active_family_id", sa.UUID(), nullable=True),
        sa.Column(
            "preferences",
            postgresql.JSONB(),
            nullable=False,
            server_default=sa.text("'{}'::jsonb"),
        ),
        sa.Column("last_seen_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps("created_at", "updated_at"),
        sa.Column("deleted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    # Email is unique among live accounts only
    op.create_index(
        "uq_users_email_active",
        "users",
        [sa.text("lower(email)")],
        unique=True,
        postgresql_where=sa.text("deleted_at IS NULL"),
    )

    # ========================================================================
    # FAMILIES table
    # ========================================================================
    op.create_table(
        "families",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("invite_code", sa.String(64), nullable=False),
        sa.Column("max_members", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("created_by", sa.UUID(), nullable=False),
        *_timestamps("created_at", "updated_at"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invite_code", name="uq_families_invite_code"),
        sa.CheckConstraint("max_members >= 1", name="check_families_max_members"),
    )

    # users.active_family_id needs families to exist first
    op.create_foreign_key(
        "fk_users_active_family_id",
        "users",
        "families",
        ["active_family_id"],
        ["id"],
        ondelete="SET NULL",
    )

    # ========================================================================
    # FAMILY_MEMBERSHIPS table
    # ========================================================================
    op.create_table(
        "family_memberships",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("family_id", sa.UUID(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="member"),
        *_timestamps("joined_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["family_id"], ["families.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "user_id", "family_id", name="uq_family_memberships_user_family"
        ),
    )
    op.create_index(
        "idx_family_memberships_family_id", "family_memberships", ["family_id"]
    )

    # ========================================================================
    # INVITES table (encrypted/legacy variant)
    # ========================================================================
    op.create_table(
        "invites",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("family_id", sa.UUID(), nullable=False),
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column("invitee_email", sa.String(255), nullable=False),
        sa.Column("encrypted_family_key", sa.Text(), nullable=True),
        sa.Column("nonce", sa.Text(), nullable=True),
        sa.Column("invite_code", sa.String(64), nullable=False),
        sa.Column("status", sa.String(32), nullable=False, server_default="pending"),
        sa.Column("invitee_language", sa.String(8), nullable=True),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("accepted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("resend_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("last_resend_at", sa.TIMESTAMP(timezone=True), nullable=True),
        *_timestamps("created_at", "updated_at"),
        sa.ForeignKeyConstraint(["family_id"], ["families.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inviter_id"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("invite_code", name="uq_invites_invite_code"),
        sa.CheckConstraint(
            "status IN ('pending', 'pending_registration', 'accepted', 'expired', 'revoked')",
            name="check_invites_status",
        ),
    )
    op.create_index(
        "uq_invites_open_family_email",
        "invites",
        ["family_id", sa.text("lower(invitee_email)")],
        unique=True,
        postgresql_where=sa.text("status IN ('pending', 'pending_registration')"),
    )
    op.create_index(
        "idx_invites_invitee_email", "invites", [sa.text("lower(invitee_email)")]
    )

    # ========================================================================
    # FAMILY_INVITES table (email-bound variant)
    # ========================================================================
    op.create_table(
        "family_invites",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("family_id", sa.UUID(), nullable=False),
        sa.Column("inviter_id", sa.UUID(), nullable=False),
        sa.Column("code_hash", sa.String(64), nullable=False),  # SHA-256 hex
        sa.Column("invitee_email_encrypted", sa.Text(), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("redeemed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("redeemed_by_user_id", sa.UUID(), nullable=True),
        *_timestamps("created_at"),
        sa.ForeignKeyConstraint(["family_id"], ["families.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["inviter_id"], ["users.id"]),
        # Deferred: a sign-up marks the invite before inserting the user
        sa.ForeignKeyConstraint(
            ["redeemed_by_user_id"],
            ["users.id"],
            ondelete="SET NULL",
            deferrable=True,
            initially="DEFERRED",
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("code_hash", name="uq_family_invites_code_hash"),
    )
    op.create_index("idx_family_invites_family_id", "family_invites", ["family_id"])

    # ========================================================================
    # EMAIL_VERIFICATION_TOKENS table
    # ========================================================================
    op.create_table(
        "email_verification_tokens",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("token_hash", sa.String(64), nullable=False),
        sa.Column("expires_at", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("used_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("pending_invite_code", sa.String(64), nullable=True),
        *_timestamps("created_at"),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint(
            "token_hash", name="uq_email_verification_tokens_token_hash"
        ),
    )
    op.create_index(
        "idx_email_verification_tokens_user_id",
        "email_verification_tokens",
        ["user_id"],
    )

    # ========================================================================
    # CHANNELS table
    # ========================================================================
    op.create_table(
        "channels",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("family_id", sa.UUID(), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(32), nullable=True),
        sa.Column("is_default", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("created_by", sa.UUID(), nullable=False),
        *_timestamps("created_at"),
        sa.ForeignKeyConstraint(["family_id"], ["families.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_channels_family_id", "channels", ["family_id"])


def downgrade() -> None:
    """Downgrade schema."""
    # Drop tables (in reverse order of dependencies)
    op.drop_table("channels")
    op.drop_table("email_verification_tokens")
    op.drop_table("family_invites")
    op.drop_table("invites")
    op.drop_table("family_memberships")
    op.drop_constraint("fk_users_active_family_id", "users", type_="foreignkey")
    op.drop_table("families")
    op.drop_table("users")
