"""SQLAlchemy table definitions for Kin.

They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, TIMESTAMP, UUID

metadata = MetaData()

# ============================================================================
# USERS TABLE
# ============================================================================
users_table = Table(
    "users",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("email", String(255), nullable=False),
    Column("name", String(100), nullable=False),
    Column("password_hash", String(255), nullable=False),
    Column("public_key", String(44), nullable=True),
    Column("email_verified", Boolean, nullable=False, server_default="false"),
    Column("email_verified_at", TIMESTAMP(timezone=True), nullable=True),
    Column("role", String(20), nullable=False, server_default="member"),
    Column(
        "active_family_id",
        UUID(as_uuid=True),
        ForeignKey(
            "families.id",
            ondelete="SET NULL",
            use_alter=True,
            name="fk_users_active_family_id",
        ),
        nullable=True,
    ),
    Column("preferences", JSONB, nullable=False, server_default="{}"),
    Column("last_seen_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("deleted_at", TIMESTAMP(timezone=True), nullable=True),
)

# Email is unique among live accounts only; deleted accounts free the address
Index(
    "uq_users_email_active",
    func.lower(users_table.c.email),
    unique=True,
    postgresql_where=users_table.c.deleted_at.is_(None),
)

# ============================================================================
# FAMILIES TABLE
# ============================================================================
families_table = Table(
    "families",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column("name", String(100), nullable=False),
    Column("invite_code", String(64), nullable=False, unique=True),
    Column("max_members", Integer, nullable=False, server_default="10"),
    Column("created_by", UUID(as_uuid=True), ForeignKey("users.id"), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint("max_members >= 1", name="check_families_max_members"),
)

# ============================================================================
# FAMILY MEMBERSHIPS TABLE
# ============================================================================
family_memberships_table = Table(
    "family_memberships",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "family_id",
        UUID(as_uuid=True),
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("role", String(20), nullable=False, server_default="member"),
    Column(
        "joined_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("user_id", "family_id", name="uq_family_memberships_user_family"),
)

Index("idx_family_memberships_family_id", family_memberships_table.c.family_id)

# ============================================================================
# INVITES TABLE (legacy/encrypted variant)
# ============================================================================
invites_table = Table(
    "invites",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "family_id",
        UUID(as_uuid=True),
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("inviter_id", UUID(as_uuid=True), ForeignKey("users.id"), nullable=False),
    Column("invitee_email", String(255), nullable=False),
    Column("encrypted_family_key", Text, nullable=True),  # Opaque E2EE blob
    Column("nonce", Text, nullable=True),  # Opaque E2EE blob
    Column("invite_code", String(64), nullable=False, unique=True),
    Column("status", String(32), nullable=False, server_default="pending"),
    Column("invitee_language", String(8), nullable=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    Column("resend_count", Integer, nullable=False, server_default="0"),
    Column("last_resend_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    CheckConstraint(
        "status IN ('pending', 'pending_registration', 'accepted', 'expired', 'revoked')",
        name="check_invites_status",
    ),
)

# At most one open invite per (family, email)
Index(
    "uq_invites_open_family_email",
    invites_table.c.family_id,
    func.lower(invites_table.c.invitee_email),
    unique=True,
    postgresql_where=invites_table.c.status.in_(["pending", "pending_registration"]),
)
Index("idx_invites_invitee_email", func.lower(invites_table.c.invitee_email))

# ============================================================================
# FAMILY INVITES TABLE (email-bound variant)
# ============================================================================
family_invites_table = Table(
    "family_invites",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "family_id",
        UUID(as_uuid=True),
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("inviter_id", UUID(as_uuid=True), ForeignKey("users.id"), nullable=False),
    Column("code_hash", String(64), nullable=False, unique=True),
    Column("invitee_email_encrypted", Text, nullable=False),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("redeemed_at", TIMESTAMP(timezone=True), nullable=True),
    Column(
        "redeemed_by_user_id",
        UUID(as_uuid=True),
        # Deferred: a sign-up marks the invite before inserting the user
        ForeignKey(
            "users.id", ondelete="SET NULL", deferrable=True, initially="DEFERRED"
        ),
        nullable=True,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_family_invites_family_id", family_invites_table.c.family_id)

# ============================================================================
# EMAIL VERIFICATION TOKENS TABLE
# ============================================================================
email_verification_tokens_table = Table(
    "email_verification_tokens",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "user_id",
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("token_hash", String(64), nullable=False, unique=True),
    Column("expires_at", TIMESTAMP(timezone=True), nullable=False),
    Column("used_at", TIMESTAMP(timezone=True), nullable=True),
    Column("pending_invite_code", String(64), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index(
    "idx_email_verification_tokens_user_id", email_verification_tokens_table.c.user_id
)

# ============================================================================
# CHANNELS TABLE
# ============================================================================
channels_table = Table(
    "channels",
    metadata,
    Column("id", UUID(as_uuid=True), primary_key=True),
    Column(
        "family_id",
        UUID(as_uuid=True),
        ForeignKey("families.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("name", String(100), nullable=False),
    Column("description", Text, nullable=True),
    Column("icon", String(32), nullable=True),
    Column("is_default", Boolean, nullable=False, server_default="false"),
    Column("created_by", UUID(as_uuid=True), ForeignKey("users.id"), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_channels_family_id", channels_table.c.family_id)
