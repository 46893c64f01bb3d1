"""SQLAlchemy table definitions for the Telloom authority records.

These table definitions are used with SQLAlchemy Core and manual mappers.
They match the schema defined in Alembic migrations.
"""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    MetaData,
    String,
    Table,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID

# Metadata object for all tables
metadata = MetaData()

ROLE_VALUES = "('SHARER', 'EXECUTOR', 'LISTENER', 'ADMIN')"
INVITATION_STATUS_VALUES = "('PENDING', 'ACCEPTED', 'DECLINED', 'REVOKED', 'EXPIRED')"

# ============================================================================
# PROFILES TABLE (one per authenticated principal)
# ============================================================================
profiles_table = Table(
    "profiles",
    metadata,
    Column("id", UUID, primary_key=True),  # Same id as the auth user
    Column("email", String(255), nullable=True),
    Column("first_name", String(255), nullable=True),
    Column("last_name", String(255), nullable=True),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

Index("idx_profiles_email", profiles_table.c.email)

# ============================================================================
# PROFILE SHARERS TABLE (partition owners)
# ============================================================================
profile_sharers_table = Table(
    "profile_sharers",
    metadata,
    Column("id", UUID, primary_key=True),  # The partition id
    Column(
        "profile_id",
        UUID,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,  # At most one partition per profile
    ),
    Column("subscription_active", Boolean, nullable=False, server_default="false"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
)

# ============================================================================
# PROFILE EXECUTORS TABLE (executor delegations)
# ============================================================================
profile_executors_table = Table(
    "profile_executors",
    metadata,
    Column("id", UUID, primary_key=True),
    Column(
        "executor_id", UUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "sharer_id",
        UUID,
        ForeignKey("profile_sharers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("executor_id", "sharer_id", name="uq_executor_sharer"),
)

# Resolution order: newest grant first, partition id as tie-break
Index(
    "idx_profile_executors_resolution",
    profile_executors_table.c.executor_id,
    profile_executors_table.c.created_at.desc(),
    profile_executors_table.c.sharer_id,
)

# ============================================================================
# PROFILE LISTENERS TABLE (listener delegations)
# ============================================================================
profile_listeners_table = Table(
    "profile_listeners",
    metadata,
    Column("id", UUID, primary_key=True),
    Column(
        "listener_id", UUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    ),
    Column(
        "sharer_id",
        UUID,
        ForeignKey("profile_sharers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column("has_access", Boolean, nullable=False, server_default="true"),
    Column("notifications", Boolean, nullable=False, server_default="true"),
    Column(
        "shared_since", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("listener_id", "sharer_id", name="uq_listener_sharer"),
)

Index("idx_profile_listeners_listener_id", profile_listeners_table.c.listener_id)

# ============================================================================
# PROFILE ROLES TABLE (role assignments)
# ============================================================================
profile_roles_table = Table(
    "profile_roles",
    metadata,
    Column("id", UUID, primary_key=True),
    Column(
        "profile_id", UUID, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False
    ),
    Column("role", String(20), nullable=False),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    UniqueConstraint("profile_id", "role", name="uq_profile_role"),
    CheckConstraint(f"role IN {ROLE_VALUES}", name="ck_profile_roles_role"),
)

# ============================================================================
# INVITATIONS TABLE
# ============================================================================
invitations_table = Table(
    "invitations",
    metadata,
    Column("id", UUID, primary_key=True),
    Column("token", String(255), nullable=False, unique=True),  # URL-safe token
    Column("invitee_email", String(255), nullable=False),  # Stored lowercased
    Column(
        "sharer_id",
        UUID,
        ForeignKey("profile_sharers.id", ondelete="CASCADE"),
        nullable=False,
    ),
    Column(
        "inviter_id", UUID, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True
    ),
    Column("role", String(20), nullable=False),
    Column("status", String(20), nullable=False, server_default="PENDING"),
    Column(
        "created_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column(
        "updated_at", TIMESTAMP(timezone=True), nullable=False, server_default="NOW()"
    ),
    Column("accepted_at", TIMESTAMP(timezone=True), nullable=True),
    CheckConstraint("role IN ('EXECUTOR', 'LISTENER')", name="ck_invitations_role"),
    CheckConstraint(
        f"status IN {INVITATION_STATUS_VALUES}", name="ck_invitations_status"
    ),
)

Index("idx_invitations_sharer_id", invitations_table.c.sharer_id)

# Partial unique constraint: only one pending invitation per email and partition
Index(
    "idx_invitations_unique_pending",
    invitations_table.c.invitee_email,
    invitations_table.c.sharer_id,
    unique=True,
    postgresql_where=invitations_table.c.status == "PENDING",
)
