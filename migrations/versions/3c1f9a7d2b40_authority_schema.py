"""authority_schema

Create the authority schema for Telloom:
- Profiles (one per authenticated principal)
- Profile sharers (partition owners, at most one partition per profile)
- Profile executors / listeners (delegations into a partition)
- Profile roles (role assignments)
- Invitations (email invitations into a partition)
- Privileged SQL functions used by provisioning and resolution

Revision ID: 3c1f9a7d2b40
Revises:
Create Date: 2026-10-19 10:12:44.318204

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "3c1f9a7d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _created_at(name: str = "created_at") -> sa.Column:
    return sa.Column(
        name,
        sa.TIMESTAMP(timezone=True),
        nullable=False,
        server_default=sa.text("NOW()"),
    )


def upgrade() -> None:
    """Upgrade schema."""
    # ========================================================================
    # PROFILES table
    # ========================================================================
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),  # Same id as the auth user
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("first_name", sa.String(255), nullable=True),
        sa.Column("last_name", sa.String(255), nullable=True),
        _created_at(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("idx_profiles_email", "profiles", ["email"])

    # ========================================================================
    # PROFILE_SHARERS table (the partition id is profile_sharers.id)
    # ========================================================================
    op.create_table(
        "profile_sharers",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("profile_id", sa.UUID(), nullable=False),
        sa.Column(
            "subscription_active",
            sa.Boolean(),
            nullable=False,
            server_default="false",
        ),
        _created_at(),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", name="uq_profile_sharers_profile_id"),
    )

    # ========================================================================
    # PROFILE_EXECUTORS table
    # ========================================================================
    op.create_table(
        "profile_executors",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("executor_id", sa.UUID(), nullable=False),
        sa.Column("sharer_id", sa.UUID(), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["executor_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["sharer_id"], ["profile_sharers.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("executor_id", "sharer_id", name="uq_executor_sharer"),
    )
    op.create_index(
        "idx_profile_executors_resolution",
        "profile_executors",
        ["executor_id", sa.text("created_at DESC"), "sharer_id"],
    )

    # ========================================================================
    # PROFILE_LISTENERS table
    # ========================================================================
    op.create_table(
        "profile_listeners",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("listener_id", sa.UUID(), nullable=False),
        sa.Column("sharer_id", sa.UUID(), nullable=False),
        sa.Column("has_access", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column(
            "notifications", sa.Boolean(), nullable=False, server_default="true"
        ),
        _created_at("shared_since"),
        _created_at(),
        sa.ForeignKeyConstraint(["listener_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["sharer_id"], ["profile_sharers.id"], ondelete="CASCADE"
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("listener_id", "sharer_id", name="uq_listener_sharer"),
    )
    op.create_index(
        "idx_profile_listeners_listener_id", "profile_listeners", ["listener_id"]
    )

    # ========================================================================
    # PROFILE_ROLES table
    # ========================================================================
    op.create_table(
        "profile_roles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("profile_id", sa.UUID(), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        _created_at(),
        sa.ForeignKeyConstraint(["profile_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("profile_id", "role", name="uq_profile_role"),
        sa.CheckConstraint(
            "role IN ('SHARER', 'EXECUTOR', 'LISTENER', 'ADMIN')",
            name="ck_profile_roles_role",
        ),
    )

    # ========================================================================
    # INVITATIONS table
    # ========================================================================
    op.create_table(
        "invitations",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("token", sa.String(255), nullable=False),
        sa.Column("invitee_email", sa.String(255), nullable=False),
        sa.Column("sharer_id", sa.UUID(), nullable=False),
        sa.Column("inviter_id", sa.UUID(), nullable=True),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column(
            "status", sa.String(20), nullable=False, server_default="PENDING"
        ),
        _created_at(),
        _created_at("updated_at"),
        sa.Column("accepted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(
            ["sharer_id"], ["profile_sharers.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["inviter_id"], ["profiles.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token", name="uq_invitations_token"),
        sa.CheckConstraint(
            "role IN ('EXECUTOR', 'LISTENER')", name="ck_invitations_role"
        ),
        sa.CheckConstraint(
            "status IN ('PENDING', 'ACCEPTED', 'DECLINED', 'REVOKED', 'EXPIRED')",
            name="ck_invitations_status",
        ),
    )
    op.create_index("idx_invitations_sharer_id", "invitations", ["sharer_id"])

    # Only one pending invitation per email and partition
    op.create_index(
        "idx_invitations_unique_pending",
        "invitations",
        ["invitee_email", "sharer_id"],
        unique=True,
        postgresql_where=sa.text("status = 'PENDING'"),
    )

    # ========================================================================
    # READ FUNCTIONS (executor resolution, admin check)
    # ========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION get_executor_for_user(p_user_id UUID)
        RETURNS TABLE (sharer_id UUID)
        LANGUAGE sql STABLE SECURITY DEFINER
        AS $$
            SELECT pe.sharer_id
            FROM profile_executors pe
            WHERE pe.executor_id = p_user_id
            ORDER BY pe.created_at DESC, pe.sharer_id ASC
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION is_admin(p_user_id UUID)
        RETURNS BOOLEAN
        LANGUAGE sql STABLE SECURITY DEFINER
        AS $$
            SELECT EXISTS (
                SELECT 1 FROM profile_roles
                WHERE profile_id = p_user_id AND role = 'ADMIN'
            )
        $$;
    """)

    # ========================================================================
    # WRITE FUNCTIONS (create-if-absent, return true when a row was inserted)
    # ========================================================================
    op.execute("""
        CREATE OR REPLACE FUNCTION create_profile(
            p_id UUID, p_email TEXT, p_created_at TIMESTAMPTZ
        )
        RETURNS BOOLEAN
        LANGUAGE plpgsql SECURITY DEFINER
        AS $$
        BEGIN
            INSERT INTO profiles (id, email, created_at)
            VALUES (p_id, p_email, p_created_at)
            ON CONFLICT (id) DO NOTHING;
            RETURN FOUND;
        END;
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION create_profile_sharer(
            p_id UUID, p_profile_id UUID, p_subscription_active BOOLEAN,
            p_created_at TIMESTAMPTZ
        )
        RETURNS BOOLEAN
        LANGUAGE plpgsql SECURITY DEFINER
        AS $$
        BEGIN
            INSERT INTO profile_sharers (id, profile_id, subscription_active, created_at)
            VALUES (p_id, p_profile_id, p_subscription_active, p_created_at)
            ON CONFLICT (profile_id) DO NOTHING;
            RETURN FOUND;
        END;
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION create_profile_role(
            p_id UUID, p_profile_id UUID, p_role TEXT, p_created_at TIMESTAMPTZ
        )
        RETURNS BOOLEAN
        LANGUAGE plpgsql SECURITY DEFINER
        AS $$
        BEGIN
            INSERT INTO profile_roles (id, profile_id, role, created_at)
            VALUES (p_id, p_profile_id, p_role, p_created_at)
            ON CONFLICT (profile_id, role) DO NOTHING;
            RETURN FOUND;
        END;
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION create_profile_executor(
            p_id UUID, p_executor_id UUID, p_sharer_id UUID, p_created_at TIMESTAMPTZ
        )
        RETURNS BOOLEAN
        LANGUAGE plpgsql SECURITY DEFINER
        AS $$
        BEGIN
            INSERT INTO profile_executors (id, executor_id, sharer_id, created_at)
            VALUES (p_id, p_executor_id, p_sharer_id, p_created_at)
            ON CONFLICT (executor_id, sharer_id) DO NOTHING;
            RETURN FOUND;
        END;
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION create_profile_listener(
            p_id UUID, p_listener_id UUID, p_sharer_id UUID, p_has_access BOOLEAN,
            p_notifications BOOLEAN, p_shared_since TIMESTAMPTZ
        )
        RETURNS BOOLEAN
        LANGUAGE plpgsql SECURITY DEFINER
        AS $$
        BEGIN
            INSERT INTO profile_listeners (
                id, listener_id, sharer_id, has_access, notifications, shared_since
            )
            VALUES (
                p_id, p_listener_id, p_sharer_id, p_has_access, p_notifications,
                p_shared_since
            )
            ON CONFLICT (listener_id, sharer_id) DO NOTHING;
            RETURN FOUND;
        END;
        $$;
    """)

    op.execute("""
        CREATE OR REPLACE FUNCTION update_invitation_status(
            p_id UUID, p_status TEXT, p_at TIMESTAMPTZ
        )
        RETURNS BOOLEAN
        LANGUAGE plpgsql SECURITY DEFINER
        AS $$
        BEGIN
            UPDATE invitations
            SET status = p_status,
                updated_at = p_at,
                accepted_at = CASE WHEN p_status = 'ACCEPTED' THEN p_at ELSE accepted_at END
            WHERE id = p_id AND status = 'PENDING';
            RETURN FOUND;
        END;
        $$;
    """)


def downgrade() -> None:
    """Downgrade schema."""
    op.execute("DROP FUNCTION IF EXISTS update_invitation_status(UUID, TEXT, TIMESTAMPTZ)")
    op.execute(
        "DROP FUNCTION IF EXISTS "
        "create_profile_listener(UUID, UUID, UUID, BOOLEAN, BOOLEAN, TIMESTAMPTZ)"
    )
    op.execute(
        "DROP FUNCTION IF EXISTS create_profile_executor(UUID, UUID, UUID, TIMESTAMPTZ)"
    )
    op.execute(
        "DROP FUNCTION IF EXISTS create_profile_role(UUID, UUID, TEXT, TIMESTAMPTZ)"
    )
    op.execute(
        "DROP FUNCTION IF EXISTS "
        "create_profile_sharer(UUID, UUID, BOOLEAN, TIMESTAMPTZ)"
    )
    op.execute("DROP FUNCTION IF EXISTS create_profile(UUID, TEXT, TIMESTAMPTZ)")
    op.execute("DROP FUNCTION IF EXISTS is_admin(UUID)")
    op.execute("DROP FUNCTION IF EXISTS get_executor_for_user(UUID)")

    op.drop_index("idx_invitations_unique_pending", table_name="invitations")
    op.drop_index("idx_invitations_sharer_id", table_name="invitations")
    op.drop_table("invitations")
    op.drop_table("profile_roles")
    op.drop_index("idx_profile_listeners_listener_id", table_name="profile_listeners")
    op.drop_table("profile_listeners")
    op.drop_index("idx_profile_executors_resolution", table_name="profile_executors")
    op.drop_table("profile_executors")
    op.drop_table("profile_sharers")
    op.drop_index("idx_profiles_email", table_name="profiles")
    op.drop_table("profiles")
