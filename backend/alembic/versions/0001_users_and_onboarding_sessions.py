"""Create users and onboarding_sessions.

Revision ID: 0001
Revises:
Create Date: 2026-10-19

users carries the profile fields the onboarding wizard writes
(bio, skills, interests, availability, onboarded). onboarding_sessions
holds one row per started wizard.
"""

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

import sqlalchemy as sa
from alembic import op

user_role = sa.Enum(
    "OPS_LEAD", "LEGAL_LEAD", "ADMIN", "VIEWER", "ATTORNEY", "MEMBER",
    name="userrole",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255)),
        sa.Column("organization", sa.String(255)),
        sa.Column("role", user_role, nullable=False, server_default="MEMBER"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("bio", sa.Text()),
        sa.Column("skills", sa.JSON()),
        sa.Column("interests", sa.JSON()),
        sa.Column("availability", sa.String(20)),
        sa.Column("onboarded", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "onboarding_sessions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "user_id",
            sa.String(36),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("current_step", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("collected_fields", sa.JSON(), nullable=False, server_default="{}"),
        sa.Column("acknowledgements", sa.JSON(), nullable=False, server_default="{}"),
        sa.Column("profile_saved", sa.Boolean()),
        sa.Column("created_at", sa.DateTime(timezone=True)),
        sa.Column("updated_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
    )
    op.create_index(
        "ix_onboarding_sessions_user_id", "onboarding_sessions", ["user_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_onboarding_sessions_user_id", table_name="onboarding_sessions")
    op.drop_table("onboarding_sessions")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_table("users")
    user_role.drop(op.get_bind(), checkfirst=True)
