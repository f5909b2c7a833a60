"""Initial schema: spaces, space_members, space_pets.

Revision ID: 001
Revises:
Create Date: 2026-10-19

space_members is keyed by (space_id, user_id) so a sync upsert can never
create a second row for the same pair.
"""

from collections.abc import Sequence

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "spaces",
        sa.Column("id", sa.Integer(), autoincrement=False, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(32), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("creator_id", sa.Integer(), nullable=False),
        sa.Column("invite_code", sa.String(32), nullable=False),
        sa.Column("cover_color", sa.String(16), nullable=False),
        sa.Column("created_at", sa.BigInteger(), nullable=False),
        sa.Column("status", sa.String(32), nullable=False),
        sa.Column("check_in_interval_seconds", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_spaces_invite_code", "spaces", ["invite_code"], unique=False)

    op.create_table(
        "space_members",
        sa.Column("space_id", sa.Integer(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("nickname", sa.String(255), nullable=True),
        sa.Column("joined_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("space_id", "user_id"),
        sa.ForeignKeyConstraint(
            ["space_id"],
            ["spaces.id"],
            name="fk_space_members_space_id",
            ondelete="CASCADE",
        ),
    )
    op.create_index("ix_space_members_user_id", "space_members", ["user_id"], unique=False)

    op.create_table(
        "space_pets",
        sa.Column("space_id", sa.Integer(), nullable=False),
        sa.Column("remote_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("type", sa.String(16), nullable=False),
        sa.Column("mood", sa.Integer(), nullable=False),
        sa.Column("health", sa.Integer(), nullable=False),
        sa.Column("energy", sa.Integer(), nullable=False),
        sa.Column("hydration", sa.Integer(), nullable=False),
        sa.Column("intimacy", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.BigInteger(), nullable=False),
        sa.PrimaryKeyConstraint("space_id"),
        sa.ForeignKeyConstraint(
            ["space_id"],
            ["spaces.id"],
            name="fk_space_pets_space_id",
            ondelete="CASCADE",
        ),
    )


def downgrade() -> None:
    op.drop_table("space_pets")
    op.drop_index("ix_space_members_user_id", table_name="space_members")
    op.drop_table("space_members")
    op.drop_index("ix_spaces_invite_code", table_name="spaces")
    op.drop_table("spaces")
