"""Create profile and wallet_method tables.

Revision ID: 0001
Revises:
Create Date: 2026-09-28 10:12:41.000000

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from profilesync.adapters.sqlalchemy.mappings import UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "profile",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("username", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=True),
        sa.Column("bio", sa.Text(), nullable=True),
        sa.Column("avatar_url", sa.String(), nullable=True),
        sa.Column("banner_url", sa.String(), nullable=True),
        sa.Column("location", sa.String(), nullable=True),
        sa.Column("theme", sa.String(length=16), nullable=False),
        sa.Column("show_social_links", sa.Boolean(), nullable=False),
        sa.Column("show_payment_methods", sa.Boolean(), nullable=False),
        sa.Column("show_goals", sa.Boolean(), nullable=False),
        sa.Column("show_about", sa.Boolean(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_profile")),
        sa.UniqueConstraint("owner_id", name=op.f("uq_profile_owner_id")),
        sa.UniqueConstraint("username", name=op.f("uq_profile_username")),
    )
    op.create_table(
        "wallet_method",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("platform", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("handle", sa.String(), nullable=True),
        sa.Column("url", sa.String(), nullable=True),
        sa.Column("details", sa.JSON(), nullable=False),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("order_index", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_wallet_method")),
    )
    with op.batch_alter_table("wallet_method", schema=None) as batch_op:
        batch_op.create_index(
            batch_op.f("ix_wallet_method_owner_id"), ["owner_id"], unique=False
        )


def downgrade() -> None:
    with op.batch_alter_table("wallet_method", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_wallet_method_owner_id"))

    op.drop_table("wallet_method")
    op.drop_table("profile")
