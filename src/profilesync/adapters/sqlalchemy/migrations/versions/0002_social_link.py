"""Create social_link table.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-02 16:40:03.000000

"""

from __future__ import annotations

from typing import TYPE_CHECKING

import sqlalchemy as sa
from alembic import op

from profilesync.adapters.sqlalchemy.mappings import UTCDateTime

if TYPE_CHECKING:
    from collections.abc import Sequence

revision: str = "0002"
down_revision: str | None = "0001"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "social_link",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("owner_id", sa.Uuid(), nullable=False),
        sa.Column("platform", sa.String(length=16), nullable=False),
        sa.Column("label", sa.String(), nullable=False),
        sa.Column("url", sa.String(), nullable=False),
        sa.Column("photo_url", sa.String(), nullable=True),
        sa.Column("photo_caption", sa.String(), nullable=True),
        sa.Column("wallet_method_id", sa.Uuid(), nullable=True),
        sa.Column("enabled", sa.Boolean(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        sa.Column("created_at", UTCDateTime(), nullable=False),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_social_link")),
    )
    with op.batch_alter_table("social_link", schema=None) as batch_op:
        batch_op.create_index(batch_op.f("ix_social_link_owner_id"), ["owner_id"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("social_link", schema=None) as batch_op:
        batch_op.drop_index(batch_op.f("ix_social_link_owner_id"))

    op.drop_table("social_link")
