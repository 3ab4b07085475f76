"""create user_badges table

Revision ID: 0001
Revises:
Create Date: 2025-10-26

Grant ledger for the badge worker. Unique (user_id, badge_name) makes
granting idempotent at the DB level. Activity tables (journal_entries,
gratitude_entries, mood_check_ins, flip_feel*) belong to the recording
services and are migrated there.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "user_badges",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(36), nullable=False),
        sa.Column("badge_name", sa.String(128), nullable=False),
        sa.Column(
            "granted_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_user_badges_id", "user_badges", ["id"])
    op.create_index("ix_user_badges_user_id", "user_badges", ["user_id"])
    op.create_unique_constraint(
        "uq_user_badges_user_badge",
        "user_badges",
        ["user_id", "badge_name"],
    )


def downgrade() -> None:
    op.drop_constraint("uq_user_badges_user_badge", "user_badges", type_="unique")
    op.drop_index("ix_user_badges_user_id", table_name="user_badges")
    op.drop_index("ix_user_badges_id", table_name="user_badges")
    op.drop_table("user_badges")
