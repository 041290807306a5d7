"""create barter_offers table

Revision ID: 001
Revises:
Create Date: 2026-10-01 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _party_column(name: str, nullable: bool = True) -> sa.Column:
    return sa.Column(name, sa.String(128), nullable=nullable)


def upgrade() -> None:
    op.create_table(
        "barter_offers",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        _party_column("requester_id", nullable=False),
        _party_column("owner_id", nullable=False),
        sa.Column("original_item_id", sa.String(128), nullable=False),
        sa.Column("original_item", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(20), server_default="pending", nullable=False),
        sa.Column("negotiations", sa.JSON(), nullable=False),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("conversation_id", sa.String(128), nullable=True),
        sa.Column("version", sa.Integer(), server_default="1", nullable=False),
        sa.Column("accepted_at", sa.DateTime(timezone=True), nullable=True),
        _party_column("accepted_by"),
        sa.Column("rejected_at", sa.DateTime(timezone=True), nullable=True),
        _party_column("rejected_by"),
        sa.Column("rejection_reason", sa.Text(), nullable=True),
        sa.Column("cancelled_at", sa.DateTime(timezone=True), nullable=True),
        _party_column("cancelled_by"),
        sa.Column("cancellation_reason", sa.Text(), nullable=True),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        _party_column("completed_by"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id", name="pk_barter_offers"),
        sa.CheckConstraint(
            "status IN ('pending', 'counter_offered', 'accepted', "
            "'rejected', 'cancelled', 'completed')",
            name="ck_barter_offers_status",
        ),
    )
    op.create_index("ix_barter_offers_requester_id", "barter_offers", ["requester_id"])
    op.create_index("ix_barter_offers_owner_id", "barter_offers", ["owner_id"])
    op.create_index("ix_barter_offers_original_item_id", "barter_offers", ["original_item_id"])
    op.create_index(
        "ix_barter_offers_owner_created", "barter_offers", ["owner_id", "created_at"]
    )
    op.create_index(
        "ix_barter_offers_requester_created", "barter_offers", ["requester_id", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_barter_offers_requester_created", table_name="barter_offers")
    op.drop_index("ix_barter_offers_owner_created", table_name="barter_offers")
    op.drop_index("ix_barter_offers_original_item_id", table_name="barter_offers")
    op.drop_index("ix_barter_offers_owner_id", table_name="barter_offers")
    op.drop_index("ix_barter_offers_requester_id", table_name="barter_offers")
    op.drop_table("barter_offers")
