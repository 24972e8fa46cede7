"""create_items_and_gift_coupons

Revision ID: 5c1e7a9d2b40
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = "5c1e7a9d2b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "items",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_items_id"), "items", ["id"], unique=False)

    op.create_table(
        "gift_coupons",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("code", sa.String(length=64), nullable=False),
        sa.Column("description", sa.String(length=500), nullable=True),
        sa.Column("discount_type", sa.String(length=32), nullable=False),
        sa.Column("usage_limit", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("used_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("individual_use", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("gift_payload", sa.JSON(), nullable=True),
        sa.Column("is_generated", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("requested_item_ids", sa.JSON(), nullable=True),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("(CURRENT_TIMESTAMP)"), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_gift_coupons_code"), "gift_coupons", ["code"], unique=True)
    op.create_index(op.f("ix_gift_coupons_id"), "gift_coupons", ["id"], unique=False)
    op.create_index(op.f("ix_gift_coupons_is_generated"), "gift_coupons", ["is_generated"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_gift_coupons_is_generated"), table_name="gift_coupons")
    op.drop_index(op.f("ix_gift_coupons_id"), table_name="gift_coupons")
    op.drop_index(op.f("ix_gift_coupons_code"), table_name="gift_coupons")
    op.drop_table("gift_coupons")
    op.drop_index(op.f("ix_items_id"), table_name="items")
    op.drop_table("items")
