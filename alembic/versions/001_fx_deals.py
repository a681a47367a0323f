"""Add fx_deals table.

Revision ID: 001
Revises:
Create Date: 2026-10-17
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
        "fx_deals",
        sa.Column("id", sa.BigInteger().with_variant(sa.Integer, "sqlite"), primary_key=True, autoincrement=True),
        sa.Column("deal_unique_id", sa.String(100), nullable=False),
        sa.Column("from_currency_iso_code", sa.String(3), nullable=False),
        sa.Column("to_currency_iso_code", sa.String(3), nullable=False),
        sa.Column("deal_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("deal_amount", sa.Numeric(19, 4), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_fx_deals_deal_unique_id", "fx_deals", ["deal_unique_id"], unique=True)


def downgrade() -> None:
    op.drop_index("ix_fx_deals_deal_unique_id", table_name="fx_deals")
    op.drop_table("fx_deals")
