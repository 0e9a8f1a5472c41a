"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2025-01-15 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Tracked products
    op.create_table(
        "products",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("position", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(512), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("quantity", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("purchase_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("sale_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("competitor_new_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("competitor_used_price", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("last_updated", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_products_name", "products", ["name"])
    op.create_index("ix_products_created_at", "products", ["created_at"])
    op.create_index("ix_products_position", "products", ["position"])

    # Price search log, pruned to the newest entries by the application
    op.create_table(
        "search_history",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "timestamp",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column("search_type", sa.String(32), nullable=False),
        sa.Column("product_name", sa.String(512), nullable=False),
        sa.Column("result", sa.Text(), nullable=False),
        sa.Column("min_price", sa.Integer(), nullable=True),
        sa.Column("matched_product_id", sa.String(64), nullable=True),
    )
    op.create_index("ix_search_history_timestamp", "search_history", ["timestamp"])


def downgrade() -> None:
    op.drop_index("ix_search_history_timestamp", table_name="search_history")
    op.drop_table("search_history")
    op.drop_index("ix_products_position", table_name="products")
    op.drop_index("ix_products_created_at", table_name="products")
    op.drop_index("ix_products_name", table_name="products")
    op.drop_table("products")
