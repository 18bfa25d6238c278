"""Create ICHI table.

Revision ID: 20261016_0001
Revises: 
Create Date: 2026-10-16

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


revision = "20261016_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ICHI",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Code", sa.String(), nullable=False),
        sa.Column("BlockId", sa.String(), nullable=True),
        sa.Column("Title", sa.Text(), nullable=False),
        sa.Column("ClassKind", sa.String(), nullable=True),
        sa.Column("DepthInKind", sa.Integer(), nullable=False, server_default="1"),
    )
    op.create_index(op.f("ix_ICHI_Code"), "ICHI", ["Code"], unique=True)
    op.create_index(op.f("ix_ICHI_DepthInKind"), "ICHI", ["DepthInKind"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_ICHI_DepthInKind"), table_name="ICHI")
    op.drop_index(op.f("ix_ICHI_Code"), table_name="ICHI")
    op.drop_table("ICHI")
