"""Enable pg_trgm and add trigram index for ICHI title search.

Revision ID: 20261016_0002
Revises: 20261016_0001
Create Date: 2026-10-16

"""

from __future__ import annotations

from alembic import op


revision = "20261016_0002"
down_revision = "20261016_0001"
branch_labels = None
depends_on = None


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != "postgresql":
        return

    op.execute("CREATE EXTENSION IF NOT EXISTS pg_trgm")
    op.execute(
        'CREATE INDEX IF NOT EXISTS ix_ichi_display_title_trgm ON "ICHI" '
        "USING gin (ltrim(\"Title\", '- ') gin_trgm_ops)"
    )


def downgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != "postgresql":
        return

    op.execute("DROP INDEX IF EXISTS ix_ichi_display_title_trgm")
