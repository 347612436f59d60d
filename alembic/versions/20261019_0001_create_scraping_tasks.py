"""create scraping_tasks table

Revision ID: 20261019_0001
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "scraping_tasks",
        sa.Column("id", sa.Uuid(), nullable=False),
        sa.Column("task_name", sa.String(length=255), nullable=False),
        sa.Column("target_url", sa.Text(), nullable=False),
        sa.Column("selectors", sa.Text(), nullable=False),
        sa.Column("data_to_extract", sa.Text(), nullable=False),
        sa.Column("frequency", sa.String(length=16), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("requester_id", sa.String(length=64), nullable=True),
        sa.Column("requester_name", sa.String(length=255), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False),
        sa.Column("last_run", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_scraped_data", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_scraping_tasks_created_at", "scraping_tasks", ["created_at"], unique=False)
    op.create_index("ix_scraping_tasks_status", "scraping_tasks", ["status"], unique=False)
    op.create_index(
        "ix_scraping_tasks_frequency_status",
        "scraping_tasks",
        ["frequency", "status"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_scraping_tasks_frequency_status", table_name="scraping_tasks")
    op.drop_index("ix_scraping_tasks_status", table_name="scraping_tasks")
    op.drop_index("ix_scraping_tasks_created_at", table_name="scraping_tasks")
    op.drop_table("scraping_tasks")
