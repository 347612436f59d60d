"""
db/models/scraping_task.py

Scraping task model: one configured, repeatable scrape job and the status and
result text of its most recent run.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.scraping_task import ScrapingTaskStatus
from db.base import Base, TimestampMixin


class ScrapingTask(Base, TimestampMixin):
    __tablename__ = "scraping_tasks"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )
    task_name: Mapped[str] = mapped_column(String(255), nullable=False)
    target_url: Mapped[str] = mapped_column(Text, nullable=False)
    selectors: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Raw selector string; newline or comma separated",
    )
    data_to_extract: Mapped[str] = mapped_column(Text, nullable=False)
    frequency: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        comment="once, hourly, daily, weekly, monthly",
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    requester_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    requester_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    status: Mapped[str] = mapped_column(
        String(16),
        nullable=False,
        default=ScrapingTaskStatus.PENDING,
    )
    last_run: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )
    last_scraped_data: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
        comment="Rendered scrape report, or a failure narrative",
    )

    __table_args__ = (
        Index("ix_scraping_tasks_status", "status"),
        Index("ix_scraping_tasks_created_at", "created_at"),
        Index("ix_scraping_tasks_frequency_status", "frequency", "status"),
    )
