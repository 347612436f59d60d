"""
Repository for scraping task persistence and lifecycle transitions.

Writes are read-modify-write without version checks: concurrent runs of the
same task overwrite each other and the last write wins.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from app.domain.scraping_task import ScrapingTaskStatus
from db.models.scraping_task import ScrapingTask

EDITABLE_FIELDS = frozenset(
    {
        "task_name",
        "target_url",
        "selectors",
        "data_to_extract",
        "frequency",
        "description",
        "requester_id",
        "requester_name",
    }
)


class ScrapingTaskRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def create_task(self, *, status: str, **fields: Any) -> ScrapingTask:
        task = ScrapingTask(status=status, **self._editable(fields))
        self._session.add(task)
        self._session.flush()
        self._session.refresh(task)
        return task

    def get_task(self, task_id: uuid.UUID) -> ScrapingTask | None:
        return self._session.get(ScrapingTask, task_id)

    def list_tasks(
        self,
        *,
        limit: int = 100,
        status: str | None = None,
    ) -> list[ScrapingTask]:
        stmt: Select[tuple[ScrapingTask]] = select(ScrapingTask)
        if status:
            stmt = stmt.where(ScrapingTask.status == status)

        stmt = stmt.order_by(ScrapingTask.created_at.desc()).limit(max(1, limit))
        return list(self._session.scalars(stmt).all())

    def list_recurring_tasks(self, *, frequencies: Sequence[str]) -> list[ScrapingTask]:
        stmt = (
            select(ScrapingTask)
            .where(ScrapingTask.frequency.in_(list(frequencies)))
            .order_by(ScrapingTask.created_at.asc())
        )
        return list(self._session.scalars(stmt).all())

    def update_task(
        self,
        *,
        task_id: uuid.UUID,
        changes: Mapping[str, Any],
    ) -> ScrapingTask | None:
        task = self.get_task(task_id)
        if task is None:
            return None
        for name, value in self._editable(changes).items():
            setattr(task, name, value)
        return task

    def delete_task(self, *, task_id: uuid.UUID) -> bool:
        task = self.get_task(task_id)
        if task is None:
            return False
        self._session.delete(task)
        return True

    def mark_running(
        self,
        *,
        task_id: uuid.UUID,
        placeholder: str | None = None,
    ) -> ScrapingTask | None:
        task = self.get_task(task_id)
        if task is None:
            return None
        task.status = ScrapingTaskStatus.RUNNING
        task.last_scraped_data = placeholder
        return task

    def mark_completed(
        self,
        *,
        task_id: uuid.UUID,
        scraped_text: str,
    ) -> ScrapingTask | None:
        return self._finish(task_id, ScrapingTaskStatus.COMPLETED, scraped_text)

    def mark_failed(
        self,
        *,
        task_id: uuid.UUID,
        error_text: str,
    ) -> ScrapingTask | None:
        return self._finish(task_id, ScrapingTaskStatus.FAILED, error_text)

    def _finish(self, task_id: uuid.UUID, status: str, text: str) -> ScrapingTask | None:
        task = self.get_task(task_id)
        if task is None:
            return None
        task.status = status
        task.last_run = datetime.now(timezone.utc)
        task.last_scraped_data = text
        return task

    @staticmethod
    def _editable(fields: Mapping[str, Any]) -> dict[str, Any]:
        return {name: value for name, value in fields.items() if name in EDITABLE_FIELDS}
