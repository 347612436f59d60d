"""
app/services/scraping_task_service.py

Scraping task lifecycle: CRUD, run dispatch, and downstream content export.

Status flow::

    Pending | Scheduled --run--> Running --ok--> Completed
                                        --err-> Failed
    Completed | Failed --run--> Running

A run is dispatched in two steps. ``start_run`` marks the task Running in the
caller's session; ``run_task`` performs the fetch in its own session and
stores the terminal state. There is no locking between repeated runs of the
same task; the last finished run wins.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Protocol

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.domain.scraping_task import ScrapeRunOutcome, ScrapingTaskStatus, initial_status_for
from app.schemas.scraping_task import ScrapingTaskCreate, ScrapingTaskUpdate
from app.scraping.logging_utils import log_event
from app.scraping.report import (
    RUNNING_PLACEHOLDER,
    extract_scraped_content,
    failure_text,
    render_csv,
    split_content_rows,
)
from app.services.scrape_service import ScrapeService, get_scrape_service
from db.models.scraping_task import ScrapingTask
from db.repositories.errors import (
    ScrapingTaskContentError,
    ScrapingTaskNotFoundError,
    ScrapingTaskStateError,
)
from db.repositories.scraping_task_repository import ScrapingTaskRepository

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = frozenset({"task_name", "target_url", "selectors", "data_to_extract", "frequency"})
_WHITESPACE_RUN = re.compile(r"\s+")


class ScrapeTaskExecutor(Protocol):
    def submit(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        ...


class FastAPIBackgroundTaskExecutor:
    def __init__(self, background_tasks: BackgroundTasks) -> None:
        self._background_tasks = background_tasks

    def submit(self, task: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
        self._background_tasks.add_task(task, *args, **kwargs)


@dataclass(frozen=True)
class TaskCsvExport:
    filename: str
    content: str
    row_count: int


class ScrapingTaskService:
    """
    Owns scraping task records and drives their run lifecycle.
    """

    def __init__(
        self,
        *,
        session_factory: Callable[[], Session] | None = None,
        scrape_service: ScrapeService | None = None,
    ) -> None:
        if session_factory is None:
            from db.session import SessionLocal

            self._session_factory = SessionLocal
        else:
            self._session_factory = session_factory

        self._scrape_service = scrape_service or get_scrape_service()

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_task(self, *, db: Session, payload: ScrapingTaskCreate) -> ScrapingTask:
        repository = ScrapingTaskRepository(db)
        fields = payload.model_dump()
        task = repository.create_task(status=initial_status_for(payload.frequency), **fields)
        self._commit(db)
        log_event(
            logger,
            logging.INFO,
            "scraping_task_created",
            task_id=task.id,
            frequency=task.frequency,
            status=task.status,
        )
        return task

    def get_task(self, *, db: Session, task_id: uuid.UUID) -> ScrapingTask:
        task = ScrapingTaskRepository(db).get_task(task_id)
        if task is None:
            raise ScrapingTaskNotFoundError(f"Scraping task not found: {task_id}")
        return task

    def list_tasks(
        self,
        *,
        db: Session,
        limit: int = 100,
        status: str | None = None,
    ) -> list[ScrapingTask]:
        return ScrapingTaskRepository(db).list_tasks(limit=limit, status=status)

    def update_task(
        self,
        *,
        db: Session,
        task_id: uuid.UUID,
        payload: ScrapingTaskUpdate,
    ) -> ScrapingTask:
        changes = {
            name: value
            for name, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or name not in _REQUIRED_FIELDS
        }
        task = ScrapingTaskRepository(db).update_task(task_id=task_id, changes=changes)
        if task is None:
            raise ScrapingTaskNotFoundError(f"Scraping task not found: {task_id}")
        self._commit(db)
        return task

    def delete_task(self, *, db: Session, task_id: uuid.UUID) -> None:
        if not ScrapingTaskRepository(db).delete_task(task_id=task_id):
            raise ScrapingTaskNotFoundError(f"Scraping task not found: {task_id}")
        self._commit(db)
        log_event(logger, logging.INFO, "scraping_task_deleted", task_id=task_id)

    # ------------------------------------------------------------------
    # Runs
    # ------------------------------------------------------------------

    def trigger_run(
        self,
        *,
        db: Session,
        executor: ScrapeTaskExecutor,
        task_id: uuid.UUID,
    ) -> ScrapingTask:
        task = self.start_run(db=db, task_id=task_id)
        try:
            executor.submit(self.run_task, task.id)
        except Exception:
            repository = ScrapingTaskRepository(db)
            repository.mark_failed(
                task_id=task.id,
                error_text=failure_text("Failed to schedule scraping task run."),
            )
            self._commit(db)
            raise
        return task

    def start_run(self, *, db: Session, task_id: uuid.UUID) -> ScrapingTask:
        task = ScrapingTaskRepository(db).mark_running(
            task_id=task_id,
            placeholder=RUNNING_PLACEHOLDER,
        )
        if task is None:
            raise ScrapingTaskNotFoundError(f"Scraping task not found: {task_id}")
        self._commit(db)
        log_event(logger, logging.INFO, "scraping_task_run_started", task_id=task_id)
        return task

    def run_task(self, task_id: uuid.UUID) -> ScrapeRunOutcome | None:
        """
        Scrape a task's target and store the terminal status.

        Returns None when the task disappeared before or during the run.
        """

        with self._session_factory() as db:
            repository = ScrapingTaskRepository(db)
            try:
                task = repository.get_task(task_id)
                if task is None:
                    log_event(logger, logging.WARNING, "scraping_task_run_skipped", task_id=task_id)
                    return None
                target_url, selectors, label = task.target_url, task.selectors, task.data_to_extract
                # Release the read transaction before the network call.
                db.commit()

                outcome = self._scrape_service.run_outcome(
                    target_url=target_url,
                    selectors=selectors,
                    data_to_extract=label,
                )

                db.expire_all()
                if outcome.succeeded:
                    finished = repository.mark_completed(task_id=task_id, scraped_text=outcome.scraped_text)
                else:
                    finished = repository.mark_failed(task_id=task_id, error_text=outcome.scraped_text)
                if finished is None:
                    log_event(logger, logging.WARNING, "scraping_task_run_orphaned", task_id=task_id)
                    return None
                db.commit()
            except Exception as exc:
                self._mark_task_failed(db=db, task_id=task_id, exc=exc)
                return None

        log_event(
            logger,
            logging.INFO if outcome.succeeded else logging.WARNING,
            "scraping_task_run_finished",
            task_id=task_id,
            status=outcome.status,
            error=outcome.error,
        )
        return outcome

    def _mark_task_failed(self, *, db: Session, task_id: uuid.UUID, exc: Exception) -> None:
        error_message = f"{type(exc).__name__}: {exc}"
        logger.exception("Scraping task run failed id=%s error=%s", task_id, error_message)
        try:
            db.rollback()
            failed = ScrapingTaskRepository(db).mark_failed(
                task_id=task_id,
                error_text=failure_text(error_message[:2000]),
            )
            if failed is None:
                logger.error("Unable to mark scraping task as failed because it was not found id=%s", task_id)
            db.commit()
        except Exception:
            db.rollback()
            logger.exception("Failed to persist failed scraping task state id=%s", task_id)

    # ------------------------------------------------------------------
    # Downstream consumers
    # ------------------------------------------------------------------

    def get_task_content(self, *, db: Session, task_id: uuid.UUID) -> str:
        """
        Extracted texts of a completed task, as fed to insight generation.
        """

        task = self.get_task(db=db, task_id=task_id)
        if task.status != ScrapingTaskStatus.COMPLETED or not task.last_scraped_data:
            raise ScrapingTaskStateError(
                "No completed scrape data is available for this task. Run it first."
            )
        content = extract_scraped_content(task.last_scraped_data)
        if not content:
            raise ScrapingTaskContentError("The last scrape did not extract any content.")
        return content

    def export_task_csv(self, *, db: Session, task_id: uuid.UUID) -> TaskCsvExport:
        task = self.get_task(db=db, task_id=task_id)
        if not task.last_scraped_data:
            raise ScrapingTaskContentError("This task has no scraped data to export.")

        content = extract_scraped_content(task.last_scraped_data)
        if not content:
            raise ScrapingTaskContentError("The scraped data contains no extracted content.")

        rows = split_content_rows(content)
        if not rows:
            raise ScrapingTaskContentError("The scraped data contains no exportable rows.")

        filename = f"{_WHITESPACE_RUN.sub('_', task.task_name)}_scraped_data.csv"
        return TaskCsvExport(filename=filename, content=render_csv(rows), row_count=len(rows))

    @staticmethod
    def _commit(db: Session) -> None:
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise


@lru_cache(maxsize=1)
def get_scraping_task_service() -> ScrapingTaskService:
    """
    Build and cache the scraping task service.
    """

    return ScrapingTaskService()
