"""
app/scheduler/jobs.py

APScheduler-based runner for recurring scraping tasks.

Due tasks
---------
A task is due when its frequency is recurring (hourly, daily, weekly,
monthly) and it has either never run or its ``last_run`` is at least one
frequency interval ago. A task still Running is skipped unless that run
started (``updated_at``) at least one interval ago; such a run was left
behind by a crashed process and is reclaimed. One-off tasks are never
picked up here; they are run by hand.

Each tick runs due tasks sequentially through the same lifecycle as a manual
run. A failure on one task is logged and the tick moves on.

Lifecycle
----------
Call ``build_scheduler()`` once to get a configured ``BackgroundScheduler``.
Start it on app boot; shut it down gracefully on app shutdown.
The scheduler is wired into FastAPI via the ``lifespan`` context in main.py.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import AbstractContextManager, contextmanager
from datetime import datetime, timezone

from apscheduler.schedulers.background import BackgroundScheduler
from sqlalchemy.orm import Session

from app.config import SchedulerSettings, get_scheduler_settings
from app.domain.scraping_task import FREQUENCY_INTERVALS, ScrapingTaskStatus
from app.services.scraping_task_service import ScrapingTaskService, get_scraping_task_service
from db.models.scraping_task import ScrapingTask
from db.repositories.errors import ScrapingTaskNotFoundError
from db.repositories.scraping_task_repository import ScrapingTaskRepository
from db.session import SessionLocal

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_task_due(task: ScrapingTask, *, now: datetime) -> bool:
    interval = FREQUENCY_INTERVALS.get(task.frequency)
    if interval is None:
        return False
    current = _as_utc(now)
    if task.status == ScrapingTaskStatus.RUNNING:
        return task.updated_at is not None and _as_utc(task.updated_at) + interval <= current
    if task.last_run is None:
        return True
    return _as_utc(task.last_run) + interval <= current


def find_due_tasks(session: Session, *, now: datetime, limit: int) -> list[ScrapingTask]:
    candidates = ScrapingTaskRepository(session).list_recurring_tasks(
        frequencies=list(FREQUENCY_INTERVALS),
    )
    return [task for task in candidates if is_task_due(task, now=now)][:limit]


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Yield a fresh session and ensure it is closed on exit."""
    session: Session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


def run_due_scraping_tasks(
    *,
    task_service: ScrapingTaskService | None = None,
    session_scope: Callable[[], AbstractContextManager[Session]] = _session_scope,
    now: datetime | None = None,
    settings: SchedulerSettings | None = None,
) -> int:
    """
    Run every due recurring task once. Returns the number of runs attempted.
    """

    service = task_service or get_scraping_task_service()
    limit = (settings or get_scheduler_settings()).max_tasks_per_tick
    current = now or datetime.now(tz=timezone.utc)

    with session_scope() as db:
        due_tasks = find_due_tasks(db, now=current, limit=limit)
        due_ids = [task.id for task in due_tasks]
        if not due_ids:
            logger.info("Scheduler: scraping_tasks nothing due")
            return 0

        logger.info("Scheduler: scraping_tasks starting count=%d", len(due_ids))
        for task in due_tasks:
            if task.status == ScrapingTaskStatus.RUNNING:
                logger.warning(
                    "Scheduler: reclaiming abandoned scraping task run id=%s started_at=%s",
                    task.id,
                    task.updated_at,
                )
        attempted = 0
        for task_id in due_ids:
            try:
                service.start_run(db=db, task_id=task_id)
            except ScrapingTaskNotFoundError:
                logger.warning("Scheduler: scraping task vanished before run id=%s", task_id)
                continue
            except Exception as exc:  # noqa: BLE001
                db.rollback()
                logger.warning("Scheduler: could not start scraping task id=%s: %s", task_id, exc)
                continue

            attempted += 1
            outcome = service.run_task(task_id)
            logger.info(
                "Scheduler: scraping task id=%s status=%s",
                task_id,
                outcome.status if outcome is not None else "skipped",
            )

    logger.info("Scheduler: scraping_tasks complete attempted=%d", attempted)
    return attempted


def build_scheduler(settings: SchedulerSettings | None = None) -> BackgroundScheduler:
    """
    Build and register the recurring scrape job.

    Returns a configured but *not yet started* ``BackgroundScheduler``.
    The caller must call ``.start()`` and ``.shutdown(wait=True)`` at the
    appropriate lifecycle points.
    """
    resolved = settings or get_scheduler_settings()
    scheduler = BackgroundScheduler(timezone="UTC")

    scheduler.add_job(
        run_due_scraping_tasks,
        trigger="interval",
        minutes=resolved.interval_minutes,
        id="scraping_tasks",
        name="Recurring scraping task runner",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=600,
    )

    return scheduler
