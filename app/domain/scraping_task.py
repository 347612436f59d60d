"""
app/domain/scraping_task.py

Domain constants and value objects for scraping task lifecycle.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta


class ScrapingTaskStatus:
    PENDING = "Pending"
    SCHEDULED = "Scheduled"
    RUNNING = "Running"
    COMPLETED = "Completed"
    FAILED = "Failed"

    ALL = (PENDING, SCHEDULED, RUNNING, COMPLETED, FAILED)
    TERMINAL = (COMPLETED, FAILED)


class ScrapeFrequency:
    ONCE = "once"
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    ALL = (ONCE, HOURLY, DAILY, WEEKLY, MONTHLY)


FREQUENCY_INTERVALS: dict[str, timedelta] = {
    ScrapeFrequency.HOURLY: timedelta(hours=1),
    ScrapeFrequency.DAILY: timedelta(days=1),
    ScrapeFrequency.WEEKLY: timedelta(weeks=1),
    ScrapeFrequency.MONTHLY: timedelta(days=30),
}


def initial_status_for(frequency: str) -> str:
    """
    One-off tasks wait to be run by hand; recurring ones wait for the scheduler.
    """

    if frequency == ScrapeFrequency.ONCE:
        return ScrapingTaskStatus.PENDING
    return ScrapingTaskStatus.SCHEDULED


@dataclass(frozen=True)
class ScrapeRunOutcome:
    """
    Terminal result of one task run.
    """

    succeeded: bool
    scraped_text: str
    error: str | None = None

    @property
    def status(self) -> str:
        return ScrapingTaskStatus.COMPLETED if self.succeeded else ScrapingTaskStatus.FAILED
