"""
app/domain package marker.
"""

from app.domain.scraping_task import (
    FREQUENCY_INTERVALS,
    ScrapeFrequency,
    ScrapeRunOutcome,
    ScrapingTaskStatus,
    initial_status_for,
)

__all__ = [
    "FREQUENCY_INTERVALS",
    "ScrapeFrequency",
    "ScrapeRunOutcome",
    "ScrapingTaskStatus",
    "initial_status_for",
]
