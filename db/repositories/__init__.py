"""
Repository layer exports.
"""

from db.repositories.errors import (
    ScrapingTaskContentError,
    ScrapingTaskError,
    ScrapingTaskNotFoundError,
    ScrapingTaskStateError,
)
from db.repositories.scraping_task_repository import ScrapingTaskRepository

__all__ = [
    "ScrapingTaskRepository",
    "ScrapingTaskError",
    "ScrapingTaskNotFoundError",
    "ScrapingTaskStateError",
    "ScrapingTaskContentError",
]
