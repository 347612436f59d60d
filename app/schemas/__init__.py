"""
app/schemas package marker.
"""

from app.schemas.scrape import ScrapeErrorResponse, ScrapeRequestBody, ScrapeResponse
from app.schemas.scraping_task import (
    ScrapingTaskContentResponse,
    ScrapingTaskCreate,
    ScrapingTaskListResponse,
    ScrapingTaskResponse,
    ScrapingTaskUpdate,
)

__all__ = [
    "ScrapeErrorResponse",
    "ScrapeRequestBody",
    "ScrapeResponse",
    "ScrapingTaskContentResponse",
    "ScrapingTaskCreate",
    "ScrapingTaskListResponse",
    "ScrapingTaskResponse",
    "ScrapingTaskUpdate",
]
