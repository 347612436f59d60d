"""
app/services package marker.
"""

from app.services.scrape_service import ScrapeService, get_scrape_service
from app.services.scraping_task_service import ScrapingTaskService, get_scraping_task_service

__all__ = [
    "ScrapeService",
    "get_scrape_service",
    "ScrapingTaskService",
    "get_scraping_task_service",
]
