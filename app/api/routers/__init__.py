"""
app/api/routers package marker.
"""

from app.api.routers.scrape import router as scrape_router
from app.api.routers.scraping_tasks import router as scraping_tasks_router

__all__ = [
    "scrape_router",
    "scraping_tasks_router",
]
