"""
Model package exports.

Import all SQLAlchemy models here so metadata registration and Alembic
autogeneration work without extra imports.
"""

from db.models.scraping_task import ScrapingTask

__all__ = [
    "ScrapingTask",
]
