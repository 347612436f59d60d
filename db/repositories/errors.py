"""
Repository-layer exceptions for scraping task flows.
"""

from __future__ import annotations


class ScrapingTaskError(Exception):
    """Base exception for scraping task failures."""


class ScrapingTaskNotFoundError(ScrapingTaskError):
    """Raised when a referenced scraping task does not exist."""


class ScrapingTaskStateError(ScrapingTaskError):
    """Raised when the task status does not allow the requested operation."""


class ScrapingTaskContentError(ScrapingTaskError):
    """Raised when a task has no stored content to hand downstream."""
