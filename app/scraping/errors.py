"""
Scrape pipeline exceptions.
"""

from __future__ import annotations


class ScrapeError(Exception):
    """Base exception for scrape failures surfaced to the caller."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InputValidationError(ScrapeError):
    """Raised when the request is rejected before any fetch is attempted."""


class FetchError(ScrapeError):
    """Raised when the target page cannot be fetched."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        status_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.status_text = status_text
