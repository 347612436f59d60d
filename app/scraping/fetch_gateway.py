"""
Outbound page fetch for scrape runs.
"""

from __future__ import annotations

import logging

import requests

from app.scraping.config.models import ScrapeSettings
from app.scraping.errors import FetchError
from app.scraping.logging_utils import log_event

logger = logging.getLogger(__name__)


class FetchGateway:
    """
    Single-attempt HTTP GET with a browser-like identity.

    Any failure is terminal for the run: no retry, no backoff.
    """

    def __init__(
        self,
        *,
        settings: ScrapeSettings,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._session = session or requests.Session()
        self.request_headers = {"User-Agent": settings.user_agent}

    def fetch(self, url: str) -> str:
        """
        Return the response body of a 2xx GET, or raise FetchError.
        """

        try:
            response = self._session.get(
                url,
                headers=self.request_headers,
                timeout=self._settings.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise self._failed(url, FetchError(str(exc))) from exc

        if not 200 <= response.status_code < 300:
            status_text = response.reason or ""
            raise self._failed(
                url,
                FetchError(
                    f"Failed to fetch the page. Status: {response.status_code} - {status_text}",
                    status_code=response.status_code,
                    status_text=status_text,
                ),
            )

        content_type = response.headers.get("Content-Type", "")
        if "charset" not in content_type.lower():
            # requests falls back to ISO-8859-1 for undeclared text/* bodies.
            response.encoding = "utf-8"
        return response.text

    @staticmethod
    def _failed(url: str, error: FetchError) -> FetchError:
        log_event(
            logger,
            logging.ERROR,
            "scrape_fetch_failed",
            url=url,
            status_code=error.status_code,
            error=error.message,
        )
        return error
