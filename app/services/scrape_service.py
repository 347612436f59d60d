"""
app/services/scrape_service.py

Service wrapper around the scrape engine for the API and the task runner.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.domain.scraping_task import ScrapeRunOutcome
from app.scraping.config import ScrapeSettings, get_scrape_settings
from app.scraping.engine import ScrapeEngine
from app.scraping.errors import ScrapeError
from app.scraping.report import failure_text

logger = logging.getLogger(__name__)

GENERIC_FAILURE_MESSAGE = "Failed to scrape the website."


class ScrapeService:
    """
    Validates raw scrape inputs and runs them through the engine.
    """

    def __init__(
        self,
        *,
        settings: ScrapeSettings | None = None,
        engine: ScrapeEngine | None = None,
    ) -> None:
        self._settings = settings or get_scrape_settings()
        self._engine = engine or ScrapeEngine(settings=self._settings)

    def scrape(
        self,
        *,
        target_url: str | None,
        selectors: str | None,
        data_to_extract: str | None = None,
    ) -> str:
        """
        Return the report text for one scrape.

        Raises InputValidationError or FetchError.
        """

        request = self._engine.build_request(
            target_url=target_url,
            selectors=selectors,
            data_to_extract=data_to_extract,
        )
        return self._engine.run(request)

    def run_outcome(
        self,
        *,
        target_url: str | None,
        selectors: str | None,
        data_to_extract: str | None = None,
    ) -> ScrapeRunOutcome:
        """
        Run a scrape and fold any failure into a human-readable outcome.
        """

        try:
            text = self.scrape(
                target_url=target_url,
                selectors=selectors,
                data_to_extract=data_to_extract,
            )
        except ScrapeError as exc:
            return ScrapeRunOutcome(
                succeeded=False,
                scraped_text=failure_text(exc.message),
                error=exc.message,
            )
        except Exception as exc:
            logger.exception("Unexpected scrape failure url=%s", target_url)
            message = str(exc) or GENERIC_FAILURE_MESSAGE
            return ScrapeRunOutcome(
                succeeded=False,
                scraped_text=failure_text(message),
                error=message,
            )
        return ScrapeRunOutcome(succeeded=True, scraped_text=text)


@lru_cache(maxsize=1)
def get_scrape_service() -> ScrapeService:
    """
    Build and cache the scrape service.
    """

    return ScrapeService()
