"""
Scrape engine: validate, fetch, extract, report.
"""

from __future__ import annotations

import logging

import requests

from app.scraping.config.models import ScrapeSettings
from app.scraping.errors import InputValidationError
from app.scraping.fetch_gateway import FetchGateway
from app.scraping.logging_utils import log_event
from app.scraping.parsing.html_parsers import SelectorExtractionEngine
from app.scraping.report import ScrapeReportBuilder
from app.scraping.selectors import parse_selector_list
from app.scraping.types import (
    Matched,
    MatchedEmpty,
    NoMatch,
    ScrapeRequest,
    ScrapeResult,
    SelectorError,
)

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Target URL and selectors are required."
NO_SELECTORS_MESSAGE = "No valid selectors provided."


class ScrapeEngine:
    """
    Runs one scrape: a single fetch followed by per-selector extraction.
    """

    def __init__(
        self,
        *,
        settings: ScrapeSettings,
        gateway: FetchGateway | None = None,
        extractor: SelectorExtractionEngine | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._settings = settings
        self._gateway = gateway or FetchGateway(settings=settings, session=session)
        self._extractor = extractor or SelectorExtractionEngine(parser=settings.html_parser)

    @staticmethod
    def build_request(
        *,
        target_url: str | None,
        selectors: str | None,
        data_to_extract: str | None = None,
    ) -> ScrapeRequest:
        """
        Validate raw inputs and return a request with a parsed selector list.

        Raises InputValidationError before any network work is done.
        """

        url = (target_url or "").strip()
        if not url or selectors is None:
            raise InputValidationError(MISSING_INPUT_MESSAGE)

        selector_list = parse_selector_list(selectors)
        if not selector_list:
            raise InputValidationError(NO_SELECTORS_MESSAGE)

        return ScrapeRequest(
            target_url=url,
            selectors=selector_list,
            data_to_extract=data_to_extract or None,
        )

    def run(self, request: ScrapeRequest) -> str:
        """
        Fetch the target page and return the rendered report text.

        FetchError propagates; selector failures are folded into the report.
        """

        html = self._gateway.fetch(request.target_url)
        result = self._extractor.extract(html, request.selectors)
        log_event(
            logger,
            logging.INFO,
            "scrape_completed",
            url=request.target_url,
            **_outcome_counts(result),
        )
        return ScrapeReportBuilder.build(request, result)


def _outcome_counts(result: ScrapeResult) -> dict[str, int]:
    counts = {"matched": 0, "matched_empty": 0, "no_match": 0, "selector_errors": 0}
    for report in result.per_selector:
        if isinstance(report.outcome, Matched):
            counts["matched"] += 1
        elif isinstance(report.outcome, MatchedEmpty):
            counts["matched_empty"] += 1
        elif isinstance(report.outcome, NoMatch):
            counts["no_match"] += 1
        elif isinstance(report.outcome, SelectorError):
            counts["selector_errors"] += 1
    counts["texts"] = len(result.all_texts)
    return counts
