"""
BeautifulSoup-based selector extraction over fetched pages.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from bs4 import BeautifulSoup, Tag
from bs4.element import Comment, Declaration, Doctype, NavigableString, ProcessingInstruction

from app.scraping.config.models import DEFAULT_HTML_PARSER
from app.scraping.logging_utils import log_event
from app.scraping.selectors import is_xpath_like
from app.scraping.types import (
    Matched,
    MatchedEmpty,
    NoMatch,
    ScrapeResult,
    SelectorError,
    SelectorOutcome,
)

logger = logging.getLogger(__name__)

_NON_TEXT_STRINGS = (Comment, Declaration, Doctype, ProcessingInstruction)


class SelectorExtractionEngine:
    """
    Applies CSS selectors to one HTML document and classifies each outcome.

    The engine holds no per-document state; one instance can serve any number
    of extractions.
    """

    def __init__(self, *, parser: str = DEFAULT_HTML_PARSER) -> None:
        self._parser = parser

    def extract(self, html: str, selectors: Sequence[str]) -> ScrapeResult:
        soup = BeautifulSoup(html, self._parser)
        result = ScrapeResult()
        for selector in selectors:
            if is_xpath_like(selector):
                log_event(
                    logger,
                    logging.WARNING,
                    "selector_xpath_like",
                    selector=selector,
                    hint="XPath is not supported; the selector is applied as CSS.",
                )
            result.add(selector, self.apply_selector(soup=soup, selector=selector))
        return result

    @classmethod
    def apply_selector(cls, *, soup: BeautifulSoup, selector: str) -> SelectorOutcome:
        try:
            elements = soup.select(selector)
            if not elements:
                return NoMatch()

            element_texts = [cls._element_text(element) for element in elements]
            texts = [text for text in element_texts if text]
            if not texts:
                return MatchedEmpty(element_count=len(elements))
            return Matched(texts=texts)
        except Exception as exc:
            log_event(
                logger,
                logging.WARNING,
                "selector_failed",
                selector=selector,
                error=str(exc),
            )
            return SelectorError(message=str(exc))

    @staticmethod
    def _element_text(element: Tag) -> str:
        # textContent: every descendant text node, script and style included, comments not.
        return "".join(
            str(node)
            for node in element.descendants
            if isinstance(node, NavigableString) and not isinstance(node, _NON_TEXT_STRINGS)
        ).strip()
