"""
Scraping configuration models.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)
DEFAULT_HTML_PARSER = "html5lib"


@dataclass(frozen=True)
class ScrapeSettings:
    """
    Runtime settings for the scrape pipeline.

    ``timeout_seconds`` of None leaves the HTTP client without a timeout.
    """

    user_agent: str = DEFAULT_USER_AGENT
    timeout_seconds: float | None = None
    html_parser: str = DEFAULT_HTML_PARSER
