"""
Config helpers for the scrape pipeline.
"""

from app.scraping.config.loader import get_scrape_settings
from app.scraping.config.models import DEFAULT_HTML_PARSER, DEFAULT_USER_AGENT, ScrapeSettings

__all__ = [
    "DEFAULT_HTML_PARSER",
    "DEFAULT_USER_AGENT",
    "ScrapeSettings",
    "get_scrape_settings",
]
