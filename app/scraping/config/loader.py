"""
Environment loader for scrape settings.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache

from bs4.builder import builder_registry

from app.scraping.config.models import DEFAULT_HTML_PARSER, DEFAULT_USER_AGENT, ScrapeSettings
from db.config import load_env_files

logger = logging.getLogger(__name__)

_SUPPORTED_PARSERS = {"html.parser", "lxml", "html5lib"}


def _get_str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    stripped = raw.strip()
    return stripped if stripped else default


def _get_optional_positive_float_env(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None


def _parser_installed(parser: str) -> bool:
    return builder_registry.lookup(parser) is not None


def _get_parser_env(name: str, default: str) -> str:
    """
    Resolve the BeautifulSoup parser once, falling back to the default when
    the configured one is unknown or its package is not installed.
    """

    parser = _get_str_env(name, default).lower()
    if parser in _SUPPORTED_PARSERS and _parser_installed(parser):
        return parser
    logger.warning(
        "Unusable HTML parser %s=%r, falling back to %r",
        name,
        parser,
        default,
    )
    return default


@lru_cache(maxsize=1)
def get_scrape_settings() -> ScrapeSettings:
    """
    Return cached scrape settings from environment variables.
    """

    load_env_files()
    return ScrapeSettings(
        user_agent=_get_str_env("SCRAPE_USER_AGENT", DEFAULT_USER_AGENT),
        timeout_seconds=_get_optional_positive_float_env("SCRAPE_TIMEOUT_SECONDS"),
        html_parser=_get_parser_env("SCRAPE_HTML_PARSER", DEFAULT_HTML_PARSER),
    )
