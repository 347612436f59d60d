"""
Selector list parsing helpers.
"""

from __future__ import annotations

import re

_SELECTOR_DELIMITERS = re.compile(r"[\n,]+")


def parse_selector_list(raw: str | None) -> list[str]:
    """
    Split a user-supplied selector string on newlines and commas.

    Pieces are trimmed and empty pieces dropped; order and duplicates are kept.
    """

    if not raw:
        return []
    return [piece.strip() for piece in _SELECTOR_DELIMITERS.split(raw) if piece.strip()]


def is_xpath_like(selector: str) -> bool:
    # No XPath engine is wired in; these go to the CSS engine as-is.
    return selector.startswith(("/", "("))
