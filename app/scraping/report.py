"""
Scrape report rendering and parsing.

The rendered report is stored verbatim on the task record and read back by the
CSV export and insights feed, so the literal phrases below are a wire format:

    Successfully scraped content for "<label>":

    <text 1>
    ---
    <text 2>

    Attempted to scrape "<label>" from <url>.
    Selectors used: <s1>; <s2>

    --- Detailed Selector Report ---
    <one paragraph per selector, blank-line separated>
"""

from __future__ import annotations

import csv
import io
import re

from typing_extensions import assert_never

from app.scraping.types import (
    Matched,
    MatchedEmpty,
    NoMatch,
    ScrapeRequest,
    ScrapeResult,
    SelectorError,
    SelectorReport,
)

REPORT_MARKER = "--- Detailed Selector Report ---"
TEXT_SEPARATOR = "\n---\n"
NO_CONTENT_HEADER = "No text content was extracted."
FAILURE_PREFIX = "Scraping failed: "
RUNNING_PLACEHOLDER = "Running..."
CSV_HEADER = "ScrapedContent"

_INTRO_START = '\n\nAttempted to scrape "'
_LEADING_PHRASES = (
    re.compile(r'^Successfully scraped content for ".*?":[ \t]*\n\n?', re.IGNORECASE | re.DOTALL),
    re.compile(r"^No text content was extracted\.\s*", re.IGNORECASE),
    re.compile(r"^Error during scraping:\s*", re.IGNORECASE),
)
_ROW_SPLIT = re.compile(r"\n---\n|\n")


class ScrapeReportBuilder:
    """
    Folds an extraction result into the stored report text.
    """

    @classmethod
    def build(cls, request: ScrapeRequest, result: ScrapeResult) -> str:
        label = request.data_label
        introduction = (
            f'Attempted to scrape "{label}" from {request.target_url}.\n'
            f"Selectors used: {'; '.join(request.selectors)}\n\n"
            f"{REPORT_MARKER}\n"
        )
        body = "\n\n".join(cls.render_paragraph(report) for report in result.per_selector)

        if result.all_texts:
            summary = (
                f'Successfully scraped content for "{label}":\n\n'
                f"{TEXT_SEPARATOR.join(result.all_texts)}\n\n"
            )
        else:
            summary = f"{NO_CONTENT_HEADER}\n"
        return f"{summary}{introduction}{body}"

    @staticmethod
    def render_paragraph(report: SelectorReport) -> str:
        selector = report.selector
        outcome = report.outcome
        if isinstance(outcome, Matched):
            quoted = "\n    ".join(f'"{text}"' for text in outcome.texts)
            return f'Selector "{selector}":\n  - Found texts:\n    {quoted}'
        if isinstance(outcome, MatchedEmpty):
            return (
                f'Selector "{selector}": Matched {outcome.element_count} element(s), '
                "but found no text content."
            )
        if isinstance(outcome, NoMatch):
            return f'Selector "{selector}": Did not match any elements.'
        if isinstance(outcome, SelectorError):
            return f'Selector "{selector}": Error during processing - {outcome.message}'
        assert_never(outcome)


def failure_text(message: str) -> str:
    return f"{FAILURE_PREFIX}{message}"


def extract_scraped_content(report_text: str | None) -> str:
    """
    Recover the extracted texts from a stored report.

    Drops the diagnostic section and the intro block, then strips at most one
    leading header (success, no-content or legacy error). A bare running
    placeholder yields an empty string. For a report with matched texts the
    result equals the texts joined by the ``---`` separator.
    """

    if not report_text:
        return ""

    marker_index = report_text.find(REPORT_MARKER)
    content = report_text[:marker_index] if marker_index != -1 else report_text
    if marker_index != -1:
        intro_index = content.rfind(_INTRO_START)
        if intro_index == -1 and content.startswith(NO_CONTENT_HEADER):
            intro_index = content.find('\nAttempted to scrape "')
        if intro_index != -1:
            content = content[:intro_index]

    content = content.strip()
    if content.lower() == RUNNING_PLACEHOLDER.lower():
        return ""
    # Only the first matching header is removed; the texts themselves may
    # start with any of these phrases.
    for pattern in _LEADING_PHRASES:
        stripped, count = pattern.subn("", content, count=1)
        if count:
            content = stripped
            break
    return content.strip()


def split_content_rows(content: str) -> list[str]:
    return [row.strip() for row in _ROW_SPLIT.split(content) if row.strip()]


def render_csv(rows: list[str]) -> str:
    """
    Render rows as a one-column CSV document with every field quoted.
    """

    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    buffer.write(f"{CSV_HEADER}\n")
    for row in rows:
        writer.writerow([row])
    return buffer.getvalue()
