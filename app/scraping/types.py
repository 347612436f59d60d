"""
Shared scraping runtime data models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

DEFAULT_DATA_LABEL = "specified data"


@dataclass(frozen=True)
class ScrapeRequest:
    """
    One scrape invocation: where to fetch, which selectors to apply.
    """

    target_url: str
    selectors: list[str]
    data_to_extract: str | None = None

    @property
    def data_label(self) -> str:
        return self.data_to_extract or DEFAULT_DATA_LABEL


@dataclass(frozen=True)
class Matched:
    texts: list[str]


@dataclass(frozen=True)
class MatchedEmpty:
    element_count: int


@dataclass(frozen=True)
class NoMatch:
    pass


@dataclass(frozen=True)
class SelectorError:
    message: str


SelectorOutcome = Union[Matched, MatchedEmpty, NoMatch, SelectorError]


@dataclass(frozen=True)
class SelectorReport:
    selector: str
    outcome: SelectorOutcome


@dataclass
class ScrapeResult:
    """
    Extraction output for one document, in selector order.
    """

    all_texts: list[str] = field(default_factory=list)
    per_selector: list[SelectorReport] = field(default_factory=list)

    def add(self, selector: str, outcome: SelectorOutcome) -> None:
        self.per_selector.append(SelectorReport(selector=selector, outcome=outcome))
        if isinstance(outcome, Matched):
            self.all_texts.extend(outcome.texts)
