"""
app/schemas/scrape.py

Wire models for the ad-hoc scrape endpoint. Field names are camelCase because
stored task results and existing clients depend on this exact shape.
"""

from __future__ import annotations

from pydantic import BaseModel


class ScrapeRequestBody(BaseModel):
    """
    All fields are optional so missing inputs surface as a 400 with an
    ``error`` message rather than a schema validation failure.
    """

    targetUrl: str | None = None
    selectors: str | None = None
    dataToExtract: str | None = None


class ScrapeResponse(BaseModel):
    scrapedText: str


class ScrapeErrorResponse(BaseModel):
    error: str
    scrapedText: str | None = None
