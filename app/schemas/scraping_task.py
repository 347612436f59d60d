"""
app/schemas/scraping_task.py

Request and response schemas for scraping task management.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal
from urllib.parse import urlparse
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

Frequency = Literal["once", "hourly", "daily", "weekly", "monthly"]


def _validate_target_url(value: str) -> str:
    stripped = value.strip()
    parsed = urlparse(stripped)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError("Please enter a valid URL.")
    return stripped


class ScrapingTaskCreate(BaseModel):
    task_name: str = Field(..., min_length=3, max_length=255)
    target_url: str
    data_to_extract: str = Field(..., min_length=1)
    selectors: str = Field(..., min_length=1)
    frequency: Frequency
    description: str | None = None
    requester_id: str | None = Field(default=None, max_length=64)
    requester_name: str | None = Field(default=None, max_length=255)

    @field_validator("target_url")
    @classmethod
    def _check_target_url(cls, value: str) -> str:
        return _validate_target_url(value)


class ScrapingTaskUpdate(BaseModel):
    """
    Partial update; only fields present in the payload are applied.
    """

    task_name: str | None = Field(default=None, min_length=3, max_length=255)
    target_url: str | None = None
    data_to_extract: str | None = Field(default=None, min_length=1)
    selectors: str | None = Field(default=None, min_length=1)
    frequency: Frequency | None = None
    description: str | None = None
    requester_id: str | None = Field(default=None, max_length=64)
    requester_name: str | None = Field(default=None, max_length=255)

    @field_validator("target_url")
    @classmethod
    def _check_target_url(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _validate_target_url(value)


class ScrapingTaskResponse(BaseModel):
    id: UUID
    task_name: str
    target_url: str
    data_to_extract: str
    selectors: str
    frequency: str
    description: str | None = None
    requester_id: str | None = None
    requester_name: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
    last_run: datetime | None = None
    last_scraped_data: str | None = None

    model_config = {"from_attributes": True}


class ScrapingTaskListResponse(BaseModel):
    tasks: list[ScrapingTaskResponse] = Field(default_factory=list)


class ScrapingTaskContentResponse(BaseModel):
    task_id: UUID
    content: str
