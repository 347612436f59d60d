"""
app/api/routers/scrape.py

Ad-hoc scrape endpoint used by the task runner UI.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.schemas.scrape import ScrapeErrorResponse, ScrapeRequestBody, ScrapeResponse
from app.scraping.errors import InputValidationError, ScrapeError
from app.scraping.report import failure_text
from app.services.scrape_service import GENERIC_FAILURE_MESSAGE, ScrapeService, get_scrape_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["scrape"])

SCRAPE_PATH = "/api/scrape"
INVALID_BODY_MESSAGE = (
    "Invalid request body. Expected JSON with string fields "
    "targetUrl, selectors and dataToExtract."
)


@router.post(
    "/scrape",
    response_model=ScrapeResponse,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ScrapeErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ScrapeErrorResponse},
    },
)
def scrape(
    body: ScrapeRequestBody,
    scrape_service: ScrapeService = Depends(get_scrape_service),
) -> ScrapeResponse | JSONResponse:
    """
    Fetch a page and report what each selector extracted.

    Selector-level problems are part of the 200 report; only bad input (400)
    and fetch failures (500) are errors.
    """

    try:
        scraped_text = scrape_service.scrape(
            target_url=body.targetUrl,
            selectors=body.selectors,
            data_to_extract=body.dataToExtract,
        )
    except InputValidationError as exc:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": exc.message},
        )
    except ScrapeError as exc:
        return _failure_response(exc.message)
    except Exception as exc:
        logger.exception("Scrape endpoint failed url=%s", body.targetUrl)
        return _failure_response(str(exc) or GENERIC_FAILURE_MESSAGE)

    return ScrapeResponse(scrapedText=scraped_text)


def _failure_response(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": message, "scrapedText": failure_text(message)},
    )


async def scrape_validation_error_handler(
    request: Request,
    exc: RequestValidationError,
) -> JSONResponse:
    """
    Keep the ``{error}`` body of /api/scrape for malformed or mistyped payloads.

    Other routes keep FastAPI's default 422 response.
    """

    if request.url.path.rstrip("/") != SCRAPE_PATH:
        return await request_validation_exception_handler(request, exc)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": INVALID_BODY_MESSAGE},
    )
