"""
app/api/routers/scraping_tasks.py

Scraping task management, run, and export endpoints.
"""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from app.domain.scraping_task import ScrapingTaskStatus
from app.schemas.scraping_task import (
    ScrapingTaskContentResponse,
    ScrapingTaskCreate,
    ScrapingTaskListResponse,
    ScrapingTaskResponse,
    ScrapingTaskUpdate,
)
from app.services.scraping_task_service import (
    FastAPIBackgroundTaskExecutor,
    ScrapingTaskService,
    get_scraping_task_service,
)
from db.repositories.errors import (
    ScrapingTaskContentError,
    ScrapingTaskError,
    ScrapingTaskNotFoundError,
    ScrapingTaskStateError,
)
from db.session import get_db

router = APIRouter(prefix="/scraping-tasks", tags=["scraping-tasks"])


@router.post("", response_model=ScrapingTaskResponse, status_code=status.HTTP_201_CREATED)
def create_scraping_task(
    body: ScrapingTaskCreate,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> ScrapingTaskResponse:
    """
    Create a task. One-off tasks start Pending, recurring ones Scheduled.
    """

    task = task_service.create_task(db=db, payload=body)
    return ScrapingTaskResponse.model_validate(task)


@router.get("", response_model=ScrapingTaskListResponse)
def list_scraping_tasks(
    status_filter: str | None = Query(default=None, alias="status", description="Optional status filter"),
    limit: int = Query(default=100, ge=1, le=500, description="Max tasks returned"),
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> ScrapingTaskListResponse:
    if status_filter is not None and status_filter not in ScrapingTaskStatus.ALL:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown status {status_filter!r}. Allowed: {list(ScrapingTaskStatus.ALL)}.",
        )
    tasks = task_service.list_tasks(db=db, limit=limit, status=status_filter)
    return ScrapingTaskListResponse(tasks=[ScrapingTaskResponse.model_validate(task) for task in tasks])


@router.get("/{task_id}", response_model=ScrapingTaskResponse)
def get_scraping_task(
    task_id: UUID,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> ScrapingTaskResponse:
    try:
        task = task_service.get_task(db=db, task_id=task_id)
    except ScrapingTaskError as exc:
        raise _to_http_error(exc) from exc
    return ScrapingTaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=ScrapingTaskResponse)
def update_scraping_task(
    task_id: UUID,
    body: ScrapingTaskUpdate,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> ScrapingTaskResponse:
    try:
        task = task_service.update_task(db=db, task_id=task_id, payload=body)
    except ScrapingTaskError as exc:
        raise _to_http_error(exc) from exc
    return ScrapingTaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_scraping_task(
    task_id: UUID,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> Response:
    try:
        task_service.delete_task(db=db, task_id=task_id)
    except ScrapingTaskError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{task_id}/run",
    response_model=ScrapingTaskResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def run_scraping_task(
    task_id: UUID,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> ScrapingTaskResponse:
    """
    Mark the task Running and scrape it in the background.
    """

    try:
        task = task_service.trigger_run(
            db=db,
            executor=FastAPIBackgroundTaskExecutor(background_tasks),
            task_id=task_id,
        )
    except ScrapingTaskError as exc:
        raise _to_http_error(exc) from exc
    return ScrapingTaskResponse.model_validate(task)


@router.get("/{task_id}/content", response_model=ScrapingTaskContentResponse)
def get_scraping_task_content(
    task_id: UUID,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> ScrapingTaskContentResponse:
    try:
        content = task_service.get_task_content(db=db, task_id=task_id)
    except ScrapingTaskError as exc:
        raise _to_http_error(exc) from exc
    return ScrapingTaskContentResponse(task_id=task_id, content=content)


@router.get("/{task_id}/export.csv")
def export_scraping_task_csv(
    task_id: UUID,
    db: Session = Depends(get_db),
    task_service: ScrapingTaskService = Depends(get_scraping_task_service),
) -> Response:
    try:
        export = task_service.export_task_csv(db=db, task_id=task_id)
    except ScrapingTaskError as exc:
        raise _to_http_error(exc) from exc
    return Response(
        content=export.content,
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "X-Row-Count": str(export.row_count),
        },
    )


def _to_http_error(exc: ScrapingTaskError) -> HTTPException:
    if isinstance(exc, ScrapingTaskNotFoundError):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ScrapingTaskStateError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, ScrapingTaskContentError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    else:
        status_code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=status_code, detail=str(exc))
