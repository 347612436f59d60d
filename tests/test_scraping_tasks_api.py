from __future__ import annotations

import uuid
from collections.abc import Iterator
from typing import Any

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session, sessionmaker

from app.main import create_app
from app.services.scrape_service import ScrapeService
from app.services.scraping_task_service import ScrapingTaskService, get_scraping_task_service
from db.session import get_db


@pytest.fixture()
def client(session_factory: sessionmaker[Session], scrape_service: ScrapeService) -> TestClient:
    task_service = ScrapingTaskService(session_factory=session_factory, scrape_service=scrape_service)

    def _get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    application = create_app()
    application.dependency_overrides[get_db] = _get_db
    application.dependency_overrides[get_scraping_task_service] = lambda: task_service
    return TestClient(application)


def _create(client: TestClient, **overrides: Any) -> dict[str, Any]:
    body: dict[str, Any] = {
        "task_name": "Acme pricing watch",
        "target_url": "https://acme.example/pricing",
        "data_to_extract": "plan prices",
        "selectors": ".price, p.lead",
        "frequency": "once",
    }
    body.update(overrides)
    response = client.post("/scraping-tasks", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def test_create_and_fetch_task(client: TestClient) -> None:
    created = _create(client)

    assert created["status"] == "Pending"
    assert created["last_run"] is None

    response = client.get(f"/scraping-tasks/{created['id']}")
    assert response.status_code == 200
    assert response.json()["task_name"] == "Acme pricing watch"


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("target_url", "not a url"),
        ("target_url", "ftp://acme.example/file"),
        ("task_name", "ab"),
        ("selectors", ""),
        ("frequency", "yearly"),
    ],
)
def test_create_rejects_invalid_fields(client: TestClient, field: str, value: str) -> None:
    body = {
        "task_name": "Acme pricing watch",
        "target_url": "https://acme.example/pricing",
        "data_to_extract": "plan prices",
        "selectors": "h1",
        "frequency": "once",
        field: value,
    }

    response = client.post("/scraping-tasks", json=body)

    assert response.status_code == 422


def test_list_with_status_filter(client: TestClient) -> None:
    _create(client, task_name="one-off")
    _create(client, task_name="nightly", frequency="daily")

    scheduled = client.get("/scraping-tasks", params={"status": "Scheduled"}).json()["tasks"]
    assert [task["task_name"] for task in scheduled] == ["nightly"]

    assert client.get("/scraping-tasks", params={"status": "Bogus"}).status_code == 400
    assert client.get("/scraping-tasks", params={"limit": 0}).status_code == 422


def test_run_completes_and_exposes_content_and_csv(client: TestClient) -> None:
    created = _create(client)

    response = client.post(f"/scraping-tasks/{created['id']}/run")

    assert response.status_code == 202
    assert response.json()["status"] == "Running"
    assert response.json()["last_scraped_data"] == "Running..."

    # TestClient runs background tasks before returning.
    stored = client.get(f"/scraping-tasks/{created['id']}").json()
    assert stored["status"] == "Completed"
    assert stored["last_run"] is not None

    content = client.get(f"/scraping-tasks/{created['id']}/content")
    assert content.status_code == 200
    assert content.json()["content"] == "$10 / mo\n---\n$25 / mo\n---\nPlans for every team"

    export = client.get(f"/scraping-tasks/{created['id']}/export.csv")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    assert export.headers["content-disposition"] == 'attachment; filename="Acme_pricing_watch_scraped_data.csv"'
    assert export.headers["x-row-count"] == "3"
    assert export.text.splitlines() == ["ScrapedContent", '"$10 / mo"', '"$25 / mo"', '"Plans for every team"']


def test_failed_run_is_recorded(client: TestClient) -> None:
    created = _create(client, target_url="https://acme.example/missing")

    client.post(f"/scraping-tasks/{created['id']}/run")

    stored = client.get(f"/scraping-tasks/{created['id']}").json()
    assert stored["status"] == "Failed"
    assert stored["last_scraped_data"].startswith("Scraping failed: Failed to fetch the page. Status: 404")
    assert client.get(f"/scraping-tasks/{created['id']}/content").status_code == 409


def test_content_before_any_run_conflicts(client: TestClient) -> None:
    created = _create(client)

    assert client.get(f"/scraping-tasks/{created['id']}/content").status_code == 409
    assert client.get(f"/scraping-tasks/{created['id']}/export.csv").status_code == 422


def test_patch_and_delete(client: TestClient) -> None:
    created = _create(client)

    patched = client.patch(f"/scraping-tasks/{created['id']}", json={"selectors": "h1", "frequency": "hourly"})
    assert patched.status_code == 200
    assert patched.json()["selectors"] == "h1"
    assert patched.json()["frequency"] == "hourly"

    assert client.delete(f"/scraping-tasks/{created['id']}").status_code == 204
    assert client.get(f"/scraping-tasks/{created['id']}").status_code == 404


def test_unknown_task_is_404(client: TestClient) -> None:
    missing = uuid.uuid4()

    assert client.get(f"/scraping-tasks/{missing}").status_code == 404
    assert client.post(f"/scraping-tasks/{missing}/run").status_code == 404
    assert client.delete(f"/scraping-tasks/{missing}").status_code == 404
