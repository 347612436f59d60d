"""
tests/test_scrape_api.py

POST /api/scrape contract: 200 report, 400 bad input, 500 fetch failure.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.api.routers.scrape import INVALID_BODY_MESSAGE
from app.main import create_app
from app.services.scrape_service import ScrapeService, get_scrape_service
from conftest import StubHTTPSession


@pytest.fixture()
def client(scrape_service: ScrapeService) -> TestClient:
    application = create_app()
    application.dependency_overrides[get_scrape_service] = lambda: scrape_service
    return TestClient(application)


def test_scrape_returns_report(client: TestClient) -> None:
    response = client.post(
        "/api/scrape",
        json={
            "targetUrl": "https://acme.example/pricing",
            "selectors": "h1, .missing",
        },
    )

    assert response.status_code == 200
    assert response.json() == {
        "scrapedText": (
            'Successfully scraped content for "specified data":\n\n'
            "Hello\n\n"
            'Attempted to scrape "specified data" from https://acme.example/pricing.\n'
            "Selectors used: h1; .missing\n\n"
            "--- Detailed Selector Report ---\n"
            'Selector "h1":\n  - Found texts:\n    "Hello"\n\n'
            'Selector ".missing": Did not match any elements.'
        )
    }


def test_selector_errors_do_not_fail_the_request(client: TestClient) -> None:
    response = client.post(
        "/api/scrape",
        json={
            "targetUrl": "https://acme.example/pricing",
            "selectors": "a[\nspan.blank",
            "dataToExtract": "pricing",
        },
    )

    assert response.status_code == 200
    text = response.json()["scrapedText"]
    assert text.startswith("No text content was extracted.\n")
    assert 'Selector "a[": Error during processing - ' in text
    assert 'Selector "span.blank": Matched 3 element(s), but found no text content.' in text


@pytest.mark.parametrize(
    "body",
    [
        {"selectors": "h1"},
        {"targetUrl": "", "selectors": "h1"},
        {"targetUrl": "https://acme.example/pricing"},
    ],
)
def test_missing_inputs_are_rejected(
    client: TestClient,
    http_session: StubHTTPSession,
    body: dict[str, str],
) -> None:
    response = client.post("/api/scrape", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": "Target URL and selectors are required."}
    assert http_session.calls == []


@pytest.mark.parametrize("selectors", ["", " , \n , "])
def test_blank_selector_list_is_rejected_before_fetch(
    client: TestClient,
    http_session: StubHTTPSession,
    selectors: str,
) -> None:
    response = client.post(
        "/api/scrape",
        json={"targetUrl": "https://acme.example/pricing", "selectors": selectors},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "No valid selectors provided."}
    assert http_session.calls == []


@pytest.mark.parametrize(
    "body",
    [
        {"targetUrl": 42, "selectors": "h1"},
        {"targetUrl": "https://acme.example/pricing", "selectors": ["h1", "p"]},
        {"targetUrl": "https://acme.example/pricing", "selectors": "h1", "dataToExtract": {"a": 1}},
    ],
)
def test_mistyped_fields_keep_error_contract(
    client: TestClient,
    http_session: StubHTTPSession,
    body: dict[str, object],
) -> None:
    response = client.post("/api/scrape", json=body)

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_BODY_MESSAGE}
    assert http_session.calls == []


def test_malformed_json_keeps_error_contract(client: TestClient) -> None:
    response = client.post(
        "/api/scrape",
        content=b"{\"targetUrl\": ",
        headers={"Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert response.json() == {"error": INVALID_BODY_MESSAGE}


def test_fetch_failure_returns_500_with_failure_text(client: TestClient) -> None:
    response = client.post(
        "/api/scrape",
        json={"targetUrl": "https://acme.example/missing", "selectors": "h1"},
    )

    assert response.status_code == 500
    message = "Failed to fetch the page. Status: 404 - Not Found"
    assert response.json() == {"error": message, "scrapedText": f"Scraping failed: {message}"}


def test_unreachable_host_returns_500(client: TestClient) -> None:
    response = client.post(
        "/api/scrape",
        json={"targetUrl": "https://unknown.example/", "selectors": "h1"},
    )

    assert response.status_code == 500
    payload = response.json()
    assert payload["scrapedText"].startswith("Scraping failed: ")
    assert payload["error"]


def test_health(client: TestClient) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
