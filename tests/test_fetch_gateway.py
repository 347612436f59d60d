"""
tests/test_fetch_gateway.py

Page fetch behaviour over a stub requests session: headers, status
handling, transport errors, body decoding.
"""

from __future__ import annotations

import pytest
import requests

from app.scraping.config import DEFAULT_USER_AGENT, ScrapeSettings
from app.scraping.errors import FetchError
from app.scraping.fetch_gateway import FetchGateway
from conftest import StubHTTPSession, make_response


def test_fetch_sends_browser_user_agent_without_timeout() -> None:
    session = StubHTTPSession({"https://acme.example/": make_response("<p>ok</p>")})
    gateway = FetchGateway(settings=ScrapeSettings(), session=session)  # type: ignore[arg-type]

    assert gateway.fetch("https://acme.example/") == "<p>ok</p>"
    assert len(session.calls) == 1
    call = session.calls[0]
    assert call["headers"] == {"User-Agent": DEFAULT_USER_AGENT}
    assert "Chrome/91" in call["headers"]["User-Agent"]
    assert call["timeout"] is None


def test_configured_timeout_is_passed_through() -> None:
    session = StubHTTPSession({"https://acme.example/": make_response("<p>ok</p>")})
    settings = ScrapeSettings(user_agent="scrape-studio-test", timeout_seconds=7.5)
    gateway = FetchGateway(settings=settings, session=session)  # type: ignore[arg-type]

    gateway.fetch("https://acme.example/")

    assert session.calls[0]["timeout"] == 7.5
    assert session.calls[0]["headers"] == {"User-Agent": "scrape-studio-test"}


def test_non_2xx_status_raises_with_status_line() -> None:
    session = StubHTTPSession(
        {"https://acme.example/missing": make_response("gone", status_code=404, reason="Not Found")}
    )
    gateway = FetchGateway(settings=ScrapeSettings(), session=session)  # type: ignore[arg-type]

    with pytest.raises(FetchError) as excinfo:
        gateway.fetch("https://acme.example/missing")

    assert excinfo.value.message == "Failed to fetch the page. Status: 404 - Not Found"
    assert excinfo.value.status_code == 404
    assert excinfo.value.status_text == "Not Found"
    assert len(session.calls) == 1


def test_server_error_is_not_retried() -> None:
    session = StubHTTPSession(
        {"https://acme.example/": make_response("oops", status_code=503, reason="Service Unavailable")}
    )
    gateway = FetchGateway(settings=ScrapeSettings(), session=session)  # type: ignore[arg-type]

    with pytest.raises(FetchError, match="Status: 503 - Service Unavailable"):
        gateway.fetch("https://acme.example/")
    assert len(session.calls) == 1


def test_transport_error_becomes_fetch_error() -> None:
    session = StubHTTPSession(error=requests.ConnectionError("Name or service not known"))
    gateway = FetchGateway(settings=ScrapeSettings(), session=session)  # type: ignore[arg-type]

    with pytest.raises(FetchError) as excinfo:
        gateway.fetch("https://nowhere.example/")

    assert excinfo.value.message == "Name or service not known"
    assert excinfo.value.status_code is None


def test_undeclared_charset_decodes_as_utf8() -> None:
    body = "<p>Café – naïve</p>"
    response = make_response(body, content_type="text/html")
    session = StubHTTPSession({"https://acme.example/": response})
    gateway = FetchGateway(settings=ScrapeSettings(), session=session)  # type: ignore[arg-type]

    assert gateway.fetch("https://acme.example/") == body
