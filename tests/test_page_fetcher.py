"""
Tests for PageFetcher: navigation, body parsing and page release.
"""

import logging

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from partidas.errors import FetchError, MalformedResponse, NavigationError, NavigationTimeout
from partidas.scrapers.page_fetcher import PageFetcher, parse_body

from .conftest import POINT_URL, FakeSession


@pytest.mark.asyncio
async def test_fetch_parses_rendered_json(mock_page):
    mock_page.evaluate.return_value = '{"pdamatriz": "456"}'
    session = FakeSession(mock_page)

    payload = await PageFetcher(session, timeout_ms=15000).fetch(POINT_URL)

    assert payload == {"pdamatriz": "456"}
    mock_page.goto.assert_awaited_once_with(
        POINT_URL, timeout=15000, wait_until="domcontentloaded"
    )
    assert session.opened == session.closed == 1


@pytest.mark.asyncio
async def test_timeout_raises_navigation_timeout(mock_page):
    mock_page.goto.side_effect = PlaywrightTimeoutError("Timeout 15000ms exceeded.")
    session = FakeSession(mock_page)

    with pytest.raises(NavigationTimeout) as exc_info:
        await PageFetcher(session).fetch(POINT_URL)

    assert exc_info.value.url == POINT_URL
    assert exc_info.value.kind == "timeout"
    mock_page.evaluate.assert_not_awaited()
    assert session.closed == 1


@pytest.mark.asyncio
async def test_browser_error_raises_navigation_error(mock_page):
    mock_page.goto.side_effect = PlaywrightError("net::ERR_NAME_NOT_RESOLVED")
    session = FakeSession(mock_page)

    with pytest.raises(NavigationError) as exc_info:
        await PageFetcher(session).fetch(POINT_URL)

    assert isinstance(exc_info.value, FetchError)
    assert "ERR_NAME_NOT_RESOLVED" in exc_info.value.reason
    assert session.closed == 1


@pytest.mark.asyncio
async def test_non_json_body_raises_malformed_response(mock_page, caplog):
    body = "<h1>Servicio no disponible</h1>" + "x" * 2000
    mock_page.evaluate.return_value = body
    session = FakeSession(mock_page)

    with caplog.at_level(logging.ERROR):
        with pytest.raises(MalformedResponse) as exc_info:
            await PageFetcher(session).fetch(POINT_URL)

    assert exc_info.value.kind == "malformed"
    assert exc_info.value.snippet == body[:500]
    assert body[:500] in caplog.text
    assert body[:501] not in caplog.text
    assert session.closed == 1


def test_parse_body_treats_missing_text_as_malformed():
    with pytest.raises(MalformedResponse) as exc_info:
        parse_body(POINT_URL, None)

    assert exc_info.value.snippet == ""
