"""
Pytest fixtures for the partida lookup tests.

No test launches a browser: the resolver runs on a fake fetcher keyed by URL,
and the page fetcher on a fake session yielding AsyncMock pages.
"""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from partidas.config import Settings
from partidas.resolver import RecordResolver

BASE_URL = "https://epok.buenosaires.gob.ar/catastro/parcela/"
POINT_URL = f"{BASE_URL}?lng=-58.4&lat=-34.6"
PH_URL = f"{POINT_URL}&ph"


class FakeFetcher:
    """Answers fetches from a URL -> payload map; exceptions in the map are raised."""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def fetch(self, url):
        self.calls.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


class FakeSession:
    """Stands in for BrowserSession, handing out a single mock page."""

    def __init__(self, page):
        self.page = page
        self.opened = 0
        self.closed = 0

    @asynccontextmanager
    async def new_page(self):
        self.opened += 1
        try:
            yield self.page
        finally:
            self.closed += 1


@pytest.fixture
def make_resolver():
    def _make(responses):
        fetcher = FakeFetcher(responses)
        return RecordResolver(fetcher, base_url=BASE_URL), fetcher

    return _make


@pytest.fixture
def mock_page():
    page = AsyncMock()
    page.goto.return_value = None
    return page


@pytest.fixture
def settings():
    return Settings(
        logo_url="https://example.com/logo.png",
        reference_url="https://example.com/abl",
        smtp_host="smtp.example.com",
        smtp_port=465,
        smtp_user="user",
        smtp_pass="secret",
        smtp_from="consultas@example.com",
        smtp_bcc="archivo@example.com",
        request_timeout=5,
    )
