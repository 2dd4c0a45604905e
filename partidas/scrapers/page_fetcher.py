import json
import logging
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..errors import MalformedResponse, NavigationError, NavigationTimeout
from .browser import BrowserSession

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 500


class PageFetcher:
    """Loads a URL in the shared browser and parses the rendered body as JSON.

    The cadastral service only answers to real browsers, and what it renders
    is a JSON document shown as page text.
    """

    def __init__(self, session: BrowserSession, timeout_ms: int = 15000):
        self.session = session
        self.timeout_ms = timeout_ms

    async def fetch(self, url: str) -> Any:
        """
        Fetch a single URL once (no retries).

        Args:
            url: The page to load

        Returns:
            The parsed JSON payload

        Raises:
            NavigationTimeout: The page did not reach DOMContentLoaded in time
            NavigationError: Any other browser failure
            MalformedResponse: The body text was not valid JSON
        """
        async with self.session.new_page() as page:
            try:
                await page.goto(url, timeout=self.timeout_ms, wait_until="domcontentloaded")
                body_text = await page.evaluate("() => document.body.innerText")
            except PlaywrightTimeoutError as e:
                logger.error(f"Timeout loading {url}: {e}")
                raise NavigationTimeout(url) from e
            except PlaywrightError as e:
                logger.error(f"Playwright error loading {url}: {e}")
                raise NavigationError(url, str(e)) from e

            return parse_body(url, body_text)


def parse_body(url: str, body_text: Any) -> Any:
    """Parse rendered page text, logging only a bounded snippet on failure."""
    text = body_text if isinstance(body_text, str) else ""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        snippet = text[:SNIPPET_LENGTH]
        logger.error(f"Error parsing JSON from {url}: {e}")
        logger.error(f"Response snippet: {snippet}")
        raise MalformedResponse(url, snippet) from e
