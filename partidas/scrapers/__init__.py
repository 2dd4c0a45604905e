"""
Browser-driven access to the Buenos Aires cadastral service.

- BrowserSession: the one headless Chromium owned by the process
- PageFetcher: loads a URL in a fresh page and parses its body as JSON
"""

from .browser import BrowserSession
from .page_fetcher import PageFetcher

__all__ = [
    "BrowserSession",
    "PageFetcher",
]
