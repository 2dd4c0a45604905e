"""
ABL partida lookup - resolves the tax records ("partidas") registered at a
coordinate in the Buenos Aires cadastral service.

The service only answers to a real browser, so lookups drive a shared headless
Chromium and read the JSON document it renders.
"""

from .resolver import RecordResolver

__all__ = ["RecordResolver"]
