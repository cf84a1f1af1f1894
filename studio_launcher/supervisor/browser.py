"""Browser opening."""

from __future__ import annotations

import webbrowser
from typing import Protocol

import structlog

logger = structlog.get_logger(__name__)


class BrowserOpener(Protocol):
    def open(self, url: str) -> bool: ...


class WebBrowserOpener:
    """Open URLs in the system default browser.

    A browser that cannot be launched is not fatal to the session: the
    failure is logged and ``open`` reports ``False``.
    """

    def open(self, url: str) -> bool:
        try:
            opened = webbrowser.open(url, new=2)
        except webbrowser.Error as exc:
            logger.warning("browser_open_failed", url=url, error=str(exc))
            return False

        if not opened:
            logger.warning("browser_open_failed", url=url, error="no runnable browser found")
            return False

        logger.info("browser_opened", url=url)
        return True
