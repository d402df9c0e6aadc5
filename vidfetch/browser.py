"""
Call-scoped Playwright session.

One RenderSession lives for exactly one acquire() call:

    async with RenderSession() as session:
        page = await session.new_page()   # Chromium launches here, on first use
        ...
    # browser and driver are closed here on every exit path

Nothing is launched unless a strategy actually asks for a page, so YouTube
acquisitions and rejected URLs never start a browser.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from playwright.async_api import async_playwright

from . import config

logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--disable-blink-features=AutomationControlled",
]

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)


class _LaunchedBrowser:
    """A running Playwright driver plus the browser context pages are opened in."""

    def __init__(self, playwright: Any, browser: Any, ctx: Any) -> None:
        self.playwright = playwright
        self.browser = browser
        self.ctx = ctx

    async def new_page(self) -> Any:
        return await self.ctx.new_page()

    async def close(self) -> None:
        try:
            await self.browser.close()
        finally:
            await self.playwright.stop()


async def launch_chromium(
    headless: bool = config.BROWSER_HEADLESS,
    executable_path: Optional[str] = config.CHROME_BIN,
) -> _LaunchedBrowser:
    """Start Playwright and a headless Chromium with a desktop user agent."""
    pw = await async_playwright().start()
    try:
        browser = await pw.chromium.launch(
            headless=headless,
            executable_path=executable_path,
            args=BROWSER_ARGS,
        )
        ctx = await browser.new_context(
            user_agent=USER_AGENT,
            viewport={"width": 1280, "height": 720},
            locale="en-US",
        )
    except BaseException:
        await pw.stop()
        raise
    return _LaunchedBrowser(pw, browser, ctx)


Launcher = Callable[[], Awaitable[Any]]


class RenderSession:
    """
    Lazily launched browser owned by a single acquire() call.

    The launcher must return an object with async new_page() and close().
    """

    def __init__(self, launcher: Optional[Launcher] = None) -> None:
        self._launcher: Launcher = launcher or launch_chromium
        self._browser: Optional[Any] = None
        self._closed = False
        self.pages_opened: List[Any] = []

    @property
    def is_launched(self) -> bool:
        return self._browser is not None

    async def new_page(self) -> Any:
        """Open a fresh page, launching the browser on first use."""
        if self._closed:
            raise RuntimeError("RenderSession is already closed")
        if self._browser is None:
            logger.info("🌐 Launching browser session")
            self._browser = await self._launcher()
        page = await self._browser.new_page()
        self.pages_opened.append(page)
        return page

    async def close(self) -> None:
        self._closed = True
        if self._browser is None:
            return
        browser, self._browser = self._browser, None
        try:
            await browser.close()
        except Exception as e:
            # teardown must not mask the outcome of the call
            logger.warning(f"⚠️ Browser session close failed: {e}")
            return
        logger.info("🌐 Browser session closed")

    async def __aenter__(self) -> "RenderSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
