"""Lazily launched browser session shared by one scenario."""

import asyncio
import logging
from typing import Optional

from playwright.async_api import BrowserContext, Page

from e2e_automation.errors import BrowserLaunchError
from e2e_automation.models.browser_models import SessionConfig

from .playwright_integration import PlaywrightManager

logger = logging.getLogger(__name__)


class BrowserSession:
    """Provide a single page, launching the browser on first use.

    The browser, context and page are created together the first time
    ``get_page()`` is awaited and reused afterwards. Concurrent callers wait
    on the same launch.

    Usage:
        async with BrowserSession(config) as session:
            page = await session.get_page()
            await page.goto("https://example.com")
    """

    def __init__(self, config: Optional[SessionConfig] = None, manager: Optional[PlaywrightManager] = None):
        self.config = config or SessionConfig()
        self._manager = manager or PlaywrightManager()
        self._lock = asyncio.Lock()
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None

    async def __aenter__(self) -> "BrowserSession":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    @property
    def is_started(self) -> bool:
        """Whether a page has been launched and not yet closed."""
        return self._page is not None

    @property
    def context(self) -> Optional[BrowserContext]:
        return self._context

    @property
    def page(self) -> Optional[Page]:
        """The launched page, without launching one."""
        return self._page

    async def get_page(self) -> Page:
        """Return the session page, launching the browser if needed.

        Returns:
            The same Page on every call after the first successful launch

        Raises:
            BrowserLaunchError: If any launch step fails. Partial resources
                are released and the next call starts a fresh launch.
        """
        if self._page is not None:
            return self._page

        async with self._lock:
            if self._page is not None:
                return self._page

            config = self.config
            logger.info(
                f"Launching {config.browser.value} "
                f"(headless={config.headless}, slow_mo={config.slow_mo_ms}ms)"
            )
            try:
                browser = await self._manager.launch_browser(
                    config.browser,
                    headless=config.headless,
                    slow_mo=config.slow_mo_ms,
                )
                context = await self._manager.create_context(browser, viewport=config.viewport)
                page = await self._manager.create_page(context)
            except BrowserLaunchError:
                await self._manager.cleanup()
                raise
            except Exception as e:
                await self._manager.cleanup()
                raise BrowserLaunchError(f"Browser session launch failed: {e}") from e

            self._context = context
            self._page = page
            return page

    async def close(self) -> None:
        """Release the page, context, browser and driver.

        Safe to call when nothing was launched and safe to call twice.
        Errors are logged, never raised.
        """
        async with self._lock:
            if not self._manager.initialized and self._page is None:
                return
            try:
                await self._manager.cleanup()
            except Exception as e:
                logger.warning(f"Browser session cleanup failed: {e}")
            finally:
                self._context = None
                self._page = None
            logger.debug("Browser session closed")
