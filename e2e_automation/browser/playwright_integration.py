"""Playwright driver ownership for one browser session.

PlaywrightManager starts the Playwright driver and holds the single browser,
context and page a session launches through it. Everything it launched is
released by ``cleanup()``, in reverse order of creation.
"""

import logging
from typing import Any, Dict, List, Optional

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    Page,
    Playwright,
)

from e2e_automation.errors import BrowserLaunchError
from e2e_automation.models.browser_models import BrowserType, Viewport

logger = logging.getLogger(__name__)


class PlaywrightManager:
    """Own the driver plus one browser, one context and one page.

    A second launch, context or page through the same manager is refused;
    tabs opened later belong to the context and close with it.

    CRITICAL: Always call cleanup() or use as async context manager to ensure
    the browser process is released.
    """

    def __init__(self):
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self._initialized = False

    async def __aenter__(self):
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.cleanup()

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> None:
        """Start the Playwright driver.

        Raises:
            BrowserLaunchError: If the driver cannot be started
        """
        if self._initialized:
            return

        try:
            self.playwright = await async_playwright().start()
            self._initialized = True
            logger.info("Playwright initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize Playwright: {e}")
            raise BrowserLaunchError(f"Playwright initialization failed: {e}") from e

    async def launch_browser(
        self,
        browser_type: BrowserType = BrowserType.CHROMIUM,
        headless: bool = False,
        **options: Any,
    ) -> Browser:
        """Launch the session's browser.

        Args:
            browser_type: Engine to launch
            headless: Whether to run in headless mode
            **options: Additional launch options (e.g. slow_mo)

        Returns:
            Browser instance

        Raises:
            BrowserLaunchError: If a browser is already running, or the launch
                fails, e.g. the engine's binaries are not installed
        """
        if self.browser is not None:
            raise BrowserLaunchError("Browser launch failed: a browser is already running")

        if not self._initialized:
            await self.initialize()

        try:
            launcher = getattr(self.playwright, browser_type.value)
            self.browser = await launcher.launch(headless=headless, **options)
            logger.info(f"Launched {browser_type.value} browser (headless={headless})")
            return self.browser
        except Exception as e:
            logger.error(f"Failed to launch {browser_type.value} browser: {e}")
            raise BrowserLaunchError(f"Browser launch failed: {e}") from e

    async def create_context(
        self,
        browser: Browser,
        viewport: Optional[Viewport] = None,
        **options: Any,
    ) -> BrowserContext:
        """Create the session's browser context.

        Args:
            browser: Browser to create the context in
            viewport: Fixed viewport size for every page in the context
            **options: Additional context options (e.g. locale, permissions)

        Raises:
            BrowserLaunchError: If a context already exists or creation fails
        """
        if self.context is not None:
            raise BrowserLaunchError("Context creation failed: a context already exists")

        context_options: Dict[str, Any] = {}
        if viewport:
            context_options["viewport"] = {"width": viewport.width, "height": viewport.height}
        context_options.update(options)

        try:
            self.context = await browser.new_context(**context_options)
            logger.debug(f"Created browser context ({context_options})")
            return self.context
        except Exception as e:
            logger.error(f"Failed to create browser context: {e}")
            raise BrowserLaunchError(f"Context creation failed: {e}") from e

    async def create_page(self, context: BrowserContext) -> Page:
        """Open the session's first page in context.

        Raises:
            BrowserLaunchError: If a page already exists or creation fails
        """
        if self.page is not None:
            raise BrowserLaunchError("Page creation failed: a page already exists")

        try:
            self.page = await context.new_page()
            logger.debug("Created page")
            return self.page
        except Exception as e:
            logger.error(f"Failed to create page: {e}")
            raise BrowserLaunchError(f"Page creation failed: {e}") from e

    async def cleanup(self) -> List[str]:
        """Release the page, context and browser, then stop the driver.

        Errors are logged and collected, never raised, so cleanup is safe
        after a partial launch or a second call.

        Returns:
            Error messages collected while closing
        """
        errors: List[str] = []

        page, self.page = self.page, None
        if page is not None:
            try:
                if not page.is_closed():
                    await page.close()
            except Exception as e:
                errors.append(f"Failed to close page: {e}")

        context, self.context = self.context, None
        if context is not None:
            try:
                await context.close()
            except Exception as e:
                errors.append(f"Failed to close context: {e}")

        browser, self.browser = self.browser, None
        if browser is not None:
            try:
                await browser.close()
            except Exception as e:
                errors.append(f"Failed to close browser: {e}")

        if self.playwright:
            try:
                await self.playwright.stop()
                logger.info("Playwright stopped successfully")
            except Exception as e:
                errors.append(f"Failed to stop Playwright: {e}")
            self.playwright = None

        self._initialized = False

        if errors:
            logger.warning(f"Cleanup completed with errors: {'; '.join(errors)}")
        else:
            logger.debug("Cleanup completed successfully")

        return errors
