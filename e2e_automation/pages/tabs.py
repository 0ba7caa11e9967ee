"""Tab (page) management within one browser context."""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from playwright.async_api import BrowserContext, Page

logger = logging.getLogger(__name__)

DEFAULT_NEW_PAGE_TIMEOUT_MS = 30000


class TabManager:
    """Track the current page among all pages of a context.

    Switch operations update ``current`` and return the selected page, or
    None when nothing matches. Closing the current page moves ``current`` to
    the page now at the same index, clamped to the remaining count.
    """

    def __init__(self, page: Page):
        self.current: Optional[Page] = page
        self.context: BrowserContext = page.context

    def use_page(self, page: Page) -> None:
        self.current = page
        self.context = page.context

    def pages(self) -> List[Page]:
        return list(self.context.pages)

    def page_count(self) -> int:
        return len(self.context.pages)

    def switch_to_index(self, index: int) -> Page:
        """Make the page at index current.

        Raises:
            IndexError: If index is out of range; current is unchanged
        """
        pages = self.pages()
        if index < 0 or index >= len(pages):
            raise IndexError(f"Page index {index} is out of range. Total pages: {len(pages)}")
        self.current = pages[index]
        return self.current

    def switch_to_url(self, url_substring: str) -> Optional[Page]:
        for page in self.pages():
            if url_substring in page.url:
                self.current = page
                return page
        return None

    async def switch_to_title(self, title_substring: str) -> Optional[Page]:
        for page in self.pages():
            if title_substring in await page.title():
                self.current = page
                return page
        return None

    async def open_new_page(self, url: Optional[str] = None) -> Page:
        """Open a new tab, optionally navigating it. ``current`` is unchanged."""
        page = await self.context.new_page()
        if url:
            await page.goto(url)
        return page

    async def wait_for_new_page(
        self,
        trigger: Callable[[], Awaitable[Any]],
        timeout_ms: int = DEFAULT_NEW_PAGE_TIMEOUT_MS,
    ) -> Page:
        """Run trigger and return the tab it opens.

        Args:
            trigger: Coroutine function that opens a new tab (e.g. a click)
            timeout_ms: How long to wait for the tab

        Returns:
            The new page
        """
        async with self.context.expect_page(timeout=timeout_ms) as page_info:
            await trigger()
        return await page_info.value

    async def close_current_and_switch(self) -> Optional[Page]:
        """Close the current page and select its neighbour.

        Returns:
            The new current page, or None when no pages remain
        """
        if self.current is None:
            return None

        pages = self.pages()
        index = pages.index(self.current) if self.current in pages else 0
        closing = self.current
        await closing.close()

        remaining = [p for p in pages if p is not closing and not p.is_closed()]
        self.current = remaining[min(index, len(remaining) - 1)] if remaining else None
        logger.debug(f"Closed tab {index}, {len(remaining)} remaining")
        return self.current

    async def close_page_by_index(self, index: int) -> None:
        """Close the page at index. Out-of-range indexes are ignored."""
        pages = self.pages()
        if index < 0 or index >= len(pages):
            return

        target = pages[index]
        if target is self.current:
            await self.close_current_and_switch()
            return
        await target.close()

    async def close_other_pages(self) -> None:
        for page in self.pages():
            if page is not self.current:
                await page.close()

    async def bring_to_front(self) -> None:
        if self.current is not None:
            await self.current.bring_to_front()
