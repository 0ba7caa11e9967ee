"""Base class for page objects."""

import logging
from pathlib import Path
from typing import Optional, Union

from playwright.async_api import Page

from .actions import DEFAULT_TIMEOUT_MS, PageActions
from .assertions import PageAssertions, SoftAssertions
from .dialogs import DialogHandler
from .tabs import TabManager

logger = logging.getLogger(__name__)


class BasePage:
    """Page object base built from the facade components.

    Attributes:
        actions: Wait-then-act helpers (PageActions)
        check: Hard assertions (PageAssertions)
        soft: Soft assertions on this page object, recorded into the
            scenario buffer (SoftAssertions)
        dialogs: Dialog handling (DialogHandler)
        tabs: Tab management (TabManager)

    Subclasses declare their selectors as class attributes and build
    page-specific flows from these components.
    """

    def __init__(
        self,
        page: Page,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        screenshots_dir: Optional[Union[str, Path]] = None,
        soft: Optional[SoftAssertions] = None,
    ):
        """Initialize the page object.

        Args:
            page: Page to drive
            timeout_ms: Default wait timeout for actions
            screenshots_dir: Directory for step screenshots
            soft: Shared soft-assertion buffer for the scenario (a new one is
                created when omitted)
        """
        self.actions = PageActions(page, timeout_ms, screenshots_dir)
        self.check = PageAssertions(self.actions)
        self.soft = (soft if soft is not None else SoftAssertions()).for_page(self.check)
        self.dialogs = DialogHandler(page)
        self.tabs = TabManager(page)

    @property
    def page(self) -> Page:
        return self.actions.page

    def use_page(self, page: Page) -> None:
        """Point every component at another page, e.g. after a tab switch."""
        self.actions.use_page(page)
        self.dialogs.use_page(page)
        self.tabs.use_page(page)

    def switch_to_tab(self, index: int) -> Page:
        """Switch to the tab at index and rebind this page object to it."""
        page = self.tabs.switch_to_index(index)
        self.use_page(page)
        return page

    async def take_screenshot(self, step_name: str) -> Optional[Path]:
        return await self.actions.take_screenshot(step_name)
