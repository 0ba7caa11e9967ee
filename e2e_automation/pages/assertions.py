"""Hard and soft page assertions built on the action facade."""

import logging
from typing import Any, Awaitable, List, Optional, Sequence

from playwright.async_api import expect

from e2e_automation.errors import PageAssertionError, SoftAssertionError

from .actions import PageActions

logger = logging.getLogger(__name__)


class PageAssertions:
    """Single-shot assertions that raise PageAssertionError on failure.

    Each check reads the current state once through PageActions and compares
    it. There is no polling; use ``expect()`` for retrying assertions.
    """

    def __init__(self, actions: PageActions):
        self.actions = actions

    async def assert_text_contains(self, selector: str, expected: str) -> None:
        actual = await self.actions.get_text(selector)
        if actual is None or expected not in actual:
            raise PageAssertionError(
                f"Expected element '{selector}' to contain text '{expected}', but got '{actual}'"
            )

    async def assert_text_equals(self, selector: str, expected: str) -> None:
        actual = await self.actions.get_text(selector)
        if actual != expected:
            raise PageAssertionError(
                f"Expected element '{selector}' text to equal '{expected}', but got '{actual}'"
            )

    async def assert_visible(self, selector: str) -> None:
        if not await self.actions.is_visible(selector):
            raise PageAssertionError(f"Expected element '{selector}' to be visible, but it was not")

    async def assert_hidden(self, selector: str) -> None:
        if not await self.actions.is_hidden(selector):
            raise PageAssertionError(f"Expected element '{selector}' to be hidden, but it was visible")

    async def assert_enabled(self, selector: str) -> None:
        if not await self.actions.is_enabled(selector):
            raise PageAssertionError(f"Expected element '{selector}' to be enabled, but it was disabled")

    async def assert_disabled(self, selector: str) -> None:
        if not await self.actions.is_disabled(selector):
            raise PageAssertionError(f"Expected element '{selector}' to be disabled, but it was enabled")

    async def assert_checked(self, selector: str) -> None:
        if not await self.actions.is_checked(selector):
            raise PageAssertionError(f"Expected element '{selector}' to be checked, but it was not")

    async def assert_not_checked(self, selector: str) -> None:
        if await self.actions.is_checked(selector):
            raise PageAssertionError(
                f"Expected element '{selector}' to be unchecked, but it was checked"
            )

    async def assert_exists(self, selector: str) -> None:
        if not await self.actions.exists(selector):
            raise PageAssertionError(f"Expected element '{selector}' to exist, but it was not found")

    async def assert_not_exists(self, selector: str) -> None:
        if await self.actions.exists(selector):
            raise PageAssertionError(f"Expected element '{selector}' to not exist, but it was found")

    async def assert_attribute_equals(self, selector: str, attribute: str, expected: str) -> None:
        actual = await self.actions.get_attribute(selector, attribute)
        if actual != expected:
            raise PageAssertionError(
                f"Expected element '{selector}' attribute '{attribute}' to equal "
                f"'{expected}', but got '{actual}'"
            )

    async def assert_attribute_contains(self, selector: str, attribute: str, expected: str) -> None:
        actual = await self.actions.get_attribute(selector, attribute)
        if actual is None or expected not in actual:
            raise PageAssertionError(
                f"Expected element '{selector}' attribute '{attribute}' to contain "
                f"'{expected}', but got '{actual}'"
            )

    async def assert_has_class(self, selector: str, class_name: str) -> None:
        classes = await self.actions.get_attribute(selector, "class")
        if classes is None or class_name not in classes.split():
            raise PageAssertionError(
                f"Expected element '{selector}' to have class '{class_name}', but got '{classes}'"
            )

    async def assert_element_count(self, selector: str, expected: int) -> None:
        actual = await self.actions.get_element_count(selector)
        if actual != expected:
            raise PageAssertionError(
                f"Expected {expected} elements matching '{selector}', but found {actual}"
            )

    async def assert_element_count_greater_than(self, selector: str, count: int) -> None:
        actual = await self.actions.get_element_count(selector)
        if actual <= count:
            raise PageAssertionError(
                f"Expected more than {count} elements matching '{selector}', but found {actual}"
            )

    def assert_url_contains(self, expected: str) -> None:
        url = self.actions.current_url
        if expected not in url:
            raise PageAssertionError(f"Expected URL to contain '{expected}', but got '{url}'")

    def assert_url_equals(self, expected: str) -> None:
        url = self.actions.current_url
        if url != expected:
            raise PageAssertionError(f"Expected URL to equal '{expected}', but got '{url}'")

    async def assert_title_contains(self, expected: str) -> None:
        title = await self.actions.get_title()
        if expected not in title:
            raise PageAssertionError(f"Expected title to contain '{expected}', but got '{title}'")

    async def assert_title_equals(self, expected: str) -> None:
        title = await self.actions.get_title()
        if title != expected:
            raise PageAssertionError(f"Expected title to equal '{expected}', but got '{title}'")

    async def assert_input_value(self, selector: str, expected: str) -> None:
        actual = await self.actions.get_input_value(selector)
        if actual != expected:
            raise PageAssertionError(
                f"Expected input '{selector}' value to equal '{expected}', but got '{actual}'"
            )

    def assert_that(self, condition: bool, message: str) -> None:
        if not condition:
            raise PageAssertionError(message)

    def expect(self, selector: str):
        """Playwright's retrying locator assertions for selector."""
        return expect(self.actions.locator(selector))

    def expect_page(self):
        """Playwright's retrying page assertions."""
        return expect(self.actions.page)


class SoftAssertions:
    """Collect assertion failures instead of stopping at the first one.

    Only PageAssertionError is collected; any other error propagates. Call
    ``assert_all()`` at the end of a scenario to fail with every collected
    message at once.

    Example:
        soft = SoftAssertions(PageAssertions(actions))
        await soft.soft_assert_visible("#header")
        await soft.soft_assert_title_contains("Dashboard")
        soft.assert_all()
    """

    def __init__(self, assertions: Optional[PageAssertions] = None):
        self.assertions = assertions
        self._errors: List[str] = []

    def for_page(self, assertions: PageAssertions) -> "SoftAssertions":
        """Return a view that checks through assertions and records into this buffer.

        Page objects sharing one scenario buffer each get their own view, so a
        soft check always runs against the page object that made it.
        """
        view = SoftAssertions(assertions)
        view._errors = self._errors
        return view

    @property
    def errors(self) -> Sequence[str]:
        """Collected failure messages in call order (read-only)."""
        return tuple(self._errors)

    async def collect(self, check: Awaitable[Any]) -> bool:
        """Await an assertion and record its failure.

        Args:
            check: Awaitable that raises PageAssertionError on failure

        Returns:
            True if the assertion passed
        """
        try:
            await check
            return True
        except PageAssertionError as e:
            logger.warning(f"Soft assertion failed: {e}")
            self._errors.append(str(e))
            return False

    def _require(self) -> PageAssertions:
        if self.assertions is None:
            raise RuntimeError("SoftAssertions is not bound to a page")
        return self.assertions

    async def soft_assert_text_contains(self, selector: str, expected: str) -> bool:
        return await self.collect(self._require().assert_text_contains(selector, expected))

    async def soft_assert_text_equals(self, selector: str, expected: str) -> bool:
        return await self.collect(self._require().assert_text_equals(selector, expected))

    async def soft_assert_visible(self, selector: str) -> bool:
        return await self.collect(self._require().assert_visible(selector))

    async def soft_assert_hidden(self, selector: str) -> bool:
        return await self.collect(self._require().assert_hidden(selector))

    async def soft_assert_enabled(self, selector: str) -> bool:
        return await self.collect(self._require().assert_enabled(selector))

    async def soft_assert_checked(self, selector: str) -> bool:
        return await self.collect(self._require().assert_checked(selector))

    async def soft_assert_url_contains(self, expected: str) -> bool:
        try:
            self._require().assert_url_contains(expected)
            return True
        except PageAssertionError as e:
            logger.warning(f"Soft assertion failed: {e}")
            self._errors.append(str(e))
            return False

    async def soft_assert_title_contains(self, expected: str) -> bool:
        return await self.collect(self._require().assert_title_contains(expected))

    def assert_all(self) -> None:
        """Raise one SoftAssertionError listing every collected failure.

        The buffer is emptied before raising, so a second call passes.

        Raises:
            SoftAssertionError: If any soft assertion failed
        """
        if not self._errors:
            return
        messages = list(self._errors)
        self._errors.clear()
        raise SoftAssertionError(messages)

    def clear(self) -> None:
        self._errors.clear()
