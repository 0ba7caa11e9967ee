"""Page action facade over a Playwright page.

PageActions wraps one Page with wait-then-act helpers. Every element action
first waits for the element to reach the required state and raises
ElementTimeoutError if it does not, so the action itself never runs against
a missing or hidden element.
"""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import allure
from playwright.async_api import (
    Frame,
    FrameLocator,
    Locator,
    Page,
    Response,
    TimeoutError as PlaywrightTimeoutError,
)

from e2e_automation.errors import ElementTimeoutError
from e2e_automation.models.browser_models import WaitState
from e2e_automation.reporting.run_context import safe_filename
from e2e_automation.utils.logging import log_success

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 30000
ENABLED_POLL_INTERVAL = 0.1

PathLike = Union[str, Path]


class PageActions:
    """Wait-then-act helpers bound to a single page.

    Holds no scenario state besides the page handle, so it can be rebound
    with ``use_page()`` after a tab switch.
    """

    def __init__(
        self,
        page: Page,
        default_timeout_ms: int = DEFAULT_TIMEOUT_MS,
        screenshots_dir: Optional[PathLike] = None,
    ):
        """Initialize the facade.

        Args:
            page: Page to drive
            default_timeout_ms: Wait timeout used when a call passes none
            screenshots_dir: Directory for step screenshots (default: ./Screenshots)
        """
        self.page = page
        self.default_timeout_ms = default_timeout_ms
        self.screenshots_dir = Path(screenshots_dir) if screenshots_dir else Path.cwd() / "Screenshots"

    def use_page(self, page: Page) -> None:
        self.page = page

    def _timeout(self, timeout_ms: Optional[int]) -> int:
        return self.default_timeout_ms if timeout_ms is None else timeout_ms

    async def _wait_for(
        self,
        selector: str,
        state: WaitState = WaitState.VISIBLE,
        timeout_ms: Optional[int] = None,
    ) -> None:
        """Wait until the element matching selector reaches state.

        Args:
            selector: Element selector
            state: Required element state
            timeout_ms: Wait timeout (default: facade default)

        Raises:
            ElementTimeoutError: If the state is not reached within the timeout
        """
        timeout = self._timeout(timeout_ms)

        if state == WaitState.ENABLED:
            await self._wait_for_enabled(selector, timeout)
            return

        try:
            await self.page.wait_for_selector(selector, state=state.value, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementTimeoutError(selector, state.value, timeout, str(e)) from e

    async def _wait_for_enabled(self, selector: str, timeout: int) -> None:
        # Playwright has no "enabled" selector state: wait for visible, then poll.
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout / 1000

        try:
            await self.page.wait_for_selector(selector, state="visible", timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementTimeoutError(selector, WaitState.ENABLED.value, timeout, str(e)) from e

        while not await self.page.is_enabled(selector):
            if loop.time() >= deadline:
                raise ElementTimeoutError(selector, WaitState.ENABLED.value, timeout)
            await asyncio.sleep(ENABLED_POLL_INTERVAL)

    # Navigation

    async def navigate(self, url: str, wait_until: Optional[str] = None) -> Optional[Response]:
        """Navigate to a URL.

        Args:
            url: Target URL
            wait_until: load, domcontentloaded, networkidle or commit

        Returns:
            Main resource response, if any
        """
        logger.debug(f"Navigating to {url}")
        if wait_until:
            return await self.page.goto(url, wait_until=wait_until)
        return await self.page.goto(url)

    async def go_back(self) -> Optional[Response]:
        return await self.page.go_back()

    async def go_forward(self) -> Optional[Response]:
        return await self.page.go_forward()

    async def reload(self) -> Optional[Response]:
        return await self.page.reload()

    @property
    def current_url(self) -> str:
        return self.page.url

    async def get_title(self) -> str:
        return await self.page.title()

    # Element actions

    async def click(
        self,
        selector: str,
        timeout_ms: Optional[int] = None,
        state: WaitState = WaitState.VISIBLE,
        **options: Any,
    ) -> None:
        """Wait for an element and click it.

        Args:
            selector: Element selector
            timeout_ms: Wait timeout
            state: State to wait for before clicking (VISIBLE or ENABLED)
            **options: Extra Playwright click options (button, modifiers, position)

        Raises:
            ElementTimeoutError: If the element never reaches state
        """
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, state, timeout)
        await self.page.click(selector, timeout=timeout, **options)
        logger.debug(f"Clicked {selector}")

    async def double_click(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.dblclick(selector, timeout=timeout)

    async def right_click(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.click(selector, button="right", timeout=timeout)

    async def force_click(self, selector: str) -> None:
        """Click without waiting and without actionability checks.

        Bypasses the visibility wait. Use only for elements that are covered
        or animated in a way that defeats the normal checks.
        """
        await self.page.click(selector, force=True)

    async def js_click(self, selector: str) -> None:
        """Dispatch ``element.click()`` in the page.

        Bypasses the wait and every actionability check. Raises a Playwright
        error if nothing matches.
        """
        await self.page.eval_on_selector(selector, "el => el.click()")

    async def fill(
        self,
        selector: str,
        value: str,
        timeout_ms: Optional[int] = None,
        state: WaitState = WaitState.VISIBLE,
    ) -> None:
        """Wait for an input and replace its value.

        Args:
            selector: Input selector
            value: New value
            timeout_ms: Wait timeout
            state: State to wait for before filling

        Raises:
            ElementTimeoutError: If the input never reaches state
        """
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, state, timeout)
        await self.page.fill(selector, value, timeout=timeout)
        logger.debug(f"Filled {selector}")

    async def type_text(
        self,
        selector: str,
        text: str,
        delay_ms: float = 0,
        timeout_ms: Optional[int] = None,
    ) -> None:
        """Type text key by key, firing keyboard events for each character."""
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.locator(selector).press_sequentially(text, delay=delay_ms, timeout=timeout)

    async def clear(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.locator(selector).clear(timeout=timeout)

    async def set_value(self, selector: str, value: str) -> None:
        """Assign ``element.value`` through JavaScript.

        Bypasses the wait and does not fire input events. Prefer ``fill``.
        """
        await self.page.eval_on_selector(selector, "(el, value) => { el.value = value; }", value)

    async def press_key(
        self,
        key: str,
        selector: Optional[str] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        """Press a key on an element, or on the page when no selector is given."""
        if selector is None:
            await self.page.keyboard.press(key)
            return

        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.press(selector, key, timeout=timeout)

    async def check(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.check(selector, timeout=timeout)

    async def uncheck(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.uncheck(selector, timeout=timeout)

    async def set_checked(self, selector: str, checked: bool, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.set_checked(selector, checked, timeout=timeout)

    async def hover(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.hover(selector, timeout=timeout)

    async def focus(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        await self.page.focus(selector, timeout=timeout)

    async def blur(self, selector: str) -> None:
        await self.page.locator(selector).blur()

    async def drag_and_drop(
        self,
        source_selector: str,
        target_selector: str,
        timeout_ms: Optional[int] = None,
    ) -> None:
        """Drag the source element onto the target element.

        Both elements must become visible within the timeout.
        """
        timeout = self._timeout(timeout_ms)
        await self._wait_for(source_selector, WaitState.VISIBLE, timeout)
        await self._wait_for(target_selector, WaitState.VISIBLE, timeout)
        await self.page.drag_and_drop(source_selector, target_selector, timeout=timeout)

    # Select

    async def select_by_value(self, selector: str, value: str, timeout_ms: Optional[int] = None) -> List[str]:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.select_option(selector, value=value, timeout=timeout)

    async def select_by_text(self, selector: str, text: str, timeout_ms: Optional[int] = None) -> List[str]:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.select_option(selector, label=text, timeout=timeout)

    async def select_by_index(self, selector: str, index: int, timeout_ms: Optional[int] = None) -> List[str]:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.select_option(selector, index=index, timeout=timeout)

    async def select_multiple(
        self,
        selector: str,
        values: Sequence[str],
        timeout_ms: Optional[int] = None,
    ) -> List[str]:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.select_option(selector, value=list(values), timeout=timeout)

    async def get_select_options(self, selector: str) -> List[str]:
        """Return the text of every option in a select, or [] if none match."""
        return await self.page.locator(f"{selector} option").all_text_contents()

    async def get_selected_option_text(self, selector: str) -> str:
        """Return the text of the checked option, or "" if none match."""
        options = self.page.locator(f"{selector} option:checked")
        if await options.count() == 0:
            return ""
        return await options.first.text_content() or ""

    # Files

    async def upload_file(self, selector: str, file_path: PathLike, timeout_ms: Optional[int] = None) -> None:
        await self.upload_files(selector, [file_path], timeout_ms)

    async def upload_files(
        self,
        selector: str,
        file_paths: Sequence[PathLike],
        timeout_ms: Optional[int] = None,
    ) -> None:
        """Set files on a file input.

        File inputs are often hidden, so this waits for the input to be
        attached rather than visible.
        """
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.ATTACHED, timeout)
        await self.page.set_input_files(selector, [str(p) for p in file_paths], timeout=timeout)
        logger.debug(f"Uploaded {len(file_paths)} file(s) to {selector}")

    async def clear_file_input(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.ATTACHED, timeout)
        await self.page.set_input_files(selector, [], timeout=timeout)

    # Reads

    async def get_text(self, selector: str, timeout_ms: Optional[int] = None) -> Optional[str]:
        """Wait for an element to be visible and return its text content."""
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.text_content(selector, timeout=timeout)

    async def get_inner_text(self, selector: str, timeout_ms: Optional[int] = None) -> str:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.inner_text(selector, timeout=timeout)

    async def get_inner_html(self, selector: str, timeout_ms: Optional[int] = None) -> str:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.ATTACHED, timeout)
        return await self.page.inner_html(selector, timeout=timeout)

    async def get_attribute(self, selector: str, name: str, timeout_ms: Optional[int] = None) -> Optional[str]:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.ATTACHED, timeout)
        return await self.page.get_attribute(selector, name, timeout=timeout)

    async def get_input_value(self, selector: str, timeout_ms: Optional[int] = None) -> str:
        timeout = self._timeout(timeout_ms)
        await self._wait_for(selector, WaitState.VISIBLE, timeout)
        return await self.page.input_value(selector, timeout=timeout)

    async def get_all_texts(self, selector: str) -> List[str]:
        return await self.page.locator(selector).all_text_contents()

    async def get_element_count(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    # State queries (never wait)

    async def is_visible(self, selector: str) -> bool:
        return await self.page.is_visible(selector)

    async def is_hidden(self, selector: str) -> bool:
        return await self.page.is_hidden(selector)

    async def exists(self, selector: str) -> bool:
        return await self.get_element_count(selector) > 0

    async def _first_state(self, selector: str, query: str) -> Optional[bool]:
        # Locator state queries auto-wait; check the count first so a missing
        # element answers immediately.
        locator = self.page.locator(selector)
        if await locator.count() == 0:
            return None
        return await getattr(locator.first, query)()

    async def is_enabled(self, selector: str) -> bool:
        return bool(await self._first_state(selector, "is_enabled"))

    async def is_disabled(self, selector: str) -> bool:
        return bool(await self._first_state(selector, "is_disabled"))

    async def is_checked(self, selector: str) -> bool:
        return bool(await self._first_state(selector, "is_checked"))

    async def is_editable(self, selector: str) -> bool:
        return bool(await self._first_state(selector, "is_editable"))

    # Explicit waits

    async def wait_for_visible(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        await self._wait_for(selector, WaitState.VISIBLE, timeout_ms)

    async def wait_for_hidden(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        await self._wait_for(selector, WaitState.HIDDEN, timeout_ms)

    async def wait_for_attached(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        await self._wait_for(selector, WaitState.ATTACHED, timeout_ms)

    async def wait_for_detached(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        await self._wait_for(selector, WaitState.DETACHED, timeout_ms)

    async def wait_for_enabled(self, selector: str, timeout_ms: Optional[int] = None) -> None:
        await self._wait_for(selector, WaitState.ENABLED, timeout_ms)

    async def wait_for_load_state(self, state: str = "load", timeout_ms: Optional[int] = None) -> None:
        await self.page.wait_for_load_state(state, timeout=self._timeout(timeout_ms))

    async def wait_for_url(self, url_substring: str, timeout_ms: Optional[int] = None) -> None:
        """Wait until the page URL contains url_substring."""
        await self.page.wait_for_url(lambda url: url_substring in url, timeout=self._timeout(timeout_ms))

    async def wait_for_response(self, url_substring: str, timeout_ms: Optional[int] = None) -> Response:
        """Wait for the next response whose URL contains url_substring."""
        return await self.page.wait_for_event(
            "response",
            predicate=lambda response: url_substring in response.url,
            timeout=self._timeout(timeout_ms),
        )

    async def wait_for_network_idle(self, timeout_ms: Optional[int] = None) -> None:
        await self.wait_for_load_state("networkidle", timeout_ms)

    async def wait(self, milliseconds: int) -> None:
        """Sleep for a fixed time. Prefer an explicit wait."""
        await self.page.wait_for_timeout(milliseconds)

    # Scrolling

    async def scroll_into_view(self, selector: str) -> None:
        await self.page.locator(selector).scroll_into_view_if_needed()

    async def scroll_to_top(self) -> None:
        await self.page.evaluate("() => window.scrollTo(0, 0)")

    async def scroll_to_bottom(self) -> None:
        await self.page.evaluate("() => window.scrollTo(0, document.body.scrollHeight)")

    async def scroll_by(self, x: int, y: int) -> None:
        await self.page.evaluate("([x, y]) => window.scrollBy(x, y)", [x, y])

    async def scroll_to(self, x: int, y: int) -> None:
        await self.page.evaluate("([x, y]) => window.scrollTo(x, y)", [x, y])

    # Frames

    def get_frame(self, name_or_url: str) -> Optional[Frame]:
        """Find a frame by name, falling back to a URL substring match."""
        frame = self.page.frame(name=name_or_url)
        if frame is not None:
            return frame
        return self.page.frame(url=lambda url: name_or_url in url)

    def frame_locator(self, selector: str) -> FrameLocator:
        return self.page.frame_locator(selector)

    @property
    def frames(self) -> List[Frame]:
        return self.page.frames

    # JavaScript

    async def execute_js(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    async def execute_js_on_element(self, selector: str, script: str, arg: Any = None) -> Any:
        return await self.page.eval_on_selector(selector, script, arg)

    # Locators

    def locator(self, selector: str) -> Locator:
        return self.page.locator(selector)

    def get_by_role(self, role: str, **options: Any) -> Locator:
        return self.page.get_by_role(role, **options)

    def get_by_text(self, text: str, exact: Optional[bool] = None) -> Locator:
        return self.page.get_by_text(text, exact=exact)

    def get_by_label(self, text: str, exact: Optional[bool] = None) -> Locator:
        return self.page.get_by_label(text, exact=exact)

    def get_by_placeholder(self, text: str, exact: Optional[bool] = None) -> Locator:
        return self.page.get_by_placeholder(text, exact=exact)

    def get_by_alt_text(self, text: str, exact: Optional[bool] = None) -> Locator:
        return self.page.get_by_alt_text(text, exact=exact)

    def get_by_title(self, text: str, exact: Optional[bool] = None) -> Locator:
        return self.page.get_by_title(text, exact=exact)

    def get_by_test_id(self, test_id: str) -> Locator:
        return self.page.get_by_test_id(test_id)

    # Cookies and storage

    async def get_cookies(self) -> List[Dict[str, Any]]:
        return await self.page.context.cookies()

    async def add_cookies(self, cookies: Sequence[Dict[str, Any]]) -> None:
        await self.page.context.add_cookies(list(cookies))

    async def clear_cookies(self) -> None:
        await self.page.context.clear_cookies()

    async def get_local_storage_item(self, key: str) -> Optional[str]:
        return await self.page.evaluate("key => window.localStorage.getItem(key)", key)

    async def set_local_storage_item(self, key: str, value: str) -> None:
        await self.page.evaluate(
            "([key, value]) => window.localStorage.setItem(key, value)", [key, value]
        )

    async def clear_local_storage(self) -> None:
        await self.page.evaluate("() => window.localStorage.clear()")

    async def get_session_storage_item(self, key: str) -> Optional[str]:
        return await self.page.evaluate("key => window.sessionStorage.getItem(key)", key)

    async def set_session_storage_item(self, key: str, value: str) -> None:
        await self.page.evaluate(
            "([key, value]) => window.sessionStorage.setItem(key, value)", [key, value]
        )

    async def clear_session_storage(self) -> None:
        await self.page.evaluate("() => window.sessionStorage.clear()")

    # Keyboard

    async def press_enter(self) -> None:
        await self.page.keyboard.press("Enter")

    async def press_tab(self) -> None:
        await self.page.keyboard.press("Tab")

    async def press_escape(self) -> None:
        await self.page.keyboard.press("Escape")

    async def press_shortcut(self, shortcut: str) -> None:
        """Press a key combination such as ``Control+A``."""
        await self.page.keyboard.press(shortcut)

    async def keyboard_type(self, text: str) -> None:
        await self.page.keyboard.type(text)

    # Mouse

    async def mouse_move(self, x: float, y: float) -> None:
        await self.page.mouse.move(x, y)

    async def mouse_click(self, x: float, y: float) -> None:
        await self.page.mouse.click(x, y)

    async def mouse_double_click(self, x: float, y: float) -> None:
        await self.page.mouse.dblclick(x, y)

    async def mouse_wheel(self, delta_x: float, delta_y: float) -> None:
        await self.page.mouse.wheel(delta_x, delta_y)

    # Debugging

    async def highlight(self, selector: str) -> None:
        await self.page.locator(selector).highlight()

    async def bring_to_front(self) -> None:
        await self.page.bring_to_front()

    # Screenshots

    async def take_screenshot(self, step_name: str) -> Optional[Path]:
        """Save a full-page screenshot and attach it to the Allure report.

        The file is named ``<step_name>_<HHMMSS>.png`` under the screenshots
        directory. Failures are logged and never raised.

        Args:
            step_name: Label used for the file name and the attachment

        Returns:
            Path of the saved file, or None if the capture failed
        """
        try:
            self.screenshots_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%H%M%S")
            path = self.screenshots_dir / f"{safe_filename(step_name)}_{stamp}.png"

            image = await self.page.screenshot(path=str(path), full_page=True)

            try:
                allure.attach(image, name=step_name, attachment_type=allure.attachment_type.PNG)
            except Exception as e:
                logger.debug(f"Screenshot not attached to report: {e}")

            log_success(logger, f"Screenshot saved: {path}")
            return path
        except Exception as e:
            logger.error(f"Failed to take screenshot: {e}")
            return None

    async def take_element_screenshot(self, selector: str, path: Optional[PathLike] = None) -> bytes:
        return await self.page.locator(selector).screenshot(path=str(path) if path else None)

    async def take_full_page_screenshot(self, path: Optional[PathLike] = None) -> bytes:
        return await self.page.screenshot(path=str(path) if path else None, full_page=True)
