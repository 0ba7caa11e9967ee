"""JavaScript dialog (alert, confirm, prompt) handling for a page."""

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional, Tuple

from playwright.async_api import Dialog, Page

from e2e_automation.errors import DialogTimeoutError
from e2e_automation.models.browser_models import DialogAction, DialogInfo

logger = logging.getLogger(__name__)

DEFAULT_DIALOG_TIMEOUT_MS = 5000

Trigger = Callable[[], Awaitable[Any]]
DialogHandlerFn = Callable[[Dialog], Awaitable[None]]


class DialogHandler:
    """Resolve dialogs raised by a page.

    One-shot calls (``accept_next`` and friends) register a handler, run the
    trigger, then wait for exactly one dialog. The handler detaches itself as
    soon as it fires, so a later dialog is never consumed by a stale handler.

    Persistent handlers (``auto_accept_all``/``auto_dismiss_all``) stay
    registered for the life of the page until ``stop_auto_handling`` removes
    them.
    """

    def __init__(self, page: Page, timeout_ms: int = DEFAULT_DIALOG_TIMEOUT_MS):
        self.page = page
        self.timeout_ms = timeout_ms
        self._auto_handlers: List[Tuple[Page, DialogHandlerFn]] = []

    def use_page(self, page: Page) -> None:
        self.page = page

    async def accept_next(self, trigger: Trigger, timeout_ms: Optional[int] = None) -> str:
        """Accept the next dialog raised by trigger.

        Args:
            trigger: Coroutine function that causes the dialog
            timeout_ms: How long to wait for the dialog after the trigger

        Returns:
            Dialog message

        Raises:
            DialogTimeoutError: If no dialog appears in time
        """
        info = await self._handle_next(trigger, DialogAction.ACCEPTED, None, timeout_ms)
        return info.message

    async def dismiss_next(self, trigger: Trigger, timeout_ms: Optional[int] = None) -> str:
        """Dismiss the next dialog raised by trigger and return its message."""
        info = await self._handle_next(trigger, DialogAction.DISMISSED, None, timeout_ms)
        return info.message

    async def accept_next_with_text(
        self,
        trigger: Trigger,
        text: str,
        timeout_ms: Optional[int] = None,
    ) -> str:
        """Answer the next prompt dialog with text and return its message."""
        info = await self._handle_next(trigger, DialogAction.ACCEPTED, text, timeout_ms)
        return info.message

    async def next_dialog_info(self, trigger: Trigger, timeout_ms: Optional[int] = None) -> DialogInfo:
        """Accept the next dialog and return its type and message."""
        return await self._handle_next(trigger, DialogAction.ACCEPTED, None, timeout_ms)

    async def _handle_next(
        self,
        trigger: Trigger,
        action: DialogAction,
        prompt_text: Optional[str],
        timeout_ms: Optional[int],
    ) -> DialogInfo:
        timeout = self.timeout_ms if timeout_ms is None else timeout_ms
        page = self.page
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        attached = True
        claimed = False

        def detach() -> None:
            nonlocal attached
            if attached:
                attached = False
                page.remove_listener("dialog", handler)

        async def handler(dialog: Dialog) -> None:
            nonlocal claimed
            detach()
            if claimed or future.done():
                return
            claimed = True

            info = DialogInfo(
                type=dialog.type,
                message=dialog.message,
                default_value=dialog.default_value or "",
                action=action,
            )
            try:
                if action == DialogAction.DISMISSED:
                    await dialog.dismiss()
                elif prompt_text is not None:
                    await dialog.accept(prompt_text)
                else:
                    await dialog.accept()
            except Exception as e:
                if not future.done():
                    future.set_exception(e)
                return

            logger.debug(f"{action.value.capitalize()} {info.type} dialog: {info.message}")
            if not future.done():
                future.set_result(info)

        page.on("dialog", handler)
        try:
            await trigger()
            try:
                return await asyncio.wait_for(future, timeout / 1000)
            except asyncio.TimeoutError as e:
                raise DialogTimeoutError(f"No dialog appeared within {timeout}ms") from e
        finally:
            detach()

    def auto_accept_all(self) -> DialogHandlerFn:
        """Accept every dialog on the page until stopped.

        Returns:
            The registered handler, for ``stop_auto_handling``
        """

        async def handler(dialog: Dialog) -> None:
            logger.debug(f"Auto-accepting {dialog.type} dialog: {dialog.message}")
            await dialog.accept()

        return self._register_auto(handler)

    def auto_dismiss_all(self) -> DialogHandlerFn:
        """Dismiss every dialog on the page until stopped."""

        async def handler(dialog: Dialog) -> None:
            logger.debug(f"Auto-dismissing {dialog.type} dialog: {dialog.message}")
            await dialog.dismiss()

        return self._register_auto(handler)

    def _register_auto(self, handler: DialogHandlerFn) -> DialogHandlerFn:
        self.page.on("dialog", handler)
        self._auto_handlers.append((self.page, handler))
        return handler

    def stop_auto_handling(self, handler: Optional[DialogHandlerFn] = None) -> None:
        """Remove one persistent handler, or all of them when none is given."""
        remaining = []
        for page, registered in self._auto_handlers:
            if handler is None or registered is handler:
                page.remove_listener("dialog", registered)
            else:
                remaining.append((page, registered))
        self._auto_handlers = remaining
