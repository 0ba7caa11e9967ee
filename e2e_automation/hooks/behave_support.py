"""Glue between behave's synchronous hooks/steps and the async framework.

behave calls hooks and steps synchronously, so each process owns one event
loop (``context.loop``) and every coroutine runs to completion on it.
"""

import asyncio
import logging
from typing import Any, Awaitable, Optional, Type, TypeVar

from behave.model_core import Status
from playwright.async_api import Page

from e2e_automation.browser.session import BrowserSession
from e2e_automation.pages.assertions import SoftAssertions
from e2e_automation.pages.base_page import BasePage

logger = logging.getLogger(__name__)

PageT = TypeVar("PageT", bound=BasePage)

# Assertion failures end in "failed"; any other exception in a step ends in
# "error", and an exception in a hook in "hook_error".
FAILED_STATUSES = (Status.failed, Status.error, Status.hook_error)


def create_loop(context: Any) -> asyncio.AbstractEventLoop:
    """Create the run's event loop and store it on ``context.loop``."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    context.loop = loop
    return loop


def close_loop(context: Any) -> None:
    loop: Optional[asyncio.AbstractEventLoop] = getattr(context, "loop", None)
    if loop is None or loop.is_closed():
        return
    try:
        loop.run_until_complete(loop.shutdown_asyncgens())
    finally:
        asyncio.set_event_loop(None)
        loop.close()


def run(context: Any, awaitable: Awaitable[Any]) -> Any:
    """Run a coroutine to completion on the run's loop and return its result."""
    return context.loop.run_until_complete(awaitable)


def start_scenario(context: Any) -> None:
    """Give the scenario a fresh browser session and soft-assertion buffer."""
    context.session = BrowserSession(context.settings.session_config())
    context.soft = SoftAssertions()
    context.page_objects = {}
    context.active_page_object = None


def get_page_object(context: Any, page_class: Type[PageT]) -> PageT:
    """Return the scenario's instance of page_class, creating it on first use.

    The first call in a scenario launches the browser.
    """
    page_object = context.page_objects.get(page_class)
    if page_object is None:
        page = run(context, context.session.get_page())
        page_object = page_class(
            page,
            timeout_ms=context.settings.timeout,
            screenshots_dir=context.hooks.run.screenshots_dir,
            soft=context.soft,
        )
        context.page_objects[page_class] = page_object
    context.active_page_object = page_object
    return page_object


def current_page(context: Any) -> Optional[Page]:
    """The page the scenario last worked with, or None if none was launched."""
    page_object = getattr(context, "active_page_object", None)
    if page_object is not None:
        return page_object.page
    session = getattr(context, "session", None)
    return session.page if session is not None else None


def end_scenario(context: Any) -> None:
    """Clear soft assertions and close the scenario's browser session."""
    soft = getattr(context, "soft", None)
    if soft is not None:
        soft.clear()
    session = getattr(context, "session", None)
    if session is not None:
        run(context, session.close())


def scenario_failed(scenario: Any) -> bool:
    """Whether a finished behave scenario failed for any reason."""
    return scenario.status in FAILED_STATUSES


def failure_message(scenario: Any) -> Optional[str]:
    """Error message of the first failed step, background steps included."""
    for step in scenario.all_steps:
        if step.status in FAILED_STATUSES and step.error_message:
            return step.error_message
    return None
