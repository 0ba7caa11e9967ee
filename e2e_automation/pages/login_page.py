"""Login page object."""

import logging

from e2e_automation.utils.logging import log_step

from .base_page import BasePage

logger = logging.getLogger(__name__)


class LoginPage(BasePage):
    """The application's sign-in form."""

    USERNAME_INPUT = "#username"
    PASSWORD_INPUT = "#password"
    SUBMIT_BUTTON = "button[type='submit']"

    async def open(self, base_url: str) -> None:
        """Navigate to ``<base_url>/login``."""
        url = f"{base_url.rstrip('/')}/login"
        log_step(logger, f"Opening login page {url}")
        await self.actions.navigate(url)

    async def login_as(self, username: str, password: str) -> None:
        """Fill the credentials and submit the form.

        Args:
            username: Account name
            password: Account password

        Raises:
            ElementTimeoutError: If a form field never becomes visible
        """
        log_step(logger, f"Logging in as {username}")
        await self.actions.fill(self.USERNAME_INPUT, username)
        await self.actions.fill(self.PASSWORD_INPUT, password)
        await self.actions.click(self.SUBMIT_BUTTON)
        await self.actions.take_screenshot("login")

    async def assert_title_contains(self, expected: str) -> None:
        await self.check.assert_title_contains(expected)
