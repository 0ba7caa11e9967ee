"""Exception types raised by the automation framework."""

from typing import Optional


class AutomationError(Exception):
    """Base class for framework errors."""

    pass


class ConfigurationError(AutomationError):
    """Raised when the settings files are missing or malformed."""

    pass


class BrowserLaunchError(AutomationError, RuntimeError):
    """Raised when the browser, context or first page cannot be created."""

    pass


class ElementTimeoutError(AutomationError, TimeoutError):
    """Raised when an element never reaches the required state in time."""

    def __init__(self, selector: str, state: str, timeout_ms: int, detail: Optional[str] = None):
        self.selector = selector
        self.state = state
        self.timeout_ms = timeout_ms
        message = f"Timed out after {timeout_ms}ms waiting for '{selector}' to be {state}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DialogTimeoutError(AutomationError, TimeoutError):
    """Raised when a triggered action never produced a dialog."""

    pass


class PageAssertionError(AutomationError, AssertionError):
    """Raised by the page assertion helpers."""

    pass


class SoftAssertionError(PageAssertionError):
    """Aggregate failure raised when collected soft assertions are checked."""

    def __init__(self, messages):
        self.messages = list(messages)
        joined = "\n".join(self.messages)
        super().__init__(f"Soft assertion failures:\n{joined}")


class LifecycleError(AutomationError, RuntimeError):
    """Raised when hooks are called out of order."""

    pass
