"""Browser session management."""

from .playwright_integration import PlaywrightManager
from .session import BrowserSession

__all__ = ["BrowserSession", "PlaywrightManager"]
