"""Page objects and the page action facade."""

from .actions import PageActions
from .assertions import PageAssertions, SoftAssertions
from .base_page import BasePage
from .dialogs import DialogHandler
from .login_page import LoginPage
from .tabs import TabManager

__all__ = [
    "BasePage",
    "DialogHandler",
    "LoginPage",
    "PageActions",
    "PageAssertions",
    "SoftAssertions",
    "TabManager",
]
