"""Tests for BasePage composition and the LoginPage flow."""

import pytest
from unittest.mock import AsyncMock, MagicMock
from playwright.async_api import Page

from e2e_automation.errors import PageAssertionError, SoftAssertionError
from e2e_automation.pages import BasePage, LoginPage, SoftAssertions


def make_page(url="https://app.test/login", title="Dashboard"):
    page = AsyncMock(spec=Page)
    page.url = url
    page.context = MagicMock()
    page.context.pages = [page]
    page.title = AsyncMock(return_value=title)
    page.screenshot = AsyncMock(return_value=b"png")
    return page


@pytest.fixture
def page():
    return make_page()


@pytest.fixture
def login_page(page, tmp_path):
    return LoginPage(page, timeout_ms=5000, screenshots_dir=tmp_path)


class TestBasePage:
    """Composition and rebinding."""

    def test_components_share_page(self, page):
        base = BasePage(page)

        assert base.page is page
        assert base.actions.page is page
        assert base.dialogs.page is page
        assert base.tabs.current is page
        assert base.check.actions is base.actions
        assert base.soft.assertions is base.check

    @pytest.mark.asyncio
    async def test_shared_soft_buffer(self, page):
        soft = SoftAssertions()
        page.title.return_value = "Login"

        first = BasePage(page, soft=soft)
        second = LoginPage(page, soft=soft)
        await first.soft.soft_assert_title_contains("Home")
        await second.soft.soft_assert_title_contains("Orders")

        assert len(soft.errors) == 2
        with pytest.raises(SoftAssertionError):
            soft.assert_all()
        assert second.soft.errors == ()

    @pytest.mark.asyncio
    async def test_soft_checks_follow_own_page_object(self, page):
        soft = SoftAssertions()
        page.title.return_value = "Login"
        login = LoginPage(page, soft=soft)
        BasePage(page, soft=soft)
        dashboard = make_page(url="https://app.test/home", title="Dashboard")

        login.use_page(dashboard)

        assert await login.soft.soft_assert_title_contains("Dashboard") is True
        assert soft.errors == ()

    def test_use_page_rebinds_every_component(self, page):
        base = BasePage(page)
        other = make_page(url="https://app.test/other")

        base.use_page(other)

        assert base.page is other
        assert base.dialogs.page is other
        assert base.tabs.current is other

    def test_switch_to_tab(self, page):
        other = make_page(url="https://app.test/second")
        page.context.pages = [page, other]
        base = BasePage(page)

        assert base.switch_to_tab(1) is other
        assert base.actions.page is other


class TestLoginPage:
    """Login flow."""

    @pytest.mark.asyncio
    async def test_open_navigates_to_login(self, login_page, page):
        await login_page.open("https://app.test/")

        page.goto.assert_awaited_once_with("https://app.test/login")

    @pytest.mark.asyncio
    async def test_login_as_fills_and_submits(self, login_page, page):
        await login_page.login_as("user1", "pw1")

        page.fill.assert_any_await("#username", "user1", timeout=5000)
        page.fill.assert_any_await("#password", "pw1", timeout=5000)
        page.click.assert_awaited_once_with("button[type='submit']", timeout=5000)
        page.screenshot.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_assert_title_contains(self, login_page, page):
        await login_page.assert_title_contains("Dash")

        page.title.return_value = "Login"
        with pytest.raises(PageAssertionError, match="Expected title to contain 'Dashboard'"):
            await login_page.assert_title_contains("Dashboard")
