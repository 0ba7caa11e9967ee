"""Tests for hard and soft page assertions."""

import pytest
from unittest.mock import AsyncMock, MagicMock, PropertyMock

from e2e_automation.errors import (
    ElementTimeoutError,
    PageAssertionError,
    SoftAssertionError,
)
from e2e_automation.pages.actions import PageActions
from e2e_automation.pages.assertions import PageAssertions, SoftAssertions


@pytest.fixture
def mock_actions():
    """PageActions double with async reads."""
    actions = MagicMock(spec=PageActions)
    actions.get_text = AsyncMock(return_value="Hello, user1")
    actions.get_title = AsyncMock(return_value="Dashboard - App")
    actions.get_attribute = AsyncMock(return_value="btn btn-primary")
    actions.get_element_count = AsyncMock(return_value=3)
    actions.get_input_value = AsyncMock(return_value="user1")
    actions.is_visible = AsyncMock(return_value=True)
    actions.is_hidden = AsyncMock(return_value=False)
    actions.is_enabled = AsyncMock(return_value=True)
    actions.is_disabled = AsyncMock(return_value=False)
    actions.is_checked = AsyncMock(return_value=False)
    actions.exists = AsyncMock(return_value=True)
    type(actions).current_url = PropertyMock(return_value="https://app.test/dashboard")
    return actions


@pytest.fixture
def check(mock_actions):
    return PageAssertions(mock_actions)


@pytest.fixture
def soft(check):
    return SoftAssertions(check)


class TestPageAssertions:
    """Hard assertions."""

    @pytest.mark.asyncio
    async def test_text_contains_passes(self, check):
        await check.assert_text_contains("#greeting", "user1")

    @pytest.mark.asyncio
    async def test_text_contains_message(self, check):
        with pytest.raises(PageAssertionError) as exc_info:
            await check.assert_text_contains("#greeting", "admin")

        assert str(exc_info.value) == (
            "Expected element '#greeting' to contain text 'admin', but got 'Hello, user1'"
        )
        assert isinstance(exc_info.value, AssertionError)

    @pytest.mark.asyncio
    async def test_text_contains_with_no_text(self, check, mock_actions):
        mock_actions.get_text.return_value = None

        with pytest.raises(PageAssertionError, match="but got 'None'"):
            await check.assert_text_contains("#empty", "x")

    @pytest.mark.asyncio
    async def test_title_contains(self, check):
        await check.assert_title_contains("Dashboard")

        with pytest.raises(PageAssertionError) as exc_info:
            await check.assert_title_contains("Login")
        assert str(exc_info.value) == "Expected title to contain 'Login', but got 'Dashboard - App'"

    @pytest.mark.asyncio
    async def test_element_count(self, check):
        await check.assert_element_count(".row", 3)

        with pytest.raises(PageAssertionError) as exc_info:
            await check.assert_element_count(".row", 5)
        assert str(exc_info.value) == "Expected 5 elements matching '.row', but found 3"

    @pytest.mark.asyncio
    async def test_element_count_greater_than(self, check):
        await check.assert_element_count_greater_than(".row", 2)

        with pytest.raises(PageAssertionError, match="more than 3"):
            await check.assert_element_count_greater_than(".row", 3)

    @pytest.mark.asyncio
    async def test_has_class_matches_whole_names(self, check):
        await check.assert_has_class("#save", "btn-primary")

        with pytest.raises(PageAssertionError):
            await check.assert_has_class("#save", "primary")

    @pytest.mark.asyncio
    async def test_visibility_and_state(self, check, mock_actions):
        await check.assert_visible("#header")
        await check.assert_enabled("#save")
        await check.assert_not_checked("#terms")

        mock_actions.is_visible.return_value = False
        with pytest.raises(PageAssertionError, match="to be visible, but it was not"):
            await check.assert_visible("#header")

    @pytest.mark.asyncio
    async def test_not_exists(self, check):
        with pytest.raises(PageAssertionError, match="to not exist, but it was found"):
            await check.assert_not_exists("#spinner")

    def test_url_assertions(self, check):
        check.assert_url_contains("/dashboard")
        check.assert_url_equals("https://app.test/dashboard")

        with pytest.raises(PageAssertionError, match="Expected URL to contain '/login'"):
            check.assert_url_contains("/login")

    def test_assert_that(self, check):
        check.assert_that(True, "unused")

        with pytest.raises(PageAssertionError, match="custom failure"):
            check.assert_that(False, "custom failure")

    @pytest.mark.asyncio
    async def test_read_timeouts_propagate(self, check, mock_actions):
        mock_actions.get_text.side_effect = ElementTimeoutError("#late", "visible", 100)

        with pytest.raises(ElementTimeoutError):
            await check.assert_text_equals("#late", "x")


class TestSoftAssertions:
    """Soft assertions collect failures in call order."""

    @pytest.mark.asyncio
    async def test_collects_failures_in_order(self, soft, mock_actions):
        mock_actions.is_visible.return_value = False

        assert await soft.soft_assert_visible("#header") is False
        assert await soft.soft_assert_title_contains("Dashboard") is True
        assert await soft.soft_assert_text_contains("#greeting", "admin") is False

        assert soft.errors == (
            "Expected element '#header' to be visible, but it was not",
            "Expected element '#greeting' to contain text 'admin', but got 'Hello, user1'",
        )

    @pytest.mark.asyncio
    async def test_assert_all_raises_once_and_clears(self, soft):
        await soft.soft_assert_title_contains("Login")
        await soft.soft_assert_url_contains("/login")

        with pytest.raises(SoftAssertionError) as exc_info:
            soft.assert_all()

        error = exc_info.value
        assert len(error.messages) == 2
        assert str(error) == "Soft assertion failures:\n" + "\n".join(error.messages)
        assert soft.errors == ()
        soft.assert_all()

    def test_assert_all_passes_when_empty(self, soft):
        soft.assert_all()

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, soft, mock_actions):
        mock_actions.get_text.side_effect = ElementTimeoutError("#late", "visible", 100)

        with pytest.raises(ElementTimeoutError):
            await soft.soft_assert_text_equals("#late", "x")

        assert soft.errors == ()

    @pytest.mark.asyncio
    async def test_collect_generic_awaitable(self, soft, check):
        assert await soft.collect(check.assert_element_count(".row", 1)) is False
        assert len(soft.errors) == 1

    @pytest.mark.asyncio
    async def test_clear(self, soft):
        await soft.soft_assert_title_contains("Login")

        soft.clear()

        assert soft.errors == ()

    def test_errors_view_is_read_only(self, soft):
        assert isinstance(soft.errors, tuple)

    @pytest.mark.asyncio
    async def test_unbound_buffer_raises(self):
        with pytest.raises(RuntimeError, match="not bound"):
            await SoftAssertions().soft_assert_visible("#x")
