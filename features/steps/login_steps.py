"""Step definitions for the login feature."""

from behave import given, then, when

from e2e_automation.hooks.behave_support import get_page_object, run
from e2e_automation.pages import LoginPage


@given("I navigate to the login page")
def step_navigate_to_login(context):
    """Open the login page under the configured base URL."""
    login_page = get_page_object(context, LoginPage)
    run(context, login_page.open(context.settings.base_url))


@when('I enter username "{username}" and password "{password}"')
def step_enter_credentials(context, username, password):
    login_page = get_page_object(context, LoginPage)
    run(context, login_page.login_as(username, password))


@when("I click the login button")
def step_click_login(context):
    # Submitting is part of login_as.
    pass


@then('the page title should contain "{text}"')
def step_title_contains(context, text):
    login_page = get_page_object(context, LoginPage)
    run(context, login_page.assert_title_contains(text))


@then("all soft assertions should pass")
def step_soft_assertions_pass(context):
    context.soft.assert_all()
