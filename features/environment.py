"""Behave environment hooks.

Wires behave's lifecycle to AutomationHooks. One event loop serves the whole
run; each scenario gets its own browser session and soft-assertion buffer.
"""

import logging

from e2e_automation.config import load_settings
from e2e_automation.hooks import AutomationHooks
from e2e_automation.hooks.behave_support import (
    close_loop,
    create_loop,
    current_page,
    end_scenario,
    failure_message,
    run,
    scenario_failed,
    start_scenario,
)
from e2e_automation.utils.logging import configure_logging

logger = logging.getLogger(__name__)


def before_all(context):
    userdata = context.config.userdata
    configure_logging(userdata.get("log_level"), userdata.get("log_file"))

    context.settings = load_settings(environment=userdata.get("environment"))
    create_loop(context)
    context.hooks = AutomationHooks(context.settings)
    context.hooks.before_run()


def before_scenario(context, scenario):
    context.hooks.before_scenario(scenario.name, scenario.effective_tags)
    start_scenario(context)


def after_scenario(context, scenario):
    failed = scenario_failed(scenario)
    error = failure_message(scenario) if failed else None

    try:
        run(
            context,
            context.hooks.after_scenario(
                scenario.name,
                failed,
                error,
                page_provider=lambda: current_page(context),
            ),
        )
    finally:
        end_scenario(context)


def after_all(context):
    try:
        outcome = context.hooks.after_run()
        logger.info(f"Report: {outcome.status.value} ({outcome.report_dir})")
    finally:
        close_loop(context)
