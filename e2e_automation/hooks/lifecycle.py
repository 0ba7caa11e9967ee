"""Run and scenario lifecycle hooks.

AutomationHooks holds everything the runner needs between hooks: the run's
report layout, the report generator and the lifecycle state. The behave
environment module forwards its hooks here.
"""

import logging
import shutil
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from playwright.async_api import Page

from e2e_automation.config.settings import AutomationSettings
from e2e_automation.errors import LifecycleError
from e2e_automation.models.report_models import ReportOutcome, ReportStatus, ScenarioMetadata
from e2e_automation.reporting.allure_cli import AllureCli, ReportGenerator
from e2e_automation.reporting.environment import write_environment_properties
from e2e_automation.reporting.run_context import RunContext, safe_filename
from e2e_automation.reporting.tags import apply_scenario_metadata, parse_scenario_tags
from e2e_automation.utils.logging import log_header, log_separator, log_step, log_success

logger = logging.getLogger(__name__)

PageProvider = Callable[[], Optional[Page]]


class RunState(str, Enum):
    """Lifecycle of one test run."""

    NOT_STARTED = "not_started"
    ACTIVE = "active"
    FINISHED = "finished"


class AutomationHooks:
    """Before/after hooks for a test run and its scenarios.

    Calls must follow ``before_run -> (before_scenario -> after_scenario)* ->
    after_run``; a call in the wrong state raises LifecycleError. Within a
    valid call, reporting side effects (screenshots, result copies, report
    generation) are best effort and only logged when they fail.
    """

    def __init__(
        self,
        settings: AutomationSettings,
        run: Optional[RunContext] = None,
        report_generator: Optional[ReportGenerator] = None,
    ):
        """Initialize hooks for one run.

        Args:
            settings: Run settings
            run: Report layout (default: computed now from the working directory)
            report_generator: Report adapter (default: AllureCli from settings)
        """
        self.settings = settings
        self.run = run or RunContext.create()
        self.report_generator = report_generator or AllureCli(
            settings.allure_executable, settings.report_timeout_seconds
        )
        self.state = RunState.NOT_STARTED
        self.current_scenario: Optional[str] = None

    def _require(self, expected: RunState, operation: str) -> None:
        if self.state != expected:
            raise LifecycleError(
                f"{operation}() requires run state '{expected.value}', current state is '{self.state.value}'"
            )

    def before_run(self) -> RunContext:
        """Prepare the report folders for the run.

        Returns:
            The run's report layout

        Raises:
            LifecycleError: If the run was already started
        """
        self._require(RunState.NOT_STARTED, "before_run")
        log_header("TEST RUN STARTED")

        self.run.results_dir.mkdir(parents=True, exist_ok=True)
        self._clear_default_results()
        write_environment_properties(self.run.results_dir, self.settings, self.run.started_at)

        logger.info(f"Report directory: {self.run.report_root}")
        logger.info(f"Allure results: {self.run.results_dir}")
        log_separator()

        self.state = RunState.ACTIVE
        return self.run

    def before_scenario(self, title: str, tags: Iterable[str] = ()) -> ScenarioMetadata:
        """Log the scenario and apply its tags to the report.

        Returns:
            Links and labels derived from the tags
        """
        self._require(RunState.ACTIVE, "before_scenario")
        self.current_scenario = title
        log_step(logger, f"Scenario: {title}")

        metadata = parse_scenario_tags(tags, self.settings.links)
        if not metadata.is_empty:
            try:
                apply_scenario_metadata(metadata)
            except Exception as e:
                logger.warning(f"Could not apply report tags for '{title}': {e}")
        return metadata

    async def after_scenario(
        self,
        title: str,
        failed: bool,
        error: Optional[str] = None,
        page_provider: Optional[PageProvider] = None,
    ) -> Optional[Path]:
        """Record the scenario outcome and capture the page on failure.

        Args:
            title: Scenario title
            failed: Whether the scenario failed
            error: Failure message, if any
            page_provider: Returns the page to capture, or None if no page
                was launched

        Returns:
            Path of the failure screenshot, if one was saved
        """
        self._require(RunState.ACTIVE, "after_scenario")
        self.current_scenario = None

        if not failed:
            log_success(logger, f"Scenario PASSED: {title}")
            return None

        logger.error(f"Scenario FAILED: {error or title}")
        return await self._capture_failure(title, page_provider)

    async def _capture_failure(self, title: str, page_provider: Optional[PageProvider]) -> Optional[Path]:
        try:
            page = page_provider() if page_provider else None
            if page is None or page.is_closed():
                logger.warning("Could not capture failure screenshot - no open page")
                return None

            self.run.screenshots_dir.mkdir(parents=True, exist_ok=True)
            stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            path = self.run.screenshots_dir / f"{safe_filename(title)}_{stamp}.png"
            await page.screenshot(path=str(path), full_page=True)

            logger.info(f"Failure screenshot saved: {path}")
            return path
        except Exception as e:
            logger.warning(f"Could not capture failure screenshot - page may be closed: {e}")
            return None

    def after_run(self) -> ReportOutcome:
        """Collect results, generate the report and open it.

        Returns:
            Outcome of report generation

        Raises:
            LifecycleError: If the run is not active
        """
        self._require(RunState.ACTIVE, "after_run")
        log_separator()
        log_header("TEST RUN COMPLETED")

        self._copy_default_results()

        report_dir = self.run.report_dir
        try:
            outcome = self.report_generator.generate_report(self.run.results_dir, report_dir)
        except Exception as e:
            logger.error(f"Error generating Allure report: {e}")
            outcome = ReportOutcome(status=ReportStatus.FAILED, report_dir=report_dir, message=str(e))

        if outcome.succeeded and self.settings.open_report:
            try:
                opened = self.report_generator.open_report(report_dir)
            except Exception as e:
                logger.error(f"Failed to open Allure report: {e}")
                opened = False
            outcome = outcome.model_copy(update={"opened": opened})

        self.state = RunState.FINISHED
        return outcome

    def _same_results_dir(self) -> bool:
        return self.run.default_results_dir.resolve() == self.run.results_dir.resolve()

    def _clear_default_results(self) -> None:
        default_dir = self.run.default_results_dir
        if not default_dir.is_dir() or self._same_results_dir():
            return
        try:
            for path in default_dir.iterdir():
                if path.is_file():
                    path.unlink()
            logger.info("Cleared previous allure results")
        except OSError as e:
            logger.warning(f"Could not clear {default_dir}: {e}")

    def _copy_default_results(self) -> int:
        default_dir = self.run.default_results_dir
        if not default_dir.is_dir() or self._same_results_dir():
            return 0
        copied = 0
        try:
            self.run.results_dir.mkdir(parents=True, exist_ok=True)
            for path in default_dir.iterdir():
                if path.is_file():
                    shutil.copy2(path, self.run.results_dir / path.name)
                    copied += 1
            log_success(logger, f"Copied {copied} allure result files to: {self.run.results_dir}")
        except OSError as e:
            logger.warning(f"Could not copy allure results from {default_dir}: {e}")
        return copied
