"""Tests for run and scenario lifecycle hooks."""

from datetime import datetime

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from e2e_automation.config.settings import AutomationSettings
from e2e_automation.errors import LifecycleError
from e2e_automation.hooks import AutomationHooks, RunState
from e2e_automation.models.report_models import ReportOutcome, ReportStatus
from e2e_automation.reporting.run_context import RunContext


@pytest.fixture
def settings():
    return AutomationSettings(BaseUrl="https://app.test", OpenReport=True)


@pytest.fixture
def run_context(tmp_path):
    return RunContext.create(
        project_root=tmp_path,
        started_at=datetime(2025, 12, 19, 15, 52),
        working_dir=tmp_path / "cwd",
    )


@pytest.fixture
def generator(run_context):
    gen = MagicMock()
    gen.generate_report.return_value = ReportOutcome(
        status=ReportStatus.GENERATED, report_dir=run_context.report_dir, exit_code=0
    )
    gen.open_report.return_value = True
    return gen


@pytest.fixture
def hooks(settings, run_context, generator):
    return AutomationHooks(settings, run=run_context, report_generator=generator)


@pytest.fixture
def started(hooks):
    hooks.before_run()
    return hooks


def make_page(closed=False):
    page = MagicMock()
    page.is_closed = MagicMock(return_value=closed)
    page.screenshot = AsyncMock()
    return page


class TestStateMachine:
    def test_initial_state(self, hooks):
        assert hooks.state == RunState.NOT_STARTED

    def test_before_run_twice(self, started):
        with pytest.raises(LifecycleError, match="before_run"):
            started.before_run()

    def test_scenario_before_run(self, hooks):
        with pytest.raises(LifecycleError):
            hooks.before_scenario("Login")

    @pytest.mark.asyncio
    async def test_after_scenario_before_run(self, hooks):
        with pytest.raises(LifecycleError):
            await hooks.after_scenario("Login", failed=False)

    def test_after_run_requires_active(self, hooks):
        with pytest.raises(LifecycleError, match="after_run"):
            hooks.after_run()

    def test_finished_after_run(self, started):
        started.after_run()

        assert started.state == RunState.FINISHED
        with pytest.raises(LifecycleError):
            started.after_run()


class TestBeforeRun:
    def test_creates_results_and_environment(self, hooks, run_context):
        returned = hooks.before_run()

        assert returned is run_context
        assert hooks.state == RunState.ACTIVE
        assert (run_context.results_dir / "environment.properties").is_file()

    def test_clears_stale_default_results(self, hooks, run_context):
        run_context.default_results_dir.mkdir(parents=True)
        stale = run_context.default_results_dir / "old-result.json"
        stale.write_text("{}")

        hooks.before_run()

        assert not stale.exists()


class TestBeforeScenario:
    def test_applies_tag_metadata(self, started):
        with patch("e2e_automation.hooks.lifecycle.apply_scenario_metadata") as apply:
            metadata = started.before_scenario("Login", ["@severity:Critical", "@smoke"])

        assert [(l.name, l.value) for l in metadata.labels] == [("severity", "critical")]
        apply.assert_called_once_with(metadata)
        assert started.current_scenario == "Login"

    def test_no_metadata_skips_reporting(self, started):
        with patch("e2e_automation.hooks.lifecycle.apply_scenario_metadata") as apply:
            started.before_scenario("Login", ["@smoke"])

        apply.assert_not_called()

    def test_reporting_error_is_logged(self, started):
        with patch(
            "e2e_automation.hooks.lifecycle.apply_scenario_metadata",
            side_effect=RuntimeError("no test case"),
        ):
            metadata = started.before_scenario("Login", ["@issue:BUG-1"])

        assert len(metadata.links) == 1


class TestAfterScenario:
    @pytest.mark.asyncio
    async def test_passed_takes_no_screenshot(self, started):
        page = make_page()

        result = await started.after_scenario("Login", failed=False, page_provider=lambda: page)

        assert result is None
        page.screenshot.assert_not_called()
        assert started.current_scenario is None

    @pytest.mark.asyncio
    async def test_failed_saves_screenshot(self, started, run_context):
        page = make_page()

        path = await started.after_scenario(
            "Login: bad/password", failed=True, error="boom", page_provider=lambda: page
        )

        assert path.parent == run_context.screenshots_dir
        assert path.name.startswith("Login_ bad_password_")
        assert path.suffix == ".png"
        page.screenshot.assert_awaited_once_with(path=str(path), full_page=True)

    @pytest.mark.asyncio
    async def test_failed_without_page(self, started):
        assert await started.after_scenario("Login", failed=True, page_provider=lambda: None) is None
        assert await started.after_scenario("Login", failed=True) is None

    @pytest.mark.asyncio
    async def test_failed_with_closed_page(self, started):
        page = make_page(closed=True)

        assert await started.after_scenario("Login", failed=True, page_provider=lambda: page) is None
        page.screenshot.assert_not_called()

    @pytest.mark.asyncio
    async def test_screenshot_error_does_not_raise(self, started):
        page = make_page()
        page.screenshot.side_effect = RuntimeError("Target closed")

        assert await started.after_scenario("Login", failed=True, page_provider=lambda: page) is None


class TestAfterRun:
    def test_generates_and_opens(self, started, generator, run_context):
        outcome = started.after_run()

        generator.generate_report.assert_called_once_with(run_context.results_dir, run_context.report_dir)
        generator.open_report.assert_called_once_with(run_context.report_dir)
        assert outcome.status == ReportStatus.GENERATED
        assert outcome.opened is True

    def test_open_disabled(self, run_context, generator):
        settings = AutomationSettings(OpenReport=False)
        hooks = AutomationHooks(settings, run=run_context, report_generator=generator)
        hooks.before_run()

        outcome = hooks.after_run()

        generator.open_report.assert_not_called()
        assert outcome.opened is False

    def test_not_opened_when_generation_fails(self, started, generator, run_context):
        generator.generate_report.return_value = ReportOutcome(
            status=ReportStatus.FAILED, report_dir=run_context.report_dir, exit_code=1
        )

        outcome = started.after_run()

        assert outcome.status == ReportStatus.FAILED
        generator.open_report.assert_not_called()

    def test_generator_exception_becomes_failed(self, started, generator):
        generator.generate_report.side_effect = RuntimeError("crashed")

        outcome = started.after_run()

        assert outcome.status == ReportStatus.FAILED
        assert "crashed" in outcome.message
        assert started.state == RunState.FINISHED

    def test_copies_default_results(self, started, run_context):
        run_context.default_results_dir.mkdir(parents=True)
        (run_context.default_results_dir / "a-result.json").write_text("{}")
        (run_context.default_results_dir / "b-container.json").write_text("{}")

        started.after_run()

        assert (run_context.results_dir / "a-result.json").is_file()
        assert (run_context.results_dir / "b-container.json").is_file()

    def test_same_results_dir_is_not_copied(self, tmp_path, settings, generator):
        results = tmp_path / "allure-results"
        run_context = RunContext(
            started_at=datetime(2025, 12, 19, 15, 52),
            project_root=tmp_path,
            report_root=tmp_path,
            results_dir=results,
            report_dir=tmp_path / "allure-report",
            screenshots_dir=tmp_path / "Screenshots",
            default_results_dir=results,
        )
        hooks = AutomationHooks(settings, run=run_context, report_generator=generator)
        hooks.before_run()
        (results / "keep-result.json").write_text("{}")

        hooks.after_run()

        assert (results / "keep-result.json").is_file()
