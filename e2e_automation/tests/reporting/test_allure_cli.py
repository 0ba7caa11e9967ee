"""Tests for the Allure CLI report generator."""

import subprocess

import pytest
from unittest.mock import MagicMock, patch

from e2e_automation.models.report_models import ReportStatus
from e2e_automation.reporting.allure_cli import AllureCli, resolve_executable


@pytest.fixture
def results_dir(tmp_path):
    path = tmp_path / "allure-results"
    path.mkdir()
    (path / "1-result.json").write_text("{}")
    return path


@pytest.fixture
def report_dir(tmp_path):
    return tmp_path / "allure-report"


@pytest.fixture
def cli():
    with patch("e2e_automation.reporting.allure_cli.shutil.which", return_value="/usr/bin/allure"):
        return AllureCli(timeout_seconds=5)


def make_process(returncode=0):
    process = MagicMock()
    process.returncode = returncode
    process.wait.return_value = returncode
    return process


def popen_writing_stderr(process, text):
    """Popen stand-in that writes text to the stderr file it is given."""

    def start(cmd, **kwargs):
        kwargs["stderr"].write(text)
        kwargs["stderr"].flush()
        return process

    return start


class TestResolveExecutable:
    def test_existing_file_path(self, tmp_path):
        exe = tmp_path / "allure"
        exe.write_text("")

        assert resolve_executable(str(exe)) == str(exe)

    def test_command_name_uses_path_lookup(self):
        with patch("e2e_automation.reporting.allure_cli.shutil.which", return_value="/opt/allure") as which:
            assert resolve_executable("allure-cli") == "/opt/allure"

        which.assert_called_once_with("allure-cli")

    def test_default_lookup(self):
        with patch("e2e_automation.reporting.allure_cli.shutil.which", return_value=None) as which:
            assert resolve_executable() is None

        which.assert_called_once_with("allure")


class TestGenerateReport:
    def test_missing_results(self, cli, tmp_path, report_dir):
        with patch("e2e_automation.reporting.allure_cli.subprocess.Popen") as popen:
            outcome = cli.generate_report(tmp_path / "nope", report_dir)

        assert outcome.status == ReportStatus.NO_RESULTS
        popen.assert_not_called()

    def test_empty_results(self, cli, tmp_path, report_dir):
        empty = tmp_path / "empty"
        empty.mkdir()

        assert cli.generate_report(empty, report_dir).status == ReportStatus.NO_RESULTS

    def test_executable_not_found(self, results_dir, report_dir):
        with patch("e2e_automation.reporting.allure_cli.shutil.which", return_value=None):
            cli = AllureCli()

        outcome = cli.generate_report(results_dir, report_dir)

        assert outcome.status == ReportStatus.NOT_FOUND
        assert "allure" in outcome.message

    def test_popen_oserror_is_not_found(self, cli, results_dir, report_dir):
        with patch(
            "e2e_automation.reporting.allure_cli.subprocess.Popen",
            side_effect=FileNotFoundError("no such file"),
        ):
            outcome = cli.generate_report(results_dir, report_dir)

        assert outcome.status == ReportStatus.NOT_FOUND

    def test_generated(self, cli, results_dir, report_dir):
        process = make_process()

        with patch("e2e_automation.reporting.allure_cli.subprocess.Popen", return_value=process) as popen:
            outcome = cli.generate_report(results_dir, report_dir)

        assert outcome.status == ReportStatus.GENERATED
        assert outcome.succeeded
        assert outcome.exit_code == 0
        assert popen.call_args.args[0] == [
            "/usr/bin/allure",
            "generate",
            str(results_dir),
            "-o",
            str(report_dir),
            "--clean",
        ]
        process.wait.assert_called_once_with(timeout=5)
        kwargs = popen.call_args.kwargs
        assert kwargs["stdout"] == subprocess.DEVNULL
        assert kwargs["stderr"] not in (subprocess.PIPE, None)

    def test_nonzero_exit(self, cli, results_dir, report_dir):
        process = make_process(returncode=1)

        with patch(
            "e2e_automation.reporting.allure_cli.subprocess.Popen",
            side_effect=popen_writing_stderr(process, "bad results\n"),
        ):
            outcome = cli.generate_report(results_dir, report_dir)

        assert outcome.status == ReportStatus.FAILED
        assert outcome.exit_code == 1
        assert outcome.message == "bad results"
        assert not outcome.succeeded

    def test_timeout_leaves_process_running(self, cli, results_dir, report_dir):
        process = make_process()
        process.wait.side_effect = subprocess.TimeoutExpired(cmd="allure", timeout=5)

        with patch("e2e_automation.reporting.allure_cli.subprocess.Popen", return_value=process):
            outcome = cli.generate_report(results_dir, report_dir)

        assert outcome.status == ReportStatus.TIMED_OUT
        process.kill.assert_not_called()
        process.terminate.assert_not_called()


class TestOpenReport:
    def test_starts_detached_viewer(self, cli, report_dir):
        with patch("e2e_automation.reporting.allure_cli.subprocess.Popen") as popen:
            assert cli.open_report(report_dir) is True

        args, kwargs = popen.call_args
        assert args[0] == ["/usr/bin/allure", "open", str(report_dir)]
        assert kwargs["start_new_session"] is True
        assert kwargs["stdout"] == subprocess.DEVNULL

    def test_no_executable(self, report_dir):
        with patch("e2e_automation.reporting.allure_cli.shutil.which", return_value=None):
            cli = AllureCli()

        with patch("e2e_automation.reporting.allure_cli.subprocess.Popen") as popen:
            assert cli.open_report(report_dir) is False

        popen.assert_not_called()

    def test_launch_failure(self, cli, report_dir):
        with patch(
            "e2e_automation.reporting.allure_cli.subprocess.Popen",
            side_effect=OSError("denied"),
        ):
            assert cli.open_report(report_dir) is False
