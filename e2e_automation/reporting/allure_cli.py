"""Allure command line report generator.

The report step only needs two operations, so callers depend on the small
ReportGenerator protocol and AllureCli is one implementation of it.
"""

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional, Protocol

from e2e_automation.models.report_models import ReportOutcome, ReportStatus
from e2e_automation.utils.logging import log_success

logger = logging.getLogger(__name__)

DEFAULT_EXECUTABLE = "allure"
DEFAULT_TIMEOUT_SECONDS = 60


class ReportGenerator(Protocol):
    """Turns a results directory into a browsable report."""

    def generate_report(self, results_dir: Path, report_dir: Path) -> ReportOutcome: ...

    def open_report(self, report_dir: Path) -> bool: ...


def resolve_executable(configured: Optional[str] = None) -> Optional[str]:
    """Locate the Allure CLI.

    Args:
        configured: Explicit path or command name from settings

    Returns:
        Executable path, or None if it cannot be found
    """
    if configured:
        candidate = Path(configured).expanduser()
        if candidate.is_file():
            return str(candidate)
        return shutil.which(configured)
    return shutil.which(DEFAULT_EXECUTABLE)


class AllureCli:
    """Run ``allure generate`` and ``allure open`` as subprocesses.

    The executable is resolved once, at construction.
    """

    def __init__(
        self,
        executable: Optional[str] = None,
        timeout_seconds: int = DEFAULT_TIMEOUT_SECONDS,
    ):
        """Initialize the adapter.

        Args:
            executable: Configured Allure path or command (None = search PATH)
            timeout_seconds: Maximum wait for report generation
        """
        self.configured = executable
        self.executable = resolve_executable(executable)
        self.timeout_seconds = timeout_seconds

    def _build_generate_command(self, results_dir: Path, report_dir: Path) -> List[str]:
        return [self.executable, "generate", str(results_dir), "-o", str(report_dir), "--clean"]

    def generate_report(self, results_dir: Path, report_dir: Path) -> ReportOutcome:
        """Generate an HTML report from the results directory.

        Never raises; every failure is described by the returned outcome.

        Args:
            results_dir: Allure results directory
            report_dir: Output directory for the report

        Returns:
            ReportOutcome with status generated, failed, timed_out, not_found
            or no_results
        """
        results_dir = Path(results_dir)
        report_dir = Path(report_dir)

        if not results_dir.is_dir() or not any(p.is_file() for p in results_dir.iterdir()):
            logger.warning("Allure results directory is empty or not found")
            return ReportOutcome(
                status=ReportStatus.NO_RESULTS,
                report_dir=report_dir,
                message=f"No result files in {results_dir}",
            )

        if not self.executable:
            target = self.configured or DEFAULT_EXECUTABLE
            logger.error(
                f"Allure CLI '{target}' not found. Install Allure and add it to PATH, "
                "or set AllureExecutable in appsettings.json."
            )
            return ReportOutcome(
                status=ReportStatus.NOT_FOUND,
                report_dir=report_dir,
                message=f"Allure executable '{target}' not found",
            )

        logger.info("Generating Allure report...")
        cmd = self._build_generate_command(results_dir, report_dir)

        # stderr goes to a file, not a pipe, so a child left running after a
        # timeout never blocks on unread output.
        with tempfile.TemporaryFile(mode="w+", encoding="utf-8", errors="replace") as stderr_file:
            try:
                process = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=stderr_file,
                )
            except OSError as e:
                logger.error(f"Failed to start Allure CLI: {e}")
                return ReportOutcome(status=ReportStatus.NOT_FOUND, report_dir=report_dir, message=str(e))

            try:
                returncode = process.wait(timeout=self.timeout_seconds)
            except subprocess.TimeoutExpired:
                # Left running: generation may still finish on its own.
                logger.warning(
                    f"Allure report generation did not finish within {self.timeout_seconds}s"
                )
                return ReportOutcome(
                    status=ReportStatus.TIMED_OUT,
                    report_dir=report_dir,
                    message=f"Timed out after {self.timeout_seconds}s",
                )

            stderr_file.seek(0)
            stderr = stderr_file.read().strip()

        if returncode != 0:
            logger.error(f"Allure report generation failed (exit code {returncode}): {stderr}")
            return ReportOutcome(
                status=ReportStatus.FAILED,
                report_dir=report_dir,
                exit_code=returncode,
                message=stderr,
            )

        log_success(logger, f"Allure report generated at: {report_dir}")
        return ReportOutcome(status=ReportStatus.GENERATED, report_dir=report_dir, exit_code=0)

    def open_report(self, report_dir: Path) -> bool:
        """Start ``allure open`` detached from this process.

        The viewer runs a local web server until stopped by the user, so it
        is not waited on.

        Returns:
            True if the viewer process was started
        """
        if not self.executable:
            logger.warning(f"Cannot open report, Allure CLI not found. Open manually: {report_dir}")
            return False

        try:
            subprocess.Popen(
                [self.executable, "open", str(report_dir)],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
            log_success(logger, "Allure report server started")
            return True
        except OSError as e:
            logger.error(f"Failed to open Allure report: {e}")
            logger.info(f"You can manually open: {report_dir}")
            return False
