"""Run-scoped report locations.

A RunContext is computed once when the test run starts and passed to every
hook, so all scenarios of a run write into the same timestamped folder:

    <project_root>/reports/<DDMON>/<HHMM>/
        allure-results/
        allure-report/
        Screenshots/
"""

import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict

PROJECT_MARKERS = ("setup.py", "behave.ini")
DEFAULT_RESULTS_DIRNAME = "allure-results"

# Locale-independent month abbreviations for folder names.
_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")

_UNSAFE_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')


def safe_filename(name: str) -> str:
    """Replace characters that are not allowed in file names with '_'."""
    cleaned = _UNSAFE_CHARS.sub("_", name).strip().strip(".")
    return cleaned or "screenshot"


def find_project_root(start: Optional[Path] = None) -> Path:
    """Return the nearest ancestor of start holding a project marker file.

    Falls back to start (default: the working directory) when no ancestor
    has ``setup.py`` or ``behave.ini``.
    """
    start = (start or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        if any((directory / marker).exists() for marker in PROJECT_MARKERS):
            return directory
    return start


def date_folder(moment: datetime) -> str:
    """``19DEC`` style folder name."""
    return f"{moment.day:02d}{_MONTHS[moment.month - 1]}"


def time_folder(moment: datetime) -> str:
    """``1552`` style folder name."""
    return moment.strftime("%H%M")


class RunContext(BaseModel):
    """Report paths for one test run."""

    model_config = ConfigDict(frozen=True)

    started_at: datetime
    project_root: Path
    report_root: Path
    results_dir: Path
    report_dir: Path
    screenshots_dir: Path
    default_results_dir: Path

    @classmethod
    def create(
        cls,
        project_root: Optional[Union[str, Path]] = None,
        started_at: Optional[datetime] = None,
        working_dir: Optional[Union[str, Path]] = None,
    ) -> "RunContext":
        """Compute the run's report layout. Nothing is created on disk.

        Args:
            project_root: Root that holds ``reports/`` (default: discovered
                from the working directory)
            started_at: Run start time (default: now)
            working_dir: Directory whose ``allure-results`` the formatter
                writes to (default: the working directory)

        Returns:
            RunContext for the run
        """
        started_at = started_at or datetime.now()
        working_dir = Path(working_dir) if working_dir else Path.cwd()
        root = Path(project_root) if project_root else find_project_root(working_dir)
        report_root = root / "reports" / date_folder(started_at) / time_folder(started_at)

        return cls(
            started_at=started_at,
            project_root=root,
            report_root=report_root,
            results_dir=report_root / "allure-results",
            report_dir=report_root / "allure-report",
            screenshots_dir=report_root / "Screenshots",
            default_results_dir=working_dir / DEFAULT_RESULTS_DIRNAME,
        )
