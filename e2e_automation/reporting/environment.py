"""Allure ``environment.properties`` writer."""

import getpass
import logging
import platform
import socket
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional

from e2e_automation.config.settings import AutomationSettings

logger = logging.getLogger(__name__)

ENVIRONMENT_FILE = "environment.properties"
FRAMEWORK_NAME = "behave + pytest + Playwright"


def _current_user() -> str:
    try:
        return getpass.getuser()
    except Exception:
        return "unknown"


def environment_properties(
    settings: AutomationSettings,
    run_date: Optional[datetime] = None,
) -> Dict[str, str]:
    """Collect the run details shown on the report's Environment widget."""
    run_date = run_date or datetime.now()
    return {
        "Browser": settings.browser_type.value.capitalize(),
        "Browser.Headless": str(settings.headless).lower(),
        "OS": f"{platform.system()} {platform.release()}",
        "OS.Architecture": platform.machine(),
        "Python.Version": platform.python_version(),
        "Machine.Name": socket.gethostname(),
        "User.Name": _current_user(),
        "Test.Environment": settings.environment.upper(),
        "Base.URL": settings.base_url,
        "Test.Run.Date": run_date.strftime("%Y-%m-%d %H:%M:%S"),
        "Framework": FRAMEWORK_NAME,
    }


def write_environment_properties(
    results_dir: Path,
    settings: AutomationSettings,
    run_date: Optional[datetime] = None,
) -> Optional[Path]:
    """Write ``environment.properties`` into the results directory.

    Args:
        results_dir: Allure results directory
        settings: Run settings
        run_date: Timestamp to record (default: now)

    Returns:
        Path of the written file, or None if writing failed (logged)
    """
    try:
        results_dir.mkdir(parents=True, exist_ok=True)
        path = results_dir / ENVIRONMENT_FILE
        lines = [f"{key}={value}" for key, value in environment_properties(settings, run_date).items()]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        logger.debug(f"Created {path}")
        return path
    except Exception as e:
        logger.error(f"Failed to create {ENVIRONMENT_FILE}: {e}")
        return None
